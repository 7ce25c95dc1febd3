"""Tests for the prescription validation API blueprint."""

import json

import pytest

from dashboard.app import create_app

from factories import TODAY

CATALOG = [
    {"id": "1", "drugName": "Paracetamol", "genericName": "Acetaminophen", "category": "Analgesic",
     "strength": "500mg", "dosageForm": "Tablet", "currentStock": 100, "expiryDate": "2027-01-01"},
    {"id": "6", "drugName": "Aspirin", "genericName": "Acetylsalicylic Acid", "category": "Antiplatelet",
     "strength": "75mg", "dosageForm": "Tablet", "currentStock": 3, "expiryDate": "2027-01-01"},
]

PATIENT = {
    "nationalId": "199012345678",
    "name": "Test Patient",
    "admissionId": "ADM-001",
    "wardName": "Ward 7",
    "bedNumber": "12",
}


@pytest.fixture
def client(tmp_path):
    catalog_path = tmp_path / "catalog.json"
    catalog_path.write_text(json.dumps(CATALOG), encoding="utf-8")

    app = create_app({"TESTING": True, "MEDICATION_CATALOG_PATH": str(catalog_path)})
    return app.test_client()


def _line(medication_id="1", **overrides):
    line = {"medicationId": medication_id, "dosage": "500mg", "frequency": "Once daily (OD)", "quantity": "10"}
    line.update(overrides)
    return line


def test_validate_clean_draft(client):
    response = client.post(
        f"/prescription-validation/api/validate?today={TODAY.isoformat()}",
        json={"patient": PATIENT, "medications": [_line()]},
    )

    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["is_valid"] is True
    assert body["data"]["errors"] == {}


def test_validate_reports_errors_as_data(client):
    response = client.post(
        f"/prescription-validation/api/validate?today={TODAY.isoformat()}",
        json={"patient": None, "medications": [_line("6", dosage="75mg", quantity="4")]},
    )

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["is_valid"] is False
    assert data["errors"]["patient"] == "Please select a patient before proceeding"
    assert data["errors"]["medication_0"]["quantity"] == "Only 3 tablets available in stock"


def test_validate_uses_catalog_from_request(client):
    catalog = [dict(CATALOG[0], currentStock=5)]
    response = client.post(
        f"/prescription-validation/api/validate?today={TODAY.isoformat()}",
        json={"patient": PATIENT, "medications": [_line()], "catalog": catalog},
    )

    errors = response.get_json()["data"]["errors"]
    assert errors["medication_0"]["quantity"] == "Only 5 tablets available in stock"


def test_validate_rejects_missing_body(client):
    response = client.post("/prescription-validation/api/validate", data="not json")

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_validate_rejects_bad_date(client):
    response = client.post(
        "/prescription-validation/api/validate",
        json={"patient": PATIENT, "medications": [_line()], "startDate": "tomorrow"},
    )

    assert response.status_code == 400
    assert "Invalid prescription payload" in response.get_json()["error"]


def test_validate_field_with_catalog_id(client):
    response = client.post(
        "/prescription-validation/api/validate-field",
        json={"field": "quantity", "value": "4", "medicationId": "6"},
    )

    body = response.get_json()
    assert body["success"] is True
    assert body["data"] == {"field": "quantity", "message": "Only 3 tablets available in stock"}


def test_validate_field_with_inline_medication(client):
    response = client.post(
        "/prescription-validation/api/validate-field",
        json={"field": "quantity", "value": "2.5", "medication": {"id": "x", "drugName": "Ceftriaxone",
                                                                  "dosageForm": "Injection"}},
    )

    assert response.get_json()["data"]["message"] == (
        "Quantity for injections/vials/ampoules must be a whole number"
    )


def test_validate_field_accepts_valid_value(client):
    response = client.post(
        "/prescription-validation/api/validate-field",
        json={"field": "dosage", "value": "500mg"},
    )

    assert response.get_json()["data"]["message"] is None


def test_validate_field_unknown_field(client):
    response = client.post(
        "/prescription-validation/api/validate-field",
        json={"field": "colour", "value": "red"},
    )

    body = response.get_json()
    assert response.status_code == 400
    assert "Unknown field" in body["error"]
    assert body["details"]["fields"] == ["dosage", "frequency", "quantity", "instructions", "expiry"]


def test_validate_field_malformed_expiry_is_a_message(client):
    response = client.post(
        "/prescription-validation/api/validate-field",
        json={"field": "expiry", "value": "31/12/2026"},
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["message"] == "Invalid expiry date (use YYYY-MM-DD)"


def test_validate_field_requires_field(client):
    response = client.post("/prescription-validation/api/validate-field", json={"value": "x"})
    assert response.status_code == 400


def test_reference_tables(client):
    response = client.get("/prescription-validation/api/reference")

    data = response.get_json()["data"]
    assert "Once daily (OD)" in data["frequencies"]
    assert data["dosage_limits"]["mg"] == {"min": 0.1, "max": 5000}
    assert "Antibiotic" in data["category_defaults"]
