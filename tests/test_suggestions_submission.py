"""Tests for line defaults and the submission payload."""

from datetime import timedelta

import pytest

from rx_validation.catalog import MedicationCatalog
from rx_validation.models import PrescriptionLine
from rx_validation.submission import InvalidPrescriptionError, build_submission_payload
from rx_validation.suggestions import (
    build_line_defaults,
    generate_dosage_options,
    get_standard_frequencies,
)

from factories import TODAY, catalog_of, create_test_draft, create_test_entry, create_test_line


def test_dosage_options_for_tablets():
    entry = create_test_entry(strength="500mg", dosage_form="Tablet")
    assert generate_dosage_options(entry) == ["250mg", "500mg", "1000mg"]


def test_dosage_options_for_liquids_and_missing_strength():
    syrup = create_test_entry(strength="125mg/5ml", dosage_form="Syrup")
    assert generate_dosage_options(syrup) == ["125mg/5ml"]
    assert generate_dosage_options(create_test_entry(strength="")) == ["Standard dose"]


def test_standard_frequencies_by_category():
    assert get_standard_frequencies("Diuretic") == ["Once daily (OD)"]
    assert "As needed (PRN)" in get_standard_frequencies("Analgesic")
    assert get_standard_frequencies("Unknown") == [
        "Once daily (OD)",
        "Twice daily (BD)",
        "Three times daily (TDS)",
        "Four times daily (QDS)",
    ]


def test_line_defaults_for_antibiotic_capsule():
    entry = create_test_entry("2", "Amoxicillin", "Amoxicillin", "Antibiotic", dosage_form="Capsule",
                              strength="250mg")

    defaults = build_line_defaults(entry)

    assert defaults["line"].medication_id == "2"
    assert defaults["line"].quantity == "21"
    assert defaults["line"].instructions == "Complete the full course"
    assert defaults["quantity_unit"] == "capsules"
    assert defaults["dosage_options"] == ["125mg", "250mg", "500mg"]


def test_line_defaults_prefer_dosage_form_unit():
    entry = create_test_entry(category="Antibiotic", dosage_form="Syrup", strength="125mg/5ml")
    assert build_line_defaults(entry)["quantity_unit"] == "ml"


def test_line_defaults_unknown_category():
    entry = create_test_entry(category="Vitamin", dosage_form="Inhaler", strength="")

    defaults = build_line_defaults(entry)

    assert defaults["line"].quantity == ""
    assert defaults["line"].instructions == ""
    assert defaults["quantity_unit"] == "units"


def _catalog() -> MedicationCatalog:
    return catalog_of(
        create_test_entry("1", "Paracetamol", "Acetaminophen", "Analgesic", current_stock=100),
        create_test_entry("3", "Omeprazole", "Omeprazole", "Proton Pump Inhibitor", dosage_form="Capsule",
                          current_stock=100, strength="20mg"),
    )


def test_submission_payload():
    line = PrescriptionLine(
        medication_id="3",
        dosage=" 20mg ",
        frequency="Before meals",
        quantity="14",
        instructions="Take before meals",
        is_urgent=True,
    )
    draft = create_test_draft(lines=[create_test_line("1"), line], start_date=TODAY + timedelta(days=1))

    payload = build_submission_payload(draft, _catalog(), prescribed_by="Dr. Silva", today=TODAY)

    assert payload["patientNationalId"] == "199012345678"
    assert payload["admissionId"] == "ADM-001"
    assert payload["prescribedBy"] == "Dr. Silva"
    assert payload["startDate"] == (TODAY + timedelta(days=1)).isoformat()
    assert payload["isUrgent"] is True
    assert [m["medicationId"] for m in payload["medications"]] == ["1", "3"]

    omeprazole = payload["medications"][1]
    assert omeprazole["dose"] == "20mg"
    assert omeprazole["quantity"] == 14
    assert omeprazole["quantityUnit"] == "capsules"
    assert omeprazole["route"] == "Oral"


def test_submission_defaults_start_date_to_today():
    payload = build_submission_payload(create_test_draft(), _catalog(), today=TODAY)

    assert payload["startDate"] == TODAY.isoformat()
    assert payload["isUrgent"] is False


def test_fractional_tablet_quantity_is_not_rounded_for_submission():
    for quantity in ["0.5", "1.5"]:
        draft = create_test_draft(lines=[create_test_line("3", dosage="20mg"), create_test_line("1", quantity=quantity)])

        with pytest.raises(InvalidPrescriptionError) as exc_info:
            build_submission_payload(draft, _catalog(), today=TODAY)

        assert exc_info.value.result.errors == {
            "medication_1": {"quantity": "Quantity must be a whole number to submit"}
        }


def test_whole_quantity_submitted_as_integer():
    draft = create_test_draft(lines=[create_test_line("1", quantity="12.0")])

    payload = build_submission_payload(draft, _catalog(), today=TODAY)

    assert payload["medications"][0]["quantity"] == 12
    assert isinstance(payload["medications"][0]["quantity"], int)


def test_invalid_draft_is_not_submitted():
    draft = create_test_draft(patient=None)

    with pytest.raises(InvalidPrescriptionError) as exc_info:
        build_submission_payload(draft, _catalog(), today=TODAY)

    assert "patient" in exc_info.value.result.errors
    assert "patient" in str(exc_info.value)
