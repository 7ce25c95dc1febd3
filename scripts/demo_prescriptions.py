#!/usr/bin/env python3
"""Run demo prescription drafts through the validation engine.

Each scenario builds a draft for an admitted ward patient and states the
result keys it is expected to produce. Drafts are validated in process, or
POSTed to a running console API with --url.

Usage:
    # Warfarin + Aspirin (bleeding-risk interaction)
    python demo_prescriptions.py --scenario warfarin-aspirin

    # Run every scenario
    python demo_prescriptions.py --all

    # Validate through the API instead of in process
    python demo_prescriptions.py --all --url http://localhost:5000/prescription-validation

    # List all scenarios
    python demo_prescriptions.py --list
"""

import argparse
import json
import sys
from datetime import date, timedelta

import requests

from rx_validation import MedicationCatalog, PrescriptionDraft, validate_form

# ============================================================================
# DEMO CATALOG
# ============================================================================
TODAY = date.today()

DEMO_CATALOG = [
    {"id": "1", "drugName": "Paracetamol", "genericName": "Acetaminophen", "category": "Analgesic",
     "strength": "500mg", "dosageForm": "Tablet", "manufacturer": "GSK", "currentStock": 1000,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "2", "drugName": "Amoxicillin", "genericName": "Amoxicillin", "category": "Antibiotic",
     "strength": "250mg", "dosageForm": "Capsule", "manufacturer": "Pfizer", "currentStock": 500,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "3", "drugName": "Omeprazole", "genericName": "Omeprazole", "category": "Proton Pump Inhibitor",
     "strength": "20mg", "dosageForm": "Capsule", "manufacturer": "AstraZeneca", "currentStock": 300,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "4", "drugName": "Metformin", "genericName": "Metformin HCl", "category": "Antidiabetic",
     "strength": "500mg", "dosageForm": "Tablet", "manufacturer": "Merck", "currentStock": 800,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "5", "drugName": "Warfarin", "genericName": "Warfarin Sodium", "category": "Anticoagulant",
     "strength": "5mg", "dosageForm": "Tablet", "manufacturer": "BMS", "currentStock": 200,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "6", "drugName": "Aspirin", "genericName": "Acetylsalicylic Acid", "category": "Antiplatelet",
     "strength": "75mg", "dosageForm": "Tablet", "manufacturer": "Bayer", "currentStock": 3,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "7", "drugName": "Panadol", "genericName": "Acetaminophen", "category": "Analgesic",
     "strength": "500mg", "dosageForm": "Tablet", "manufacturer": "GSK", "currentStock": 400,
     "expiryDate": (TODAY + timedelta(days=365)).isoformat()},
    {"id": "8", "drugName": "Amoxil Syrup", "genericName": "Amoxicillin", "category": "Antibiotic",
     "strength": "125mg/5ml", "dosageForm": "Syrup", "manufacturer": "GSK", "currentStock": 50,
     "expiryDate": (TODAY + timedelta(days=10)).isoformat()},
]

DEMO_PATIENT = {
    "nationalId": "199012345678",
    "name": "Nimal Perera",
    "admissionId": "ADM-2041",
    "wardName": "Ward 7",
    "bedNumber": "12",
}


def _line(medication_id, dosage="500mg", frequency="Once daily (OD)", quantity="10", instructions=""):
    return {
        "medicationId": medication_id,
        "dosage": dosage,
        "frequency": frequency,
        "quantity": quantity,
        "instructions": instructions,
    }


# ============================================================================
# PREDEFINED SCENARIOS
# ============================================================================
SCENARIOS = {
    "clean": {
        "name": "Clean single-line prescription",
        "patient": DEMO_PATIENT,
        "medications": [_line("1")],
        "expected_keys": [],
    },
    "no-patient-no-meds": {
        "name": "Nothing selected yet",
        "patient": None,
        "medications": [],
        "expected_keys": ["medications", "patient"],
    },
    "warfarin-aspirin": {
        "name": "Warfarin + Aspirin",
        "patient": DEMO_PATIENT,
        "medications": [_line("5", dosage="5mg"), _line("6", dosage="75mg", quantity="2")],
        "expected_keys": ["duplicates"],
    },
    "stock-shortage": {
        "name": "Aspirin quantity above stock",
        "patient": DEMO_PATIENT,
        "medications": [_line("6", dosage="75mg", quantity="4")],
        "expected_keys": ["medication_0"],
    },
    "duplicate-generic": {
        "name": "Paracetamol and Panadol together",
        "patient": DEMO_PATIENT,
        "medications": [_line("1"), _line("7")],
        "expected_keys": ["duplicates"],
    },
    "contradictory-instructions": {
        "name": "Contradictory instructions",
        "patient": DEMO_PATIENT,
        "medications": [_line("4", instructions="take with food on empty stomach")],
        "expected_keys": ["medication_0"],
    },
    "expiring-syrup": {
        "name": "Syrup expiring within 30 days",
        "patient": DEMO_PATIENT,
        "medications": [_line("8", dosage="5ml", frequency="Three times daily (TDS)", quantity="30")],
        "expected_keys": ["medication_0"],
    },
}


def build_payload(scenario: dict) -> dict:
    return {
        "patient": scenario["patient"],
        "medications": scenario["medications"],
        "startDate": TODAY.isoformat(),
        "catalog": DEMO_CATALOG,
    }


def validate_local(payload: dict) -> dict:
    draft = PrescriptionDraft.from_dict(payload)
    catalog = MedicationCatalog.from_dicts(payload["catalog"])
    return validate_form(draft, catalog).to_dict()


def validate_remote(payload: dict, url: str) -> dict:
    response = requests.post(f"{url.rstrip('/')}/api/validate", json=payload, timeout=10)
    response.raise_for_status()
    body = response.json()
    if not body.get("success"):
        raise RuntimeError(body.get("error", "validation request failed"))
    return body["data"]


def run_scenario(scenario_key: str, url: str | None = None) -> bool:
    """Validate one scenario; return True if the result keys match expectations."""
    scenario = SCENARIOS[scenario_key]
    payload = build_payload(scenario)

    result = validate_remote(payload, url) if url else validate_local(payload)
    keys = sorted(result["errors"])
    expected = sorted(scenario["expected_keys"])
    ok = keys == expected

    print(f"\n{'✓' if ok else '✗'} {scenario_key}: {scenario['name']}")
    print(f"  valid: {result['is_valid']}")
    if result["errors"]:
        print("  errors:")
        print("    " + json.dumps(result["errors"], indent=2, ensure_ascii=False).replace("\n", "\n    "))
    if not ok:
        print(f"  expected keys {expected}, got {keys}")
    return ok


def main():
    parser = argparse.ArgumentParser(
        description="Validate demo prescription drafts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--scenario", "-s", choices=list(SCENARIOS.keys()), help="Specific scenario to run")
    parser.add_argument("--all", action="store_true", help="Run all scenarios")
    parser.add_argument("--url", help="Console API base URL (validate over HTTP)")
    parser.add_argument("--list", "-l", action="store_true", help="List available scenarios")

    args = parser.parse_args()

    if args.list:
        for key, scenario in SCENARIOS.items():
            print(f"  {key:28} {scenario['name']}")
        return 0

    if args.scenario:
        keys = [args.scenario]
    elif args.all:
        keys = list(SCENARIOS)
    else:
        parser.print_help()
        return 1

    try:
        results = [run_scenario(key, args.url) for key in keys]
    except requests.RequestException as e:
        print(f"Request failed: {e}")
        return 2

    print(f"\n{sum(results)}/{len(results)} scenarios behaved as expected")
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
