"""Prescription validation routes for the ward console.

The console calls ``/api/validate-field`` on every edit and ``/api/validate``
before enabling submission. Both are thin wrappers over ``rx_validation``;
no validation logic lives here.
"""

import logging
from datetime import date

from flask import Blueprint, current_app, request

from rx_validation import (
    MedicationCatalog,
    MedicationCatalogEntry,
    PrescriptionDraft,
    validate_field,
    validate_form,
)
from rx_validation.config import CATEGORY_DEFAULTS
from rx_validation.rules import FIELD_CHECKS
from rx_validation.rules.dosage_rules import DOSAGE_LIMITS, DOSAGE_UNITS, VALID_FREQUENCIES
from dashboard.utils.api_response import api_success, api_error

logger = logging.getLogger(__name__)

prescription_validation_bp = Blueprint(
    "prescription_validation", __name__, url_prefix="/prescription-validation"
)


def _get_catalog() -> MedicationCatalog:
    """Get the configured catalog snapshot, loading it on first use."""
    if not hasattr(current_app, "medication_catalog"):
        path = current_app.config.get("MEDICATION_CATALOG_PATH")
        current_app.medication_catalog = (
            MedicationCatalog.from_json(path) if path else MedicationCatalog()
        )
    return current_app.medication_catalog


def _catalog_for(payload: dict) -> MedicationCatalog:
    """Catalog sent with the request, else the configured one."""
    records = payload.get("catalog")
    if records is not None:
        return MedicationCatalog.from_dicts(records)
    return _get_catalog()


def _today() -> date | None:
    value = request.args.get("today")
    return date.fromisoformat(value) if value else None


# API Endpoints

@prescription_validation_bp.route("/api/validate", methods=["POST"])
def api_validate():
    """Validate a whole prescription draft."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return api_error("JSON body is required", 400)

    try:
        draft = PrescriptionDraft.from_dict(payload)
        catalog = _catalog_for(payload)
        today = _today()
    except (ValueError, TypeError, AttributeError) as e:
        return api_error(f"Invalid prescription payload: {e}", 400)

    try:
        result = validate_form(draft, catalog, today=today)
        return api_success(data=result.to_dict())
    except Exception as e:
        logger.error(f"API validate error: {e}", exc_info=True)
        return api_error(str(e), 500)


@prescription_validation_bp.route("/api/validate-field", methods=["POST"])
def api_validate_field():
    """Validate a single field of a single line."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return api_error("JSON body is required", 400)

    field_name = payload.get("field")
    if not isinstance(field_name, str) or field_name not in FIELD_CHECKS:
        return api_error(
            f"Unknown field '{field_name}'" if field_name else "field is required",
            400,
            details={"fields": list(FIELD_CHECKS)},
        )

    try:
        medication = payload.get("medication")
        if isinstance(medication, dict):
            entry = MedicationCatalogEntry.from_dict(medication)
        elif payload.get("medicationId") is not None:
            entry = _get_catalog().get(payload["medicationId"])
        else:
            entry = None

        message = validate_field(field_name, payload.get("value"), entry, today=_today())
    except (ValueError, TypeError) as e:
        return api_error(str(e), 400)
    except Exception as e:
        logger.error(f"API validate-field error: {e}", exc_info=True)
        return api_error(str(e), 500)

    return api_success(data={"field": field_name, "message": message})


@prescription_validation_bp.route("/api/reference")
def api_reference():
    """Reference tables the console uses to build its pickers."""
    return api_success(data={
        "frequencies": VALID_FREQUENCIES,
        "dosage_units": DOSAGE_UNITS,
        "dosage_limits": DOSAGE_LIMITS,
        "category_defaults": CATEGORY_DEFAULTS,
    })
