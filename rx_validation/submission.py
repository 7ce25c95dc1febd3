"""Build the payload the prescription Submission API accepts.

The payload is only built for a draft that validates cleanly; the draft is
always re-validated here, whatever the console showed before.
"""

import logging
from datetime import date

from common.prescription_safety import FlagType, ValidationFlag, ValidationResult
from .catalog import MedicationCatalog
from .models import PrescriptionDraft
from .rules.quantity_rules import get_quantity_unit, parse_quantity
from .validators import validate_form

logger = logging.getLogger(__name__)


class InvalidPrescriptionError(ValueError):
    """Raised when an invalid draft is submitted."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(f"Prescription failed validation: {', '.join(sorted(result.errors))}")


def build_submission_payload(
    draft: PrescriptionDraft,
    catalog: MedicationCatalog,
    prescribed_by: str = "Ward Doctor",
    today: date | None = None,
    config: dict | None = None,
) -> dict:
    """Validate the draft and convert it for submission.

    The Submission API counts quantities in whole units, so a fractional
    quantity that passed the dosage-form rules (e.g. half a tablet) is
    rejected here rather than rounded.

    Raises:
        InvalidPrescriptionError: If the draft does not validate, or a
            quantity is not a whole number
    """
    today = today or date.today()
    result = validate_form(draft, catalog, today=today, config=config)
    if not result.is_valid:
        raise InvalidPrescriptionError(result)

    patient = draft.patient
    medications = []
    for selected in catalog.resolve(draft.lines):
        line = selected.line
        quantity = parse_quantity(line.quantity)
        if not quantity.is_integer():
            result.add(ValidationFlag(
                key=selected.key,
                field="quantity",
                flag_type=FlagType.INVALID_QUANTITY,
                message="Quantity must be a whole number to submit",
                details={"quantity": quantity},
            ))
            continue
        medications.append({
            "medicationId": line.medication_id,
            "drugName": selected.drug_name,
            "dose": line.dosage.strip(),
            "frequency": line.frequency.strip(),
            "quantity": int(quantity),
            "quantityUnit": get_quantity_unit(selected.dosage_form),
            "instructions": line.instructions or "",
            "route": line.route or "Oral",
            "isUrgent": line.is_urgent,
            "notes": line.notes or "",
        })

    if not result.is_valid:
        raise InvalidPrescriptionError(result)

    payload = {
        "patientNationalId": patient.national_id,
        "patientName": patient.name,
        "admissionId": patient.admission_id,
        "prescribedBy": prescribed_by,
        "startDate": (draft.start_date or today).isoformat(),
        "endDate": None,
        "isUrgent": any(line.is_urgent for line in draft.lines),
        "medications": medications,
    }

    logger.info(
        f"Built submission payload for {patient.national_id} with {len(medications)} medication(s)"
    )
    return payload
