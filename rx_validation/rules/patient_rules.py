"""Patient eligibility rules: a prescription needs an admitted, located patient."""

import logging

from common.prescription_safety import FlagType, ValidationFlag
from ..models import PatientSelection, ValidationContext
from ..rules_engine import BaseRuleModule

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


# Checked in order; the first failing rule is the one reported
PATIENT_RULES = [
    {
        "flag_type": FlagType.PATIENT_NOT_SELECTED,
        "fails": lambda p: p is None,
        "message": "Please select a patient before proceeding",
    },
    {
        "flag_type": FlagType.PATIENT_INCOMPLETE,
        "fails": lambda p: _blank(p.name) or _blank(p.national_id),
        "message": "Selected patient has incomplete information",
    },
    {
        "flag_type": FlagType.PATIENT_NOT_ADMITTED,
        "fails": lambda p: _blank(p.admission_id),
        "message": "Selected patient must be admitted before prescribing",
    },
    {
        "flag_type": FlagType.PATIENT_LOCATION_MISSING,
        "fails": lambda p: _blank(p.ward_name) or _blank(p.bed_number),
        "message": "Patient ward/bed location information is missing",
    },
]


def find_patient_issue(patient: PatientSelection | None) -> dict | None:
    for rule in PATIENT_RULES:
        if rule["fails"](patient):
            return rule
    return None


class PatientEligibilityRules(BaseRuleModule):
    """Check the selected patient can receive a ward prescription."""

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        rule = find_patient_issue(context.patient)
        if rule is None:
            return []

        return [ValidationFlag(
            key="patient",
            flag_type=rule["flag_type"],
            message=rule["message"],
        )]
