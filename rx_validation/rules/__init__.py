"""Prescription validation rule modules."""

from .category_rules import CategoryConcentrationRules
from .duplicate_rules import DuplicateMedicationRules
from .interaction_rules import DRUG_INTERACTIONS, DrugInteractionRules
from .line_rules import FIELD_CHECKS, MedicationLineRules
from .patient_rules import PatientEligibilityRules
from .start_date_rules import StartDateRules

__all__ = [
    "CategoryConcentrationRules",
    "DRUG_INTERACTIONS",
    "DrugInteractionRules",
    "DuplicateMedicationRules",
    "FIELD_CHECKS",
    "MedicationLineRules",
    "PatientEligibilityRules",
    "StartDateRules",
]
