"""Prescription safety validation engine."""

from .catalog import MedicationCatalog
from .models import (
    MedicationCatalogEntry,
    PatientSelection,
    PrescriptionDraft,
    PrescriptionLine,
    SelectedMedication,
)
from .rules_engine import PrescriptionRulesEngine
from .validators import (
    validate_duplicate_medications,
    validate_field,
    validate_form,
    validate_medications,
    validate_patient_selection,
)

__all__ = [
    "MedicationCatalog",
    "MedicationCatalogEntry",
    "PatientSelection",
    "PrescriptionDraft",
    "PrescriptionLine",
    "PrescriptionRulesEngine",
    "SelectedMedication",
    "validate_duplicate_medications",
    "validate_field",
    "validate_form",
    "validate_medications",
    "validate_patient_selection",
]
