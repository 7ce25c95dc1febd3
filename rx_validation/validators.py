"""Public validation entry points.

These are the functions the ward console calls: ``validate_field`` on every
edit for immediate feedback, ``validate_form`` before allowing submission.
All of them are pure; call them as often as needed.

Usage:
    from rx_validation import MedicationCatalog, PrescriptionDraft, validate_form

    result = validate_form(draft, catalog)
    if not result.is_valid:
        show(result.errors)
"""

import logging
from datetime import date

from common.prescription_safety import ValidationResult
from .catalog import MedicationCatalog
from .models import (
    MedicationCatalogEntry,
    PatientSelection,
    PrescriptionDraft,
    PrescriptionLine,
    SelectedMedication,
)
from .rules_engine import PrescriptionRulesEngine
from .rules.category_rules import CategoryConcentrationRules
from .rules.duplicate_rules import DuplicateMedicationRules
from .rules.interaction_rules import DrugInteractionRules
from .rules.line_rules import FIELD_CHECKS, MedicationLineRules
from .rules.patient_rules import find_patient_issue

logger = logging.getLogger(__name__)


def validate_patient_selection(patient: PatientSelection | None) -> str | None:
    """Return the first patient eligibility problem, or None."""
    rule = find_patient_issue(patient)
    return rule["message"] if rule else None


def validate_field(
    field_name: str,
    value,
    entry: MedicationCatalogEntry | None = None,
    today: date | None = None,
    config: dict | None = None,
) -> str | None:
    """Validate one field of one line, for live feedback.

    Args:
        field_name: One of dosage, frequency, quantity, instructions, expiry
        value: The value as typed (for expiry, the date or None to use the entry's)
        entry: Catalog entry of the line, enables stock/form/category/expiry rules
        today: Evaluation date (defaults to today)
        config: Optional engine configuration

    Returns:
        Error or warning message, or None if the value is acceptable

    Raises:
        ValueError: If field_name is not a validated field
    """
    check = FIELD_CHECKS.get(field_name)
    if check is None:
        raise ValueError(
            f"Unknown field '{field_name}'. Expected one of: {', '.join(FIELD_CHECKS)}"
        )
    issue = check(value, entry, today or date.today(), config)
    return issue.message if issue else None


def validate_medications(
    lines: list[PrescriptionLine],
    catalog: MedicationCatalog,
    today: date | None = None,
    config: dict | None = None,
) -> dict:
    """Validate draft size and every line.

    Returns:
        ``{"medication_<i>": {field: message}}`` plus ``{"medications": message}``
        for count violations; empty when every line is acceptable.
    """
    engine = PrescriptionRulesEngine(config=config, rules=[MedicationLineRules()])
    draft = PrescriptionDraft(patient=None, lines=list(lines))
    return engine.evaluate(draft, catalog, today).errors


def validate_duplicate_medications(
    medications: list[SelectedMedication],
    interactions: list[dict] | None = None,
) -> str | None:
    """Cross-medication check: duplicates, interactions, category overload.

    Returns:
        All triggered findings joined with '; ', or None.
    """
    flags = []
    flags.extend(DuplicateMedicationRules().check(medications))
    flags.extend(DrugInteractionRules(interactions).check(medications))
    flags.extend(CategoryConcentrationRules().check(medications))

    if not flags:
        return None
    return "; ".join(f.message for f in flags)


def validate_form(
    draft: PrescriptionDraft,
    catalog: MedicationCatalog,
    today: date | None = None,
    config: dict | None = None,
) -> ValidationResult:
    """Validate the whole draft: patient, lines, cross-medication, start date.

    The draft may be submitted only when ``result.is_valid``.
    """
    engine = PrescriptionRulesEngine(config=config)
    result = engine.evaluate(draft, catalog, today)

    if not result.is_valid:
        logger.info(f"Prescription draft invalid: {sorted(result.errors)}")
    return result
