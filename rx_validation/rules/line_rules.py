"""Per-line medication rules and draft size limits."""

import logging

from common.prescription_safety import FlagType, ValidationFlag
from ..models import FieldIssue, SelectedMedication, ValidationContext
from ..rules_engine import BaseRuleModule
from .dosage_rules import check_dosage, check_frequency
from .expiry_rules import check_expiry
from .instruction_rules import check_instructions
from .quantity_rules import check_quantity

logger = logging.getLogger(__name__)


# Field name -> check; each check takes (value, entry, today, config)
FIELD_CHECKS = {
    "dosage": check_dosage,
    "frequency": check_frequency,
    "quantity": check_quantity,
    "instructions": check_instructions,
    "expiry": check_expiry,
}


def _line_value(medication: SelectedMedication, field_name: str):
    if field_name == "expiry":
        return None  # read from the catalog entry
    return getattr(medication.line, field_name)


class MedicationLineRules(BaseRuleModule):
    """Validate draft size and every field of every line."""

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        flags: list[ValidationFlag] = []
        max_medications = context.config.get("max_medications", 10)

        if not context.medications:
            flags.append(ValidationFlag(
                key="medications",
                flag_type=FlagType.NO_MEDICATIONS,
                message="Please add at least one medication",
            ))
            return flags

        if len(context.medications) > max_medications:
            flags.append(ValidationFlag(
                key="medications",
                flag_type=FlagType.TOO_MANY_MEDICATIONS,
                message=f"Maximum {max_medications} medications allowed per prescription",
                details={"count": len(context.medications)},
            ))

        for medication in context.medications:
            flags.extend(self.evaluate_line(medication, context))

        return flags

    def evaluate_line(self, medication: SelectedMedication, context: ValidationContext) -> list[ValidationFlag]:
        """Flags for one line; never looks at any other line."""
        flags: list[ValidationFlag] = []
        entry = medication.entry

        if entry is None:
            flags.append(self._flag(medication, "medication", FieldIssue(
                FlagType.UNKNOWN_MEDICATION, "Medication not found in catalog",
                details={"medication_id": medication.line.medication_id},
            )))
        elif not entry.is_active:
            flags.append(self._flag(medication, "medication", FieldIssue(
                FlagType.INACTIVE_MEDICATION,
                f"{entry.drug_name} is not available for prescribing",
            )))

        for field_name, check in FIELD_CHECKS.items():
            issue = check(
                _line_value(medication, field_name),
                entry,
                context.today,
                context.config,
            )
            if issue is not None:
                flags.append(self._flag(medication, field_name, issue))

        if flags:
            logger.debug(
                f"{medication.key} ({medication.drug_name or medication.line.medication_id}): "
                f"{len(flags)} issue(s)"
            )
        return flags

    def _flag(self, medication: SelectedMedication, field_name: str, issue: FieldIssue) -> ValidationFlag:
        return ValidationFlag(
            key=medication.key,
            field=field_name,
            flag_type=issue.flag_type,
            severity=issue.severity,
            message=issue.message,
            details=issue.details,
        )
