"""Core rules engine for prescription safety validation."""

import logging
from datetime import date

from common.prescription_safety import (
    FlagType,
    ValidationFlag,
    ValidationResult,
)
from .catalog import MedicationCatalog
from .config import load_config
from .models import PrescriptionDraft, ValidationContext

logger = logging.getLogger(__name__)


class BaseRuleModule:
    """Base class for rule modules."""

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        """Return list of validation flags for this draft.

        Args:
            context: Draft, resolved medications and evaluation date

        Returns:
            List of ValidationFlag objects
        """
        raise NotImplementedError


class PrescriptionRulesEngine:
    """Evaluates a prescription draft against the safety rules."""

    def __init__(self, config: dict | None = None, rules: list[BaseRuleModule] | None = None):
        """Initialize rules engine.

        Args:
            config: Optional configuration dict (merged over load_config())
            rules: Optional rule modules replacing the default set
        """
        self.config = load_config(config)
        self.rules: list[BaseRuleModule] = []

        if rules is not None:
            self.rules = list(rules)
        else:
            self._register_rules()

    def _register_rules(self) -> None:
        """Register all rule modules in result order."""
        from .rules.patient_rules import PatientEligibilityRules
        from .rules.line_rules import MedicationLineRules
        from .rules.duplicate_rules import DuplicateMedicationRules
        from .rules.interaction_rules import DrugInteractionRules
        from .rules.category_rules import CategoryConcentrationRules
        from .rules.start_date_rules import StartDateRules

        self.rules = [
            PatientEligibilityRules(),     # patient
            MedicationLineRules(),         # medications, medication_<i>
            DuplicateMedicationRules(),    # duplicates
            DrugInteractionRules(),        # duplicates
            CategoryConcentrationRules(),  # duplicates
            StartDateRules(),              # start_date
        ]

    def build_context(
        self,
        draft: PrescriptionDraft,
        catalog: MedicationCatalog,
        today: date | None = None,
    ) -> ValidationContext:
        return ValidationContext(
            draft=draft,
            medications=catalog.resolve(draft.lines),
            today=today or date.today(),
            config=self.config,
        )

    def evaluate(
        self,
        draft: PrescriptionDraft,
        catalog: MedicationCatalog,
        today: date | None = None,
    ) -> ValidationResult:
        """Run all rules against a draft, return the merged result.

        Args:
            draft: Prescription draft to validate
            catalog: Catalog snapshot the draft's lines refer to
            today: Evaluation date (defaults to today)

        Returns:
            ValidationResult with every flag raised
        """
        context = self.build_context(draft, catalog, today)
        return self.evaluate_context(context)

    def evaluate_context(self, context: ValidationContext) -> ValidationResult:
        result = ValidationResult(warnings_block=self.config["expiry_warning_blocks"])

        for rule_module in self.rules:
            try:
                result.extend(rule_module.evaluate(context))
            except Exception as e:
                logger.error(
                    f"Error in {rule_module.__class__.__name__}: {e}", exc_info=True
                )
                # A rule that could not run must keep the draft blocked
                result.add(ValidationFlag(
                    key="validation",
                    flag_type=FlagType.RULE_FAILURE,
                    message="Prescription could not be fully validated. Please try again.",
                    details={"rule": rule_module.__class__.__name__},
                ))

        # Cross-medication findings are reported as one combined message
        result.flags = self._combine_duplicates(result.flags)

        logger.debug(
            f"Validated draft with {len(context.medications)} line(s): "
            f"{len(result.flags)} flag(s)"
        )
        return result

    def _combine_duplicates(self, flags: list[ValidationFlag]) -> list[ValidationFlag]:
        """Fold every ``duplicates`` flag into a single flag joined with '; '.

        The combined flag keeps the first flag's type and the individual
        flags under ``details["parts"]``.
        """
        parts = [f for f in flags if f.key == "duplicates"]
        if len(parts) <= 1:
            return flags

        combined = ValidationFlag(
            key="duplicates",
            flag_type=parts[0].flag_type,
            message="; ".join(f.message for f in parts),
            details={"parts": [f.to_dict() for f in parts]},
        )

        merged: list[ValidationFlag] = []
        for flag in flags:
            if flag.key != "duplicates":
                merged.append(flag)
            elif flag is parts[0]:
                merged.append(combined)
        return merged
