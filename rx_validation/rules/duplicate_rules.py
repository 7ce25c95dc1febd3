"""Duplicate drug and duplicate active-ingredient rules.

Both checks compare trimmed, case-insensitive names and are independent of
line order: each duplicated name is reported once, sorted.
"""

import logging

from common.prescription_safety import FlagType, ValidationFlag
from ..models import SelectedMedication, ValidationContext
from ..rules_engine import BaseRuleModule

logger = logging.getLogger(__name__)


def _normalize(name: str | None) -> str:
    return (name or "").strip().lower()


def find_duplicates(names: list[str]) -> list[str]:
    """Names occurring more than once, shown as first written, sorted.

    Blank names are ignored.
    """
    seen: dict[str, str] = {}
    counts: dict[str, int] = {}
    for name in names:
        key = _normalize(name)
        if not key:
            continue
        seen.setdefault(key, name.strip())
        counts[key] = counts.get(key, 0) + 1
    return [seen[key] for key in sorted(counts) if counts[key] > 1]


class DuplicateMedicationRules(BaseRuleModule):
    """Flag the same drug, or the same active ingredient, ordered twice."""

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        return self.check(context.medications)

    def check(self, medications: list[SelectedMedication]) -> list[ValidationFlag]:
        flags: list[ValidationFlag] = []

        duplicate_names = find_duplicates([m.drug_name for m in medications])
        if duplicate_names:
            flags.append(ValidationFlag(
                key="duplicates",
                flag_type=FlagType.DUPLICATE_DRUG,
                message=f"Duplicate medications: {', '.join(duplicate_names)}",
                details={"names": duplicate_names},
            ))

        duplicate_generics = find_duplicates([m.generic_name for m in medications])
        if duplicate_generics:
            flags.append(ValidationFlag(
                key="duplicates",
                flag_type=FlagType.DUPLICATE_INGREDIENT,
                message=f"Duplicate active ingredient: {', '.join(duplicate_generics)}",
                details={"generic_names": duplicate_generics},
            ))

        return flags
