"""Therapeutic category concentration rule."""

import logging

from common.prescription_safety import FlagType, ValidationFlag
from ..models import SelectedMedication, ValidationContext
from ..rules_engine import BaseRuleModule

logger = logging.getLogger(__name__)


MONITORED_CATEGORIES = ["analgesic", "antibiotic", "antihypertensive", "diuretic"]
MAX_PER_CATEGORY = 2


class CategoryConcentrationRules(BaseRuleModule):
    """Flag more than two lines from one broad therapeutic category."""

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        return self.check(context.medications)

    def check(self, medications: list[SelectedMedication]) -> list[ValidationFlag]:
        flags: list[ValidationFlag] = []

        for category in MONITORED_CATEGORIES:
            count = sum(1 for m in medications if category in (m.category or "").lower())
            if count > MAX_PER_CATEGORY:
                flags.append(ValidationFlag(
                    key="duplicates",
                    flag_type=FlagType.CATEGORY_OVERLOAD,
                    message=f"Multiple {category} medications ({count}) - review for appropriateness",
                    details={"category": category, "count": count},
                ))

        return flags
