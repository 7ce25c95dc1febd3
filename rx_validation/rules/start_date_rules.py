"""Prescription start date rules."""

import logging
from datetime import date, timedelta

from common.prescription_safety import FlagType, ValidationFlag
from ..models import ValidationContext
from ..rules_engine import BaseRuleModule

logger = logging.getLogger(__name__)


def check_start_date(start_date: date | None, today: date, max_days_ahead: int = 30) -> str | None:
    """A missing start date means "start today" and is accepted."""
    if start_date is None:
        return None
    if start_date < today:
        return "Start date cannot be in the past"
    if start_date > today + timedelta(days=max_days_ahead):
        return f"Start date cannot be more than {max_days_ahead} days in the future"
    return None


class StartDateRules(BaseRuleModule):
    """Keep the start date within today and the configured look-ahead window."""

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        message = check_start_date(
            context.draft.start_date,
            context.today,
            context.config.get("max_start_date_days", 30),
        )
        if message is None:
            return []
        return [ValidationFlag(
            key="start_date",
            flag_type=FlagType.INVALID_START_DATE,
            message=message,
        )]
