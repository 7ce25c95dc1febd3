"""Catalog expiry rules.

An expired entry cannot be prescribed. An entry expiring within the warning
window is reported as a warning under the same ``expiry`` field.
"""

import logging
from datetime import date

from common.prescription_safety import FlagSeverity, FlagType
from ..config import DEFAULT_CONFIG
from ..models import FieldIssue, MedicationCatalogEntry, parse_date

logger = logging.getLogger(__name__)


def check_expiry(value, entry: MedicationCatalogEntry | None = None, today: date | None = None, config=None) -> FieldIssue | None:
    """Check an expiry date (``value``, or the entry's own expiry date)."""
    try:
        expiry = parse_date(value) if value is not None else (entry.expiry_date if entry else None)
    except ValueError:
        return FieldIssue(
            FlagType.INVALID_EXPIRY_DATE,
            "Invalid expiry date (use YYYY-MM-DD)",
            details={"value": str(value)},
        )
    if expiry is None:
        return None

    today = today or date.today()
    warning_days = (config or DEFAULT_CONFIG).get(
        "expiry_warning_days", DEFAULT_CONFIG["expiry_warning_days"]
    )
    drug = entry.drug_name if entry and entry.drug_name else "This medication"
    days_left = (expiry - today).days

    if days_left < 0:
        return FieldIssue(
            FlagType.EXPIRED,
            f"{drug} expired on {expiry.isoformat()} and cannot be prescribed",
            details={"expiry_date": expiry.isoformat()},
        )

    if days_left <= warning_days:
        return FieldIssue(
            FlagType.EXPIRING_SOON,
            f"Warning: {drug} expires in {days_left} day{'s' if days_left != 1 else ''} ({expiry.isoformat()})",
            severity=FlagSeverity.WARNING,
            details={"expiry_date": expiry.isoformat(), "days_left": days_left},
        )

    return None
