"""Dosage format/range and frequency rules.

Dosage is free text of the form ``<number><optional space><unit>``, e.g.
``500mg``, ``1.5 g``, ``2tabs``. Once the format matches, the magnitude is
checked against a per-unit range. Units without a range row skip the check.
"""

import logging
import re

from common.prescription_safety import FlagType
from ..models import FieldIssue, MedicationCatalogEntry

logger = logging.getLogger(__name__)


DOSAGE_UNITS = [
    "mg", "g", "ml", "mcg", "μg", "iu",
    "units", "unit", "tabs", "tab", "caps", "cap",
    "drops", "drop", "puffs", "puff", "sprays", "spray",
    "patches", "patch",
]

# Longest alternatives first so "mg" is not read as "g" and "units" not as "unit"
DOSAGE_PATTERN = re.compile(
    r"^(?P<amount>\d+(?:\.\d{1,3})?)\s*(?P<unit>"
    + "|".join(sorted((re.escape(u) for u in DOSAGE_UNITS), key=len, reverse=True))
    + r")$",
    re.IGNORECASE,
)

# Plural spellings share the singular's limits
UNIT_ALIASES = {
    "units": "unit",
    "tabs": "tab",
    "caps": "cap",
    "drops": "drop",
    "puffs": "puff",
    "sprays": "spray",
    "patches": "patch",
}

DOSAGE_LIMITS = {
    "mg": {"min": 0.1, "max": 5000},
    "mcg": {"min": 0.1, "max": 10000},
    "μg": {"min": 0.1, "max": 10000},
    "g": {"min": 0.01, "max": 50},
    "ml": {"min": 0.1, "max": 1000},
    "iu": {"min": 1, "max": 100000},
    "unit": {"min": 1, "max": 1000},
    "tab": {"min": 0.25, "max": 20},
    "cap": {"min": 0.5, "max": 20},
    "drop": {"min": 1, "max": 50},
    "puff": {"min": 1, "max": 20},
    "spray": {"min": 1, "max": 10},
    "patch": {"min": 0.5, "max": 10},
}

VALID_FREQUENCIES = [
    "Once daily (OD)",
    "Twice daily (BD)",
    "Three times daily (TDS)",
    "Four times daily (QDS)",
    "As needed (PRN)",
    "Before meals",
    "After meals",
    "At bedtime",
    "As per sliding scale",
]


def parse_dosage(value: str) -> tuple[float, str] | None:
    """Split a dosage string into (amount, unit), or None if malformed.

    The unit is returned lowercased as written (``"Tabs"`` -> ``"tabs"``).
    """
    match = DOSAGE_PATTERN.match(value.strip())
    if not match:
        return None
    return float(match.group("amount")), match.group("unit").lower()


def _fmt(number: float) -> str:
    return f"{number:g}"


def check_dosage(value, entry: MedicationCatalogEntry | None = None, today=None, config=None) -> FieldIssue | None:
    if value is None or str(value).strip() == "":
        return FieldIssue(FlagType.INVALID_DOSAGE, "Dosage is required")

    parsed = parse_dosage(str(value))
    if parsed is None:
        return FieldIssue(
            FlagType.INVALID_DOSAGE,
            "Invalid dosage format (e.g., 500mg, 1.5g, 10ml, 2tabs, 1puff)",
        )

    amount, unit = parsed
    limits = DOSAGE_LIMITS.get(UNIT_ALIASES.get(unit, unit))
    if limits is None:
        return None

    if amount < limits["min"] or amount > limits["max"]:
        return FieldIssue(
            FlagType.DOSAGE_OUT_OF_RANGE,
            f"Dosage should be between {_fmt(limits['min'])} and {_fmt(limits['max'])} {unit}",
            details={"amount": amount, "unit": unit, "min": limits["min"], "max": limits["max"]},
        )
    return None


def check_frequency(value, entry: MedicationCatalogEntry | None = None, today=None, config=None) -> FieldIssue | None:
    if value is None or str(value).strip() == "":
        return FieldIssue(FlagType.INVALID_FREQUENCY, "Frequency is required")

    if str(value).strip() not in VALID_FREQUENCIES:
        return FieldIssue(
            FlagType.INVALID_FREQUENCY,
            "Please select a standard frequency (e.g., \"Once daily (OD)\", \"Twice daily (BD)\")",
            details={"allowed": VALID_FREQUENCIES},
        )
    return None
