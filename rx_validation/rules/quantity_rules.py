"""Quantity rules: numeric range, stock, dosage-form granularity, controlled ceiling."""

import logging
import math

from common.prescription_safety import FlagType
from ..config import DEFAULT_QUANTITY_UNIT, FORM_QUANTITY_UNITS
from ..models import FieldIssue, MedicationCatalogEntry

logger = logging.getLogger(__name__)


MAX_QUANTITY = 1000
CONTROLLED_MAX_QUANTITY = 30
CONTROLLED_CATEGORY_KEYWORDS = ["controlled", "narcotic"]

# Dosage form (lowercase) -> granularity rule
FORM_QUANTITY_RULES = {
    "tablet": {"step": 0.5, "message": "Quantity for tablets/capsules must be in multiples of 0.5"},
    "capsule": {"step": 0.5, "message": "Quantity for tablets/capsules must be in multiples of 0.5"},
    "suppository": {"step": 0.5, "message": "Quantity for suppositories/patches must be in multiples of 0.5"},
    "patch": {"step": 0.5, "message": "Quantity for suppositories/patches must be in multiples of 0.5"},
    "injection": {"step": 1, "message": "Quantity for injections/vials/ampoules must be a whole number"},
    "vial": {"step": 1, "message": "Quantity for injections/vials/ampoules must be a whole number"},
    "ampoule": {"step": 1, "message": "Quantity for injections/vials/ampoules must be a whole number"},
    "syrup": {"max_decimals": 1, "min_quantity": 5},
    "suspension": {"max_decimals": 1, "min_quantity": 5},
    "solution": {"max_decimals": 1, "min_quantity": 5},
}


def get_quantity_unit(dosage_form: str | None) -> str:
    """Unit the quantity is counted in for a dosage form."""
    return FORM_QUANTITY_UNITS.get((dosage_form or "").strip().lower(), DEFAULT_QUANTITY_UNIT)


def parse_quantity(value) -> float | None:
    """Parse a typed quantity, or None if it is not a finite number."""
    try:
        quantity = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(quantity):
        return None
    return quantity


def count_decimals(value) -> int:
    """Digits after the decimal point, as typed."""
    text = str(value).strip()
    if "." not in text:
        return 0
    return len(text.split(".", 1)[1])


def _is_multiple(quantity: float, step: float) -> bool:
    return (quantity / step).is_integer()


def check_quantity(value, entry: MedicationCatalogEntry | None = None, today=None, config=None) -> FieldIssue | None:
    if value is None or str(value).strip() == "":
        return FieldIssue(FlagType.INVALID_QUANTITY, "Quantity is required")

    quantity = parse_quantity(value)
    if quantity is None:
        return FieldIssue(FlagType.INVALID_QUANTITY, "Quantity must be a number")
    if quantity <= 0:
        return FieldIssue(FlagType.INVALID_QUANTITY, "Quantity must be a positive number")
    if quantity > MAX_QUANTITY:
        return FieldIssue(FlagType.INVALID_QUANTITY, f"Quantity seems too large (max {MAX_QUANTITY})")

    if entry is None:
        return None

    dosage_form = (entry.dosage_form or "").strip().lower()

    if entry.current_stock is not None and quantity > entry.current_stock:
        if entry.current_stock <= 0:
            message = f"{entry.drug_name} is currently out of stock"
        else:
            message = (
                f"Only {entry.current_stock:g} {get_quantity_unit(dosage_form)} available in stock"
            )
        return FieldIssue(
            FlagType.INSUFFICIENT_STOCK,
            message,
            details={"requested": quantity, "available": entry.current_stock},
        )

    rule = FORM_QUANTITY_RULES.get(dosage_form)
    if rule:
        if "step" in rule and not _is_multiple(quantity, rule["step"]):
            return FieldIssue(FlagType.QUANTITY_FORM_MISMATCH, rule["message"])
        if "max_decimals" in rule and count_decimals(value) > rule["max_decimals"]:
            return FieldIssue(
                FlagType.QUANTITY_FORM_MISMATCH,
                "Liquid quantities should not exceed 1 decimal place",
            )
        if "min_quantity" in rule and quantity < rule["min_quantity"]:
            return FieldIssue(
                FlagType.QUANTITY_FORM_MISMATCH,
                f"Minimum liquid quantity is {rule['min_quantity']}ml",
            )

    category = (entry.category or "").lower()
    if any(keyword in category for keyword in CONTROLLED_CATEGORY_KEYWORDS):
        if quantity > CONTROLLED_MAX_QUANTITY:
            return FieldIssue(
                FlagType.CONTROLLED_QUANTITY_EXCEEDED,
                f"Controlled substances limited to {CONTROLLED_MAX_QUANTITY} units maximum",
            )

    return None
