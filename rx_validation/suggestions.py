"""Defaults offered when a catalog entry is added to a draft."""

import re

from .config import CATEGORY_DEFAULTS, DEFAULT_QUANTITY_UNIT, FALLBACK_CATEGORY_DEFAULTS
from .models import MedicationCatalogEntry, PrescriptionLine
from .rules.quantity_rules import get_quantity_unit

_STRENGTH_PATTERN = re.compile(r"(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>[^\d\s]*)")


def get_category_defaults(category: str | None, table: dict | None = None) -> dict:
    table = CATEGORY_DEFAULTS if table is None else table
    return table.get(category or "", FALLBACK_CATEGORY_DEFAULTS)


def generate_dosage_options(entry: MedicationCatalogEntry) -> list[str]:
    """Common dosages derived from the entry strength.

    Tablets and capsules get half, full and double strength; everything else
    gets the labelled strength only.
    """
    strength = (entry.strength or "").strip()
    if not strength:
        return ["Standard dose"]

    form = (entry.dosage_form or "").lower()
    match = _STRENGTH_PATTERN.fullmatch(strength)
    if not match or not ("tablet" in form or "capsule" in form):
        return [strength]

    amount = float(match.group("amount"))
    unit = match.group("unit")
    return [f"{amount * m:g}{unit}" for m in (0.5, 1, 2)]


def get_standard_frequencies(category: str | None, table: dict | None = None) -> list[str]:
    return list(get_category_defaults(category, table)["default_frequencies"])


def build_line_defaults(entry: MedicationCatalogEntry, table: dict | None = None) -> dict:
    """Options and a pre-filled line for a newly added catalog entry."""
    defaults = get_category_defaults(entry.category, table)
    quantity = defaults.get("default_quantity")

    line = PrescriptionLine(
        medication_id=entry.medication_id,
        instructions=entry.common_instructions or defaults.get("default_instructions") or "",
        quantity="" if quantity is None else str(quantity),
    )

    # The dosage form knows the unit better than the category does
    quantity_unit = get_quantity_unit(entry.dosage_form)
    if quantity_unit == DEFAULT_QUANTITY_UNIT and defaults.get("quantity_unit"):
        quantity_unit = defaults["quantity_unit"]

    return {
        "line": line,
        "dosage_options": generate_dosage_options(entry),
        "frequency_options": get_standard_frequencies(entry.category, table),
        "quantity_unit": quantity_unit,
    }
