"""Configuration for prescription validation.

Engine limits come from ``DEFAULT_CONFIG`` and can be overridden with
environment variables (see ``load_config``). The category and dosage-form
tables drive the defaults offered when a medication is added to a draft.
"""

import os

DEFAULT_CONFIG = {
    "max_medications": 10,
    "expiry_warning_days": 30,
    "max_start_date_days": 30,
    # Expiring-soon warnings block submission unless this is turned off
    "expiry_warning_blocks": True,
}

_ENV_OVERRIDES = {
    "max_medications": ("RX_MAX_MEDICATIONS", int),
    "expiry_warning_days": ("RX_EXPIRY_WARNING_DAYS", int),
    "max_start_date_days": ("RX_MAX_START_DATE_DAYS", int),
    "expiry_warning_blocks": (
        "RX_EXPIRY_WARNING_BLOCKS",
        lambda v: v.strip().lower() not in ("0", "false", "no", "off"),
    ),
}


def load_config(overrides: dict | None = None) -> dict:
    """Build an engine config from defaults, environment, then explicit overrides."""
    config = dict(DEFAULT_CONFIG)
    for key, (env_name, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw != "":
            config[key] = cast(raw)
    if overrides:
        config.update(overrides)
    return config


# Quantity unit shown next to the quantity field, by dosage form (lowercase)
FORM_QUANTITY_UNITS = {
    "tablet": "tablets",
    "capsule": "capsules",
    "syrup": "ml",
    "suspension": "ml",
    "solution": "ml",
    "injection": "vials",
    "vial": "vials",
    "ampoule": "ampoules",
    "cream": "tubes",
    "ointment": "tubes",
    "suppository": "suppositories",
    "patch": "patches",
}

DEFAULT_QUANTITY_UNIT = "units"

DEFAULT_FREQUENCIES = [
    "Once daily (OD)",
    "Twice daily (BD)",
    "Three times daily (TDS)",
    "Four times daily (QDS)",
]

# Category -> defaults offered when a medication of that category is added
CATEGORY_DEFAULTS = {
    "Analgesic": {
        "default_frequencies": ["Once daily (OD)", "Twice daily (BD)", "Three times daily (TDS)", "As needed (PRN)"],
        "default_instructions": "Take after meals with water",
        "default_quantity": 10,
        "quantity_unit": "tablets",
    },
    "Antibiotic": {
        "default_frequencies": ["Twice daily (BD)", "Three times daily (TDS)", "Four times daily (QDS)"],
        "default_instructions": "Complete the full course",
        "default_quantity": 21,
        "quantity_unit": "capsules",
    },
    "Antidiabetic": {
        "default_frequencies": ["Once daily (OD)", "Twice daily (BD)", "Before meals", "As per sliding scale"],
        "default_instructions": "Take with meals",
        "default_quantity": 30,
        "quantity_unit": "tablets",
    },
    "Antihypertensive": {
        "default_frequencies": ["Once daily (OD)", "Twice daily (BD)"],
        "default_instructions": "Take at the same time each day",
        "default_quantity": 30,
        "quantity_unit": "tablets",
    },
    "Diuretic": {
        "default_frequencies": ["Once daily (OD)"],
        "default_instructions": "Take in the morning",
        "default_quantity": 30,
        "quantity_unit": "tablets",
    },
    "Proton Pump Inhibitor": {
        "default_frequencies": ["Once daily (OD)", "Twice daily (BD)", "Before meals"],
        "default_instructions": "Take before meals",
        "default_quantity": 14,
        "quantity_unit": "capsules",
    },
}

FALLBACK_CATEGORY_DEFAULTS = {
    "default_frequencies": DEFAULT_FREQUENCIES,
    "default_instructions": "",
    "default_quantity": None,
    "quantity_unit": None,
}
