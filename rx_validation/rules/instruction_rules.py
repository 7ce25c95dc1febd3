"""Instruction text safety rules.

Instructions are optional. When present they must be a sensible length, must
not contain language that encourages misuse, and must not ask for two things
that cannot both be true (e.g. "with food" and "on empty stomach").
"""

import logging

from common.prescription_safety import FlagType
from ..models import FieldIssue, MedicationCatalogEntry

logger = logging.getLogger(__name__)


MAX_INSTRUCTION_LENGTH = 500
MIN_INSTRUCTION_LENGTH = 3

DANGEROUS_PHRASES = [
    "overdose",
    "double dose",
    "triple dose",
    "quadruple dose",
    "as much as possible",
    "unlimited",
    "no limit",
    "maximum dose",
    "crush and inject",
    "inject",
    "snort",
    "abuse",
    "all at once",
    "entire bottle",
    "whole pack",
]

# Pairs of phrases that must not appear in the same instructions
CONTRADICTORY_PAIRS = [
    ("with food", "on empty stomach"),
    ("before meals", "after meals"),
    ("morning", "bedtime"),
    ("with milk", "avoid dairy"),
    ("once daily", "twice daily"),
    ("chew", "swallow whole"),
]


def find_dangerous_phrases(text: str) -> list[str]:
    lowered = text.lower()
    return [phrase for phrase in DANGEROUS_PHRASES if phrase in lowered]


def find_contradiction(text: str) -> tuple[str, str] | None:
    """First contradictory pair contained in the text, in table order."""
    lowered = text.lower()
    for first, second in CONTRADICTORY_PAIRS:
        if first in lowered and second in lowered:
            return first, second
    return None


def check_instructions(value, entry: MedicationCatalogEntry | None = None, today=None, config=None) -> FieldIssue | None:
    if not value:
        return None

    text = str(value)
    stripped = text.strip()

    if len(text) > MAX_INSTRUCTION_LENGTH:
        return FieldIssue(
            FlagType.INVALID_INSTRUCTIONS,
            f"Instructions too long (max {MAX_INSTRUCTION_LENGTH} characters)",
        )
    if 0 < len(stripped) < MIN_INSTRUCTION_LENGTH:
        return FieldIssue(
            FlagType.INVALID_INSTRUCTIONS,
            f"Instructions too short (min {MIN_INSTRUCTION_LENGTH} characters)",
        )

    dangerous = find_dangerous_phrases(text)
    if dangerous:
        logger.debug(f"Unsafe instruction phrases: {dangerous}")
        return FieldIssue(
            FlagType.UNSAFE_INSTRUCTIONS,
            "Instructions contain potentially unsafe language",
            details={"phrases": dangerous},
        )

    contradiction = find_contradiction(text)
    if contradiction:
        first, second = contradiction
        return FieldIssue(
            FlagType.CONTRADICTORY_INSTRUCTIONS,
            f"Instructions contain contradictory terms: \"{first}\" and \"{second}\"",
            details={"terms": [first, second]},
        )

    return None
