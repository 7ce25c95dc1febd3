"""Tests for instruction text and catalog expiry rules."""

from datetime import timedelta

from rx_validation import validate_field
from rx_validation.rules.expiry_rules import check_expiry
from rx_validation.rules.instruction_rules import find_contradiction, find_dangerous_phrases
from common.prescription_safety import FlagSeverity, FlagType

from factories import TODAY, create_test_entry


def test_instructions_optional():
    assert validate_field("instructions", "") is None
    assert validate_field("instructions", None) is None
    assert validate_field("instructions", "Take after meals with water") is None


def test_instructions_length():
    assert validate_field("instructions", "x" * 500) is None
    assert validate_field("instructions", "x" * 501) == "Instructions too long (max 500 characters)"
    assert validate_field("instructions", "ok") == "Instructions too short (min 3 characters)"


def test_dangerous_phrases():
    assert validate_field("instructions", "Take a double dose if pain persists") == (
        "Instructions contain potentially unsafe language"
    )
    assert validate_field("instructions", "Crush and inject") == "Instructions contain potentially unsafe language"
    assert find_dangerous_phrases("Finish the ENTIRE BOTTLE") == ["entire bottle"]


def test_contradiction_names_both_terms():
    message = validate_field("instructions", "Take with food on empty stomach")

    assert message is not None
    assert "with food" in message
    assert "on empty stomach" in message


def test_contradiction_is_case_insensitive():
    assert find_contradiction("Chew, or SWALLOW WHOLE") == ("chew", "swallow whole")
    assert find_contradiction("Take before meals") is None


def test_unsafe_language_reported_before_contradiction():
    message = validate_field("instructions", "overdose with food on empty stomach")
    assert message == "Instructions contain potentially unsafe language"


def test_expired_entry_blocks():
    entry = create_test_entry(drug_name="Amoxil", expiry_date=TODAY - timedelta(days=1))

    issue = check_expiry(None, entry, TODAY)

    assert issue.flag_type == FlagType.EXPIRED
    assert issue.severity == FlagSeverity.ERROR
    assert issue.message == f"Amoxil expired on {(TODAY - timedelta(days=1)).isoformat()} and cannot be prescribed"


def test_expiring_soon_is_warning():
    entry = create_test_entry(drug_name="Amoxil", expiry_date=TODAY + timedelta(days=10))

    issue = check_expiry(None, entry, TODAY)

    assert issue.flag_type == FlagType.EXPIRING_SOON
    assert issue.severity == FlagSeverity.WARNING
    assert "expires in 10 days" in issue.message


def test_expiry_window_boundaries():
    assert check_expiry(None, create_test_entry(expiry_date=TODAY), TODAY).flag_type == FlagType.EXPIRING_SOON
    assert check_expiry(None, create_test_entry(expiry_date=TODAY + timedelta(days=30)), TODAY) is not None
    assert check_expiry(None, create_test_entry(expiry_date=TODAY + timedelta(days=31)), TODAY) is None
    assert "expires in 1 day " in check_expiry(
        None, create_test_entry(expiry_date=TODAY + timedelta(days=1)), TODAY
    ).message


def test_expiry_warning_days_configurable():
    entry = create_test_entry(expiry_date=TODAY + timedelta(days=45))

    assert check_expiry(None, entry, TODAY) is None
    assert check_expiry(None, entry, TODAY, {"expiry_warning_days": 60}) is not None


def test_expiry_without_date_passes():
    assert check_expiry(None, create_test_entry(expiry_date=None), TODAY) is None
    assert check_expiry(None, None, TODAY) is None


def test_malformed_expiry_date_is_reported_not_raised():
    assert validate_field("expiry", "31/12/2026", today=TODAY) == "Invalid expiry date (use YYYY-MM-DD)"
    assert validate_field("expiry", "soon", today=TODAY) == "Invalid expiry date (use YYYY-MM-DD)"

    issue = check_expiry("2026-13-01", create_test_entry(), TODAY)
    assert issue.flag_type == FlagType.INVALID_EXPIRY_DATE
    assert issue.severity == FlagSeverity.ERROR


def test_expiry_field_accepts_explicit_date():
    message = validate_field("expiry", (TODAY - timedelta(days=3)).isoformat(), today=TODAY)
    assert message.startswith("This medication expired on")
