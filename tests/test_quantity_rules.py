"""Tests for quantity rules: range, stock, dosage form, controlled ceiling."""

from rx_validation import validate_field
from rx_validation.rules.quantity_rules import count_decimals, get_quantity_unit, parse_quantity

from factories import create_test_entry


def test_quantity_basic_range():
    assert validate_field("quantity", "") == "Quantity is required"
    assert validate_field("quantity", None) == "Quantity is required"
    assert validate_field("quantity", "ten") == "Quantity must be a number"
    assert validate_field("quantity", "0") == "Quantity must be a positive number"
    assert validate_field("quantity", "-3") == "Quantity must be a positive number"
    assert validate_field("quantity", "1000") is None
    assert validate_field("quantity", "1001") == "Quantity seems too large (max 1000)"


def test_quantity_accepts_numbers_as_well_as_text():
    assert validate_field("quantity", 10) is None
    assert validate_field("quantity", 2.5) is None


def test_non_finite_quantity_is_not_a_number():
    assert parse_quantity("nan") is None
    assert parse_quantity("inf") is None
    assert validate_field("quantity", "inf") == "Quantity must be a number"


def test_tablet_quantity_multiples_of_half():
    tablet = create_test_entry(dosage_form="Tablet", current_stock=100)

    assert validate_field("quantity", "1.5", tablet) is None
    assert validate_field("quantity", "2", tablet) is None
    assert validate_field("quantity", "1.25", tablet) == "Quantity for tablets/capsules must be in multiples of 0.5"


def test_capsule_quantity_multiples_of_half():
    capsule = create_test_entry(dosage_form="Capsule", current_stock=100)
    assert validate_field("quantity", "0.3", capsule) == "Quantity for tablets/capsules must be in multiples of 0.5"


def test_quantity_above_stock_names_available_amount():
    aspirin = create_test_entry(drug_name="Aspirin", current_stock=3)

    assert validate_field("quantity", "3", aspirin) is None

    message = validate_field("quantity", "4", aspirin)
    assert message == "Only 3 tablets available in stock"
    assert "3" in message


def test_out_of_stock_wording():
    entry = create_test_entry(drug_name="Aspirin", current_stock=0)
    assert validate_field("quantity", "1", entry) == "Aspirin is currently out of stock"


def test_stock_unknown_skips_stock_check():
    entry = create_test_entry(current_stock=None)
    assert validate_field("quantity", "500", entry) is None


def test_injection_whole_numbers():
    injection = create_test_entry(dosage_form="Injection", current_stock=50)

    assert validate_field("quantity", "2", injection) is None
    assert validate_field("quantity", "2.5", injection) == "Quantity for injections/vials/ampoules must be a whole number"


def test_syrup_decimal_places_and_minimum():
    syrup = create_test_entry(dosage_form="Syrup", current_stock=500)

    assert validate_field("quantity", "100.5", syrup) is None
    assert validate_field("quantity", "10.25", syrup) == "Liquid quantities should not exceed 1 decimal place"
    assert validate_field("quantity", "4", syrup) == "Minimum liquid quantity is 5ml"
    assert validate_field("quantity", "5", syrup) is None


def test_liquid_stock_message_uses_ml():
    syrup = create_test_entry(dosage_form="Syrup", current_stock=50)
    assert validate_field("quantity", "60", syrup) == "Only 50 ml available in stock"


def test_controlled_substance_ceiling():
    morphine = create_test_entry(drug_name="Morphine", category="Controlled Analgesic", current_stock=100)

    assert validate_field("quantity", "30", morphine) is None
    assert validate_field("quantity", "31", morphine) == "Controlled substances limited to 30 units maximum"


def test_narcotic_category_is_controlled():
    entry = create_test_entry(category="Narcotic", current_stock=100)
    assert validate_field("quantity", "40", entry) == "Controlled substances limited to 30 units maximum"


def test_helpers():
    assert count_decimals("10.25") == 2
    assert count_decimals("10") == 0
    assert get_quantity_unit("Tablet") == "tablets"
    assert get_quantity_unit("Cream") == "tubes"
    assert get_quantity_unit("Inhaler") == "units"
    assert get_quantity_unit(None) == "units"


def test_suppository_and_patch_multiples_of_half():
    message = "Quantity for suppositories/patches must be in multiples of 0.5"
    for form in ["Suppository", "Patch"]:
        entry = create_test_entry(dosage_form=form, current_stock=100)
        assert validate_field("quantity", "2.5", entry) is None, form
        assert validate_field("quantity", "2.2", entry) == message, form


def test_vial_and_ampoule_whole_numbers():
    message = "Quantity for injections/vials/ampoules must be a whole number"
    for form in ["Vial", "Ampoule"]:
        entry = create_test_entry(dosage_form=form, current_stock=100)
        assert validate_field("quantity", "3", entry) is None, form
        assert validate_field("quantity", "0.5", entry) == message, form


def test_first_failing_quantity_rule_is_reported():
    syrup = create_test_entry(dosage_form="Syrup", current_stock=500)
    assert validate_field("quantity", "4.25", syrup) == "Liquid quantities should not exceed 1 decimal place"

    controlled_injection = create_test_entry(category="Controlled", dosage_form="Injection", current_stock=100)
    assert validate_field("quantity", "40.5", controlled_injection) == (
        "Quantity for injections/vials/ampoules must be a whole number"
    )
