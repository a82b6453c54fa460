"""
Tests for the pricing engine.
"""

from datetime import date
from decimal import Decimal

from salonbot.application.utils.pricing import calculate_price, format_price
from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.infrastructure.catalog.catalog_data import DEFAULT_CATALOG

MONDAY = date(2025, 6, 2)
SATURDAY = date(2025, 6, 7)
SUNDAY = date(2025, 6, 8)


def test_single_service_weekday_list_price():
    result = calculate_price(DEFAULT_CATALOG, ["haircut"], MONDAY)
    assert result.final_price == Decimal("500.00")
    assert not result.weekend_offer_applied
    assert not result.first_booking_offer_applied


def test_combo_replaces_member_prices():
    """manicure + pedicure is charged at the combo price, not 300 + 350."""
    result = calculate_price(DEFAULT_CATALOG, ["manicure", "pedicure"], MONDAY)
    assert result.final_price == Decimal("600.00")


def test_combo_plus_extra_service():
    result = calculate_price(DEFAULT_CATALOG, ["manicure", "spa treatment", "pedicure"], MONDAY)
    assert result.final_price == Decimal("1600.00")


def test_both_combos_collapse():
    result = calculate_price(DEFAULT_CATALOG, ["haircut", "facial", "manicure", "pedicure"], MONDAY)
    assert result.final_price == Decimal("1400.00")


def test_combo_matching_ignores_case():
    result = calculate_price(DEFAULT_CATALOG, ["Manicure", "PEDICURE"], MONDAY)
    assert result.final_price == Decimal("600.00")


def test_weekend_discount_on_saturday_and_sunday():
    assert calculate_price(DEFAULT_CATALOG, ["facial"], SATURDAY).final_price == Decimal("360.00")
    assert calculate_price(DEFAULT_CATALOG, ["facial"], SUNDAY).weekend_offer_applied


def test_weekend_then_first_booking():
    """500 * 0.90 * 0.50 = 225.00"""
    result = calculate_price(DEFAULT_CATALOG, ["haircut"], SATURDAY, is_first_booking=True)
    assert result.final_price == Decimal("225.00")
    assert result.weekend_offer_applied
    assert result.first_booking_offer_applied


def test_missing_date_gets_no_weekend_discount():
    result = calculate_price(DEFAULT_CATALOG, ["haircut"], None, is_first_booking=True)
    assert result.final_price == Decimal("250.00")
    assert not result.weekend_offer_applied


def test_unknown_service_counts_as_zero():
    result = calculate_price(DEFAULT_CATALOG, ["haircut", "massage"], MONDAY)
    assert result.final_price == Decimal("500.00")
    assert calculate_price(DEFAULT_CATALOG, ["massage"], MONDAY).final_price == Decimal("0.00")


def test_empty_selection_is_zero():
    assert calculate_price(DEFAULT_CATALOG, [], SATURDAY).final_price == Decimal("0.00")


def test_rounds_half_up_to_two_places():
    catalog = SalonCatalog.build({"threading": "10.05"}, [], ["Main"])
    result = calculate_price(catalog, ["threading"], MONDAY, is_first_booking=True)
    assert result.final_price == Decimal("5.03")


def test_same_inputs_same_result():
    first = calculate_price(DEFAULT_CATALOG, ["pedicure", "facial"], SATURDAY, is_first_booking=True)
    second = calculate_price(DEFAULT_CATALOG, ["pedicure", "facial"], SATURDAY, is_first_booking=True)
    assert first == second


def test_custom_catalog_combo():
    catalog = SalonCatalog.build(
        {"wash": 100, "blow dry": 150, "trim": 200},
        [(["wash", "blow dry"], 200)],
        ["Main"],
    )
    assert calculate_price(catalog, ["trim", "wash", "blow dry"], MONDAY).final_price == Decimal("400.00")


def test_format_price_uses_currency_symbol():
    assert format_price(DEFAULT_CATALOG, Decimal("225")) == "₹225.00"
