from datetime import date

import pytest

from app.core.errors import InvalidPricing
from app.services.availability import (
    check_pricing,
    compute_price,
    count_days,
    ranges_overlap,
    unit_count,
)


def test_day_pricing_counts_both_endpoints():
    quote = compute_price(1000, "day", [], date(2030, 8, 1), date(2030, 8, 3))
    assert quote.days == 3
    assert quote.unit_count == 3
    assert quote.total == 3000


def test_week_pricing_rounds_up_partial_weeks():
    quote = compute_price(500, "week", [], date(2030, 1, 1), date(2030, 1, 10))
    assert quote.days == 10
    assert quote.unit_count == 2
    assert quote.total == 1000


def test_only_included_additional_costs_are_added():
    costs = [
        {"name": "Printing", "cost": 250, "is_included": True},
        {"name": "Lighting", "cost": 400, "is_included": False},
        {"name": "Mounting", "cost": 100, "is_included": True},
    ]
    quote = compute_price(500, "week", costs, date(2030, 1, 1), date(2030, 1, 10))
    assert quote.extras == 350
    assert quote.total == 1350


def test_month_and_slot_units():
    assert unit_count("month", 30) == 1
    assert unit_count("month", 31) == 2
    assert unit_count("slot", 90) == 1


def test_unknown_unit_is_invalid_pricing():
    with pytest.raises(InvalidPricing):
        unit_count("fortnight", 14)


@pytest.mark.parametrize("base_price", [None, 0, -10])
def test_missing_or_non_positive_base_price_is_rejected(base_price):
    with pytest.raises(InvalidPricing):
        check_pricing(base_price, "day")


def test_shared_boundary_day_overlaps():
    assert ranges_overlap(date(2030, 8, 1), date(2030, 8, 3), date(2030, 8, 3), date(2030, 8, 5))


def test_adjacent_ranges_do_not_overlap():
    assert not ranges_overlap(date(2030, 8, 1), date(2030, 8, 3), date(2030, 8, 4), date(2030, 8, 6))


def test_contained_range_overlaps():
    assert ranges_overlap(date(2030, 8, 1), date(2030, 8, 30), date(2030, 8, 10), date(2030, 8, 12))


def test_count_days_single_night():
    assert count_days(date(2030, 8, 1), date(2030, 8, 2)) == 2
