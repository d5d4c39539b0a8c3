import pytest

from cpq.pricing import price_quote, quote_total, round2, subtotal


ITEMS = [
    {'sell': 100.0, 'qty': 2.0, 'cost': 70.0},
    {'sell': 50.0, 'qty': 1.0, 'cost': 30.0},
]


def test_totals_example():
    pricing = price_quote(ITEMS, tax_rate=0.1, discount=5)
    assert pricing.subtotal == 250
    assert pricing.taxed == pytest.approx(275)
    assert pricing.total == 270.00


def test_cost_is_not_part_of_totals():
    assert subtotal(ITEMS) == 250
    expensive = [dict(i, cost=10_000) for i in ITEMS]
    assert quote_total(expensive) == quote_total(ITEMS) == 250


def test_negative_total_is_not_clamped():
    assert quote_total([{'sell': 10.0, 'qty': 1.0}], discount=25) == -15.0


def test_round2_half_up():
    assert round2(0.125) == 0.13
    assert round2(2.5) == 2.5
    assert round2(1 / 3) == 0.33
    assert round2(10.0049) == 10.0
