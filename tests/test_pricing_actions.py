import math

import pytest

from pricing_actions import (
    calculate_order_totals,
    get_global_discount_percentage,
    get_shipping_settings,
    get_tax_rate,
    update_global_discount_percentage,
    update_shipping_settings,
    update_tax_rate,
)
from schemas import Coupon


def test_defaults():
    assert get_global_discount_percentage() == 0
    assert get_tax_rate() == 18
    settings = get_shipping_settings()
    assert (settings.rate, settings.threshold) == (50, 5000)


@pytest.mark.parametrize("value", [150, -5, math.nan, "50", None, True])
def test_global_discount_rejects_invalid_values(value):
    result = update_global_discount_percentage(value)
    assert not result.success
    assert result.error == "Discount percentage must be a number between 0 and 100."
    assert get_global_discount_percentage() == 0


def test_global_discount_update_is_readable():
    result = update_global_discount_percentage(50)
    assert result.success and result.data == 50
    assert get_global_discount_percentage() == 50


def test_tax_rate_bounds():
    assert not update_tax_rate(101).success
    assert not update_tax_rate(-1).success
    assert update_tax_rate(5).success
    assert get_tax_rate() == 5


def test_shipping_settings_must_be_non_negative():
    assert not update_shipping_settings(-1, 100).success
    assert not update_shipping_settings(10, -100).success
    result = update_shipping_settings(40, 999)
    assert result.success
    assert get_shipping_settings().threshold == 999


def test_totals_with_defaults():
    totals = calculate_order_totals(200)
    assert totals.discount_amount == 0
    assert totals.tax_amount == 36
    assert totals.shipping_cost == 50
    assert totals.total_amount == 286


def test_free_shipping_at_threshold():
    update_tax_rate(0)
    assert calculate_order_totals(5000).shipping_cost == 0
    assert calculate_order_totals(4999.99).shipping_cost == 50
    assert calculate_order_totals(0).total_amount == 0


def test_global_discount_then_percentage_coupon():
    update_global_discount_percentage(10)
    update_tax_rate(0)
    coupon = Coupon(id="c", code="TEN", discount_type="percentage", value=10)
    totals = calculate_order_totals(1000, coupon)
    # 100 off globally, then 10% of the remaining 900
    assert totals.discount_amount == 190
    assert totals.coupon_code == "TEN"
    assert totals.total_amount == 860


def test_fixed_coupon_is_capped_at_amount():
    update_tax_rate(0)
    coupon = Coupon(id="c", code="BIG", discount_type="fixed", value=500)
    totals = calculate_order_totals(300, coupon)
    assert totals.discount_amount == 300
    assert totals.total_amount == 50
