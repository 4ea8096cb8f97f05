from datetime import date

import pytest

from coupon_actions import add_coupon, delete_coupon, get_coupons, validate_coupon
from database import coupons_store


def test_add_coupon_stores_code_uppercase():
    result = add_coupon(" glow10 ", "percentage", 10, min_spend=500)
    assert result.success
    assert result.data.code == "GLOW10"
    stored = coupons_store.read()
    assert stored[0]["code"] == "GLOW10"
    assert stored[0]["discountType"] == "percentage"
    assert stored[0]["minSpend"] == 500


def test_add_coupon_rejects_case_insensitive_duplicate():
    assert add_coupon("SAVE50", "fixed", 50).success
    result = add_coupon("save50", "percentage", 5)
    assert not result.success
    assert "already exists" in result.error
    assert len(get_coupons()) == 1


@pytest.mark.parametrize("kwargs,error", [
    (dict(code="", discount_type="fixed", value=10), "Coupon code and value are required."),
    (dict(code="X", discount_type="fixed", value=None), "Coupon code and value are required."),
    (dict(code="X", discount_type="bogus", value=10), 'Discount type must be "percentage" or "fixed".'),
    (dict(code="X", discount_type="fixed", value=0), "Coupon value must be greater than 0."),
    (dict(code="X", discount_type="percentage", value=120), "Percentage discount must be between 0 and 100."),
    (dict(code="X", discount_type="fixed", value=10, min_spend=-1), "Minimum spend cannot be negative."),
    (dict(code="X", discount_type="fixed", value=10, expiry_date="31/12/2030"),
     "Expiry date must be in YYYY-MM-DD format."),
])
def test_add_coupon_validation(kwargs, error):
    result = add_coupon(**kwargs)
    assert not result.success
    assert result.error == error
    assert coupons_store.read() == []


def test_delete_coupon():
    coupon = add_coupon("BYE", "fixed", 20).data
    assert delete_coupon(coupon.id).success
    assert get_coupons() == []
    assert delete_coupon(coupon.id).error == "Coupon not found."
    assert delete_coupon("").error == "Coupon ID is required."


def test_validate_coupon_rules():
    add_coupon("WELCOME", "percentage", 15, expiry_date="2030-01-31", min_spend=1000)
    add_coupon("OLD", "fixed", 100, expiry_date="2020-01-01")

    assert validate_coupon("welcome", 1500, today=date(2029, 5, 1)).data.code == "WELCOME"
    assert validate_coupon("WELCOME", 1500, today=date(2030, 1, 31)).success
    assert "expired" in validate_coupon("WELCOME", 1500, today=date(2030, 2, 1)).error
    assert "minimum spend" in validate_coupon("WELCOME", 999, today=date(2029, 5, 1)).error
    assert "expired" in validate_coupon("OLD", 5000).error
    assert validate_coupon("MISSING", 5000).error == "Invalid coupon code."
