"""
Store-wide pricing rules: global discount, tax rate, shipping settings, and
the order totals they produce.
"""
import logging
import math
from typing import Any, Optional

from database import StoreWriteError, global_discount_store, shipping_store, tax_store
from schemas import ActionResult, Coupon, OrderTotals, ShippingSettings

logger = logging.getLogger(__name__)


def _is_valid_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


# ----------------------------------------------------------------------------
# Global discount
# ----------------------------------------------------------------------------

def get_global_discount_percentage() -> float:
    return global_discount_store.read()["percentage"]


def update_global_discount_percentage(percentage: Any) -> ActionResult:
    if not _is_valid_number(percentage) or percentage < 0 or percentage > 100:
        return ActionResult(success=False, error="Discount percentage must be a number between 0 and 100.")
    try:
        with global_discount_store.lock:
            global_discount_store.write({"percentage": percentage})
    except StoreWriteError as e:
        return ActionResult(success=False, error=f"Could not update global discount. {e}")
    logger.info("Global discount set to %s%%", percentage)
    return ActionResult(success=True, data=percentage)


# ----------------------------------------------------------------------------
# Tax
# ----------------------------------------------------------------------------

def get_tax_rate() -> float:
    return tax_store.read()["rate"]


def update_tax_rate(rate: Any) -> ActionResult:
    if not _is_valid_number(rate) or rate < 0 or rate > 100:
        return ActionResult(success=False, error="Tax rate must be a number between 0 and 100.")
    try:
        with tax_store.lock:
            tax_store.write({"rate": rate})
    except StoreWriteError as e:
        return ActionResult(success=False, error=f"Could not update tax rate. {e}")
    logger.info("Tax rate set to %s%%", rate)
    return ActionResult(success=True, data=rate)


# ----------------------------------------------------------------------------
# Shipping
# ----------------------------------------------------------------------------

def get_shipping_settings() -> ShippingSettings:
    return ShippingSettings.model_validate(shipping_store.read())


def update_shipping_settings(rate: Any, threshold: Any) -> ActionResult:
    if not _is_valid_number(rate) or rate < 0 or not _is_valid_number(threshold) or threshold < 0:
        return ActionResult(success=False, error="Shipping rate and threshold must be non-negative numbers.")
    settings = ShippingSettings(rate=rate, threshold=threshold)
    try:
        with shipping_store.lock:
            shipping_store.write(settings.to_store())
    except StoreWriteError as e:
        return ActionResult(success=False, error=f"Could not update shipping settings. {e}")
    return ActionResult(success=True, data=settings)


# ----------------------------------------------------------------------------
# Order totals
# ----------------------------------------------------------------------------

def shipping_cost_for(subtotal: float, settings: Optional[ShippingSettings] = None) -> float:
    settings = settings or get_shipping_settings()
    if subtotal <= 0 or subtotal >= settings.threshold:
        return 0.0
    return float(settings.rate)


def coupon_discount(coupon: Coupon, amount: float) -> float:
    if coupon.discount_type == "percentage":
        return amount * coupon.value / 100
    return min(coupon.value, amount)


def calculate_order_totals(subtotal: float, coupon: Optional[Coupon] = None) -> OrderTotals:
    """Price a cart subtotal.

    The global discount applies first, then the coupon on what is left. Tax is
    charged on the discounted amount. Shipping depends on the undiscounted
    subtotal and is free at or above the configured threshold.
    """
    discount = subtotal * get_global_discount_percentage() / 100
    if coupon:
        discount += coupon_discount(coupon, subtotal - discount)
    discounted = max(0.0, subtotal - discount)
    tax = discounted * get_tax_rate() / 100
    shipping = shipping_cost_for(subtotal)
    return OrderTotals(
        subtotal=round(subtotal, 2),
        discount_amount=round(discount, 2),
        coupon_code=coupon.code if coupon else None,
        tax_amount=round(tax, 2),
        shipping_cost=round(shipping, 2),
        total_amount=round(discounted + tax + shipping, 2),
    )
