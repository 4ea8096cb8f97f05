"""
Coupon store actions (coupons.json)
"""
import logging
import secrets
import time
from datetime import date
from typing import List, Optional

from pydantic import ValidationError

from database import StoreWriteError, coupons_store
from schemas import ActionResult, Coupon

logger = logging.getLogger(__name__)


def get_coupons() -> List[Coupon]:
    coupons = []
    for doc in coupons_store.read():
        try:
            coupons.append(Coupon.model_validate(doc))
        except ValidationError as e:
            logger.error("Skipping invalid coupon %r: %s", doc.get("code"), e)
    return coupons


def add_coupon(
    code: str,
    discount_type: str,
    value: Optional[float],
    expiry_date: Optional[str] = None,
    min_spend: Optional[float] = None,
    usage_limit: Optional[int] = None,
) -> ActionResult:
    # Normalize code
    code = (code or "").strip().upper()
    if not code or value is None:
        return ActionResult(success=False, error="Coupon code and value are required.")
    if discount_type not in ("percentage", "fixed"):
        return ActionResult(success=False, error='Discount type must be "percentage" or "fixed".')
    if value <= 0:
        return ActionResult(success=False, error="Coupon value must be greater than 0.")
    if discount_type == "percentage" and value > 100:
        return ActionResult(success=False, error="Percentage discount must be between 0 and 100.")
    if min_spend is not None and min_spend < 0:
        return ActionResult(success=False, error="Minimum spend cannot be negative.")
    if usage_limit is not None and usage_limit < 0:
        return ActionResult(success=False, error="Usage limit cannot be negative.")
    if expiry_date:
        try:
            date.fromisoformat(expiry_date)
        except ValueError:
            return ActionResult(success=False, error="Expiry date must be in YYYY-MM-DD format.")

    with coupons_store.lock:
        docs = coupons_store.read()
        # Check for duplicates
        if any(str(d.get("code", "")).upper() == code for d in docs):
            return ActionResult(success=False, error=f'Coupon code "{code}" already exists.')

        coupon = Coupon(
            id=f"{int(time.time() * 1000)}{secrets.token_hex(3)}",
            code=code,
            discount_type=discount_type,
            value=value,
            expiry_date=expiry_date or None,
            min_spend=min_spend,
            usage_limit=usage_limit,
        )
        docs.append(coupon.to_store())
        try:
            coupons_store.write(docs)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not add coupon. {e}")
    logger.info("Added coupon %s", code)
    return ActionResult(success=True, data=coupon)


def delete_coupon(coupon_id: str) -> ActionResult:
    if not coupon_id:
        return ActionResult(success=False, error="Coupon ID is required.")
    with coupons_store.lock:
        docs = coupons_store.read()
        remaining = [d for d in docs if d.get("id") != coupon_id]
        if len(remaining) == len(docs):
            return ActionResult(success=False, error="Coupon not found.")
        try:
            coupons_store.write(remaining)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not delete coupon. {e}")
    return ActionResult(success=True)


def validate_coupon(code: str, subtotal: float, today: Optional[date] = None) -> ActionResult:
    """Look up a coupon for a cart subtotal. Usage counts are not tracked."""
    code = (code or "").strip().upper()
    coupon = next((c for c in get_coupons() if c.code.upper() == code), None)
    if not code or coupon is None:
        return ActionResult(success=False, error="Invalid coupon code.")
    if coupon.expiry_date:
        try:
            expired = date.fromisoformat(coupon.expiry_date) < (today or date.today())
        except ValueError:
            logger.warning("Coupon %s has an unreadable expiry date %r", coupon.code, coupon.expiry_date)
            expired = False
        if expired:
            return ActionResult(success=False, error=f'Coupon "{coupon.code}" has expired.')
    if coupon.min_spend and subtotal < coupon.min_spend:
        return ActionResult(
            success=False,
            error=f'Coupon "{coupon.code}" requires a minimum spend of {coupon.min_spend:.2f}.',
        )
    return ActionResult(success=True, data=coupon)
