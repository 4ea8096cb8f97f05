"""
Order actions

Orders live inside the owning user's record in users.json, newest first.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from coupon_actions import validate_coupon
from pricing_actions import calculate_order_totals
from product_actions import adjust_product_stock, get_product_by_id
from schemas import ActionResult, Order, OrderItem, OrderStatus, ShippingDetails
from user_actions import clear_user_cart, get_all_users, get_user_data, update_user_record

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("Processing", "Shipped", "Delivered", "Cancelled")


def _order_sort_key(order: Dict[str, Any]):
    # numeric ids newest first; anything else after them in insertion order
    try:
        return (0, -int(str(order.get("id"))))
    except ValueError:
        return (1, 0)


def new_order_id() -> str:
    return str(int(time.time() * 1000))


def add_order(email: str, order: Order) -> bool:
    def mutate(record):
        orders = record.setdefault("orders", [])
        orders.append(order.to_store())
        orders.sort(key=_order_sort_key)

    return update_user_record(email, mutate, "add order")


def update_user_orders(email: str, orders: List[Order]) -> bool:
    docs = [o.to_store() for o in orders]

    def mutate(record):
        record["orders"] = docs

    return update_user_record(email, mutate, "update orders")


def get_user_orders(email: str) -> List[Order]:
    user = get_user_data(email)
    return user.orders if user else []


def get_user_order(email: str, order_id: str) -> Optional[Order]:
    return next((o for o in get_user_orders(email) if o.id == order_id), None)


def update_order_status(email: str, order_id: str, status: OrderStatus) -> ActionResult:
    """Overwrite an order's status. Any status may follow any other."""
    if status not in ORDER_STATUSES:
        return ActionResult(success=False, error=f"Status must be one of: {', '.join(ORDER_STATUSES)}.")
    if get_user_data(email) is None:
        return ActionResult(success=False, error="User not found.")
    found = []

    def mutate(record):
        for order in record.get("orders", []):
            if order.get("id") == order_id:
                order["status"] = status
                found.append(order)
                return
        return False

    if not update_user_record(email, mutate, "update order status"):
        return ActionResult(success=False, error="Could not update order status.")
    if not found:
        return ActionResult(success=False, error="Order not found.")
    logger.info("Order %s for %s marked %s", order_id, email, status)
    return ActionResult(success=True, data=Order.model_validate(found[0]))


def get_all_orders(search: Optional[str] = None) -> List[Dict[str, Any]]:
    """Every customer's orders with customerName/customerEmail, newest first."""
    collected = []
    for user in get_all_users():
        name = f"{user.profile.first_name} {user.profile.last_name}".strip()
        for order in user.orders:
            collected.append({**order.to_store(), "customerName": name, "customerEmail": user.profile.email})
    collected.sort(key=_order_sort_key)

    if search:
        term = search.lower()
        collected = [
            o for o in collected
            if term in str(o["id"]).lower()
            or term in o["customerEmail"].lower()
            or term in o["customerName"].lower()
        ]
    return collected


def place_order(email: str, shipping_details: ShippingDetails, coupon_code: Optional[str] = None) -> ActionResult:
    """Turn the user's cart into an order.

    Items are priced from the live catalog. The stock decrement and the order
    write are separate file writes.
    """
    user = get_user_data(email)
    if user is None:
        return ActionResult(success=False, error="User not found.")
    if not user.cart:
        return ActionResult(success=False, error="Cart is empty")

    items: List[OrderItem] = []
    subtotal = 0.0
    for cart_item in user.cart:
        product = get_product_by_id(cart_item.product.id)
        if product is None:
            return ActionResult(success=False, error=f"{cart_item.product.name} is no longer available.")
        if product.stock < cart_item.quantity:
            return ActionResult(
                success=False,
                error=f"Only {product.stock} of {product.name} left in stock.",
            )
        subtotal += product.price * cart_item.quantity
        items.append(OrderItem(
            product_id=product.id,
            name=product.name,
            quantity=cart_item.quantity,
            price=product.price,
            image_url=product.image_url,
            image_hint=product.image_hint,
        ))

    coupon = None
    if coupon_code:
        checked = validate_coupon(coupon_code, subtotal)
        if not checked.success:
            return checked
        coupon = checked.data

    totals = calculate_order_totals(subtotal, coupon)
    order = Order(
        id=new_order_id(),
        date=datetime.now(timezone.utc).isoformat(),
        items=items,
        shipping_details=shipping_details,
        status="Processing",
        **totals.model_dump(),
    )

    for item in items:
        adjust_product_stock(item.product_id, -item.quantity)
    if not add_order(email, order):
        return ActionResult(success=False, error="Could not save order.")
    clear_user_cart(email)
    logger.info("Order %s placed by %s for %.2f", order.id, email, order.total_amount)
    return ActionResult(success=True, data=order)
