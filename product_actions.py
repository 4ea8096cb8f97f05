"""
Product store actions (products.json)
"""
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from database import StoreWriteError, products_store
from schemas import ActionResult, Product, Review

logger = logging.getLogger(__name__)


def new_id() -> str:
    return f"{int(time.time() * 1000)}{secrets.token_hex(3)}"


def _to_products(docs: List[Dict[str, Any]]) -> List[Product]:
    products = []
    for doc in docs:
        try:
            products.append(Product.model_validate(doc))
        except ValidationError as e:
            logger.error("Skipping invalid product %r: %s", doc.get("id"), e)
    return products


def get_products() -> List[Product]:
    return _to_products(products_store.read())


def get_product_by_id(product_id: str) -> Optional[Product]:
    for product in get_products():
        if product.id == product_id:
            return product
    return None


def get_featured_products(limit: int = 4) -> List[Product]:
    products = sorted(get_products(), key=lambda p: p.rating or 0, reverse=True)
    return products[:max(0, limit)]


def get_related_products(product_id: str, limit: int = 4) -> List[Product]:
    product = get_product_by_id(product_id)
    if not product:
        return []
    related = [p for p in get_products() if p.category == product.category and p.id != product.id]
    return related[:max(0, limit)]


def search_products(q: Optional[str] = None, category: Optional[str] = None, sort: Optional[str] = None) -> List[Product]:
    products = get_products()
    if q:
        needle = q.lower()
        products = [
            p for p in products
            if needle in p.name.lower()
            or needle in p.description.lower()
            or any(needle in t.lower() for t in p.tags or [])
        ]
    if category:
        products = [p for p in products if p.category.lower() == category.lower()]

    sort_map = {
        "price_asc": (lambda p: p.price, False),
        "price_desc": (lambda p: p.price, True),
        "rating_desc": (lambda p: p.rating or 0, True),
        "rating_asc": (lambda p: p.rating or 0, False),
        "name": (lambda p: p.name.lower(), False),
    }
    if sort and sort in sort_map:
        key, reverse = sort_map[sort]
        products = sorted(products, key=key, reverse=reverse)
    return products


def get_categories() -> List[str]:
    return sorted({p.category for p in get_products()})


# ----------------------------------------------------------------------------
# Reviews
# ----------------------------------------------------------------------------

def add_product_review(product_id: str, user_email: str, user_name: str, rating: Any, comment: str) -> ActionResult:
    if not user_email or not user_name or not comment or rating is None:
        return ActionResult(success=False, error="Missing review data.")
    if not isinstance(rating, (int, float)) or rating < 1 or rating > 5:
        return ActionResult(success=False, error="Rating must be between 1 and 5.")

    with products_store.lock:
        docs = products_store.read()
        doc = next((d for d in docs if d.get("id") == product_id), None)
        if doc is None:
            return ActionResult(success=False, error="Product not found.")

        review = Review(
            id=new_id(),
            user_email=user_email,
            user_name=user_name,
            rating=int(rating),
            comment=comment,
            date=datetime.now(timezone.utc).isoformat(),
        )
        reviews = doc.setdefault("productReviews", [])
        reviews.insert(0, review.to_store())
        reviews.sort(key=lambda r: r.get("date", ""), reverse=True)
        doc["rating"] = round(sum(r["rating"] for r in reviews) / len(reviews), 1)
        doc["reviews"] = len(reviews)

        try:
            products_store.write(docs)
        except StoreWriteError:
            return ActionResult(success=False, error="Could not add review to product.")
    return ActionResult(success=True, data=Product.model_validate(doc))


# ----------------------------------------------------------------------------
# Admin: Product Management
# ----------------------------------------------------------------------------

def add_product(data: Dict[str, Any]) -> ActionResult:
    try:
        product = Product.model_validate({**data, "id": data.get("id") or new_id()})
    except ValidationError as e:
        return ActionResult(success=False, error=f"Invalid product data. {_first_error(e)}")

    with products_store.lock:
        docs = products_store.read()
        if any(d.get("id") == product.id for d in docs):
            return ActionResult(success=False, error=f'Product id "{product.id}" already exists.')
        docs.append(product.to_store())
        try:
            products_store.write(docs)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not add product. {e}")
    logger.info("Added product %s (%s)", product.id, product.name)
    return ActionResult(success=True, data=product)


def update_product(product_id: str, changes: Dict[str, Any]) -> ActionResult:
    with products_store.lock:
        docs = products_store.read()
        index = next((i for i, d in enumerate(docs) if d.get("id") == product_id), None)
        if index is None:
            return ActionResult(success=False, error="Product not found.")
        try:
            product = Product.model_validate({**docs[index], **changes, "id": product_id})
        except ValidationError as e:
            return ActionResult(success=False, error=f"Invalid product data. {_first_error(e)}")
        docs[index] = product.to_store()
        try:
            products_store.write(docs)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not update product. {e}")
    return ActionResult(success=True, data=product)


def delete_product_by_id(product_id: str) -> ActionResult:
    # Wishlists, carts and orders keep their snapshots of the product.
    with products_store.lock:
        docs = products_store.read()
        remaining = [d for d in docs if d.get("id") != product_id]
        if len(remaining) == len(docs):
            return ActionResult(success=False, error="Product not found.")
        try:
            products_store.write(remaining)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not delete product. {e}")
    return ActionResult(success=True)


def adjust_product_stock(product_id: str, delta: int) -> bool:
    with products_store.lock:
        docs = products_store.read()
        doc = next((d for d in docs if d.get("id") == product_id), None)
        if doc is None:
            logger.warning("Stock adjustment for unknown product %s", product_id)
            return False
        doc["stock"] = max(0, int(doc.get("stock", 0)) + delta)
        try:
            products_store.write(docs)
        except StoreWriteError:
            return False
    return True


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else err.get("msg", "")
