"""
Client-side cart and wishlist state

The storefront keeps the cart in the browser's key/value storage and mirrors
the wishlist locally while persisting it to the user store. ClientStorage
wraps any str -> str mapping standing in for that storage.
"""
import json
import logging
from typing import Any, Callable, List, MutableMapping, Optional

from pydantic import TypeAdapter, ValidationError

from schemas import CartItem, Product
from user_actions import update_user_wishlist

logger = logging.getLogger(__name__)

# Storage keys used by the storefront client
IS_LOGGED_IN_KEY = "isLoggedInPrototype"
IS_ADMIN_KEY = "isAdminPrototype"
CURRENT_USER_EMAIL_KEY = "currentUserEmail"
ADMIN_ACCESS_GRANTED_KEY = "adminAccessGranted"
ADMIN_CREDENTIALS_CONFIGURED_KEY = "adminCredentialsConfigured"
ADMIN_EMAIL_KEY = "adminEmailPrototype"
ADMIN_PASSWORD_HASH_KEY = "adminPasswordHashPrototype"
ADMIN_PIN_HASH_KEY = "adminLoginPinHashPrototype"
CART_STORAGE_KEY = "earthPuranCart"
USER_PROFILE_KEY = "userProfilePrototype"

_cart_adapter = TypeAdapter(List[CartItem])


class ClientStorage:
    def __init__(self, backend: Optional[MutableMapping[str, str]] = None):
        self.backend = backend if backend is not None else {}

    def get(self, key: str) -> Optional[str]:
        return self.backend.get(key)

    def set(self, key: str, value: str) -> None:
        self.backend[key] = value

    def remove(self, key: str) -> None:
        self.backend.pop(key, None)

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.backend.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Failed to parse %s from client storage", key)
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.backend[key] = json.dumps(value)


class CartState:
    """Cart kept entirely in client storage. Quantities never exceed stock."""

    def __init__(self, storage: ClientStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self.items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        try:
            return _cart_adapter.validate_python(self.storage.get_json(self.key, []))
        except ValidationError:
            logger.error("Failed to load cart from client storage, starting empty")
            return []

    def _save(self) -> None:
        self.storage.set_json(self.key, [item.to_store() for item in self.items])

    def _find(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product.id == product_id), None)

    def add_to_cart(self, product: Product, quantity: int = 1) -> None:
        if quantity <= 0 or product.stock <= 0:
            return
        existing = self._find(product.id)
        if existing:
            existing.quantity = min(existing.quantity + quantity, product.stock)
        else:
            self.items.append(CartItem(product=product, quantity=min(quantity, product.stock)))
        self._save()

    def remove_from_cart(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.product.id != product_id]
        self._save()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        item = self._find(product_id)
        if item is None:
            return
        quantity = max(0, min(quantity, item.product.stock))
        if quantity == 0:
            self.remove_from_cart(product_id)
            return
        item.quantity = quantity
        self._save()

    def clear_cart(self) -> None:
        self.items = []
        self._save()

    @property
    def subtotal(self) -> float:
        return sum(item.product.price * item.quantity for item in self.items)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


class WishlistState:
    """Local wishlist mirror with optimistic updates.

    Each change is applied locally first and then persisted. If persisting
    fails the local list goes back to what it was before the change.
    """

    def __init__(
        self,
        email: str,
        items: Optional[List[Product]] = None,
        persist: Callable[[str, List[Product]], bool] = update_user_wishlist,
    ):
        self.email = email
        self.items: List[Product] = list(items or [])
        self.persist = persist

    def is_in_wishlist(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self.items)

    def _commit(self, new_items: List[Product]) -> bool:
        snapshot = self.items
        self.items = new_items
        try:
            saved = self.persist(self.email, new_items)
        except Exception:
            logger.exception("Wishlist persistence failed for %s, reverting", self.email)
            saved = False
        if not saved:
            self.items = snapshot
        return bool(saved)

    def toggle_wishlist(self, product: Product) -> bool:
        if self.is_in_wishlist(product.id):
            new_items = [p for p in self.items if p.id != product.id]
        else:
            new_items = [*self.items, product]
        return self._commit(new_items)

    def clear_wishlist(self) -> bool:
        return self._commit([])
