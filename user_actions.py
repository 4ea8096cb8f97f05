"""
User store actions

users.json maps a lowercased email to a UserData record. Every action reads
the whole file, changes one record and writes the whole file back.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from database import StoreWriteError, admin_store, users_store
from schemas import (
    ActionResult,
    AdminCredentials,
    CartItem,
    Product,
    ProfileUpdate,
    UserAddress,
    UserData,
    UserProfile,
)
from security import hash_secret, verify_secret

logger = logging.getLogger(__name__)

ADMIN_PLACEHOLDER_EMAIL = "REPLACE_WITH_ADMIN_EMAIL"
ADMIN_PLACEHOLDER_HASH = "REPLACE_WITH_BCRYPT_HASH"


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _to_user(doc: Dict[str, Any]) -> Optional[UserData]:
    try:
        return UserData.model_validate(doc)
    except ValidationError as e:
        logger.error("Invalid user record in users.json: %s", e)
        return None


def update_user_record(email: str, mutate: Callable[[Dict[str, Any]], Any], action: str) -> bool:
    key = normalize_email(email)
    if not key:
        return False
    with users_store.lock:
        all_users = users_store.read()
        record = all_users.get(key)
        if record is None:
            logger.error("Attempted to %s for non-existent user: %s", action, email)
            return False
        if mutate(record) is False:
            return True
        try:
            users_store.write(all_users)
        except StoreWriteError:
            return False
    return True


# ----------------------------------------------------------------------------
# Accounts
# ----------------------------------------------------------------------------

def get_user_data(email: str) -> Optional[UserData]:
    if not email:
        logger.warning("get_user_data called with no email")
        return None
    doc = users_store.read().get(normalize_email(email))
    return _to_user(doc) if doc is not None else None


def get_all_users() -> List[UserData]:
    users = [_to_user(doc) for doc in users_store.read().values()]
    return [u for u in users if u is not None]


def user_exists(email: str) -> bool:
    """True when users.json has a record under email, readable or not."""
    key = normalize_email(email)
    return bool(key) and key in users_store.read()


def initialize_user_account(profile: UserProfile, password: str, pin: str, make_admin: bool = False) -> ActionResult:
    """Create the account for profile.email, or return the existing record untouched.

    An existing record that no longer validates is never overwritten; the
    call fails instead.
    """
    key = normalize_email(profile.email)
    with users_store.lock:
        all_users = users_store.read()
        existing = all_users.get(key)
        if existing is not None:
            user = _to_user(existing)
            if user is None:
                return ActionResult(success=False, error=f"Account for {key} exists but could not be read.")
            return ActionResult(success=True, data=user)

        new_profile = profile.model_copy(update={
            "email": key,
            "hashed_password": hash_secret(password),
            "hashed_pin": hash_secret(pin),
            "is_admin": make_admin,
        })
        user = UserData(profile=new_profile)
        all_users[key] = user.to_store()
        try:
            users_store.write(all_users)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not create account. {e}")
    logger.info("Created account for %s", key)
    return ActionResult(success=True, data=user)


def verify_user_credentials(email: str, password: str) -> Optional[UserData]:
    user = get_user_data(email)
    if not user or not verify_secret(password, user.profile.hashed_password):
        return None
    return user


def delete_user_by_email(email: str) -> ActionResult:
    key = normalize_email(email)
    if not key:
        return ActionResult(success=False, error="Email is required.")
    with users_store.lock:
        all_users = users_store.read()
        if key not in all_users:
            return ActionResult(success=False, error="User not found.")
        del all_users[key]
        try:
            users_store.write(all_users)
        except StoreWriteError as e:
            return ActionResult(success=False, error=f"Could not delete user. {e}")
    return ActionResult(success=True)


def update_user_profile(email: str, changes: ProfileUpdate) -> bool:
    fields = changes.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)

    def mutate(record):
        record["profile"].update(fields)

    return update_user_record(email, mutate, "update profile")


def _change_secret(email: str, field: str, label: str, current: str, new: str) -> ActionResult:
    if not email:
        return ActionResult(success=False, error="Email not provided.")
    if not new:
        return ActionResult(success=False, error=f"New {label} is required.")
    user = get_user_data(email)
    stored = getattr(user.profile, field) if user else None
    if not stored:
        return ActionResult(success=False, error=f"User not found or no {label} set.")
    if not verify_secret(current, stored):
        return ActionResult(success=False, error=f"Current {label} does not match.")

    alias = UserProfile.model_fields[field].alias
    new_hash = hash_secret(new)

    def mutate(record):
        record["profile"][alias] = new_hash

    if not update_user_record(email, mutate, f"update {label}"):
        return ActionResult(success=False, error=f"Could not update {label}.")
    return ActionResult(success=True, data=f"{label.capitalize()} updated successfully.")


def update_user_password(email: str, current_password: str, new_password: str) -> ActionResult:
    return _change_secret(email, "hashed_password", "password", current_password, new_password)


def update_user_pin(email: str, current_pin: str, new_pin: str) -> ActionResult:
    return _change_secret(email, "hashed_pin", "PIN", current_pin, new_pin)


def update_user_addresses(email: str, addresses: List[UserAddress]) -> bool:
    seen_default = False
    docs = []
    for address in addresses:
        doc = address.to_store()
        if doc.get("isDefault"):
            if seen_default:
                doc["isDefault"] = False
            seen_default = True
        docs.append(doc)

    def mutate(record):
        record["addresses"] = docs

    return update_user_record(email, mutate, "update addresses")


# ----------------------------------------------------------------------------
# Wishlist
# ----------------------------------------------------------------------------

def _wishlist_of(email: str) -> List[Product]:
    user = get_user_data(email)
    return user.wishlist if user else []


def update_user_wishlist(email: str, wishlist: List[Product]) -> bool:
    docs = [p.to_store() for p in wishlist]

    def mutate(record):
        record["wishlist"] = docs

    return update_user_record(email, mutate, "update wishlist")


def add_product_to_wishlist(email: str, product: Product) -> ActionResult:
    def mutate(record):
        wishlist = record.setdefault("wishlist", [])
        if any(p.get("id") == product.id for p in wishlist):
            return False
        wishlist.append(product.to_store())

    if not update_user_record(email, mutate, "add to wishlist"):
        return ActionResult(success=False, error="Could not update wishlist.")
    return ActionResult(success=True, data=_wishlist_of(email))


def remove_product_from_wishlist(email: str, product_id: str) -> ActionResult:
    def mutate(record):
        wishlist = record.get("wishlist") or []
        remaining = [p for p in wishlist if p.get("id") != product_id]
        if len(remaining) == len(wishlist):
            return False
        record["wishlist"] = remaining

    if not update_user_record(email, mutate, "remove from wishlist"):
        return ActionResult(success=False, error="Could not update wishlist.")
    return ActionResult(success=True, data=_wishlist_of(email))


def clear_user_wishlist(email: str) -> ActionResult:
    if not update_user_wishlist(email, []):
        return ActionResult(success=False, error="Could not clear wishlist.")
    return ActionResult(success=True, data=[])


# ----------------------------------------------------------------------------
# Cart
# ----------------------------------------------------------------------------

def _cart_of(email: str) -> List[CartItem]:
    user = get_user_data(email)
    return user.cart if user else []


def update_user_cart(email: str, cart: List[CartItem]) -> bool:
    docs = [item.to_store() for item in cart]

    def mutate(record):
        record["cart"] = docs

    return update_user_record(email, mutate, "update cart")


def add_item_to_user_cart(email: str, product: Product, quantity: int) -> ActionResult:
    if quantity <= 0:
        return ActionResult(success=False, error="Quantity must be at least 1.")
    if product.stock <= 0:
        return ActionResult(success=False, error=f"{product.name} is out of stock.")

    def mutate(record):
        cart = record.setdefault("cart", [])
        for item in cart:
            if item["product"].get("id") == product.id:
                item["quantity"] = min(item["quantity"] + quantity, product.stock)
                break
        else:
            cart.append({"product": product.to_store(), "quantity": min(quantity, product.stock)})

    if not update_user_record(email, mutate, "add to cart"):
        return ActionResult(success=False, error="Could not update cart.")
    return ActionResult(success=True, data=_cart_of(email))


def remove_item_from_user_cart(email: str, product_id: str) -> ActionResult:
    def mutate(record):
        cart = record.get("cart") or []
        remaining = [item for item in cart if item["product"].get("id") != product_id]
        if len(remaining) == len(cart):
            return False
        record["cart"] = remaining

    if not update_user_record(email, mutate, "remove from cart"):
        return ActionResult(success=False, error="Could not update cart.")
    return ActionResult(success=True, data=_cart_of(email))


def update_user_item_quantity_in_cart(email: str, product_id: str, new_quantity: int) -> ActionResult:
    def mutate(record):
        cart = record.get("cart") or []
        for i, item in enumerate(cart):
            if item["product"].get("id") == product_id:
                if new_quantity <= 0:
                    cart.pop(i)
                else:
                    item["quantity"] = min(new_quantity, item["product"].get("stock", 0))
                    if item["quantity"] <= 0:
                        cart.pop(i)
                return
        return False

    if not update_user_record(email, mutate, "update cart quantity"):
        return ActionResult(success=False, error="Could not update cart.")
    return ActionResult(success=True, data=_cart_of(email))


def clear_user_cart(email: str) -> ActionResult:
    if not update_user_cart(email, []):
        return ActionResult(success=False, error="Could not clear cart.")
    return ActionResult(success=True, data=[])


# ----------------------------------------------------------------------------
# Admin credentials
# ----------------------------------------------------------------------------

def get_admin_credentials() -> ActionResult:
    """Report whether earthpuranadmin.json holds a usable admin login."""
    try:
        creds = AdminCredentials.model_validate(admin_store.read())
    except ValidationError as e:
        logger.error("Invalid admin credentials in %s: %s", admin_store.filename, e)
        return ActionResult(success=False, error="Admin credentials file is invalid.")
    if (
        creds.email and not creds.email.startswith(ADMIN_PLACEHOLDER_EMAIL)
        and creds.password_hash and not creds.password_hash.startswith(ADMIN_PLACEHOLDER_HASH)
        and creds.pin_hash and not creds.pin_hash.startswith(ADMIN_PLACEHOLDER_HASH)
    ):
        return ActionResult(success=True, data=creds)
    return ActionResult(success=False, error="Admin credentials use placeholder values or are incomplete.")


def create_admin_account(email: str, password: str, pin: str) -> ActionResult:
    if not email or not password or not pin:
        return ActionResult(success=False, error="Email, password and PIN are required.")
    with admin_store.lock:
        if get_admin_credentials().success:
            return ActionResult(success=False, error="An admin account is already configured. Cannot create another.")
        creds = AdminCredentials(
            email=normalize_email(email),
            password_hash=hash_secret(password),
            pin_hash=hash_secret(pin),
        )
        try:
            admin_store.write(creds.to_store())
        except StoreWriteError:
            return ActionResult(success=False, error="Failed to create admin account. Check server logs.")
    logger.info("Admin account configured for %s", creds.email)
    return ActionResult(success=True, data=creds.email)


def verify_admin_login(email: str, password: str, pin: str) -> bool:
    result = get_admin_credentials()
    if not result.success:
        return False
    creds: AdminCredentials = result.data
    return (
        normalize_email(email) == creds.email
        and verify_secret(password, creds.password_hash)
        and verify_secret(pin, creds.pin_hash)
    )
