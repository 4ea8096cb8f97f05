import logging
import os
from typing import Any, List, Optional

import jwt
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import OAuth2PasswordBearer
from langchain_core.language_models.chat_models import BaseChatModel
from pydantic import BaseModel, EmailStr, Field

from ai_flows import (
    ProductChatbotInput,
    ProductRecommendationsInput,
    describe_ai_error,
    get_chat_model,
    get_product_recommendations,
    is_rate_limited,
    product_chatbot,
)
from blog_actions import (
    add_blog_post,
    delete_blog_post,
    get_admin_blog_post_by_slug,
    get_blog_post_by_slug,
    get_blog_posts,
    update_blog_post,
)
from coupon_actions import add_coupon, delete_coupon, get_coupons, validate_coupon
from database import ALL_STORES, StoreWriteError, data_dir, products_store
from order_actions import get_all_orders, get_user_order, get_user_orders, place_order, update_order_status
from pricing_actions import (
    calculate_order_totals,
    get_global_discount_percentage,
    get_shipping_settings,
    get_tax_rate,
    update_global_discount_percentage,
    update_shipping_settings,
    update_tax_rate,
)
from product_actions import (
    add_product,
    add_product_review,
    delete_product_by_id,
    get_categories,
    get_featured_products,
    get_product_by_id,
    get_products,
    get_related_products,
    search_products,
    update_product,
)
from schemas import (
    ActionResult,
    BlogPostForm,
    ColorVariant,
    OrderStatus,
    ProfileUpdate,
    ShippingDetails,
    StoreModel,
    UserAddress,
    UserData,
    UserProfile,
)
from security import create_access_token, decode_access_token
from user_actions import (
    add_item_to_user_cart,
    add_product_to_wishlist,
    clear_user_cart,
    clear_user_wishlist,
    create_admin_account,
    delete_user_by_email,
    get_admin_credentials,
    get_all_users,
    get_user_data,
    initialize_user_account,
    remove_item_from_user_cart,
    remove_product_from_wishlist,
    update_user_addresses,
    update_user_item_quantity_in_cart,
    update_user_password,
    update_user_pin,
    update_user_profile,
    user_exists,
    verify_admin_login,
    verify_user_credentials,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("earthpuran")

# ----------------------------------------------------------------------------
# App and Security Setup
# ----------------------------------------------------------------------------

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

app = FastAPI(title="Earth Puran Storefront API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------------------------------------------------------
# Utilities
# ----------------------------------------------------------------------------

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class Session(BaseModel):
    email: str
    is_admin: bool = False


def public(value: Any) -> Any:
    return jsonable_encoder(value, by_alias=True, exclude_none=True)


def user_to_public(user: UserData) -> dict:
    doc = public(user)
    # hide sensitive fields
    doc["profile"].pop("hashedPassword", None)
    doc["profile"].pop("hashedPin", None)
    return doc


def unwrap(result: ActionResult) -> Any:
    if not result.success:
        status = 404 if result.error and "not found" in result.error.lower() else 400
        raise HTTPException(status_code=status, detail=result.error)
    return public(result.data)


def issue_token(email: str, is_admin: bool) -> TokenResponse:
    return TokenResponse(access_token=create_access_token({"sub": email, "admin": is_admin}))


async def get_session(token: str = Depends(oauth2_scheme)) -> Session:
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid authentication")
    email = payload.get("sub")
    if not email:
        raise HTTPException(status_code=401, detail="Invalid token")
    return Session(email=email, is_admin=bool(payload.get("admin")))


async def get_current_user(session: Session = Depends(get_session)) -> UserData:
    user = get_user_data(session.email)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_current_admin(session: Session = Depends(get_session)) -> Session:
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return session


# ----------------------------------------------------------------------------
# Models (request bodies)
# ----------------------------------------------------------------------------

class SignupRequest(StoreModel):
    first_name: str
    last_name: str
    email: EmailStr
    country_code: str = "IN"
    phone_number: str = ""
    password: str = Field(..., min_length=6)
    pin: str = Field(..., pattern=r"^\d{4}$")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AdminSetupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    pin: str = Field(..., pattern=r"^\d{4}$")


class AdminLoginRequest(AdminSetupRequest):
    pass


class ChangePasswordRequest(StoreModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class ChangePinRequest(StoreModel):
    current_pin: str
    new_pin: str = Field(..., pattern=r"^\d{4}$")


class ProductCreateRequest(StoreModel):
    id: Optional[str] = None
    name: str
    category: str
    brand: str = "Earth Puran"
    price: float
    description: str = ""
    image_url: str = ""
    image_hint: Optional[str] = None
    additional_image_urls: Optional[List[str]] = None
    colors: Optional[List[ColorVariant]] = None
    shades: Optional[List[str]] = None
    palette_name: Optional[str] = None
    stock: int = 0
    tags: Optional[List[str]] = None


class ProductUpdateRequest(StoreModel):
    name: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_hint: Optional[str] = None
    additional_image_urls: Optional[List[str]] = None
    colors: Optional[List[ColorVariant]] = None
    shades: Optional[List[str]] = None
    palette_name: Optional[str] = None
    stock: Optional[int] = None
    tags: Optional[List[str]] = None


class ReviewRequest(BaseModel):
    rating: int
    comment: str


class AddCartRequest(StoreModel):
    product_id: str
    quantity: int = 1


class UpdateCartRequest(BaseModel):
    quantity: int


class AddWishlistRequest(StoreModel):
    product_id: str


class CheckoutRequest(StoreModel):
    shipping_details: ShippingDetails
    coupon_code: Optional[str] = None


class ValidateCouponRequest(BaseModel):
    code: str
    subtotal: float = Field(..., ge=0)


class CouponCreateRequest(StoreModel):
    code: str
    discount_type: str
    value: float
    expiry_date: Optional[str] = None
    min_spend: Optional[float] = None
    usage_limit: Optional[int] = None


class OrderStatusRequest(BaseModel):
    status: OrderStatus


class DiscountRequest(BaseModel):
    percentage: float


class TaxRequest(BaseModel):
    rate: float


class ShippingRequest(BaseModel):
    rate: float
    threshold: float


# ----------------------------------------------------------------------------
# Auth Endpoints
# ----------------------------------------------------------------------------

@app.post("/auth/signup", response_model=TokenResponse)
def signup(body: SignupRequest):
    if user_exists(body.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    profile = UserProfile(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        country_code=body.country_code,
        phone_number=body.phone_number,
    )
    result = initialize_user_account(profile, body.password, body.pin)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)
    user = result.data
    return issue_token(user.profile.email, user.profile.is_admin)


@app.post("/auth/login", response_model=TokenResponse)
def login(body: LoginRequest):
    user = verify_user_credentials(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return issue_token(user.profile.email, user.profile.is_admin)


@app.get("/me")
def me(current: UserData = Depends(get_current_user)):
    return user_to_public(current)


@app.put("/me/profile")
def edit_profile(body: ProfileUpdate, current: UserData = Depends(get_current_user)):
    if not update_user_profile(current.profile.email, body):
        raise HTTPException(status_code=400, detail="Could not update profile.")
    return user_to_public(get_user_data(current.profile.email))


@app.put("/me/addresses")
def edit_addresses(body: List[UserAddress], current: UserData = Depends(get_current_user)):
    if not update_user_addresses(current.profile.email, body):
        raise HTTPException(status_code=400, detail="Could not update addresses.")
    return public(get_user_data(current.profile.email).addresses)


@app.put("/me/password")
def change_password(body: ChangePasswordRequest, current: UserData = Depends(get_current_user)):
    return {"message": unwrap(update_user_password(current.profile.email, body.current_password, body.new_password))}


@app.put("/me/pin")
def change_pin(body: ChangePinRequest, current: UserData = Depends(get_current_user)):
    return {"message": unwrap(update_user_pin(current.profile.email, body.current_pin, body.new_pin))}


# ----------------------------------------------------------------------------
# Product Endpoints
# ----------------------------------------------------------------------------

@app.get("/products")
def list_products(
    q: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description="price_asc|price_desc|rating_desc|rating_asc|name"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    items = search_products(q, category, sort)
    skip = max(0, (page - 1) * limit)
    return {
        "items": public(items[skip:skip + limit]),
        "total": len(items),
        "page": page,
        "limit": limit,
        "categories": get_categories(),
    }


@app.get("/products/featured")
def featured_products(limit: int = 4):
    return public(get_featured_products(limit))


@app.get("/products/{product_id}")
def get_product(product_id: str):
    product = get_product_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return public(product)


@app.get("/products/{product_id}/related")
def related_products(product_id: str, limit: int = 4):
    if not get_product_by_id(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return public(get_related_products(product_id, limit))


@app.post("/products/{product_id}/reviews")
def review_product(product_id: str, body: ReviewRequest, current: UserData = Depends(get_current_user)):
    name = f"{current.profile.first_name} {current.profile.last_name}".strip()
    return unwrap(add_product_review(product_id, current.profile.email, name, body.rating, body.comment))


# ----------------------------------------------------------------------------
# Cart & Wishlist
# ----------------------------------------------------------------------------

def _live_product(product_id: str):
    product = get_product_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.get("/me/cart")
def get_cart(current: UserData = Depends(get_current_user)):
    return public(current.cart)


@app.post("/me/cart")
def add_to_cart(body: AddCartRequest, current: UserData = Depends(get_current_user)):
    product = _live_product(body.product_id)
    return {"ok": True, "cart": unwrap(add_item_to_user_cart(current.profile.email, product, body.quantity))}


@app.put("/me/cart/{product_id}")
def update_cart_quantity(product_id: str, body: UpdateCartRequest, current: UserData = Depends(get_current_user)):
    return {"ok": True, "cart": unwrap(update_user_item_quantity_in_cart(current.profile.email, product_id, body.quantity))}


@app.delete("/me/cart/{product_id}")
def remove_from_cart(product_id: str, current: UserData = Depends(get_current_user)):
    return {"ok": True, "cart": unwrap(remove_item_from_user_cart(current.profile.email, product_id))}


@app.delete("/me/cart")
def clear_cart(current: UserData = Depends(get_current_user)):
    return {"ok": True, "cart": unwrap(clear_user_cart(current.profile.email))}


@app.get("/me/wishlist")
def get_wishlist(current: UserData = Depends(get_current_user)):
    return public(current.wishlist)


@app.post("/me/wishlist")
def add_wishlist(body: AddWishlistRequest, current: UserData = Depends(get_current_user)):
    product = _live_product(body.product_id)
    return {"ok": True, "wishlist": unwrap(add_product_to_wishlist(current.profile.email, product))}


@app.delete("/me/wishlist/{product_id}")
def remove_wishlist(product_id: str, current: UserData = Depends(get_current_user)):
    return {"ok": True, "wishlist": unwrap(remove_product_from_wishlist(current.profile.email, product_id))}


@app.delete("/me/wishlist")
def clear_wishlist(current: UserData = Depends(get_current_user)):
    return {"ok": True, "wishlist": unwrap(clear_user_wishlist(current.profile.email))}


# ----------------------------------------------------------------------------
# Orders (Checkout & Tracking)
# ----------------------------------------------------------------------------

@app.post("/orders/checkout")
def checkout(body: CheckoutRequest, current: UserData = Depends(get_current_user)):
    return unwrap(place_order(current.profile.email, body.shipping_details, body.coupon_code))


@app.get("/orders")
def list_orders(current: UserData = Depends(get_current_user)):
    return public(get_user_orders(current.profile.email))


@app.get("/orders/{order_id}")
def get_order(order_id: str, current: UserData = Depends(get_current_user)):
    order = get_user_order(current.profile.email, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return public(order)


# ----------------------------------------------------------------------------
# Blog, Pricing & Coupons
# ----------------------------------------------------------------------------

@app.get("/blog")
def list_blog_posts():
    return public(get_blog_posts(only_published=True))


@app.get("/blog/{slug}")
def read_blog_post(slug: str):
    post = get_blog_post_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return public(post)


@app.get("/pricing")
def pricing_rules():
    return {
        "globalDiscountPercentage": get_global_discount_percentage(),
        "taxRate": get_tax_rate(),
        "shipping": public(get_shipping_settings()),
    }


@app.post("/coupons/validate")
def check_coupon(body: ValidateCouponRequest):
    result = validate_coupon(body.code, body.subtotal)
    coupon = unwrap(result)
    return {"coupon": coupon, "totals": public(calculate_order_totals(body.subtotal, result.data))}


# ----------------------------------------------------------------------------
# AI Assistant
# ----------------------------------------------------------------------------

@app.post("/ai/chatbot")
def chatbot(body: ProductChatbotInput, model: BaseChatModel = Depends(get_chat_model)):
    try:
        return product_chatbot(body, model)
    except Exception as e:
        logger.exception("Chatbot flow failed")
        return {"answer": describe_ai_error(e)}


@app.post("/ai/recommendations")
def recommendations(body: ProductRecommendationsInput, model: BaseChatModel = Depends(get_chat_model)):
    try:
        return get_product_recommendations(body, model)
    except Exception as e:
        logger.exception("Recommendation flow failed")
        raise HTTPException(status_code=429 if is_rate_limited(e) else 502, detail=describe_ai_error(e))


# ----------------------------------------------------------------------------
# Admin: Access
# ----------------------------------------------------------------------------

@app.get("/admin/setup")
def admin_setup_status():
    return {"configured": get_admin_credentials().success}


@app.post("/admin/setup")
def admin_setup(body: AdminSetupRequest):
    return {"email": unwrap(create_admin_account(body.email, body.password, body.pin))}


@app.post("/admin/login", response_model=TokenResponse)
def admin_login(body: AdminLoginRequest):
    if not verify_admin_login(body.email, body.password, body.pin):
        raise HTTPException(status_code=401, detail="Invalid admin credentials")
    return issue_token(body.email.lower(), True)


@app.get("/admin/dashboard")
def admin_dashboard(admin: Session = Depends(get_current_admin)):
    orders = get_all_orders()
    revenue = sum(o["totalAmount"] for o in orders if o.get("status") != "Cancelled")
    return {
        "products": len(get_products()),
        "customers": len(get_all_users()),
        "orders": len(orders),
        "revenue": round(revenue, 2),
        "lowStock": public([p for p in get_products() if p.stock < 10]),
    }


# ----------------------------------------------------------------------------
# Admin: Product Management
# ----------------------------------------------------------------------------

@app.get("/admin/products")
def admin_list_products(admin: Session = Depends(get_current_admin)):
    return public(get_products())


@app.post("/admin/products")
def admin_create_product(body: ProductCreateRequest, admin: Session = Depends(get_current_admin)):
    return unwrap(add_product(body.model_dump(by_alias=True, exclude_none=True)))


@app.put("/admin/products/{product_id}")
def admin_update_product(product_id: str, body: ProductUpdateRequest, admin: Session = Depends(get_current_admin)):
    return unwrap(update_product(product_id, body.model_dump(by_alias=True, exclude_unset=True)))


@app.delete("/admin/products/{product_id}")
def admin_delete_product(product_id: str, admin: Session = Depends(get_current_admin)):
    unwrap(delete_product_by_id(product_id))
    return {"deleted": True}


# ----------------------------------------------------------------------------
# Admin: Orders & Customers
# ----------------------------------------------------------------------------

@app.get("/admin/orders")
def admin_orders(search: Optional[str] = None, admin: Session = Depends(get_current_admin)):
    return get_all_orders(search)


@app.put("/admin/orders/{email}/{order_id}/status")
def admin_update_order_status(email: str, order_id: str, body: OrderStatusRequest, admin: Session = Depends(get_current_admin)):
    return unwrap(update_order_status(email, order_id, body.status))


@app.get("/admin/users")
def admin_users(admin: Session = Depends(get_current_admin)):
    return [user_to_public(u) for u in get_all_users()]


@app.get("/admin/users/{email}")
def admin_user_detail(email: str, admin: Session = Depends(get_current_admin)):
    user = get_user_data(email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user_to_public(user)


@app.delete("/admin/users/{email}")
def admin_delete_user(email: str, admin: Session = Depends(get_current_admin)):
    unwrap(delete_user_by_email(email))
    return {"deleted": True}


# ----------------------------------------------------------------------------
# Admin: Blog
# ----------------------------------------------------------------------------

@app.get("/admin/blog")
def admin_blog_posts(admin: Session = Depends(get_current_admin)):
    return public(get_blog_posts())


@app.get("/admin/blog/{slug}")
def admin_blog_post(slug: str, admin: Session = Depends(get_current_admin)):
    post = get_admin_blog_post_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return public(post)


@app.post("/admin/blog")
def admin_create_blog_post(body: BlogPostForm, admin: Session = Depends(get_current_admin)):
    return unwrap(add_blog_post(body))


@app.put("/admin/blog/{slug}")
def admin_update_blog_post(slug: str, body: BlogPostForm, admin: Session = Depends(get_current_admin)):
    return unwrap(update_blog_post(slug, body))


@app.delete("/admin/blog/{slug}")
def admin_delete_blog_post(slug: str, admin: Session = Depends(get_current_admin)):
    unwrap(delete_blog_post(slug))
    return {"deleted": True}


# ----------------------------------------------------------------------------
# Admin: Pricing Rules
# ----------------------------------------------------------------------------

@app.get("/admin/coupons")
def admin_coupons(admin: Session = Depends(get_current_admin)):
    return public(get_coupons())


@app.post("/admin/coupons")
def admin_create_coupon(body: CouponCreateRequest, admin: Session = Depends(get_current_admin)):
    return unwrap(add_coupon(
        body.code,
        body.discount_type,
        body.value,
        expiry_date=body.expiry_date,
        min_spend=body.min_spend,
        usage_limit=body.usage_limit,
    ))


@app.delete("/admin/coupons/{coupon_id}")
def admin_delete_coupon(coupon_id: str, admin: Session = Depends(get_current_admin)):
    unwrap(delete_coupon(coupon_id))
    return {"deleted": True}


@app.get("/admin/discount")
def admin_get_discount(admin: Session = Depends(get_current_admin)):
    return {"percentage": get_global_discount_percentage()}


@app.put("/admin/discount")
def admin_set_discount(body: DiscountRequest, admin: Session = Depends(get_current_admin)):
    return {"percentage": unwrap(update_global_discount_percentage(body.percentage))}


@app.get("/admin/tax")
def admin_get_tax(admin: Session = Depends(get_current_admin)):
    return {"rate": get_tax_rate()}


@app.put("/admin/tax")
def admin_set_tax(body: TaxRequest, admin: Session = Depends(get_current_admin)):
    return {"rate": unwrap(update_tax_rate(body.rate))}


@app.get("/admin/shipping")
def admin_get_shipping(admin: Session = Depends(get_current_admin)):
    return public(get_shipping_settings())


@app.put("/admin/shipping")
def admin_set_shipping(body: ShippingRequest, admin: Session = Depends(get_current_admin)):
    return unwrap(update_shipping_settings(body.rate, body.threshold))


# ----------------------------------------------------------------------------
# Health and Test
# ----------------------------------------------------------------------------

@app.get("/")
def root():
    return {"message": "Earth Puran API running"}


@app.get("/test")
def test_data_dir():
    directory = data_dir()
    return {
        "backend": "ok",
        "data_dir": str(directory),
        "stores": [s.filename for s in ALL_STORES if (directory / s.filename).exists()],
    }


# ----------------------------------------------------------------------------
# Seed Data (idempotent) and Startup Hook
# ----------------------------------------------------------------------------

SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "name": "Aloe Vera Soothing Gel",
        "category": "Skincare",
        "brand": "Earth Puran",
        "price": 349.0,
        "description": "Cold-pressed aloe gel that calms and hydrates sun-stressed skin.",
        "imageUrl": "https://placehold.co/600x600.png",
        "imageHint": "aloe gel",
        "stock": 120,
        "rating": 4.6,
        "reviews": 0,
        "tags": ["aloe", "hydrating", "natural"],
    },
    {
        "id": "2",
        "name": "Kumkumadi Radiance Face Oil",
        "category": "Skincare",
        "brand": "Earth Puran",
        "price": 899.0,
        "description": "Saffron-infused Ayurvedic night oil for an even, luminous complexion.",
        "imageUrl": "https://placehold.co/600x600.png",
        "imageHint": "face oil",
        "stock": 60,
        "rating": 4.8,
        "reviews": 0,
        "tags": ["saffron", "ayurvedic", "glow"],
    },
    {
        "id": "3",
        "name": "Beetroot Tinted Lip Balm",
        "category": "Makeup",
        "brand": "Earth Puran",
        "price": 249.0,
        "description": "Shea butter lip balm with a natural beetroot tint.",
        "imageUrl": "https://placehold.co/600x600.png",
        "imageHint": "lip balm",
        "stock": 200,
        "rating": 4.4,
        "reviews": 0,
        "tags": ["lips", "tinted", "vegan"],
        "shades": ["Rose", "Berry", "Nude"],
    },
    {
        "id": "4",
        "name": "Bhringraj Hair Growth Oil",
        "category": "Haircare",
        "brand": "Earth Puran",
        "price": 499.0,
        "description": "Bhringraj and amla blend that nourishes the scalp and strengthens roots.",
        "imageUrl": "https://placehold.co/600x600.png",
        "imageHint": "hair oil",
        "stock": 80,
        "rating": 4.5,
        "reviews": 0,
        "tags": ["hair", "amla", "bhringraj"],
    },
    {
        "id": "5",
        "name": "Neem & Tulsi Face Wash",
        "category": "Skincare",
        "brand": "Earth Puran",
        "price": 299.0,
        "description": "Gentle purifying cleanser for oily and acne-prone skin.",
        "imageUrl": "https://placehold.co/600x600.png",
        "imageHint": "face wash",
        "stock": 150,
        "rating": 4.2,
        "reviews": 0,
        "tags": ["neem", "tulsi", "cleanser"],
    },
]


def seed_data():
    # Seed products if the catalog is empty
    with products_store.lock:
        if not products_store.read():
            products_store.write(SAMPLE_PRODUCTS)
            logger.info("Seeded %d sample products", len(SAMPLE_PRODUCTS))


@app.post("/admin/seed")
def trigger_seed(admin: Session = Depends(get_current_admin)):
    seed_data()
    return {"seeded": True}


@app.on_event("startup")
def on_startup():
    try:
        seed_data()
    except StoreWriteError:
        logger.warning("Could not seed sample products on startup")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
