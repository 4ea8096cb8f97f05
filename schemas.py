"""
Data Schemas for the Earth Puran Storefront

Each Pydantic model describes one record shape kept in the JSON store files
under DATA_DIR. Field names in the files are camelCase; attributes here are
snake_case with camelCase aliases.

We store:
- users.json (email -> UserData, which embeds orders, cart and wishlist)
- products.json, blogs.json, coupons.json
- globalDiscount.json, tax.json, shippingSettings.json (singletons)
- earthpuranadmin.json (admin credentials)
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StoreModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ----------------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------------

class Review(StoreModel):
    id: str
    user_email: str
    user_name: str
    rating: int = Field(..., ge=1, le=5, description="Star rating 1-5")
    comment: str
    date: str = Field(..., description="ISO timestamp")


class ColorVariant(StoreModel):
    name: str
    link: Optional[str] = None
    image: Optional[str] = None


class Product(StoreModel):
    """
    Products store schema
    File: "products.json"
    """
    id: str = Field(..., description="Product id as string")
    name: str = Field(..., description="Product name")
    category: str = Field(..., description="Product category")
    brand: str = Field("Earth Puran", description="Brand name")
    price: float = Field(..., ge=0, description="Price in INR")
    description: str = Field("", description="Product description")
    image_url: str = Field("", description="Primary image URL")
    image_hint: Optional[str] = None
    additional_image_urls: Optional[List[str]] = None
    colors: Optional[List[ColorVariant]] = None
    shades: Optional[List[str]] = None
    palette_name: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5, description="Average rating 0-5")
    reviews: Optional[int] = Field(None, ge=0, description="Review count")
    product_reviews: Optional[List[Review]] = None
    stock: int = Field(0, ge=0, description="Available inventory")
    tags: Optional[List[str]] = None


# ----------------------------------------------------------------------------
# Users (profile, addresses, cart, wishlist, orders)
# ----------------------------------------------------------------------------

class UserProfile(StoreModel):
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email address, primary key")
    country_code: str = Field("IN", description="Country code, e.g. IN")
    phone_number: str = Field("", description="Phone number")

    # Auth fields (stored in the file, never returned in public responses)
    hashed_password: Optional[str] = None
    hashed_pin: Optional[str] = None
    is_admin: bool = False


class ProfileUpdate(StoreModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country_code: Optional[str] = None
    phone_number: Optional[str] = None


class UserAddress(StoreModel):
    id: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    is_default: bool = False


class CartItem(StoreModel):
    product: Product = Field(..., description="Product snapshot when added")
    quantity: int = Field(1, ge=1, description="Quantity for the product")


OrderStatus = Literal["Processing", "Shipped", "Delivered", "Cancelled"]


class ShippingDetails(StoreModel):
    first_name: str
    last_name: str
    address: str
    city: str
    state: str
    pincode: str
    country: str = "India"
    phone_number: str
    phone_country_code: Optional[str] = None


class OrderItem(StoreModel):
    product_id: str
    name: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    image_url: str = ""
    image_hint: Optional[str] = None


class Order(StoreModel):
    """
    Orders are embedded in the owning user's record in "users.json".
    """
    id: str = Field(..., description="Numeric string, millisecond timestamp")
    date: str = Field(..., description="ISO timestamp the order was placed")
    items: List[OrderItem]
    total_amount: float = Field(..., ge=0)
    shipping_details: ShippingDetails
    status: OrderStatus = "Processing"

    # Pricing breakdown, present on orders placed through checkout
    subtotal: Optional[float] = None
    discount_amount: Optional[float] = None
    coupon_code: Optional[str] = None
    tax_amount: Optional[float] = None
    shipping_cost: Optional[float] = None


class UserData(StoreModel):
    """
    Users store schema
    File: "users.json" (email -> UserData)
    """
    profile: UserProfile
    addresses: List[UserAddress] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list)
    wishlist: List[Product] = Field(default_factory=list)
    cart: List[CartItem] = Field(default_factory=list)


class AdminCredentials(StoreModel):
    """
    Admin credentials file schema
    File: "earthpuranadmin.json"
    """
    email: Optional[str] = None
    password_hash: Optional[str] = None
    pin_hash: Optional[str] = None


# ----------------------------------------------------------------------------
# Blog
# ----------------------------------------------------------------------------

class BlogPost(StoreModel):
    """
    Blog posts store schema
    File: "blogs.json"
    """
    id: str
    slug: str = Field(..., description="URL-friendly identifier, unique")
    title: str
    content: str
    excerpt: str = ""
    image_url: Optional[str] = None
    image_hint: Optional[str] = None
    author_name: str
    category: str
    tags: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: str
    is_published: bool = False
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class BlogPostForm(StoreModel):
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    image_hint: Optional[str] = None
    author_name: Optional[str] = None
    category: Optional[str] = None
    tags_string: Optional[str] = Field(None, description="Comma separated tags")
    is_published: Optional[bool] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


# ----------------------------------------------------------------------------
# Pricing rules
# ----------------------------------------------------------------------------

class Coupon(StoreModel):
    """
    Coupons store schema
    File: "coupons.json"
    """
    id: str
    code: str = Field(..., description="Unique coupon code, stored uppercase")
    discount_type: Literal["percentage", "fixed"]
    value: float
    expiry_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    min_spend: Optional[float] = None
    usage_limit: Optional[int] = None


class GlobalDiscount(StoreModel):
    percentage: float = 0


class TaxRate(StoreModel):
    rate: float = 18


class ShippingSettings(StoreModel):
    rate: float = Field(50, description="Flat shipping rate")
    threshold: float = Field(5000, description="Free shipping at or above this subtotal")


class OrderTotals(StoreModel):
    subtotal: float
    discount_amount: float
    coupon_code: Optional[str] = None
    tax_amount: float
    shipping_cost: float
    total_amount: float


class ActionResult(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
