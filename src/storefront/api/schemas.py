"""Pydantic request/response schemas for the storefront API.

These are the external contracts; they are translated into Protean commands
by the route modules. Amounts are integer minor units (paise).
"""

import json
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class VariantSelection(BaseModel):
    kind: str = Field(min_length=1, max_length=50)
    value: str = Field(min_length=1, max_length=50)


class SelectedVariant(VariantSelection):
    price: int


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page, limit, total):
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit if total else 0)


def _variants(raw):
    return [SelectedVariant(**v) for v in (json.loads(raw) if raw else [])]


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class VariantSchema(BaseModel):
    id: str
    kind: str
    value: str
    price: int


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    short_description: str | None = None
    price: int
    compare_price: int | None = None
    category_id: str | None = None
    images: list[str]
    tags: list[str]
    variants: list[VariantSchema]
    quantity: int
    is_active: bool
    is_featured: bool

    @classmethod
    def from_product(cls, product):
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            short_description=product.short_description,
            price=product.price,
            compare_price=product.compare_price,
            category_id=str(product.category_id) if product.category_id else None,
            images=product.image_urls,
            tags=product.tag_list,
            variants=[
                VariantSchema(id=str(v.id), kind=v.kind, value=v.value, price=v.price) for v in product.variants
            ],
            quantity=product.quantity,
            is_active=product.is_active,
            is_featured=product.is_featured,
        )


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    pagination: PageMeta


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    is_active: bool

    @classmethod
    def from_category(cls, category):
        return cls(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            image_url=category.image_url,
            is_active=category.is_active,
        )


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=2000)
    short_description: str | None = Field(default=None, max_length=200)
    price: int = Field(ge=0)
    compare_price: int | None = Field(default=None, ge=0)
    quantity: int = Field(default=0, ge=0)
    category_id: str | None = None
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    is_featured: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "University Hoodie",
                    "description": "Fleece hoodie with the university crest",
                    "price": 149900,
                    "quantity": 40,
                    "images": ["https://media.example.edu/hoodie.jpg"],
                    "tags": ["apparel"],
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    short_description: str | None = Field(default=None, max_length=200)
    compare_price: int | None = Field(default=None, ge=0)
    category_id: str | None = None
    images: list[str] | None = None
    tags: list[str] | None = None
    is_featured: bool | None = None


class ChangePriceRequest(BaseModel):
    price: int = Field(ge=0)


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1)


class ProductStatusRequest(BaseModel):
    is_active: bool


class AddVariantRequest(BaseModel):
    kind: str = Field(min_length=1, max_length=50)
    value: str = Field(min_length=1, max_length=50)
    price: int = Field(default=0, ge=0)


class CategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=200)
    image_url: str | None = Field(default=None, max_length=500)


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=200)
    image_url: str | None = Field(default=None, max_length=500)


class IdResponse(BaseModel):
    id: str


class StockResponse(BaseModel):
    product_id: str
    quantity: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1, le=10)
    selected_variants: list[VariantSelection] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "6d3c1c9e-8f7a-4a55-9d7e-1c2b3a4d5e6f",
                    "quantity": 2,
                    "selected_variants": [{"kind": "size", "value": "M"}],
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    product_image: str | None = None
    quantity: int
    price: int
    line_total: int
    selected_variants: list[SelectedVariant]


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total_amount: int
    total_items: int

    @classmethod
    def from_cart(cls, cart):
        return cls(
            items=[
                CartItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    product_image=item.product_image,
                    quantity=item.quantity,
                    price=item.price,
                    line_total=item.line_total,
                    selected_variants=_variants(item.selected_variants),
                )
                for item in cart.items
            ],
            total_amount=cart.total_amount or 0,
            total_items=cart.total_items or 0,
        )


class CartValidationResponse(BaseModel):
    valid: bool
    item_count: int
    total_items: int
    total_amount: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
PaymentMethodName = Literal["cash_on_delivery", "upi", "card", "net_banking"]
OrderStatusName = Literal["pending", "confirmed", "processing", "shipped", "delivered", "cancelled"]
PaymentStatusName = Literal["pending", "paid", "failed", "refunded"]


class ShippingAddressSchema(BaseModel):
    full_name: str = Field(min_length=1, max_length=100)
    phone: str = Field(pattern=r"^[6-9]\d{9}$")
    street: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=50)
    state: str = Field(min_length=1, max_length=50)
    zip_code: str = Field(pattern=r"^\d{6}$")
    country: str = "India"
    landmark: str | None = Field(default=None, max_length=100)


class CheckoutItem(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, le=10)
    selected_variants: list[VariantSelection] = Field(default_factory=list)


class PlaceOrderRequest(BaseModel):
    items: list[CheckoutItem] = Field(min_length=1)
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethodName
    subtotal: int = Field(ge=0)
    tax: int = Field(default=0, ge=0)
    shipping: int = Field(default=0, ge=0)
    total_amount: int = Field(ge=0)
    notes: str | None = Field(default=None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "6d3c1c9e-8f7a-4a55-9d7e-1c2b3a4d5e6f", "quantity": 1}],
                    "shipping_address": {
                        "full_name": "Asha Verma",
                        "phone": "9876543210",
                        "street": "Hostel 4, Bawana Road",
                        "city": "Delhi",
                        "state": "Delhi",
                        "zip_code": "110042",
                    },
                    "payment_method": "upi",
                    "subtotal": 149900,
                    "tax": 0,
                    "shipping": 0,
                    "total_amount": 149900,
                }
            ]
        }
    }


class OrderReceipt(BaseModel):
    order_id: str
    order_number: str
    total_amount: int
    status: str


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    product_image: str | None = None
    price: int
    quantity: int
    selected_variants: list[SelectedVariant]


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    items: list[OrderItemResponse]
    subtotal: int
    tax: int
    shipping: int
    total_amount: int
    currency: str
    shipping_address: ShippingAddressSchema
    payment_method: str
    status: str
    payment_status: str
    notes: str | None = None
    admin_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order):
        address = order.shipping_address
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    product_image=item.product_image,
                    price=item.price,
                    quantity=item.quantity,
                    selected_variants=_variants(item.selected_variants),
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            tax=order.tax or 0,
            shipping=order.shipping or 0,
            total_amount=order.total_amount,
            currency=order.currency,
            shipping_address=ShippingAddressSchema(
                full_name=address.full_name,
                phone=address.phone,
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country or "India",
                landmark=address.landmark,
            ),
            payment_method=order.payment_method,
            status=order.status,
            payment_status=order.payment_status,
            notes=order.notes,
            admin_notes=order.admin_notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: PageMeta


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatusName
    payment_status: PaymentStatusName | None = None
    notes: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class PostalAddressSchema(BaseModel):
    street: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=50)
    state: str | None = Field(default=None, max_length=50)
    zip_code: str | None = Field(default=None, pattern=r"^\d{6}$")
    country: str = "India"


class RegisterUserRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    email: str = Field(max_length=254)
    college_id: str | None = Field(default=None, max_length=30)
    department: str | None = Field(default=None, max_length=100)
    year: int | None = Field(default=None, ge=1, le=4)
    phone: str | None = Field(default=None, pattern=r"^[6-9]\d{9}$")


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    college_id: str | None = Field(default=None, max_length=30)
    department: str | None = Field(default=None, max_length=100)
    year: int | None = Field(default=None, ge=1, le=4)
    phone: str | None = Field(default=None, pattern=r"^[6-9]\d{9}$")
    address: PostalAddressSchema | None = None


class ProfileImageRequest(BaseModel):
    image_url: str = Field(max_length=500)


class UpdateContactRequest(BaseModel):
    email: str = Field(max_length=254)
    phone: str | None = Field(default=None, pattern=r"^[6-9]\d{9}$")


class NotificationPreferencesSchema(BaseModel):
    email: bool
    push: bool
    sms: bool
    marketing: bool


def _preferences(prefs):
    if prefs is None:
        return None
    return NotificationPreferencesSchema(email=prefs.email, push=prefs.push, sms=prefs.sms, marketing=prefs.marketing)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    college_id: str | None = None
    department: str | None = None
    year: int | None = None
    phone: str | None = None
    image_url: str | None = None
    address: PostalAddressSchema | None = None
    notification_preferences: NotificationPreferencesSchema | None = None
    is_active: bool

    @classmethod
    def from_user(cls, user):
        address = None
        if user.address:
            address = PostalAddressSchema(
                street=user.address.street,
                city=user.address.city,
                state=user.address.state,
                zip_code=user.address.zip_code,
                country=user.address.country or "India",
            )
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            college_id=user.college_id,
            department=user.department,
            year=user.year,
            phone=user.phone,
            image_url=user.image_url,
            address=address,
            notification_preferences=_preferences(user.notification_preferences),
            is_active=user.is_active,
        )


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: PageMeta


class WishlistToggleRequest(BaseModel):
    product_id: str


class WishlistToggleResponse(BaseModel):
    in_wishlist: bool
    wishlist_count: int


class WishlistResponse(BaseModel):
    products: list[ProductResponse]


class ChangeRoleRequest(BaseModel):
    role: Literal["student", "admin"]


class UserStatusRequest(BaseModel):
    is_active: bool
