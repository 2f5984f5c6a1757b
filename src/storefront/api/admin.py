"""Admin console routes. Every route here requires the admin role."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import Page, admin_principal, paging
from storefront.api.schemas import (
    AddVariantRequest,
    CategoryRequest,
    ChangePriceRequest,
    ChangeRoleRequest,
    CreateProductRequest,
    IdResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusName,
    PageMeta,
    PaymentStatusName,
    ProductListResponse,
    ProductResponse,
    ProductStatusRequest,
    RestockRequest,
    StatusResponse,
    StockResponse,
    UpdateCategoryRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UserListResponse,
    UserResponse,
    UserStatusRequest,
)
from storefront.catalogue.categories import AddCategory, DeactivateCategory, UpdateCategory
from storefront.catalogue.creation import AddProduct
from storefront.catalogue.details import AddProductVariant, ChangeProductPrice, UpdateProductDetails
from storefront.catalogue.lifecycle import ActivateProduct, DeactivateProduct, RemoveProduct, RestockProduct
from storefront.catalogue.product import Product
from storefront.identity.administration import ChangeUserRole, SetUserActive
from storefront.identity.user import User
from storefront.order.order import Order
from storefront.order.status import UpdateOrderStatus

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_principal)])


def _json_or_none(values):
    return json.dumps(values) if values is not None else None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@admin_router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status: OrderStatusName | None = None,
    payment_status: PaymentStatusName | None = None,
    sort_by: str = Query(default="created_at", pattern="^(created_at|total_amount)$"),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
    page: Page = Depends(paging),
) -> OrderListResponse:
    orders, total = current_domain.repository_for(Order).search(
        status=status,
        payment_status=payment_status,
        sort_by=sort_by,
        descending=sort_order == "desc",
        page=page.page,
        limit=page.limit,
    )
    return OrderListResponse(
        orders=[OrderResponse.from_order(o) for o in orders],
        pagination=PageMeta.build(page.page, page.limit, total),
    )


@admin_router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        payment_status=body.payment_status,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(current_domain.repository_for(Order).get(order_id))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@admin_router.get("/users", response_model=UserListResponse)
async def list_users(
    role: str | None = Query(default=None, pattern="^(student|admin)$"),
    is_active: bool | None = None,
    page: Page = Depends(paging),
) -> UserListResponse:
    users, total = current_domain.repository_for(User).search(
        role=role, is_active=is_active, page=page.page, limit=page.limit
    )
    return UserListResponse(
        users=[UserResponse.from_user(u) for u in users],
        pagination=PageMeta.build(page.page, page.limit, total),
    )


@admin_router.patch("/users/{user_id}/role", response_model=UserResponse)
async def change_user_role(user_id: str, body: ChangeRoleRequest) -> UserResponse:
    current_domain.process(ChangeUserRole(user_id=user_id, role=body.role), asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(user_id))


@admin_router.patch("/users/{user_id}/status", response_model=UserResponse)
async def set_user_status(user_id: str, body: UserStatusRequest) -> UserResponse:
    current_domain.process(SetUserActive(user_id=user_id, is_active=body.is_active), asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(user_id))


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@admin_router.get("/products", response_model=ProductListResponse)
async def list_all_products(page: Page = Depends(paging)) -> ProductListResponse:
    products, total = current_domain.repository_for(Product).search(
        include_inactive=True, page=page.page, limit=page.limit
    )
    return ProductListResponse(
        products=[ProductResponse.from_product(p) for p in products],
        pagination=PageMeta.build(page.page, page.limit, total),
    )


@admin_router.post("/products", status_code=201, response_model=IdResponse)
async def create_product(body: CreateProductRequest) -> IdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        short_description=body.short_description,
        price=body.price,
        compare_price=body.compare_price,
        quantity=body.quantity,
        category_id=body.category_id,
        images=json.dumps(body.images),
        tags=json.dumps(body.tags),
        is_featured=body.is_featured,
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@admin_router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        description=body.description,
        short_description=body.short_description,
        compare_price=body.compare_price,
        category_id=body.category_id,
        images=_json_or_none(body.images),
        tags=_json_or_none(body.tags),
        is_featured=body.is_featured,
    )
    current_domain.process(command, asynchronous=False)
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


@admin_router.patch("/products/{product_id}/price", response_model=ProductResponse)
async def change_price(product_id: str, body: ChangePriceRequest) -> ProductResponse:
    current_domain.process(ChangeProductPrice(product_id=product_id, price=body.price), asynchronous=False)
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


@admin_router.post("/products/{product_id}/stock", response_model=StockResponse)
async def restock(product_id: str, body: RestockRequest) -> StockResponse:
    quantity = current_domain.process(
        RestockProduct(product_id=product_id, quantity=body.quantity),
        asynchronous=False,
    )
    return StockResponse(product_id=product_id, quantity=quantity)


@admin_router.patch("/products/{product_id}/status", response_model=StatusResponse)
async def set_product_status(product_id: str, body: ProductStatusRequest) -> StatusResponse:
    command = ActivateProduct(product_id=product_id) if body.is_active else DeactivateProduct(product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.post("/products/{product_id}/variants", status_code=201, response_model=IdResponse)
async def add_variant(product_id: str, body: AddVariantRequest) -> IdResponse:
    command = AddProductVariant(product_id=product_id, kind=body.kind, value=body.value, price=body.price)
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@admin_router.delete("/products/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
@admin_router.post("/categories", status_code=201, response_model=IdResponse)
async def create_category(body: CategoryRequest) -> IdResponse:
    command = AddCategory(name=body.name, description=body.description, image_url=body.image_url)
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@admin_router.put("/categories/{category_id}", response_model=StatusResponse)
async def update_category(category_id: str, body: UpdateCategoryRequest) -> StatusResponse:
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.delete("/categories/{category_id}", response_model=StatusResponse)
async def deactivate_category(category_id: str) -> StatusResponse:
    current_domain.process(DeactivateCategory(category_id=category_id), asynchronous=False)
    return StatusResponse()
