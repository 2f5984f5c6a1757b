"""Checkout and order history routes for the signed-in user."""

import json

from fastapi import APIRouter, Depends, Header
from protean.utils.globals import current_domain

from storefront.api.dependencies import Page, current_principal, paging
from storefront.api.schemas import OrderListResponse, OrderReceipt, OrderResponse, PageMeta, PlaceOrderRequest
from storefront.identity.gate import Principal
from storefront.order.checkout import PlaceOrder, place_order
from storefront.order.order import Order

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderReceipt)
async def create_order(
    body: PlaceOrderRequest,
    principal: Principal = Depends(current_principal),
    idempotency_key: str | None = Header(default=None, max_length=100),
) -> OrderReceipt:
    command = PlaceOrder(
        user_id=principal.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
        subtotal=body.subtotal,
        tax=body.tax,
        shipping=body.shipping,
        total_amount=body.total_amount,
        notes=body.notes,
        idempotency_key=idempotency_key,
    )
    return OrderReceipt(**place_order(command))


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(
    principal: Principal = Depends(current_principal), page: Page = Depends(paging)
) -> OrderListResponse:
    orders, total = current_domain.repository_for(Order).for_user(principal.user_id, page=page.page, limit=page.limit)
    return OrderListResponse(
        orders=[OrderResponse.from_order(o) for o in orders],
        pagination=PageMeta.build(page.page, page.limit, total),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    order = current_domain.repository_for(Order).visible_to(order_id, principal.user_id, is_admin=principal.is_admin)
    return OrderResponse.from_order(order)
