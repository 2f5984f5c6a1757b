"""Cart routes for the signed-in user."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_principal
from storefront.api.schemas import AddToCartRequest, CartResponse, CartValidationResponse, UpdateCartItemRequest
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.validation import get_cart, validate_cart
from storefront.identity.gate import Principal

cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def show_cart(principal: Principal = Depends(current_principal)) -> CartResponse:
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, principal: Principal = Depends(current_principal)) -> CartResponse:
    command = AddToCart(
        user_id=principal.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
        selected_variants=json.dumps([v.model_dump() for v in body.selected_variants]),
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, principal: Principal = Depends(current_principal)
) -> CartResponse:
    command = UpdateCartQuantity(user_id=principal.user_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, principal: Principal = Depends(current_principal)) -> CartResponse:
    current_domain.process(RemoveFromCart(user_id=principal.user_id, item_id=item_id), asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(principal: Principal = Depends(current_principal)) -> CartResponse:
    current_domain.process(ClearCart(user_id=principal.user_id), asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.post("/validate", response_model=CartValidationResponse)
async def validate(principal: Principal = Depends(current_principal)) -> CartValidationResponse:
    return CartValidationResponse(**validate_cart(principal.user_id))
