"""Registration, profile, contact, notification and wishlist routes."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_principal
from storefront.api.schemas import (
    IdResponse,
    NotificationPreferencesSchema,
    ProductResponse,
    ProfileImageRequest,
    RegisterUserRequest,
    UpdateContactRequest,
    UpdateProfileRequest,
    UserResponse,
    WishlistResponse,
    WishlistToggleRequest,
    WishlistToggleResponse,
)
from storefront.catalogue.product import Product
from storefront.identity.gate import Principal
from storefront.identity.profile import (
    ToggleWishlist,
    UpdateContact,
    UpdateNotificationPreferences,
    UpdateProfile,
    UpdateProfileImage,
)
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User

user_router = APIRouter(prefix="/users", tags=["users"])
me_router = APIRouter(prefix="/me", tags=["profile"])


@user_router.post("", status_code=201, response_model=IdResponse)
async def register_user(body: RegisterUserRequest) -> IdResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        college_id=body.college_id,
        department=body.department,
        year=body.year,
        phone=body.phone,
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@me_router.get("", response_model=UserResponse)
async def show_me(principal: Principal = Depends(current_principal)) -> UserResponse:
    return UserResponse.from_user(current_domain.repository_for(User).get(principal.user_id))


@me_router.put("/profile", response_model=UserResponse)
async def update_profile(body: UpdateProfileRequest, principal: Principal = Depends(current_principal)) -> UserResponse:
    command = UpdateProfile(
        user_id=principal.user_id,
        name=body.name,
        college_id=body.college_id,
        department=body.department,
        year=body.year,
        phone=body.phone,
        address=json.dumps(body.address.model_dump()) if body.address else None,
    )
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(principal.user_id))


@me_router.put("/image", response_model=UserResponse)
async def update_profile_image(
    body: ProfileImageRequest, principal: Principal = Depends(current_principal)
) -> UserResponse:
    command = UpdateProfileImage(user_id=principal.user_id, image_url=body.image_url)
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(principal.user_id))


@me_router.put("/contact", response_model=UserResponse)
async def update_contact(body: UpdateContactRequest, principal: Principal = Depends(current_principal)) -> UserResponse:
    command = UpdateContact(user_id=principal.user_id, email=body.email, phone=body.phone)
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(principal.user_id))


@me_router.put("/notifications", response_model=UserResponse)
async def update_notification_preferences(
    body: NotificationPreferencesSchema, principal: Principal = Depends(current_principal)
) -> UserResponse:
    command = UpdateNotificationPreferences(user_id=principal.user_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(principal.user_id))


@me_router.get("/wishlist", response_model=WishlistResponse)
async def show_wishlist(principal: Principal = Depends(current_principal)) -> WishlistResponse:
    user = current_domain.repository_for(User).get(principal.user_id)
    dao = current_domain.repository_for(Product)._dao

    # Products deleted since they were saved are skipped
    products = [dao.query.filter(id=pid).all().first for pid in user.wishlist_ids]
    return WishlistResponse(products=[ProductResponse.from_product(p) for p in products if p is not None])


@me_router.post("/wishlist/toggle", response_model=WishlistToggleResponse)
async def toggle_wishlist(
    body: WishlistToggleRequest, principal: Principal = Depends(current_principal)
) -> WishlistToggleResponse:
    result = current_domain.process(
        ToggleWishlist(user_id=principal.user_id, product_id=body.product_id),
        asynchronous=False,
    )
    return WishlistToggleResponse(**result)
