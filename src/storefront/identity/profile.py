"""Profile, contact, preference and wishlist management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=50)
    college_id: String(max_length=30)
    department: String(max_length=100)
    year: Integer(min_value=1, max_value=4)
    phone: String(max_length=10)
    address: Text()  # JSON object: street, city, state, zip_code, country


@storefront.command(part_of="User")
class UpdateProfileImage:
    user_id: Identifier(required=True)
    image_url: String(required=True, max_length=500)


@storefront.command(part_of="User")
class UpdateContact:
    user_id: Identifier(required=True)
    email: String(required=True, max_length=254)
    phone: String(max_length=10)


@storefront.command(part_of="User")
class UpdateNotificationPreferences:
    user_id: Identifier(required=True)
    email: Boolean(required=True)
    push: Boolean(required=True)
    sms: Boolean(required=True)
    marketing: Boolean(required=True)


@storefront.command(part_of="User")
class ToggleWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class ManageProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        # Only fields present on the command are changed
        changes = {
            field: getattr(command, field)
            for field in ("name", "college_id", "department", "year", "phone")
            if getattr(command, field) is not None
        }
        if command.address:
            changes["address"] = json.loads(command.address)

        user.update_profile(**changes)
        repo.add(user)

    @handle(UpdateProfileImage)
    def update_profile_image(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_image(command.image_url)
        repo.add(user)
        return user.image_url

    @handle(UpdateContact)
    def update_contact(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        holder = repo.find_by_email(command.email)
        if holder is not None and holder.id != user.id:
            raise ValidationError({"email": ["Email is already in use"]})

        user.change_contact(command.email, command.phone)
        repo.add(user)

    @handle(UpdateNotificationPreferences)
    def update_notification_preferences(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_notification_preferences(
            email=command.email,
            push=command.push,
            sms=command.sms,
            marketing=command.marketing,
        )
        repo.add(user)

    @handle(ToggleWishlist)
    def toggle_wishlist(self, command):
        # Raises ObjectNotFoundError for an unknown product
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        in_wishlist = user.toggle_wishlist(command.product_id)
        repo.add(user)
        return {"in_wishlist": in_wishlist, "wishlist_count": len(user.wishlist_ids)}
