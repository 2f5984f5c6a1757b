"""Domain events for the User aggregate."""

from protean.fields import Boolean, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new student or admin account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    name: String(required=True)
    role: String(required=True)


@storefront.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)


@storefront.event(part_of="User")
class ProfileImageChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    image_url: String(required=True)


@storefront.event(part_of="User")
class WishlistToggled:
    __version__ = 1

    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    in_wishlist: Boolean(required=True)


@storefront.event(part_of="User")
class UserRoleChanged:
    """An administrator promoted or demoted a user."""

    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)


@storefront.event(part_of="User")
class UserAccountStatusChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    is_active: Boolean(required=True)


@storefront.event(part_of="User")
class ContactUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    phone: String()


@storefront.event(part_of="User")
class NotificationPreferencesUpdated:
    """A user changed which channels the storefront may reach them on."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: Boolean(required=True)
    push: Boolean(required=True)
    sms: Boolean(required=True)
    marketing: Boolean(required=True)
