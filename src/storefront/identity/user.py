"""User aggregate root with the PostalAddress value object.

Users are provisioned by the upstream authenticator and identified here by
their system id. The role decides access to the admin console; a deactivated
account is refused at the gate even though its record remains.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.identity.contact import check_email, check_phone, check_zip_code

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    STUDENT = "student"
    ADMIN = "admin"


@storefront.value_object(part_of="User")
class PostalAddress:
    street: String(max_length=200)
    city: String(max_length=50)
    state: String(max_length=50)
    zip_code: String(max_length=6)
    country: String(max_length=50, default="India")

    @invariant.post
    def zip_code_must_be_valid(self):
        if self.zip_code:
            check_zip_code("zip_code", self.zip_code)


@storefront.value_object(part_of="User")
class NotificationPreferences:
    email: Boolean(default=True)
    push: Boolean(default=False)
    sms: Boolean(default=False)
    marketing: Boolean(default=False)


@storefront.aggregate
class User:
    name: String(required=True, max_length=50)
    email: String(required=True, max_length=254, unique=True)
    role: String(choices=Role, default=Role.STUDENT.value)
    college_id: String(max_length=30)
    department: String(max_length=100)
    year: Integer(min_value=1, max_value=4)
    phone: String(max_length=10)
    image_url: String(max_length=500)
    address: ValueObject(PostalAddress)
    notification_preferences: ValueObject(NotificationPreferences)
    is_active: Boolean(default=True)
    wishlist: Text()  # JSON array of product ids
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_be_valid(self):
        if self.email:
            check_email("email", self.email)

    @invariant.post
    def phone_must_be_valid(self):
        if self.phone:
            check_phone("phone", self.phone)

    @classmethod
    def register(cls, name, email, role=Role.STUDENT.value, college_id=None, department=None, year=None, phone=None):
        from storefront.identity.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=email.strip().lower(),
            role=role,
            college_id=college_id,
            department=department,
            year=year,
            phone=phone,
            notification_preferences=NotificationPreferences(),
            wishlist=json.dumps([]),
            created_at=now,
            updated_at=now,
        )
        user.raise_(UserRegistered(user_id=user.id, email=user.email, name=name, role=role))
        return user

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def wishlist_ids(self) -> list[str]:
        return json.loads(self.wishlist) if self.wishlist else []

    def update_profile(
        self,
        name=_UNSET,
        college_id=_UNSET,
        department=_UNSET,
        year=_UNSET,
        phone=_UNSET,
        address=_UNSET,
    ):
        from storefront.identity.events import ProfileUpdated

        with atomic_change(self):
            if name is not _UNSET:
                self.name = name
            if college_id is not _UNSET:
                self.college_id = college_id
            if department is not _UNSET:
                self.department = department
            if year is not _UNSET:
                self.year = year
            if phone is not _UNSET:
                self.phone = phone or None
            if address is not _UNSET:
                self.address = PostalAddress(**address) if address else None
            self.updated_at = datetime.now(UTC)

        self.raise_(ProfileUpdated(user_id=self.id, name=self.name))

    def change_contact(self, email, phone=None):
        from storefront.identity.events import ContactUpdated

        with atomic_change(self):
            self.email = email.strip().lower()
            self.phone = phone or None
            self.updated_at = datetime.now(UTC)

        self.raise_(ContactUpdated(user_id=self.id, email=self.email, phone=self.phone))

    def update_notification_preferences(self, email, push, sms, marketing):
        from storefront.identity.events import NotificationPreferencesUpdated

        self.notification_preferences = NotificationPreferences(email=email, push=push, sms=sms, marketing=marketing)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            NotificationPreferencesUpdated(user_id=self.id, email=email, push=push, sms=sms, marketing=marketing)
        )

    def change_image(self, image_url):
        from storefront.identity.events import ProfileImageChanged

        if not image_url.startswith(("http://", "https://")):
            raise ValidationError({"image_url": ["Image must be a URL returned by the media host"]})

        self.image_url = image_url
        self.updated_at = datetime.now(UTC)
        self.raise_(ProfileImageChanged(user_id=self.id, image_url=image_url))

    def toggle_wishlist(self, product_id) -> bool:
        """Add or remove a product. Returns whether it is now in the wishlist."""
        from storefront.identity.events import WishlistToggled

        product_id = str(product_id)
        ids = self.wishlist_ids
        if product_id in ids:
            ids.remove(product_id)
            in_wishlist = False
        else:
            ids.append(product_id)
            in_wishlist = True

        self.wishlist = json.dumps(ids)
        self.updated_at = datetime.now(UTC)
        self.raise_(WishlistToggled(user_id=self.id, product_id=product_id, in_wishlist=in_wishlist))
        return in_wishlist

    def change_role(self, new_role):
        from storefront.identity.events import UserRoleChanged

        previous_role = self.role
        self.role = Role(new_role).value
        self.updated_at = datetime.now(UTC)
        self.raise_(UserRoleChanged(user_id=self.id, previous_role=previous_role, new_role=self.role))

    def activate(self):
        self._set_active(True)

    def deactivate(self):
        self._set_active(False)

    def _set_active(self, is_active):
        from storefront.identity.events import UserAccountStatusChanged

        self.is_active = is_active
        self.updated_at = datetime.now(UTC)
        self.raise_(UserAccountStatusChanged(user_id=self.id, is_active=is_active))
