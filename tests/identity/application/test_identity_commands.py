"""Identity commands and the access gate."""

import pytest
from factories import make_product, make_user
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.errors import Forbidden, Unauthenticated
from storefront.identity.administration import ChangeUserRole, SetUserActive
from storefront.identity.gate import Principal, require_role, resolve_principal
from storefront.identity.profile import (
    ToggleWishlist,
    UpdateContact,
    UpdateNotificationPreferences,
    UpdateProfile,
    UpdateProfileImage,
)
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _load(user_id):
    return current_domain.repository_for(User).get(user_id)


class TestRegisterUser:
    def test_register(self):
        user_id = _process(RegisterUser(name="Ravi", email="ravi@dtu.ac.in", department="Civil"))
        user = _load(user_id)
        assert user.department == "Civil"
        assert user.role == "student"

    def test_duplicate_email_is_case_insensitive(self):
        make_user(email="ravi@dtu.ac.in")
        with pytest.raises(ValidationError) as exc:
            _process(RegisterUser(name="Ravi", email="RAVI@dtu.ac.in"))
        assert "email" in exc.value.messages

    def test_find_by_email(self):
        user = make_user(email="ravi@dtu.ac.in")
        found = current_domain.repository_for(User).find_by_email(" Ravi@DTU.ac.in ")
        assert str(found.id) == str(user.id)


class TestProfileCommands:
    def test_update_profile(self):
        user = make_user()
        _process(
            UpdateProfile(
                user_id=user.id,
                phone="9123456780",
                address='{"street": "Hostel 4", "city": "Delhi", "state": "Delhi", "zip_code": "110042"}',
            )
        )
        stored = _load(user.id)
        assert stored.phone == "9123456780"
        assert stored.address.city == "Delhi"
        assert stored.name == user.name

    def test_update_image(self):
        user = make_user()
        url = _process(UpdateProfileImage(user_id=user.id, image_url="https://media.example.edu/a.png"))
        assert url == "https://media.example.edu/a.png"
        assert _load(user.id).image_url == url

    def test_toggle_wishlist(self):
        user = make_user()
        product = make_product()

        result = _process(ToggleWishlist(user_id=user.id, product_id=product.id))
        assert result == {"in_wishlist": True, "wishlist_count": 1}

        result = _process(ToggleWishlist(user_id=user.id, product_id=product.id))
        assert result == {"in_wishlist": False, "wishlist_count": 0}

    def test_wishlist_unknown_product(self):
        user = make_user()
        with pytest.raises(ObjectNotFoundError):
            _process(ToggleWishlist(user_id=user.id, product_id="missing"))


class TestContactCommands:
    def test_update_contact(self):
        user = make_user(email="asha@dtu.ac.in")
        _process(UpdateContact(user_id=user.id, email="Asha.Verma@dtu.ac.in", phone="9123456780"))

        stored = _load(user.id)
        assert stored.email == "asha.verma@dtu.ac.in"
        assert stored.phone == "9123456780"
        assert current_domain.repository_for(User).find_by_email("asha@dtu.ac.in") is None

    def test_keeping_own_email_is_allowed(self):
        user = make_user(email="asha@dtu.ac.in")
        _process(UpdateContact(user_id=user.id, email="ASHA@dtu.ac.in", phone="9123456780"))
        assert _load(user.id).phone == "9123456780"

    def test_email_of_another_account_is_rejected(self):
        make_user(name="Ravi", email="ravi@dtu.ac.in")
        user = make_user(email="asha@dtu.ac.in")

        with pytest.raises(ValidationError) as exc:
            _process(UpdateContact(user_id=user.id, email="Ravi@dtu.ac.in"))

        assert exc.value.messages["email"] == ["Email is already in use"]
        assert _load(user.id).email == "asha@dtu.ac.in"

    def test_update_notification_preferences(self):
        user = make_user()
        _process(UpdateNotificationPreferences(user_id=user.id, email=False, push=True, sms=False, marketing=True))

        prefs = _load(user.id).notification_preferences
        assert (prefs.email, prefs.push, prefs.sms, prefs.marketing) == (False, True, False, True)


class TestAdministerUsers:
    def test_change_role(self):
        user = make_user()
        _process(ChangeUserRole(user_id=user.id, role="admin"))
        assert _load(user.id).is_admin

    def test_unknown_role(self):
        user = make_user()
        with pytest.raises(ValidationError):
            _process(ChangeUserRole(user_id=user.id, role="dean"))

    def test_deactivate(self):
        user = make_user()
        _process(SetUserActive(user_id=user.id, is_active=False))
        assert _load(user.id).is_active is False

    def test_search(self):
        make_user(name="A", email="a@dtu.ac.in")
        make_user(name="B", email="b@dtu.ac.in", role="admin")
        users, total = current_domain.repository_for(User).search(role="admin")
        assert total == 1
        assert users[0].name == "B"


class TestGate:
    def test_resolves_registered_user(self):
        user = make_user()
        principal = resolve_principal(str(user.id))
        assert principal == Principal(user_id=str(user.id), role="student")
        assert not principal.is_admin

    @pytest.mark.parametrize("user_id", [None, "", "ghost"])
    def test_unknown_or_missing_user(self, user_id):
        with pytest.raises(Unauthenticated):
            resolve_principal(user_id)

    def test_deactivated_user(self):
        user = make_user()
        stored = _load(user.id)
        stored.deactivate()
        current_domain.repository_for(User).add(stored)
        with pytest.raises(Forbidden):
            resolve_principal(str(user.id))

    def test_require_admin(self):
        student = Principal(user_id="s", role="student")
        admin = Principal(user_id="a", role="admin")
        with pytest.raises(Forbidden):
            require_role(student, "admin")
        assert require_role(admin, "admin") is admin
