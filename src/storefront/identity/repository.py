"""Repository for the User aggregate."""

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email) -> User | None:
        return self._dao.query.filter(email=email.strip().lower()).all().first

    def search(self, role=None, is_active=None, page=1, limit=10):
        """Page through users, newest first. Returns ``(users, total)``."""
        criteria = {}
        if role:
            criteria["role"] = role
        if is_active is not None:
            criteria["is_active"] = is_active

        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        result = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        return result.items, result.total
