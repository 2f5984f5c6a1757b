"""Principal resolution and role gating.

The upstream authenticator forwards the signed-in user's id; this module
turns it into a ``Principal`` and provides the single capability check used
in front of every admin operation.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.errors import Forbidden, Unauthenticated
from storefront.identity.user import Role, User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def resolve_principal(user_id: str | None) -> Principal:
    if not user_id:
        raise Unauthenticated("Please sign in to continue")

    user = current_domain.repository_for(User)._dao.query.filter(id=user_id).all().first
    if user is None:
        logger.info("unknown_principal", user_id=user_id)
        raise Unauthenticated("Please sign in to continue")
    if not user.is_active:
        raise Forbidden("This account has been deactivated")

    return Principal(user_id=str(user.id), role=user.role)


def require_role(principal: Principal, role: str) -> Principal:
    if principal.role != Role(role).value:
        logger.warning("access_denied", user_id=principal.user_id, required_role=role)
        raise Forbidden(f"{role.capitalize()} access required")
    return principal
