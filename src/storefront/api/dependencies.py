"""Request-scoped dependencies: the caller's principal and paging."""

from dataclasses import dataclass

from fastapi import Depends, Query, Request

from storefront.config import get_settings
from storefront.identity.gate import Principal, require_role, resolve_principal
from storefront.identity.user import Role
from storefront.utils.logging import add_context


async def current_principal(request: Request) -> Principal:
    principal = resolve_principal(request.headers.get(get_settings().auth_header))
    add_context(user_id=principal.user_id)
    return principal


async def admin_principal(principal: Principal = Depends(current_principal)) -> Principal:
    return require_role(principal, Role.ADMIN.value)


@dataclass
class Page:
    page: int
    limit: int


async def paging(page: int = Query(default=1, ge=1), limit: int | None = Query(default=None, ge=1)) -> Page:
    settings = get_settings()
    return Page(page=page, limit=min(limit or settings.default_page_size, settings.max_page_size))
