"""Admin management of user accounts — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import Role, User


@storefront.command(part_of="User")
class ChangeUserRole:
    user_id: Identifier(required=True)
    role: String(required=True, choices=Role)


@storefront.command(part_of="User")
class SetUserActive:
    user_id: Identifier(required=True)
    is_active: Boolean(required=True)


@storefront.command_handler(part_of=User)
class AdministerUsersHandler:
    @handle(ChangeUserRole)
    def change_user_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_role(command.role)
        repo.add(user)

    @handle(SetUserActive)
    def set_user_active(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        if command.is_active:
            user.activate()
        else:
            user.deactivate()
        repo.add(user)
