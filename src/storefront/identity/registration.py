"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import Role, User


@storefront.command(part_of="User")
class RegisterUser:
    """Create an account for a user admitted by the upstream authenticator."""

    name: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    role: String(choices=Role, default=Role.STUDENT.value)
    college_id: String(max_length=30)
    department: String(max_length=100)
    year: Integer(min_value=1, max_value=4)
    phone: String(max_length=10)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["An account with this email already exists"]})

        user = User.register(
            name=command.name,
            email=command.email,
            role=command.role or Role.STUDENT.value,
            college_id=command.college_id,
            department=command.department,
            year=command.year,
            phone=command.phone,
        )
        repo.add(user)
        return str(user.id)
