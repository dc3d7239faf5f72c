"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from inventory.domain import inventory, logger
from inventory.users.user import User


@inventory.command(part_of="User")
class RegisterUser:
    """Add a staff member to the directory."""

    username = String(required=True, max_length=30)
    email = String(required=True, max_length=254)
    role = String(max_length=10)


@inventory.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        user = User.register(
            username=command.username,
            email=command.email,
            role=command.role,
        )

        if repo._dao.query.filter(username=user.username).all().first is not None:
            raise ValidationError({"username": ["User already exists"]})
        if repo._dao.query.filter(email=user.email).all().first is not None:
            raise ValidationError({"email": ["User already exists"]})

        repo.add(user)
        logger.info("user_registered", user_id=str(user.id), username=user.username, role=user.role)
        return str(user.id)
