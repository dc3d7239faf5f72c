"""Request dependencies: caller identity and path identifiers."""

from uuid import UUID

from fastapi import Header
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from inventory.exceptions import AuthenticationRequiredError, MalformedIdentifierError
from inventory.users.user import User


def parse_identifier(value: str, label: str = "inventory item") -> str:
    """Return ``value`` in canonical UUID form, or fail with a 400."""
    try:
        return str(UUID(value))
    except (TypeError, ValueError):
        raise MalformedIdentifierError(f"Invalid {label} ID") from None


async def current_user(x_user_id: str | None = Header(default=None)) -> User:
    """Resolve the caller from the ``X-User-Id`` header."""
    if not x_user_id:
        raise AuthenticationRequiredError("No user identity supplied, authorization denied")
    try:
        user_id = str(UUID(x_user_id))
        return current_domain.repository_for(User).get(user_id)
    except (ValueError, ObjectNotFoundError):
        raise AuthenticationRequiredError("User identity is not valid") from None
