"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from inventory.domain import inventory


@inventory.event(part_of="User")
class UserRegistered:
    """A staff member was added to the directory."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)
