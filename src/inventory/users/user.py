"""User aggregate — the staff directory behind creator/modifier references.

Credentials and token issuance belong to the upstream authentication
service. This aggregate only records who a caller is, so that inventory
records can be stamped with ``added_by``/``last_updated_by`` and the
owner-or-admin rule can be evaluated.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from inventory.domain import inventory
from inventory.users.events import UserRegistered

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


class Role(Enum):
    ADMIN = "admin"
    USER = "user"


@inventory.aggregate
class User:
    """A staff member who can manage inventory."""

    username: String(required=True, unique=True, min_length=3, max_length=30)
    email: String(required=True, unique=True, max_length=254)
    role: String(choices=Role, default=Role.USER.value)
    created_at: DateTime()

    @classmethod
    def register(cls, username, email, role=None):
        now = datetime.now(UTC)
        user = cls(
            username=username.strip() if username else username,
            email=email.strip().lower() if email else email,
            role=role or Role.USER.value,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                username=user.username,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    @invariant.post
    def username_must_use_allowed_characters(self):
        if self.username and not _USERNAME_PATTERN.match(self.username):
            raise ValidationError(
                {"username": ["Username may only contain letters, numbers, dots, hyphens and underscores"]}
            )

    @invariant.post
    def email_must_be_valid(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Please enter a valid email"]})
