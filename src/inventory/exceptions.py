"""Service-level exceptions for the inventory context.

Domain rule violations use ``protean.exceptions.ValidationError`` and
missing records ``protean.exceptions.ObjectNotFoundError``. The classes here
cover the remaining request-boundary failures.
"""


class InventoryServiceError(Exception):
    """Base class for inventory service errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedIdentifierError(InventoryServiceError):
    """An identifier in the request is not a well-formed UUID."""


class AuthenticationRequiredError(InventoryServiceError):
    """No caller identity was supplied, or it does not match a known user."""


class AccessDeniedError(InventoryServiceError):
    """The caller is not allowed to modify the record."""


class StaleItemError(InventoryServiceError):
    """Another writer changed the item between read and write."""
