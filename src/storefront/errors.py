"""Error taxonomy for catalogue, cart and checkout operations.

Client-recoverable failures extend Protean's ``ValidationError`` and
``ObjectNotFoundError`` so they carry the same ``{field: [messages]}``
payload as every other domain rule violation.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class EmptyCartError(ValidationError):
    """Checkout was requested with no items."""


class InsufficientStockError(ValidationError):
    """A requested quantity exceeds the product's current stock."""


class NotFoundError(ObjectNotFoundError):
    """``ObjectNotFoundError`` that keeps its ``{field: [messages]}`` payload."""

    def __init__(self, messages):
        super().__init__(messages)
        self.messages = messages


class ProductNotFoundError(NotFoundError):
    """A referenced product does not exist."""


class OrderNotFoundError(NotFoundError):
    """A referenced order does not exist."""


class UserNotFoundError(NotFoundError):
    """A referenced user does not exist."""


class StorefrontError(Exception):
    def __init__(self, messages):
        super().__init__(messages)
        self.messages = messages


class AccessDeniedError(StorefrontError):
    """The caller's role or identity does not permit the operation."""


class PersistenceError(StorefrontError):
    """The store rejected a write; nothing was committed and the call may be retried."""
