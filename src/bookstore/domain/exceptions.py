"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
The checkout and cancellation failures carry their details as attributes so
callers can react without parsing the message.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class EmptyCartError(DomainException):
    """Checkout was attempted on a cart with no lines."""

    def __init__(self, owner_key: str | None = None) -> None:
        self.owner_key = owner_key
        super().__init__("Cart is empty")


class InsufficientStockError(DomainException):
    """A book does not have enough stock for the requested quantity."""

    def __init__(self, book_title: str, available: int) -> None:
        self.book_title = book_title
        self.available = available
        super().__init__(
            f'Insufficient stock for "{book_title}". Only {available} available.'
        )


class BookUnavailableError(DomainException):
    """A referenced book does not exist or is no longer active."""

    def __init__(self, book_id: str, title: str | None = None) -> None:
        self.book_id = book_id
        self.title = title
        label = f'"{title}"' if title else f"ID '{book_id}'"
        super().__init__(f"Book {label} not found or not available")


class InvalidTransitionError(DomainException):
    """An order status change is not allowed from the current status."""

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot change order status from {from_status} to {to_status}"
        )


class ConfigurationError(DomainException):
    """Payment or address data reaching the core is missing or invalid."""
