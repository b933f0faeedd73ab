"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidSizeSelection(ValidationError):
    """Size required but missing, or not one of the product's variants."""


class StockExceeded(ValidationError):
    """Requested quantity is above what the stock bound allows."""

    def __init__(self, message: str, available: int) -> None:
        super().__init__(message)
        self.available = available


class DealNotUsable(ValidationError):
    """A deal-priced add was attempted while the deal is not ACTIVE."""


class InvalidPriceInput(ValidationError):
    """A non-positive base price reached the price calculator."""


class LineNotFound(EntityNotFoundError):
    """A cart mutation referenced a line id that is not in the cart."""
