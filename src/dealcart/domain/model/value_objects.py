"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from dealcart.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "IDR"

# Number of decimal places in each currency's smallest unit.
MINOR_UNITS = {
    "IDR": 0,
    "JPY": 0,
    "USD": 2,
    "EUR": 2,
    "SGD": 2,
}

_SYMBOLS = {
    "IDR": "Rp",
    "USD": "$",
    "EUR": "€",
}


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if self.currency not in MINOR_UNITS:
            raise ValidationError(f"Unsupported currency: {self.currency!r}")

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def min(self, other: Money) -> Money:
        return self if self <= other else other

    # --- Rounding -------------------------------------------------------------

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable step, e.g. ``0.01`` for USD, ``1`` for IDR."""
        return Decimal(1).scaleb(-MINOR_UNITS[self.currency])

    def quantized(self) -> Money:
        """Round half-up to the currency's smallest unit."""
        return Money(
            self.amount.quantize(self.minor_unit, rounding=ROUND_HALF_UP),
            self.currency,
        )

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        places = MINOR_UNITS[self.currency]
        symbol = _SYMBOLS.get(self.currency, self.currency + " ")
        return f"{symbol}{self.amount:,.{places}f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0"), currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PriceQuote:
    """Price snapshot for one unit of a product.

    ``discount_amount`` is exact to the currency's smallest unit;
    ``discount_percentage`` is rounded to a whole number for display.
    """

    unit_price: Money
    discount_amount: Money
    discount_percentage: int
    applied_deal_id: str | None = None

    @property
    def base_price(self) -> Money:
        return self.unit_price + self.discount_amount

    @property
    def is_discounted(self) -> bool:
        return self.applied_deal_id is not None
