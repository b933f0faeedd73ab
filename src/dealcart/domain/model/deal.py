"""Deal aggregate — a time-boxed, optionally usage-capped discount rule.

Deals are owned by the catalog service.  ``used_count`` is advanced only
by the external order service at checkout, so a Deal here is always a
read-only snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from dealcart.domain.exceptions import ValidationError

HUNDRED = Decimal("100")


class DealKind(Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    FLASH_SALE = "FLASH_SALE"


class DealStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"


def require_aware(moment: datetime, what: str) -> None:
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValidationError(f"{what} must be timezone-aware, got {moment!r}")


@dataclass(frozen=True)
class Deal:
    """Discount rule attached to one or more products.

    ``status`` is the value stored by the administrator; the status that
    actually governs pricing is computed by
    :func:`dealcart.domain.service.deal_status.effective_status`.

    For FIXED_AMOUNT deals ``value`` is a currency amount.  It is not
    capped here because one deal can cover products of different prices;
    the price calculator clamps it to each product's base price.
    """

    id: str
    title: str
    kind: DealKind
    value: Decimal
    start_date: datetime
    end_date: datetime
    status: DealStatus = DealStatus.ACTIVE
    max_uses: int | None = None
    used_count: int = 0
    product_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Deal id is required")
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Deal value must be a Decimal, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise ValidationError(f"Deal value cannot be negative, got {self.value}")
        if self.kind in (DealKind.PERCENTAGE, DealKind.FLASH_SALE) and self.value > HUNDRED:
            raise ValidationError(
                f"{self.kind.value} deal value must be within 0..100, got {self.value}"
            )

        require_aware(self.start_date, "Deal start date")
        require_aware(self.end_date, "Deal end date")
        if self.end_date <= self.start_date:
            raise ValidationError(
                f"Deal '{self.id}' must end after it starts "
                f"({self.start_date.isoformat()} .. {self.end_date.isoformat()})"
            )

        if self.max_uses is not None and self.max_uses <= 0:
            raise ValidationError("Deal max uses must be a positive integer")
        if self.used_count < 0:
            raise ValidationError("Deal used count cannot be negative")

        # Accept any iterable of ids from callers, store it frozen.
        object.__setattr__(self, "product_ids", frozenset(self.product_ids))

    # --- Derived values -------------------------------------------------------

    @property
    def is_flash_sale(self) -> bool:
        return self.kind is DealKind.FLASH_SALE

    @property
    def uses_remaining(self) -> int | None:
        """Redemptions left before the usage cap, or None when uncapped."""
        if self.max_uses is None:
            return None
        return max(self.max_uses - self.used_count, 0)

    def applies_to(self, product_id: str) -> bool:
        return product_id in self.product_ids

    def time_remaining(self, now: datetime) -> timedelta:
        """Time until ``end_date``; zero once the deal has ended."""
        require_aware(now, "Current time")
        return max(self.end_date - now, timedelta(0))
