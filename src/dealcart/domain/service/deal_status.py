"""Domain service: effective deal status.

The stored status only tells us whether an administrator switched the
deal off.  Whether it can price a cart line right now also depends on its
date window and on how many times it has already been redeemed.
"""

from __future__ import annotations

from datetime import datetime

from dealcart.domain.model.deal import Deal, DealStatus, require_aware


def effective_status(deal: Deal, now: datetime) -> DealStatus:
    """Compute the status that governs pricing at instant *now*.

    Rules, first match wins:
      1. stored INACTIVE (administrator override) -> INACTIVE
      2. outside ``[start_date, end_date]``       -> EXPIRED
      3. usage cap reached                        -> EXPIRED
      4. otherwise                                -> ACTIVE

    Both ends of the date window are inclusive so a deal does not flicker
    between states when polled exactly on a boundary.
    """
    require_aware(now, "Current time")

    if deal.status is DealStatus.INACTIVE:
        return DealStatus.INACTIVE

    if now < deal.start_date or now > deal.end_date:
        return DealStatus.EXPIRED

    if deal.max_uses is not None and deal.used_count >= deal.max_uses:
        return DealStatus.EXPIRED

    return DealStatus.ACTIVE


def is_usable(deal: Deal | None, now: datetime) -> bool:
    if deal is None:
        return False
    return effective_status(deal, now) is DealStatus.ACTIVE


def format_time_remaining(deal: Deal, now: datetime) -> str:
    """Countdown label such as ``"2d 3h 15m"``, ``"3h 5m"`` or ``"12m"``."""
    remaining = deal.time_remaining(now)
    if remaining.total_seconds() <= 0:
        return "Expired"

    days = remaining.days
    hours, rest = divmod(remaining.seconds, 3600)
    minutes = rest // 60

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
