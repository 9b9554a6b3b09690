"""Claim lifecycle.

``pending -> confirmed -> fulfilled`` with ``pending -> cancelled``.  A cash
payment that covers the item price fulfils a pending claim directly.  Open
claims become ``expired`` once ``expire_at`` has passed.

Only open claims can expire.  A fulfilled claim has already been paid for and
a cancelled one has released its unit, so expiring either would change
nothing but the label.  Cash collected for a claim that expired while the
payment was in flight is still credited to the owner; the claim keeps its
``expired`` status.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from heyspender.core.clock import as_utc, utcnow

from .exceptions import InvalidClaimTransitionError

PENDING = "pending"
CONFIRMED = "confirmed"
FULFILLED = "fulfilled"
CANCELLED = "cancelled"
EXPIRED = "expired"

STATUSES = (PENDING, CONFIRMED, FULFILLED, CANCELLED, EXPIRED)
OPEN_STATUSES = (PENDING, CONFIRMED)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED, FULFILLED, EXPIRED}),
    CONFIRMED: frozenset({FULFILLED, EXPIRED}),
    FULFILLED: frozenset(),
    CANCELLED: frozenset(),
    EXPIRED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, target: str) -> None:
    if target not in STATUSES or not can_transition(current, target):
        raise InvalidClaimTransitionError(current, target)


def is_expired(expire_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    if expire_at is None:
        return False
    return as_utc(expire_at) < (now or utcnow())


def effective_status(status: str, expire_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Stored status, or ``expired`` for an open claim past its expiry."""
    if status in OPEN_STATUSES and is_expired(expire_at, now):
        return EXPIRED
    return status
