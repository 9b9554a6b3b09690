"""Claim domain exports"""

from . import state
from .calendar import google_calendar_url, ics_event, share_url
from .exceptions import (
    ClaimError,
    ClaimNotFoundError,
    ClaimOwnershipError,
    ClaimValidationError,
    InvalidClaimTransitionError,
    ItemFullyClaimedError,
)
from .models import REMINDER_CHANNELS, CashPaymentResult, Claim, ClaimStats, Reminder
from .service import ClaimService

__all__ = [
    "CashPaymentResult",
    "Claim",
    "ClaimError",
    "ClaimNotFoundError",
    "ClaimOwnershipError",
    "ClaimService",
    "ClaimStats",
    "ClaimValidationError",
    "InvalidClaimTransitionError",
    "ItemFullyClaimedError",
    "REMINDER_CHANNELS",
    "Reminder",
    "google_calendar_url",
    "ics_event",
    "share_url",
    "state",
]
