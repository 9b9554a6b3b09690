"""Payout domain exports"""

from .exceptions import InvalidPayoutTransitionError, PayoutError, PayoutNotFoundError, PayoutValidationError
from .models import PAYOUT_STATUSES, Payout, ReconciliationReport
from .service import PayoutService, ensure_payout_transition

__all__ = [
    "InvalidPayoutTransitionError",
    "PAYOUT_STATUSES",
    "Payout",
    "PayoutError",
    "PayoutNotFoundError",
    "PayoutService",
    "PayoutValidationError",
    "ReconciliationReport",
    "ensure_payout_transition",
]
