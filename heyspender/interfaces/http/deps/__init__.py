"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .services import (
    get_account_service,
    get_audit_service,
    get_claim_service,
    get_contribution_service,
    get_notification_service,
    get_payment_gateway,
    get_payment_service,
    get_payout_service,
    get_wallet_service,
    get_wishlist_service,
)

__all__ = [
    "get_account_service",
    "get_audit_service",
    "get_claim_service",
    "get_contribution_service",
    "get_db_session",
    "get_notification_service",
    "get_payment_gateway",
    "get_payment_service",
    "get_payout_service",
    "get_wallet_service",
    "get_wishlist_service",
]
