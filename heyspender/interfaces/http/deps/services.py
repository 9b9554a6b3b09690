"""Domain service providers bound to the request session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.core.config import get_settings
from heyspender.infrastructure.payments import build_gateway
from heyspender.modules.accounts import AccountService
from heyspender.modules.audit import AuditService
from heyspender.modules.claims import ClaimService
from heyspender.modules.contributions import ContributionService
from heyspender.modules.notifications import NotificationService
from heyspender.modules.payments import PaymentGateway, PaymentService
from heyspender.modules.payouts import PayoutService
from heyspender.modules.wallets import WalletService
from heyspender.modules.wishlists import WishlistService

from .database import get_db_session


def get_payment_gateway() -> PaymentGateway | None:
    return build_gateway(get_settings())


def get_account_service(db: AsyncSession = Depends(get_db_session)) -> AccountService:
    return AccountService.with_session(db)


def get_wishlist_service(db: AsyncSession = Depends(get_db_session)) -> WishlistService:
    return WishlistService.with_session(db)


def get_claim_service(db: AsyncSession = Depends(get_db_session)) -> ClaimService:
    return ClaimService.with_session(db)


def get_contribution_service(db: AsyncSession = Depends(get_db_session)) -> ContributionService:
    return ContributionService.with_session(db)


def get_wallet_service(db: AsyncSession = Depends(get_db_session)) -> WalletService:
    return WalletService.with_session(db)


def get_notification_service(db: AsyncSession = Depends(get_db_session)) -> NotificationService:
    return NotificationService.with_session(db)


def get_audit_service(db: AsyncSession = Depends(get_db_session)) -> AuditService:
    return AuditService.with_session(db)


def get_payout_service(
    db: AsyncSession = Depends(get_db_session),
    gateway: PaymentGateway | None = Depends(get_payment_gateway),
) -> PayoutService:
    return PayoutService.with_session(db, gateway)


def get_payment_service(
    db: AsyncSession = Depends(get_db_session),
    gateway: PaymentGateway | None = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService.with_session(db, gateway)


__all__ = [
    "get_account_service",
    "get_audit_service",
    "get_claim_service",
    "get_contribution_service",
    "get_notification_service",
    "get_payment_gateway",
    "get_payment_service",
    "get_payout_service",
    "get_wallet_service",
    "get_wishlist_service",
]
