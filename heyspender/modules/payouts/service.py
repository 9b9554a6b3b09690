"""Withdrawal requests, auto-approval and admin review."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.core.config import get_settings
from heyspender.core.money import format_naira
from heyspender.db.models import Payout as PayoutModel
from heyspender.infrastructure.database.repositories.payout_repository import SqlPayoutRepository
from heyspender.modules.accounts import Account, AccountService
from heyspender.modules.notifications import NotificationService
from heyspender.modules.payments.exceptions import PaymentGatewayError
from heyspender.modules.payments.gateway import PaymentGateway
from heyspender.modules.wallets import InsufficientBalanceError, WalletService, WalletSummary, ledger

from .exceptions import InvalidPayoutTransitionError, PayoutNotFoundError, PayoutValidationError
from .models import FAILED, PAID, PAYOUT_TRANSITIONS, PROCESSING, REQUESTED, Payout, ReconciliationReport
from .repository import PayoutRepository

logger = logging.getLogger(__name__)


def ensure_payout_transition(current: str, target: str) -> None:
    if target not in PAYOUT_TRANSITIONS.get(current, frozenset()):
        raise InvalidPayoutTransitionError(current, target)


class PayoutService:
    def __init__(
        self,
        repository: PayoutRepository,
        *,
        accounts: AccountService,
        wallets: WalletService,
        notifications: NotificationService,
        gateway: Optional[PaymentGateway] = None,
        auto_approve_limit_kobo: int = 500_000,
        minimum_payout_kobo: int = 10_000,
        currency: str = "NGN",
    ) -> None:
        self._repository = repository
        self._accounts = accounts
        self._wallets = wallets
        self._notifications = notifications
        self._gateway = gateway
        self._auto_approve_limit_kobo = auto_approve_limit_kobo
        self._minimum_payout_kobo = minimum_payout_kobo
        self._currency = currency

    @classmethod
    def with_session(cls, session: AsyncSession, gateway: Optional[PaymentGateway] = None) -> "PayoutService":
        settings = get_settings()
        return cls(
            SqlPayoutRepository(session),
            accounts=AccountService.with_session(session),
            wallets=WalletService.with_session(session),
            notifications=NotificationService.with_session(session),
            gateway=gateway,
            auto_approve_limit_kobo=settings.wallet.auto_approve_limit_kobo,
            minimum_payout_kobo=settings.wallet.minimum_payout_kobo,
            currency=settings.wallet.currency,
        )

    async def wallet_summary(self, account_id: str) -> WalletSummary:
        """Ledger totals with unreviewed withdrawals held back from the available amount."""
        wallet = await self._wallets.ensure_wallet(account_id)
        reserved = [
            payout.amount_kobo
            for payout in await self._repository.list_by_wallet(wallet.id)
            if payout.status in (REQUESTED, PROCESSING) and not payout.debited
        ]
        return await self._wallets.summarize(account_id, pending_payouts=reserved)

    async def request_payout(
        self,
        account: Account,
        *,
        amount_kobo: int,
        bank_code: str,
        account_number: str,
        account_name: Optional[str] = None,
    ) -> Payout:
        if amount_kobo < self._minimum_payout_kobo:
            raise PayoutValidationError(f"Minimum withdrawal is {format_naira(self._minimum_payout_kobo)}")
        bank_code = (bank_code or "").strip()
        account_number = (account_number or "").strip()
        if not bank_code:
            raise PayoutValidationError("bank code is required")
        if not account_number.isdigit() or len(account_number) != 10:
            raise PayoutValidationError("account number must be 10 digits")

        summary = await self.wallet_summary(account.id)
        if amount_kobo > summary.available_kobo:
            raise InsufficientBalanceError(
                f"Requested {format_naira(amount_kobo)} exceeds available {format_naira(summary.available_kobo)}"
            )

        auto_approve = amount_kobo <= self._auto_approve_limit_kobo and account.is_verified
        model = await self._repository.create(
            wallet_id=summary.wallet.id,
            amount_kobo=amount_kobo,
            destination_bank_code=bank_code,
            destination_account=account_number,
            destination_account_name=account_name or account.full_name,
            status=PROCESSING if auto_approve else REQUESTED,
            debited=False,
            provider=self._gateway.name if self._gateway is not None else "manual",
        )
        logger.info(
            "Payout %s requested by %s for %d kobo (auto_approved=%s)",
            model.id,
            account.id,
            amount_kobo,
            auto_approve,
        )

        if auto_approve:
            model = await self._debit(model)
            model = await self._attempt_transfer(model)
        else:
            admins = await self._accounts.list_active_admins()
            await self._notifications.notify_many(
                [admin.id for admin in admins],
                "withdrawal_request",
                "New withdrawal request",
                f"{account.username} requested {format_naira(amount_kobo)}.",
                {"payout_id": model.id, "account_id": account.id, "amount_kobo": amount_kobo},
            )
        await self._notify_owner(model)
        return self._to_domain(model)

    async def get_payout(self, payout_id: str) -> Payout:
        return self._to_domain(await self._require(payout_id))

    async def list_for_account(self, account_id: str) -> list[Payout]:
        wallet = await self._wallets.get_wallet(account_id)
        if wallet is None:
            return []
        return [self._to_domain(row) for row in await self._repository.list_by_wallet(wallet.id)]

    async def list_admin(self, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> list[Payout]:
        return [self._to_domain(row) for row in await self._repository.list_all(status, limit, offset)]

    async def count_pending(self) -> int:
        return await self._repository.count_by_status(REQUESTED)

    async def approve(self, payout_id: str) -> Payout:
        model = await self._move(payout_id, PROCESSING)
        model = await self._debit(model)
        model = await self._attempt_transfer(model)
        await self._notify_owner(model)
        return self._to_domain(model)

    async def reject(self, payout_id: str, reason: Optional[str] = None) -> Payout:
        """Fail a payout; money already debited goes back to the wallet as a refund."""
        model = await self._move(payout_id, FAILED, failure_reason=reason or "Rejected by admin")
        if model.debited:
            await self._wallets.refund_payout(
                wallet_id=model.wallet_id,
                payout_id=model.id,
                amount_kobo=model.amount_kobo,
            )
            model = await self._require(model.id)
        await self._notify_owner(model)
        return self._to_domain(model)

    async def mark_paid(self, payout_id: str, provider_ref: Optional[str] = None) -> Payout:
        changes: dict[str, Any] = {}
        if provider_ref:
            changes["provider_ref"] = provider_ref
        model = await self._move(payout_id, PAID, **changes)
        await self._notify_owner(model)
        return self._to_domain(model)

    async def set_status(self, payout_id: str, status: str, *, reason: Optional[str] = None) -> Payout:
        if status == PROCESSING:
            return await self.approve(payout_id)
        if status == FAILED:
            return await self.reject(payout_id, reason)
        if status == PAID:
            return await self.mark_paid(payout_id)
        model = await self._require(payout_id)
        raise InvalidPayoutTransitionError(model.status, status)

    async def reconcile(self, account_id: str) -> ReconciliationReport:
        wallet = await self._wallets.ensure_wallet(account_id)
        transactions = await self._wallets.list_wallet_transactions(wallet.id)
        payouts = [self._to_domain(row) for row in await self._repository.list_by_wallet(wallet.id)]
        report = ReconciliationReport(
            wallet_id=wallet.id,
            account_id=account_id,
            stored_balance_kobo=wallet.balance_kobo,
            ledger=ledger.summarize(transactions),
            payouts=ledger.summarize_with_payouts(transactions, payouts),
        )
        if not report.is_consistent:
            logger.warning(
                "Wallet %s diverges: withdrawn %d kobo, balance %d kobo",
                wallet.id,
                report.withdrawn_divergence_kobo,
                report.balance_divergence_kobo,
            )
        return report

    async def _move(self, payout_id: str, target: str, **changes: Any) -> PayoutModel:
        model = await self._require(payout_id)
        ensure_payout_transition(model.status, target)
        if not await self._repository.transition(payout_id, model.status, {"status": target, **changes}):
            # Someone else moved it between the read and the update.
            current = await self._require(payout_id)
            raise InvalidPayoutTransitionError(current.status, target)
        logger.info("Payout %s moved %s -> %s", payout_id, model.status, target)
        return await self._require(payout_id)

    async def _debit(self, model: PayoutModel) -> PayoutModel:
        if model.debited:
            return model
        await self._wallets.debit_payout(
            wallet_id=model.wallet_id,
            payout_id=model.id,
            amount_kobo=model.amount_kobo,
        )
        return await self._repository.update(model.id, {"debited": True})

    async def _attempt_transfer(self, model: PayoutModel) -> PayoutModel:
        """Start a gateway transfer; failures leave the payout processing for manual handling."""
        if self._gateway is None:
            return model
        try:
            recipient = await self._gateway.create_transfer_recipient(
                name=model.destination_account_name or "",
                account_number=model.destination_account,
                bank_code=model.destination_bank_code,
                currency=self._currency,
            )
            result = await self._gateway.initiate_transfer(
                amount_kobo=model.amount_kobo,
                recipient_code=recipient,
                reference=f"payout_{model.id}",
                reason="HeySpender wallet withdrawal",
            )
        except PaymentGatewayError as exc:
            logger.warning("Transfer for payout %s not started: %s", model.id, exc)
            return model
        return await self._repository.update(model.id, {"provider_ref": result.transfer_code or result.reference})

    async def _notify_owner(self, model: PayoutModel) -> None:
        wallet = model.wallet
        if wallet is None:
            return
        await self._notifications.notify(
            wallet.account_id,
            "payout_status",
            f"Withdrawal {model.status}",
            f"Your withdrawal of {format_naira(model.amount_kobo)} is {model.status}.",
            {"payout_id": model.id, "status": model.status},
        )

    async def _require(self, payout_id: str) -> PayoutModel:
        model = await self._repository.get(payout_id)
        if model is None:
            raise PayoutNotFoundError(payout_id)
        return model

    @staticmethod
    def _to_domain(model: PayoutModel) -> Payout:
        wallet = model.wallet
        account = wallet.account if wallet is not None else None
        return Payout(
            id=model.id,
            wallet_id=model.wallet_id,
            amount_kobo=model.amount_kobo,
            status=model.status,
            debited=bool(model.debited),
            destination_bank_code=model.destination_bank_code,
            destination_account=model.destination_account,
            destination_account_name=model.destination_account_name,
            provider=model.provider,
            provider_ref=model.provider_ref,
            failure_reason=model.failure_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
            account_id=wallet.account_id if wallet is not None else None,
            account_username=account.username if account is not None else None,
        )
