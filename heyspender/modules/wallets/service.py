"""Wallet domain service"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel
from heyspender.infrastructure.database.repositories.wallet_repository import SqlWalletRepository

from . import ledger
from .exceptions import WalletNotFoundError
from .models import WalletSnapshot, WalletSummary, WalletTransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "NGN"


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session))

    async def ensure_wallet(self, account_id: str, currency: str = DEFAULT_CURRENCY) -> WalletSnapshot:
        return self._to_snapshot(await self._ensure_model(account_id, currency))

    async def get_wallet(self, account_id: str) -> WalletSnapshot | None:
        wallet = await self.repository.get_wallet(account_id)
        return self._to_snapshot(wallet) if wallet else None

    async def get_wallet_by_id(self, wallet_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_wallet_by_id(wallet_id)
        if wallet is None:
            raise WalletNotFoundError(wallet_id)
        return self._to_snapshot(wallet)

    async def credit(
        self,
        *,
        account_id: str,
        amount_kobo: int,
        source: str,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        claim_id: Optional[str] = None,
        payout_id: Optional[str] = None,
    ) -> WalletTransactionRecord:
        wallet = await self._ensure_model(account_id)
        tx = await self._record(
            wallet.id,
            ledger.CREDIT,
            source,
            amount_kobo,
            description,
            reference=reference,
            claim_id=claim_id,
            payout_id=payout_id,
        )
        await self.repository.update_balance(wallet.id, amount_kobo)
        logger.info("Wallet %s credited %d kobo (%s)", wallet.id, amount_kobo, source)
        return tx

    async def record_sent(
        self,
        *,
        account_id: str,
        amount_kobo: int,
        source: str,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        claim_id: Optional[str] = None,
    ) -> WalletTransactionRecord:
        """Debit entry for money a user sent from outside the wallet; balance is untouched."""
        wallet = await self._ensure_model(account_id)
        return await self._record(
            wallet.id,
            ledger.DEBIT,
            source,
            amount_kobo,
            description,
            reference=reference,
            claim_id=claim_id,
        )

    async def debit_payout(
        self,
        *,
        wallet_id: str,
        payout_id: str,
        amount_kobo: int,
        description: Optional[str] = None,
    ) -> WalletTransactionRecord:
        tx = await self._record(
            wallet_id,
            ledger.DEBIT,
            "payout",
            amount_kobo,
            description or "Withdrawal to bank account",
            payout_id=payout_id,
        )
        await self.repository.update_balance(wallet_id, -amount_kobo)
        logger.info("Wallet %s debited %d kobo for payout %s", wallet_id, amount_kobo, payout_id)
        return tx

    async def refund_payout(
        self,
        *,
        wallet_id: str,
        payout_id: str,
        amount_kobo: int,
        description: Optional[str] = None,
    ) -> WalletTransactionRecord:
        tx = await self._record(
            wallet_id,
            ledger.CREDIT,
            "refund",
            amount_kobo,
            description or "Refund for failed bank transfer",
            payout_id=payout_id,
        )
        await self.repository.update_balance(wallet_id, amount_kobo)
        return tx

    async def list_transactions(
        self, account_id: str, limit: Optional[int] = 20, offset: int = 0
    ) -> list[WalletTransactionRecord]:
        wallet = await self.repository.get_wallet(account_id)
        if wallet is None:
            return []
        rows = await self.repository.list_transactions(wallet.id, limit, offset)
        return [self._to_transaction(row) for row in rows]

    async def list_wallet_transactions(self, wallet_id: str) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_transactions(wallet_id, None, 0)
        return [self._to_transaction(row) for row in rows]

    async def list_recent_transactions(self, limit: int = 50, offset: int = 0) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_recent_transactions(limit, offset)
        return [self._to_transaction(row) for row in rows]

    async def summarize(self, account_id: str, pending_payouts: Iterable[int] = ()) -> WalletSummary:
        """Ledger-derived totals; ``pending_payouts`` are amounts reserved by unreviewed withdrawals."""
        wallet = await self._ensure_model(account_id)
        rows = await self.repository.list_transactions(wallet.id, None, 0)
        return WalletSummary(
            wallet=self._to_snapshot(wallet),
            totals=ledger.summarize(rows),
            reserved_kobo=sum(pending_payouts),
        )

    async def _ensure_model(self, account_id: str, currency: str = DEFAULT_CURRENCY) -> WalletModel:
        wallet = await self.repository.get_wallet(account_id)
        if wallet is None:
            wallet = await self.repository.create_wallet(account_id, currency)
        return wallet

    async def _record(
        self,
        wallet_id: str,
        tx_type: str,
        source: str,
        amount_kobo: int,
        description: Optional[str],
        **links: Optional[str],
    ) -> WalletTransactionRecord:
        if amount_kobo <= 0:
            raise ValueError("transaction amount must be positive")
        category = ledger.category_for_source(source, description, tx_type)
        row = await self.repository.add_transaction(
            wallet_id=wallet_id,
            type=tx_type,
            source=source,
            category=category.value,
            amount_kobo=amount_kobo,
            description=description,
            **links,
        )
        return self._to_transaction(row)

    @staticmethod
    def _to_snapshot(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            id=model.id,
            account_id=model.account_id,
            balance_kobo=model.balance_kobo or 0,
            currency=model.currency,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_transaction(model: WalletTransactionModel) -> WalletTransactionRecord:
        return WalletTransactionRecord(
            id=model.id,
            wallet_id=model.wallet_id,
            type=model.type,
            source=model.source,
            category=ledger.categorize(model).value,
            amount_kobo=model.amount_kobo,
            description=model.description,
            reference=model.reference,
            claim_id=model.claim_id,
            payout_id=model.payout_id,
            created_at=model.created_at,
        )
