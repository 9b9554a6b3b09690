"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Protocol, Sequence

from heyspender.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel


class WalletRepository(Protocol):
    async def get_wallet(self, account_id: str) -> WalletModel | None:
        ...

    async def get_wallet_by_id(self, wallet_id: str) -> WalletModel | None:
        ...

    async def create_wallet(self, account_id: str, currency: str) -> WalletModel:
        ...

    async def update_balance(self, wallet_id: str, delta_kobo: int) -> WalletModel:
        ...

    async def add_transaction(
        self,
        *,
        wallet_id: str,
        type: str,
        source: str,
        category: str,
        amount_kobo: int,
        description: str | None,
        reference: str | None = None,
        claim_id: str | None = None,
        payout_id: str | None = None,
    ) -> WalletTransactionModel:
        ...

    async def list_transactions(self, wallet_id: str, limit: int | None, offset: int) -> Sequence[WalletTransactionModel]:
        ...

    async def list_recent_transactions(self, limit: int, offset: int) -> Sequence[WalletTransactionModel]:
        ...
