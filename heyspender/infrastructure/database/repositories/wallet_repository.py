"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from heyspender.db.models import Wallet, WalletTransaction
from heyspender.modules.wallets.exceptions import WalletNotFoundError


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, account_id: str) -> Wallet | None:
        stmt = (
            select(Wallet)
            .options(selectinload(Wallet.account))
            .where(Wallet.account_id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_wallet_by_id(self, wallet_id: str) -> Wallet | None:
        return await self.session.get(
            Wallet, wallet_id, options=[selectinload(Wallet.account)], populate_existing=True
        )

    async def create_wallet(self, account_id: str, currency: str) -> Wallet:
        wallet = Wallet(account_id=account_id, currency=currency, balance_kobo=0)
        self.session.add(wallet)
        await self.session.flush()
        return wallet

    async def update_balance(self, wallet_id: str, delta_kobo: int) -> Wallet:
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(balance_kobo=Wallet.balance_kobo + delta_kobo)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        # Reloading drops eager-loaded relationships unless they are requested again.
        wallet = await self.session.get(
            Wallet, wallet_id, options=[selectinload(Wallet.account)], populate_existing=True
        )
        if wallet is None:
            raise WalletNotFoundError(wallet_id)
        return wallet

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
    ) -> WalletTransaction:
        tx = WalletTransaction(
            wallet_id=wallet_id,
            type=type,
            source=source,
            category=category,
            amount_kobo=amount_kobo,
            description=description,
            reference=reference,
            claim_id=claim_id,
            payout_id=payout_id,
        )
        self.session.add(tx)
        await self.session.flush()
        return tx

    async def list_transactions(self, wallet_id: str, limit: int | None, offset: int) -> Sequence[WalletTransaction]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.wallet_id == wallet_id)
            .order_by(desc(WalletTransaction.created_at))
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_recent_transactions(self, limit: int, offset: int) -> Sequence[WalletTransaction]:
        stmt = select(WalletTransaction).order_by(desc(WalletTransaction.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
