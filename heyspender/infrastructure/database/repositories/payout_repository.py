"""SQLAlchemy implementation for payouts"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from heyspender.db.models import Payout, Wallet


class SqlPayoutRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _query(self):
        return (
            select(Payout)
            .options(selectinload(Payout.wallet).selectinload(Wallet.account))
            .execution_options(populate_existing=True)
        )

    async def create(self, **fields: Any) -> Payout:
        payout = Payout(**fields)
        self.session.add(payout)
        await self.session.flush()
        return await self.get(payout.id)

    async def get(self, payout_id: str) -> Payout | None:
        result = await self.session.execute(self._query().where(Payout.id == payout_id))
        return result.scalars().first()

    async def transition(self, payout_id: str, from_status: str, changes: dict[str, Any]) -> bool:
        """Apply ``changes`` only while the payout is still in ``from_status``."""
        stmt = (
            update(Payout)
            .where(Payout.id == payout_id, Payout.status == from_status)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def update(self, payout_id: str, changes: dict[str, Any]) -> Payout:
        payout = await self.session.get(Payout, payout_id)
        for key, value in changes.items():
            setattr(payout, key, value)
        await self.session.flush()
        return await self.get(payout_id)

    async def list_by_wallet(self, wallet_id: str) -> Sequence[Payout]:
        stmt = self._query().where(Payout.wallet_id == wallet_id).order_by(desc(Payout.created_at))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_all(self, status: str | None, limit: int, offset: int) -> Sequence[Payout]:
        stmt = self._query()
        if status and status != "all":
            stmt = stmt.where(Payout.status == status)
        stmt = stmt.order_by(desc(Payout.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count_by_status(self, status: str) -> int:
        stmt = select(func.count()).select_from(Payout).where(Payout.status == status)
        result = await self.session.execute(stmt)
        return result.scalar_one()
