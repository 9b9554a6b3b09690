"""SQLAlchemy implementation for payment intents"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import PaymentIntent


class SqlPaymentIntentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, **fields: Any) -> PaymentIntent:
        intent = PaymentIntent(**fields)
        self.session.add(intent)
        await self.session.flush()
        return intent

    async def get_by_reference(self, reference: str) -> PaymentIntent | None:
        stmt = (
            select(PaymentIntent)
            .where(PaymentIntent.reference == reference)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update(self, intent_id: str, changes: dict[str, Any]) -> PaymentIntent:
        intent = await self.session.get(PaymentIntent, intent_id)
        for key, value in changes.items():
            setattr(intent, key, value)
        await self.session.flush()
        return intent

    async def claim_for_settlement(self, intent_id: str, changes: dict[str, Any]) -> bool:
        """Flip an unsettled intent to success; False when another caller got there first."""
        stmt = (
            update(PaymentIntent)
            .where(PaymentIntent.id == intent_id, PaymentIntent.status != "success")
            .values(status="success", **changes)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_intents(self, status: str | None, limit: int, offset: int) -> Sequence[PaymentIntent]:
        stmt = select(PaymentIntent)
        if status and status != "all":
            stmt = stmt.where(PaymentIntent.status == status)
        stmt = stmt.order_by(desc(PaymentIntent.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
