"""SQLAlchemy implementation for goal contributions"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from heyspender.db.models import Contribution, Goal


class SqlContributionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _query(self):
        return (
            select(Contribution)
            .options(selectinload(Contribution.goal).selectinload(Goal.wishlist))
            .execution_options(populate_existing=True)
        )

    async def get_goal(self, goal_id: str) -> Goal | None:
        stmt = (
            select(Goal)
            .where(Goal.id == goal_id)
            .options(selectinload(Goal.wishlist))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_to_goal(self, goal_id: str, amount_kobo: int) -> None:
        stmt = (
            update(Goal)
            .where(Goal.id == goal_id)
            .values(amount_raised_kobo=Goal.amount_raised_kobo + amount_kobo)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def create(self, **fields: Any) -> Contribution:
        contribution = Contribution(**fields)
        self.session.add(contribution)
        await self.session.flush()
        return await self.get(contribution.id)

    async def get(self, contribution_id: str) -> Contribution | None:
        result = await self.session.execute(self._query().where(Contribution.id == contribution_id))
        return result.scalars().first()

    async def get_by_ref(self, payment_ref: str) -> Contribution | None:
        result = await self.session.execute(self._query().where(Contribution.payment_ref == payment_ref))
        return result.scalars().first()

    async def set_status(self, contribution_id: str, status: str) -> Contribution:
        contribution = await self.session.get(Contribution, contribution_id)
        contribution.status = status
        await self.session.flush()
        return await self.get(contribution_id)

    async def list_for_goal(self, goal_id: str, status: str | None) -> Sequence[Contribution]:
        stmt = self._query().where(Contribution.goal_id == goal_id)
        if status:
            stmt = stmt.where(Contribution.status == status)
        result = await self.session.execute(stmt.order_by(desc(Contribution.created_at)))
        return result.scalars().all()

    async def list_all(self, status: str | None, limit: int, offset: int) -> Sequence[Contribution]:
        stmt = self._query()
        if status and status != "all":
            stmt = stmt.where(Contribution.status == status)
        stmt = stmt.order_by(desc(Contribution.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
