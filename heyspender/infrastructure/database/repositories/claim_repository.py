"""SQLAlchemy implementation for claims and reminders"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from heyspender.db.models import Claim, Reminder, Wishlist, WishlistItem


class SqlClaimRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _claim_query(self):
        return (
            select(Claim)
            .options(selectinload(Claim.item).selectinload(WishlistItem.wishlist).selectinload(Wishlist.owner))
            .execution_options(populate_existing=True)
        )

    async def get_item(self, item_id: str) -> WishlistItem | None:
        stmt = (
            select(WishlistItem)
            .where(WishlistItem.id == item_id)
            .options(selectinload(WishlistItem.wishlist))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def adjust_item_claimed(self, item_id: str, delta: int) -> bool:
        """Move ``qty_claimed`` by ``delta``; refuses to leave ``[0, qty_total]``."""
        new_value = WishlistItem.qty_claimed + delta
        stmt = (
            update(WishlistItem)
            .where(WishlistItem.id == item_id, new_value >= 0, new_value <= WishlistItem.qty_total)
            .values(qty_claimed=new_value)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def create_claim(self, **fields: Any) -> Claim:
        claim = Claim(**fields)
        self.session.add(claim)
        await self.session.flush()
        return claim

    async def get_claim(self, claim_id: str) -> Claim | None:
        result = await self.session.execute(self._claim_query().where(Claim.id == claim_id))
        return result.scalars().first()

    async def list_by_supporter(self, user_id: str) -> Sequence[Claim]:
        stmt = self._claim_query().where(Claim.supporter_user_id == user_id).order_by(desc(Claim.created_at))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_for_owner(self, owner_id: str) -> Sequence[Claim]:
        stmt = (
            self._claim_query()
            .join(WishlistItem, WishlistItem.id == Claim.wishlist_item_id)
            .join(Wishlist, Wishlist.id == WishlistItem.wishlist_id)
            .where(Wishlist.owner_id == owner_id)
            .order_by(desc(Claim.created_at))
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_overdue(self, now: datetime, statuses: Sequence[str]) -> Sequence[Claim]:
        stmt = self._claim_query().where(Claim.status.in_(statuses), Claim.expire_at < now)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def update_claim(self, claim_id: str, changes: dict[str, Any]) -> Claim | None:
        claim = await self.session.get(Claim, claim_id)
        if claim is None:
            return None
        for key, value in changes.items():
            setattr(claim, key, value)
        await self.session.flush()
        return await self.get_claim(claim_id)

    async def delete_claim(self, claim_id: str) -> bool:
        await self.session.execute(delete(Reminder).where(Reminder.claim_id == claim_id))
        result = await self.session.execute(delete(Claim).where(Claim.id == claim_id))
        return result.rowcount == 1

    async def add_reminder(self, **fields: Any) -> Reminder:
        reminder = Reminder(**fields)
        self.session.add(reminder)
        await self.session.flush()
        return reminder

    async def list_due_reminders(self, now: datetime, limit: int) -> Sequence[Reminder]:
        stmt = (
            select(Reminder)
            .where(Reminder.status == "queued", Reminder.schedule_at <= now)
            .order_by(Reminder.schedule_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def update_reminder(self, reminder_id: str, changes: dict[str, Any]) -> None:
        await self.session.execute(update(Reminder).where(Reminder.id == reminder_id).values(**changes))
