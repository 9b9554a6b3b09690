"""SQLAlchemy implementation for wishlists, items and goals"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from heyspender.db.models import Goal, Wishlist, WishlistItem
from heyspender.modules.wishlists.models import GoalInput, ItemInput


class SqlWishlistRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _wishlist_query(self):
        return (
            select(Wishlist)
            .options(
                selectinload(Wishlist.items),
                selectinload(Wishlist.goals),
                selectinload(Wishlist.owner),
            )
            .execution_options(populate_existing=True)
        )

    async def slug_exists(self, slug: str) -> bool:
        result = await self.session.execute(select(Wishlist.id).where(Wishlist.slug == slug))
        return result.first() is not None

    async def create_wishlist(self, **fields: Any) -> Wishlist:
        wishlist = Wishlist(**fields)
        self.session.add(wishlist)
        await self.session.flush()
        return wishlist

    async def get_wishlist(self, wishlist_id: str) -> Wishlist | None:
        result = await self.session.execute(self._wishlist_query().where(Wishlist.id == wishlist_id))
        return result.scalars().first()

    async def get_by_slug(self, slug: str) -> Wishlist | None:
        result = await self.session.execute(self._wishlist_query().where(Wishlist.slug == slug))
        return result.scalars().first()

    async def list_by_owner(self, owner_id: str) -> Sequence[Wishlist]:
        stmt = self._wishlist_query().where(Wishlist.owner_id == owner_id).order_by(desc(Wishlist.created_at))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_public(self, limit: int, offset: int) -> Sequence[Wishlist]:
        stmt = (
            self._wishlist_query()
            .where(Wishlist.visibility == "public", Wishlist.status == "active")
            .order_by(desc(Wishlist.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_all(self, *, status: str | None, limit: int, offset: int) -> Sequence[Wishlist]:
        stmt = self._wishlist_query()
        if status and status != "all":
            stmt = stmt.where(Wishlist.status == status)
        stmt = stmt.order_by(desc(Wishlist.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count_wishlists(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Wishlist))
        return result.scalar_one()

    async def update_wishlist(self, wishlist_id: str, changes: dict[str, Any]) -> Wishlist | None:
        wishlist = await self.session.get(Wishlist, wishlist_id)
        if wishlist is None:
            return None
        for key, value in changes.items():
            setattr(wishlist, key, value)
        await self.session.flush()
        return await self.get_wishlist(wishlist_id)

    async def delete_wishlist(self, wishlist_id: str) -> bool:
        wishlist = await self.get_wishlist(wishlist_id)
        if wishlist is None:
            return False
        await self.session.delete(wishlist)
        await self.session.flush()
        return True

    async def add_items(self, wishlist_id: str, items: Sequence[ItemInput]) -> Sequence[WishlistItem]:
        models = [
            WishlistItem(
                wishlist_id=wishlist_id,
                name=item.name,
                description=item.description,
                unit_price_kobo=item.unit_price_kobo,
                qty_total=item.qty_total,
                qty_claimed=0,
                product_url=item.product_url,
                image_url=item.image_url,
                allow_group_gift=item.allow_group_gift,
            )
            for item in items
        ]
        self.session.add_all(models)
        await self.session.flush()
        return models

    async def get_item(self, item_id: str) -> WishlistItem | None:
        return await self.session.get(WishlistItem, item_id, populate_existing=True)

    async def update_item(self, item_id: str, changes: dict[str, Any]) -> WishlistItem | None:
        item = await self.session.get(WishlistItem, item_id, populate_existing=True)
        if item is None:
            return None
        for key, value in changes.items():
            setattr(item, key, value)
        await self.session.flush()
        return item

    async def delete_item(self, item_id: str) -> bool:
        item = await self.session.get(WishlistItem, item_id)
        if item is None:
            return False
        await self.session.delete(item)
        await self.session.flush()
        return True

    async def list_items_for_owner(self, owner_id: str) -> Sequence[WishlistItem]:
        stmt = (
            select(WishlistItem)
            .join(Wishlist, Wishlist.id == WishlistItem.wishlist_id)
            .where(Wishlist.owner_id == owner_id)
            .order_by(desc(WishlistItem.created_at))
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def add_goals(self, wishlist_id: str, goals: Sequence[GoalInput]) -> Sequence[Goal]:
        models = [
            Goal(
                wishlist_id=wishlist_id,
                title=goal.title,
                target_amount_kobo=goal.target_amount_kobo,
                amount_raised_kobo=0,
                deadline=goal.deadline,
            )
            for goal in goals
        ]
        self.session.add_all(models)
        await self.session.flush()
        return models

    async def get_goal(self, goal_id: str) -> Goal | None:
        return await self.session.get(Goal, goal_id, populate_existing=True)

    async def update_goal(self, goal_id: str, changes: dict[str, Any]) -> Goal | None:
        goal = await self.session.get(Goal, goal_id)
        if goal is None:
            return None
        for key, value in changes.items():
            setattr(goal, key, value)
        await self.session.flush()
        return goal

    async def delete_goal(self, goal_id: str) -> bool:
        goal = await self.session.get(Goal, goal_id)
        if goal is None:
            return False
        await self.session.delete(goal)
        await self.session.flush()
        return True

    async def list_goals_for_owner(self, owner_id: str) -> Sequence[Goal]:
        stmt = (
            select(Goal)
            .join(Wishlist, Wishlist.id == Goal.wishlist_id)
            .where(Wishlist.owner_id == owner_id)
            .order_by(desc(Goal.created_at))
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
