"""Repository protocol for wishlists, items and goals."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from heyspender.db.models import Goal as GoalModel, Wishlist as WishlistModel, WishlistItem as WishlistItemModel

from .models import GoalInput, ItemInput


class WishlistRepository(Protocol):
    async def slug_exists(self, slug: str) -> bool:
        ...

    async def create_wishlist(self, **fields: Any) -> WishlistModel:
        ...

    async def get_wishlist(self, wishlist_id: str) -> WishlistModel | None:
        ...

    async def get_by_slug(self, slug: str) -> WishlistModel | None:
        ...

    async def list_by_owner(self, owner_id: str) -> Sequence[WishlistModel]:
        ...

    async def list_public(self, limit: int, offset: int) -> Sequence[WishlistModel]:
        ...

    async def list_all(self, *, status: str | None, limit: int, offset: int) -> Sequence[WishlistModel]:
        ...

    async def count_wishlists(self) -> int:
        ...

    async def update_wishlist(self, wishlist_id: str, changes: dict[str, Any]) -> WishlistModel | None:
        ...

    async def delete_wishlist(self, wishlist_id: str) -> bool:
        ...

    async def add_items(self, wishlist_id: str, items: Sequence[ItemInput]) -> Sequence[WishlistItemModel]:
        ...

    async def get_item(self, item_id: str) -> WishlistItemModel | None:
        ...

    async def update_item(self, item_id: str, changes: dict[str, Any]) -> WishlistItemModel | None:
        ...

    async def delete_item(self, item_id: str) -> bool:
        ...

    async def list_items_for_owner(self, owner_id: str) -> Sequence[WishlistItemModel]:
        ...

    async def add_goals(self, wishlist_id: str, goals: Sequence[GoalInput]) -> Sequence[GoalModel]:
        ...

    async def get_goal(self, goal_id: str) -> GoalModel | None:
        ...

    async def update_goal(self, goal_id: str, changes: dict[str, Any]) -> GoalModel | None:
        ...

    async def delete_goal(self, goal_id: str) -> bool:
        ...

    async def list_goals_for_owner(self, owner_id: str) -> Sequence[GoalModel]:
        ...
