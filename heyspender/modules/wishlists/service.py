"""Wishlist domain service: wishlists, items and cash goals."""

from __future__ import annotations

import logging
import re
import unicodedata
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import Goal as GoalModel, Wishlist as WishlistModel, WishlistItem as WishlistItemModel
from heyspender.infrastructure.database.repositories.wishlist_repository import SqlWishlistRepository
from heyspender.modules.wallets.ledger import calculate_progress

from .exceptions import (
    GoalNotFoundError,
    WishlistItemNotFoundError,
    WishlistNotFoundError,
    WishlistOwnershipError,
    WishlistValidationError,
)
from .models import (
    OCCASIONS,
    VISIBILITIES,
    WISHLIST_STATUSES,
    Goal,
    GoalInput,
    ItemInput,
    Wishlist,
    WishlistAnalytics,
    WishlistItem,
)
from .repository import WishlistRepository

logger = logging.getLogger(__name__)

WISHLIST_FIELDS = {"title", "occasion", "wishlist_date", "story", "cover_image_url", "visibility"}
ITEM_FIELDS = {
    "name",
    "description",
    "unit_price_kobo",
    "qty_total",
    "product_url",
    "image_url",
    "allow_group_gift",
}
GOAL_FIELDS = {"title", "target_amount_kobo", "deadline"}
# Columns that accept a new value on update but never null.
NON_NULL_FIELDS = {
    "title",
    "occasion",
    "visibility",
    "name",
    "unit_price_kobo",
    "qty_total",
    "allow_group_gift",
    "target_amount_kobo",
}


def slugify(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "wishlist"


def wishlist_state(wishlist: Wishlist, today: Optional[date] = None) -> str:
    """``completed`` once the occasion date has passed, otherwise ``live``."""
    if wishlist.wishlist_date is None:
        return "live"
    today = today or date.today()
    return "completed" if wishlist.wishlist_date < today else "live"


@dataclass(slots=True)
class WishlistService:
    repository: WishlistRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WishlistService":
        return cls(SqlWishlistRepository(session))

    async def generate_unique_slug(self, title: str) -> str:
        base = slugify(title)
        slug = base
        counter = 1
        while await self.repository.slug_exists(slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    async def create_wishlist(
        self,
        *,
        owner_id: str,
        title: str,
        occasion: str = "other",
        wishlist_date: Optional[date] = None,
        story: Optional[str] = None,
        cover_image_url: Optional[str] = None,
        visibility: str = "unlisted",
        items: Iterable[ItemInput] = (),
        goals: Iterable[GoalInput] = (),
    ) -> Wishlist:
        _check_choice("occasion", occasion, OCCASIONS)
        _check_choice("visibility", visibility, VISIBILITIES)
        items = list(items)
        goals = list(goals)
        for item in items:
            _validate_item_values(item.qty_total, item.unit_price_kobo)
        for goal in goals:
            _validate_goal_target(goal.target_amount_kobo)

        model = await self.repository.create_wishlist(
            owner_id=owner_id,
            title=title,
            slug=await self.generate_unique_slug(title),
            occasion=occasion,
            wishlist_date=wishlist_date,
            story=story,
            cover_image_url=cover_image_url,
            visibility=visibility,
            status="active",
        )
        if items:
            await self.repository.add_items(model.id, items)
        if goals:
            await self.repository.add_goals(model.id, goals)
        logger.info("Wishlist %s created for %s with %d items, %d goals", model.id, owner_id, len(items), len(goals))
        return await self.get_wishlist(model.id)

    async def get_wishlist(self, wishlist_id: str) -> Wishlist:
        model = await self.repository.get_wishlist(wishlist_id)
        if model is None:
            raise WishlistNotFoundError(wishlist_id)
        return self._to_wishlist(model)

    async def get_by_slug(self, slug: str, *, viewer_id: Optional[str] = None) -> Wishlist:
        model = await self.repository.get_by_slug(slug)
        if model is None:
            raise WishlistNotFoundError(slug)
        # Private wishlists are visible to their owner only.
        if model.visibility == "private" and model.owner_id != viewer_id:
            raise WishlistNotFoundError(slug)
        return self._to_wishlist(model)

    async def list_for_owner(self, owner_id: str) -> list[Wishlist]:
        return [self._to_wishlist(model) for model in await self.repository.list_by_owner(owner_id)]

    async def list_public(self, limit: int = 20, offset: int = 0) -> list[Wishlist]:
        return [self._to_wishlist(model) for model in await self.repository.list_public(limit, offset)]

    async def list_admin(self, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> list[Wishlist]:
        rows = await self.repository.list_all(status=status, limit=limit, offset=offset)
        return [self._to_wishlist(model) for model in rows]

    async def count_wishlists(self) -> int:
        return await self.repository.count_wishlists()

    async def list_occasions(self, owner_id: str) -> list[str]:
        """Distinct wishlist titles of an owner, newest first, used as occasion filters."""
        seen: list[str] = []
        for wishlist in await self.repository.list_by_owner(owner_id):
            if wishlist.title not in seen:
                seen.append(wishlist.title)
        return seen

    async def owner_analytics(self, owner_id: str, today: Optional[date] = None) -> WishlistAnalytics:
        """Dashboard figures across every wishlist and cash goal of an owner."""
        wishlists = await self.list_for_owner(owner_id)
        goals = [goal for wishlist in wishlists for goal in wishlist.goals]
        states = [wishlist_state(wishlist, today) for wishlist in wishlists]
        raised = sum(goal.amount_raised_kobo for goal in goals)
        target = sum(goal.target_amount_kobo for goal in goals)
        occasions = Counter(wishlist.occasion for wishlist in wishlists if wishlist.occasion)
        analytics = WishlistAnalytics(
            total_wishlists=len(wishlists),
            live_wishlists=states.count("live"),
            completed_wishlists=states.count("completed"),
            total_goals=len(goals),
            amount_raised_kobo=raised,
            target_amount_kobo=target,
            completion_rate=calculate_progress(raised, target),
            most_popular_occasion=occasions.most_common(1)[0][0] if occasions else None,
        )
        if wishlists:
            analytics.average_items = round(sum(len(w.items) for w in wishlists) / len(wishlists))
        return analytics

    async def update_wishlist(self, wishlist_id: str, owner_id: str, changes: dict[str, Any]) -> Wishlist:
        await self._require_owned_wishlist(wishlist_id, owner_id)
        changes = _pick(changes, WISHLIST_FIELDS)
        if "occasion" in changes:
            _check_choice("occasion", changes["occasion"], OCCASIONS)
        if "visibility" in changes:
            _check_choice("visibility", changes["visibility"], VISIBILITIES)
        if "title" in changes and not changes["title"]:
            raise WishlistValidationError("title must not be empty")
        model = await self.repository.update_wishlist(wishlist_id, changes)
        return self._to_wishlist(model)

    async def set_status(self, wishlist_id: str, status: str) -> Wishlist:
        _check_choice("status", status, WISHLIST_STATUSES)
        model = await self.repository.update_wishlist(wishlist_id, {"status": status})
        if model is None:
            raise WishlistNotFoundError(wishlist_id)
        return self._to_wishlist(model)

    async def delete_wishlist(self, wishlist_id: str, owner_id: str) -> None:
        await self._require_owned_wishlist(wishlist_id, owner_id)
        await self.repository.delete_wishlist(wishlist_id)
        logger.info("Wishlist %s deleted by %s", wishlist_id, owner_id)

    async def add_items(self, wishlist_id: str, owner_id: str, items: Sequence[ItemInput]) -> list[WishlistItem]:
        await self._require_owned_wishlist(wishlist_id, owner_id)
        for item in items:
            _validate_item_values(item.qty_total, item.unit_price_kobo)
        models = await self.repository.add_items(wishlist_id, items)
        return [self._to_item(model) for model in models]

    async def get_item(self, item_id: str) -> WishlistItem:
        model = await self.repository.get_item(item_id)
        if model is None:
            raise WishlistItemNotFoundError(item_id)
        return self._to_item(model)

    async def update_item(self, item_id: str, owner_id: str, changes: dict[str, Any]) -> WishlistItem:
        item = await self.get_item(item_id)
        await self._require_owned_wishlist(item.wishlist_id, owner_id)
        changes = _pick(changes, ITEM_FIELDS)
        qty_total = changes.get("qty_total", item.qty_total)
        _validate_item_values(qty_total, changes.get("unit_price_kobo", item.unit_price_kobo))
        if qty_total < item.qty_claimed:
            raise WishlistValidationError(
                f"qty_total cannot drop below the {item.qty_claimed} already claimed"
            )
        model = await self.repository.update_item(item_id, changes)
        return self._to_item(model)

    async def delete_item(self, item_id: str, owner_id: str) -> None:
        item = await self.get_item(item_id)
        await self._require_owned_wishlist(item.wishlist_id, owner_id)
        await self.repository.delete_item(item_id)

    async def list_owner_items(self, owner_id: str) -> list[WishlistItem]:
        return [self._to_item(model) for model in await self.repository.list_items_for_owner(owner_id)]

    async def add_goal(self, wishlist_id: str, owner_id: str, goal: GoalInput) -> Goal:
        await self._require_owned_wishlist(wishlist_id, owner_id)
        _validate_goal_target(goal.target_amount_kobo)
        models = await self.repository.add_goals(wishlist_id, [goal])
        return self._to_goal(models[0])

    async def get_goal(self, goal_id: str) -> Goal:
        model = await self.repository.get_goal(goal_id)
        if model is None:
            raise GoalNotFoundError(goal_id)
        return self._to_goal(model)

    async def update_goal(self, goal_id: str, owner_id: str, changes: dict[str, Any]) -> Goal:
        goal = await self.get_goal(goal_id)
        await self._require_owned_wishlist(goal.wishlist_id, owner_id)
        changes = _pick(changes, GOAL_FIELDS)
        if "target_amount_kobo" in changes:
            _validate_goal_target(changes["target_amount_kobo"])
        model = await self.repository.update_goal(goal_id, changes)
        return self._to_goal(model)

    async def delete_goal(self, goal_id: str, owner_id: str) -> None:
        goal = await self.get_goal(goal_id)
        await self._require_owned_wishlist(goal.wishlist_id, owner_id)
        await self.repository.delete_goal(goal_id)

    async def list_owner_goals(self, owner_id: str) -> list[Goal]:
        return [self._to_goal(model) for model in await self.repository.list_goals_for_owner(owner_id)]

    async def _require_owned_wishlist(self, wishlist_id: str, owner_id: str) -> WishlistModel:
        model = await self.repository.get_wishlist(wishlist_id)
        if model is None:
            raise WishlistNotFoundError(wishlist_id)
        if model.owner_id != owner_id:
            raise WishlistOwnershipError(wishlist_id)
        return model

    @classmethod
    def _to_wishlist(cls, model: WishlistModel) -> Wishlist:
        return Wishlist(
            id=model.id,
            owner_id=model.owner_id,
            title=model.title,
            slug=model.slug,
            occasion=model.occasion,
            wishlist_date=model.wishlist_date,
            story=model.story,
            cover_image_url=model.cover_image_url,
            visibility=model.visibility,
            status=model.status,
            created_at=model.created_at,
            updated_at=model.updated_at,
            owner_username=model.owner.username if model.owner is not None else None,
            items=[cls._to_item(item) for item in model.items],
            goals=[cls._to_goal(goal) for goal in model.goals],
        )

    @staticmethod
    def _to_item(model: WishlistItemModel) -> WishlistItem:
        return WishlistItem(
            id=model.id,
            wishlist_id=model.wishlist_id,
            name=model.name,
            description=model.description,
            unit_price_kobo=model.unit_price_kobo or 0,
            qty_total=model.qty_total or 1,
            qty_claimed=model.qty_claimed or 0,
            product_url=model.product_url,
            image_url=model.image_url,
            allow_group_gift=bool(model.allow_group_gift),
            created_at=model.created_at,
        )

    @staticmethod
    def _to_goal(model: GoalModel) -> Goal:
        return Goal(
            id=model.id,
            wishlist_id=model.wishlist_id,
            title=model.title,
            target_amount_kobo=model.target_amount_kobo or 0,
            amount_raised_kobo=model.amount_raised_kobo or 0,
            deadline=model.deadline,
            created_at=model.created_at,
        )


def _pick(changes: dict[str, Any], allowed: set[str]) -> dict[str, Any]:
    picked = {key: value for key, value in changes.items() if key in allowed}
    for key, value in picked.items():
        if value is None and key in NON_NULL_FIELDS:
            raise WishlistValidationError(f"{key} cannot be null")
    return picked


def _check_choice(name: str, value: str, choices: Sequence[str]) -> None:
    if value not in choices:
        raise WishlistValidationError(f"{name} must be one of: {', '.join(choices)}")


def _validate_item_values(qty_total: int, unit_price_kobo: int) -> None:
    if qty_total < 1:
        raise WishlistValidationError("qty_total must be at least 1")
    if unit_price_kobo < 0:
        raise WishlistValidationError("unit price cannot be negative")


def _validate_goal_target(target_amount_kobo: int) -> None:
    if target_amount_kobo <= 0:
        raise WishlistValidationError("target amount must be positive")
