"""Domain models for wishlists, their items and cash goals."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

OCCASIONS = ("birthday", "wedding", "graduation", "burial", "other")
VISIBILITIES = ("public", "unlisted", "private")
WISHLIST_STATUSES = ("active", "archived", "flagged")


@dataclass(slots=True)
class WishlistItem:
    id: str
    wishlist_id: str
    name: str
    description: Optional[str]
    unit_price_kobo: int
    qty_total: int
    qty_claimed: int
    product_url: Optional[str]
    image_url: Optional[str]
    allow_group_gift: bool
    created_at: Optional[datetime] = None

    @property
    def qty_available(self) -> int:
        return max(self.qty_total - self.qty_claimed, 0)

    @property
    def is_fully_claimed(self) -> bool:
        return self.qty_claimed >= self.qty_total


@dataclass(slots=True)
class Goal:
    id: str
    wishlist_id: str
    title: str
    target_amount_kobo: int
    amount_raised_kobo: int
    deadline: Optional[date]
    created_at: Optional[datetime] = None

    @property
    def is_reached(self) -> bool:
        return self.target_amount_kobo > 0 and self.amount_raised_kobo >= self.target_amount_kobo


@dataclass(slots=True)
class Wishlist:
    id: str
    owner_id: str
    title: str
    slug: str
    occasion: str
    wishlist_date: Optional[date]
    story: Optional[str]
    cover_image_url: Optional[str]
    visibility: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner_username: Optional[str] = None
    items: list[WishlistItem] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)


@dataclass(slots=True)
class ItemInput:
    name: str
    unit_price_kobo: int = 0
    qty_total: int = 1
    description: Optional[str] = None
    product_url: Optional[str] = None
    image_url: Optional[str] = None
    allow_group_gift: bool = False


@dataclass(slots=True)
class GoalInput:
    title: str
    target_amount_kobo: int
    deadline: Optional[date] = None


@dataclass(slots=True)
class WishlistAnalytics:
    total_wishlists: int = 0
    live_wishlists: int = 0
    completed_wishlists: int = 0
    total_goals: int = 0
    amount_raised_kobo: int = 0
    target_amount_kobo: int = 0
    completion_rate: float = 0.0
    average_items: int = 0
    most_popular_occasion: Optional[str] = None
