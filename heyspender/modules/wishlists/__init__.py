"""Wishlist domain exports"""

from .exceptions import (
    GoalNotFoundError,
    WishlistError,
    WishlistItemNotFoundError,
    WishlistNotFoundError,
    WishlistOwnershipError,
    WishlistValidationError,
)
from .models import Goal, GoalInput, ItemInput, Wishlist, WishlistAnalytics, WishlistItem
from .service import WishlistService, slugify, wishlist_state

__all__ = [
    "Goal",
    "GoalInput",
    "GoalNotFoundError",
    "ItemInput",
    "Wishlist",
    "WishlistAnalytics",
    "WishlistError",
    "WishlistItem",
    "WishlistItemNotFoundError",
    "WishlistNotFoundError",
    "WishlistOwnershipError",
    "WishlistService",
    "WishlistValidationError",
    "slugify",
    "wishlist_state",
]
