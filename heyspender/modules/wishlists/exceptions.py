"""Wishlist domain specific exceptions."""


class WishlistError(Exception):
    """Base class for wishlist, item and goal errors."""


class WishlistNotFoundError(WishlistError):
    """Raised when a wishlist cannot be found by id or slug."""


class WishlistItemNotFoundError(WishlistError):
    """Raised when a wishlist item cannot be found."""


class GoalNotFoundError(WishlistError):
    """Raised when a cash goal cannot be found."""


class WishlistOwnershipError(WishlistError):
    """Raised when an account edits a wishlist it does not own."""


class WishlistValidationError(WishlistError):
    """Raised when wishlist, item or goal values break a business rule."""
