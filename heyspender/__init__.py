"""HeySpender wishlist and cash-goal crowdfunding service."""

__version__ = "0.1.0"
