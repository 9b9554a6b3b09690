"""Wallet domain specific exceptions."""


class WalletError(Exception):
    """Base class for wallet errors."""


class WalletNotFoundError(WalletError):
    """Raised when an account has no wallet and one cannot be created."""


class InsufficientBalanceError(WalletError):
    """Raised when an amount exceeds the wallet's available balance."""
