"""Wallet domain exports"""

from . import ledger
from .exceptions import InsufficientBalanceError, WalletError, WalletNotFoundError
from .ledger import TransactionCategory, WalletTotals, calculate_progress, categorize, summarize
from .models import WalletSnapshot, WalletSummary, WalletTransactionRecord
from .service import WalletService

__all__ = [
    "InsufficientBalanceError",
    "TransactionCategory",
    "WalletError",
    "WalletNotFoundError",
    "WalletService",
    "WalletSnapshot",
    "WalletSummary",
    "WalletTotals",
    "WalletTransactionRecord",
    "calculate_progress",
    "categorize",
    "ledger",
    "summarize",
]
