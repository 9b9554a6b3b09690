"""Wallet ledger rules shared by every wallet view.

Transactions carry a free-text ``source`` and ``description``.  The category
of a transaction decides how it counts towards wallet totals:

* every credit adds to *received* and to the balance;
* only debits categorized as ``payout`` add to *withdrawn* and reduce the
  balance.  Other debits (cash or contributions a user sent to someone else)
  are funded outside the wallet and never touch the balance.

New rows get their category stored at insert time; :func:`categorize` falls
back to the substring rules for rows written without one.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol


class TransactionCategory(str, enum.Enum):
    SENT = "sent"
    CONTRIBUTION = "contribution"
    PAYOUT = "payout"
    REFUND = "refund"
    WISHLIST_PURCHASE = "wishlist_purchase"
    OTHER = "other"


CREDIT = "credit"
DEBIT = "debit"

# First match wins: "contribution_sent" must be tested before "contribution".
_SOURCE_RULES: tuple[tuple[tuple[str, ...], TransactionCategory], ...] = (
    (("contribution_sent", "cash_sent", "sent_item"), TransactionCategory.SENT),
    (("contribution",), TransactionCategory.CONTRIBUTION),
    (("payout", "withdraw"), TransactionCategory.PAYOUT),
    (("refund",), TransactionCategory.REFUND),
    (("wishlist", "cash payment"), TransactionCategory.WISHLIST_PURCHASE),
)


# Sources written by this service; their category never depends on free text.
KNOWN_SOURCES: dict[str, TransactionCategory] = {
    "cash_payment": TransactionCategory.WISHLIST_PURCHASE,
    "contribution": TransactionCategory.CONTRIBUTION,
    "cash_sent": TransactionCategory.SENT,
    "contribution_sent": TransactionCategory.SENT,
    "payout": TransactionCategory.PAYOUT,
    "refund": TransactionCategory.REFUND,
}


class LedgerEntry(Protocol):
    type: str
    amount_kobo: int
    source: Optional[str]
    description: Optional[str]
    category: Optional[str]


class PayoutEntry(Protocol):
    amount_kobo: int
    debited: bool


@dataclass(frozen=True, slots=True)
class WalletTotals:
    received_kobo: int = 0
    withdrawn_kobo: int = 0

    @property
    def balance_kobo(self) -> int:
        return self.received_kobo - self.withdrawn_kobo


def normalize_source(source: Optional[str], description: Optional[str], tx_type: str) -> TransactionCategory:
    text = f"{source or ''} {description or ''}".lower()
    for needles, category in _SOURCE_RULES:
        if any(needle in text for needle in needles):
            return category
    if tx_type == CREDIT:
        return TransactionCategory.WISHLIST_PURCHASE
    return TransactionCategory.OTHER


def category_for_source(source: Optional[str], description: Optional[str], tx_type: str) -> TransactionCategory:
    """Category stored on a new row: known sources map directly, anything else is sniffed."""
    known = KNOWN_SOURCES.get((source or "").lower())
    if known is not None:
        return known
    return normalize_source(source, description, tx_type)


def categorize(entry: LedgerEntry) -> TransactionCategory:
    if entry.category:
        try:
            return TransactionCategory(entry.category)
        except ValueError:
            pass
    return normalize_source(entry.source, entry.description, entry.type)


def summarize(transactions: Iterable[LedgerEntry]) -> WalletTotals:
    """Totals derived from the transaction ledger alone."""
    received = 0
    withdrawn = 0
    for entry in transactions:
        amount = abs(int(entry.amount_kobo or 0))
        if entry.type == CREDIT:
            received += amount
        elif categorize(entry) is TransactionCategory.PAYOUT:
            withdrawn += amount
    return WalletTotals(received_kobo=received, withdrawn_kobo=withdrawn)


def summarize_with_payouts(transactions: Iterable[LedgerEntry], payouts: Iterable[PayoutEntry]) -> WalletTotals:
    """Totals where *withdrawn* comes from the payouts table instead of the ledger.

    Only payouts whose debit has been written count, so a payout still waiting
    for review does not reduce the balance here either.
    """
    received = sum(abs(int(entry.amount_kobo or 0)) for entry in transactions if entry.type == CREDIT)
    withdrawn = sum(int(payout.amount_kobo or 0) for payout in payouts if payout.debited)
    return WalletTotals(received_kobo=received, withdrawn_kobo=withdrawn)


def withdrawn_divergence(transactions: Iterable[LedgerEntry], payouts: Iterable[PayoutEntry]) -> int:
    """Ledger-derived minus payouts-derived withdrawals; zero when both agree."""
    transactions = list(transactions)
    return summarize(transactions).withdrawn_kobo - summarize_with_payouts(transactions, payouts).withdrawn_kobo


def calculate_progress(raised: float, target: float) -> float:
    """Goal progress in percent, clamped to [0, 100]."""
    if not target or target <= 0:
        return 0.0
    progress = (raised or 0) / target * 100
    return float(min(max(progress, 0.0), 100.0))


__all__ = [
    "CREDIT",
    "DEBIT",
    "LedgerEntry",
    "PayoutEntry",
    "TransactionCategory",
    "WalletTotals",
    "calculate_progress",
    "categorize",
    "category_for_source",
    "KNOWN_SOURCES",
    "normalize_source",
    "summarize",
    "summarize_with_payouts",
    "withdrawn_divergence",
]
