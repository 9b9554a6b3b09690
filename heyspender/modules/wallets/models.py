"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .ledger import WalletTotals


@dataclass(slots=True)
class WalletSnapshot:
    id: str
    account_id: str
    balance_kobo: int
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    wallet_id: str
    type: str
    source: Optional[str]
    category: Optional[str]
    amount_kobo: int
    description: Optional[str]
    reference: Optional[str]
    claim_id: Optional[str]
    payout_id: Optional[str]
    created_at: Optional[datetime]


@dataclass(slots=True)
class WalletSummary:
    wallet: WalletSnapshot
    totals: WalletTotals
    reserved_kobo: int = 0

    @property
    def available_kobo(self) -> int:
        """Computed balance minus payouts still waiting for review."""
        return max(self.totals.balance_kobo - self.reserved_kobo, 0)
