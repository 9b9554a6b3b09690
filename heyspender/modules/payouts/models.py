"""Domain models for withdrawals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from heyspender.modules.wallets.ledger import WalletTotals

REQUESTED = "requested"
PROCESSING = "processing"
PAID = "paid"
FAILED = "failed"

PAYOUT_STATUSES = (REQUESTED, PROCESSING, PAID, FAILED)

PAYOUT_TRANSITIONS: dict[str, frozenset[str]] = {
    REQUESTED: frozenset({PROCESSING, FAILED}),
    PROCESSING: frozenset({PAID, FAILED}),
    PAID: frozenset(),
    FAILED: frozenset(),
}


@dataclass(slots=True)
class Payout:
    id: str
    wallet_id: str
    amount_kobo: int
    status: str
    debited: bool
    destination_bank_code: Optional[str] = None
    destination_account: Optional[str] = None
    destination_account_name: Optional[str] = None
    provider: Optional[str] = None
    provider_ref: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    account_id: Optional[str] = None
    account_username: Optional[str] = None


@dataclass(slots=True)
class ReconciliationReport:
    """Withdrawn totals of one wallet seen from the ledger and from the payouts table."""

    wallet_id: str
    account_id: str
    stored_balance_kobo: int
    ledger: WalletTotals
    payouts: WalletTotals

    @property
    def withdrawn_divergence_kobo(self) -> int:
        return self.ledger.withdrawn_kobo - self.payouts.withdrawn_kobo

    @property
    def balance_divergence_kobo(self) -> int:
        return self.stored_balance_kobo - self.ledger.balance_kobo

    @property
    def is_consistent(self) -> bool:
        return self.withdrawn_divergence_kobo == 0 and self.balance_divergence_kobo == 0
