"""Domain models for payment intents and checkout responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

CASH_PAYMENT = "cash_payment"
CONTRIBUTION = "contribution"
INTENT_KINDS = (CASH_PAYMENT, CONTRIBUTION)
INTENT_STATUSES = ("pending", "success", "failed", "cancelled")


@dataclass(slots=True)
class PaymentIntent:
    id: str
    reference: str
    kind: str
    amount_kobo: int
    currency: str
    email: str
    status: str
    payer_id: Optional[str] = None
    recipient_id: Optional[str] = None
    claim_id: Optional[str] = None
    contribution_id: Optional[str] = None
    authorization_url: Optional[str] = None
    gateway_ref: Optional[str] = None
    meta: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    settled_at: Optional[datetime] = None

    @property
    def is_settled(self) -> bool:
        return self.status == "success"


@dataclass(slots=True)
class CheckoutResult:
    """Either a hosted checkout URL or instructions for settling by hand."""

    intent: PaymentIntent
    mode: str  # "gateway" or "manual"
    authorization_url: Optional[str] = None
    public_key: Optional[str] = None
    instructions: Optional[str] = None
