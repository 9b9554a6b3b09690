"""Payment gateway contract used by the payment and payout services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Protocol


@dataclass(slots=True)
class CheckoutSession:
    reference: str
    authorization_url: str
    access_code: Optional[str] = None


@dataclass(slots=True)
class TransactionVerification:
    reference: str
    status: str
    amount_kobo: int
    currency: str
    gateway_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_successful(self) -> bool:
        return self.status == "success"


@dataclass(slots=True)
class TransferResult:
    reference: str
    transfer_code: Optional[str]
    status: str


class PaymentGateway(Protocol):
    name: str

    async def initialize_transaction(
        self,
        *,
        email: str,
        amount_kobo: int,
        reference: str,
        currency: str,
        callback_url: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> CheckoutSession:
        ...

    async def verify_transaction(self, reference: str) -> TransactionVerification:
        ...

    async def create_transfer_recipient(
        self, *, name: str, account_number: str, bank_code: str, currency: str
    ) -> str:
        ...

    async def initiate_transfer(
        self, *, amount_kobo: int, recipient_code: str, reference: str, reason: str
    ) -> TransferResult:
        ...
