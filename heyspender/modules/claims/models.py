"""Domain models for claims and purchase reminders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

REMINDER_CHANNELS = ("email", "sms", "whatsapp")


@dataclass(slots=True)
class Claim:
    id: str
    wishlist_item_id: str
    supporter_user_id: Optional[str]
    supporter_contact: str
    note: Optional[str]
    status: str
    amount_paid_kobo: int
    expire_at: datetime
    scheduled_purchase_date: Optional[date] = None
    reminder_channel: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Denormalized item and wishlist details for listings.
    item_name: Optional[str] = None
    unit_price_kobo: int = 0
    wishlist_id: Optional[str] = None
    wishlist_title: Optional[str] = None
    wishlist_slug: Optional[str] = None
    wishlist_date: Optional[date] = None
    owner_id: Optional[str] = None
    owner_username: Optional[str] = None

    @property
    def is_fully_paid(self) -> bool:
        return self.unit_price_kobo > 0 and self.amount_paid_kobo >= self.unit_price_kobo

    @property
    def amount_remaining_kobo(self) -> int:
        return max(self.unit_price_kobo - self.amount_paid_kobo, 0)


@dataclass(slots=True)
class ClaimStats:
    total: int = 0
    value_kobo: int = 0
    paid_kobo: int = 0
    by_status: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class Reminder:
    id: str
    claim_id: str
    contact: str
    channel: str
    schedule_at: datetime
    status: str
    sent_at: Optional[datetime] = None


@dataclass(slots=True)
class CashPaymentResult:
    claim: Claim
    fulfilled: bool
    transaction_id: str
