"""Domain models for cash-goal contributions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

ANONYMOUS_NAME = "Anonymous Spender"
CONTRIBUTION_STATUSES = ("pending", "success", "failed")


@dataclass(slots=True)
class Contribution:
    id: str
    goal_id: str
    supporter_user_id: Optional[str]
    display_name: Optional[str]
    is_anonymous: bool
    amount_kobo: int
    currency: str
    payment_provider: Optional[str]
    payment_ref: Optional[str]
    status: str
    created_at: Optional[datetime] = None
    goal_title: Optional[str] = None
    owner_id: Optional[str] = None

    @property
    def public_name(self) -> str:
        if self.is_anonymous or not self.display_name:
            return ANONYMOUS_NAME
        return self.display_name
