"""Repository protocol for claims."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from heyspender.db.models import Claim as ClaimModel, Reminder as ReminderModel, WishlistItem as WishlistItemModel


class ClaimRepository(Protocol):
    async def get_item(self, item_id: str) -> WishlistItemModel | None:
        ...

    async def adjust_item_claimed(self, item_id: str, delta: int) -> bool:
        ...

    async def create_claim(self, **fields: Any) -> ClaimModel:
        ...

    async def get_claim(self, claim_id: str) -> ClaimModel | None:
        ...

    async def list_by_supporter(self, user_id: str) -> Sequence[ClaimModel]:
        ...

    async def list_for_owner(self, owner_id: str) -> Sequence[ClaimModel]:
        ...

    async def list_overdue(self, now: datetime, statuses: Sequence[str]) -> Sequence[ClaimModel]:
        ...

    async def update_claim(self, claim_id: str, changes: dict[str, Any]) -> ClaimModel | None:
        ...

    async def delete_claim(self, claim_id: str) -> bool:
        ...

    async def add_reminder(self, **fields: Any) -> ReminderModel:
        ...

    async def list_due_reminders(self, now: datetime, limit: int) -> Sequence[ReminderModel]:
        ...

    async def update_reminder(self, reminder_id: str, changes: dict[str, Any]) -> None:
        ...
