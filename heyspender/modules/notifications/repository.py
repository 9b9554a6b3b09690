"""Repository protocol for notifications."""

from __future__ import annotations

from typing import Protocol, Sequence

from heyspender.db.models import Notification as NotificationModel


class NotificationRepository(Protocol):
    async def add(
        self,
        *,
        user_id: str | None,
        type: str,
        title: str | None,
        message: str | None,
        payload: str | None,
    ) -> NotificationModel:
        ...

    async def list_for_user(self, user_id: str, unread_only: bool, limit: int) -> Sequence[NotificationModel]:
        ...

    async def set_status(self, notification_id: str, user_id: str, status: str) -> NotificationModel | None:
        ...
