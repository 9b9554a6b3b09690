"""Stores in-app notifications; delivery channels are out of scope, rows are only logged."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import Notification as NotificationModel
from heyspender.infrastructure.database.repositories.notification_repository import SqlNotificationRepository

from .exceptions import NotificationNotFoundError
from .models import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, repository: NotificationRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "NotificationService":
        return cls(SqlNotificationRepository(session))

    async def notify(
        self,
        user_id: Optional[str],
        type: str,
        title: str,
        message: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Notification:
        model = await self._repository.add(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            payload=json.dumps(payload, default=str) if payload else None,
        )
        logger.info("Notification %s queued for %s: %s", type, user_id, title)
        return self._to_domain(model)

    async def notify_many(
        self,
        user_ids: Iterable[str],
        type: str,
        title: str,
        message: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> list[Notification]:
        return [await self.notify(user_id, type, title, message, payload) for user_id in user_ids]

    async def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> list[Notification]:
        rows = await self._repository.list_for_user(user_id, unread_only, limit)
        return [self._to_domain(row) for row in rows]

    async def mark_read(self, notification_id: str, user_id: str) -> Notification:
        model = await self._repository.set_status(notification_id, user_id, "read")
        if model is None:
            raise NotificationNotFoundError(notification_id)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            status=model.status,
            payload=json.loads(model.payload) if model.payload else {},
            created_at=model.created_at,
        )
