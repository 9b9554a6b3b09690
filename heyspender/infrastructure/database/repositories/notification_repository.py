"""SQLAlchemy implementation for notifications."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import Notification


class SqlNotificationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        user_id: str | None,
        type: str,
        title: str | None,
        message: str | None,
        payload: str | None,
    ) -> Notification:
        model = Notification(user_id=user_id, type=type, title=title, message=message, payload=payload)
        self._session.add(model)
        await self._session.flush()
        return model

    async def list_for_user(self, user_id: str, unread_only: bool, limit: int) -> Sequence[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.status == "unread")
        stmt = stmt.order_by(desc(Notification.created_at)).limit(limit)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def set_status(self, notification_id: str, user_id: str, status: str) -> Notification | None:
        model = await self._session.get(Notification, notification_id)
        if model is None or model.user_id != user_id:
            return None
        model.status = status
        await self._session.flush()
        return model
