"""SQLAlchemy implementation for the admin audit trail."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import AuditLog


class SqlAuditRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        actor_user_id: str | None,
        action: str,
        target_table: str | None,
        target_id: str | None,
        diff: str | None,
    ) -> AuditLog:
        entry = AuditLog(
            actor_user_id=actor_user_id,
            action=action,
            target_table=target_table,
            target_id=target_id,
            diff=diff,
        )
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def list_recent(self, limit: int, offset: int, target_table: str | None = None) -> Sequence[AuditLog]:
        stmt = select(AuditLog)
        if target_table:
            stmt = stmt.where(AuditLog.target_table == target_table)
        stmt = stmt.order_by(desc(AuditLog.id)).offset(offset).limit(limit)
        result = await self._session.execute(stmt)
        return result.scalars().all()
