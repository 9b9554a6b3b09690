"""Audit trail for admin mutations."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import AuditLog as AuditLogModel
from heyspender.infrastructure.database.repositories.audit_repository import SqlAuditRepository

from .models import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, repository: AuditRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AuditService":
        return cls(SqlAuditRepository(session))

    async def record(
        self,
        actor_user_id: Optional[str],
        action: str,
        *,
        target_table: Optional[str] = None,
        target_id: Optional[str] = None,
        diff: Optional[dict[str, Any]] = None,
    ) -> AuditEntry:
        model = await self._repository.add(
            actor_user_id=actor_user_id,
            action=action,
            target_table=target_table,
            target_id=target_id,
            diff=json.dumps(diff, default=str) if diff else None,
        )
        logger.info("Audit: %s by %s on %s/%s", action, actor_user_id, target_table, target_id)
        return self._to_domain(model)

    async def list_recent(
        self, limit: int = 50, offset: int = 0, target_table: Optional[str] = None
    ) -> list[AuditEntry]:
        rows = await self._repository.list_recent(limit, offset, target_table)
        return [self._to_domain(row) for row in rows]

    @staticmethod
    def _to_domain(model: AuditLogModel) -> AuditEntry:
        return AuditEntry(
            id=model.id,
            actor_user_id=model.actor_user_id,
            action=model.action,
            target_table=model.target_table,
            target_id=model.target_id,
            diff=json.loads(model.diff) if model.diff else {},
            created_at=model.created_at,
        )
