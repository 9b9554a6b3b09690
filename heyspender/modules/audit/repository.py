"""Repository protocol for audit entries."""

from __future__ import annotations

from typing import Protocol, Sequence

from heyspender.db.models import AuditLog as AuditLogModel


class AuditRepository(Protocol):
    async def add(
        self,
        *,
        actor_user_id: str | None,
        action: str,
        target_table: str | None,
        target_id: str | None,
        diff: str | None,
    ) -> AuditLogModel:
        ...

    async def list_recent(self, limit: int, offset: int, target_table: str | None = None) -> Sequence[AuditLogModel]:
        ...
