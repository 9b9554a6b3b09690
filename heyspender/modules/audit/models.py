from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(slots=True)
class AuditEntry:
    id: int
    actor_user_id: Optional[str]
    action: str
    target_table: Optional[str]
    target_id: Optional[str]
    diff: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
