"""Domain models for in-app notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(slots=True)
class Notification:
    id: str
    user_id: Optional[str]
    type: str
    title: Optional[str]
    message: Optional[str]
    status: str
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def is_unread(self) -> bool:
        return self.status == "unread"
