"""Per-request correlation id."""
from contextvars import ContextVar
from typing import Optional

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_cid() -> Optional[str]:
    return _correlation_id.get()


def set_cid(value: Optional[str]) -> None:
    _correlation_id.set(value)
