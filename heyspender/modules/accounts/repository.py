"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import Account


class AccountRepository(Protocol):
    """Abstract repository interface for account persistence."""

    async def get_by_id(self, account_id: str) -> Account | None:
        ...

    async def get_by_username(self, username: str) -> Account | None:
        ...

    async def get_by_email(self, email: str) -> Account | None:
        ...

    async def list_accounts(self, *, role: str | None = None, active_only: bool = False) -> Sequence[Account]:
        ...

    async def count_accounts(self) -> int:
        ...

    async def create_account(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: str,
        email: str | None,
        phone: str | None,
        is_active: bool,
    ) -> Account:
        ...

    async def update_account(
        self,
        account_id: str,
        *,
        full_name: str,
        email: str | None,
        phone: str | None,
        is_active: bool | None = None,
        role: str | None = None,
        password_hash: str | None = None,
    ) -> Account:
        ...

    async def delete_account(self, account_id: str) -> bool:
        ...

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        ...

    async def mark_email_verified(self, account_id: str, timestamp: datetime) -> Account:
        ...
