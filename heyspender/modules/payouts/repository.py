"""Repository protocol for payouts."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from heyspender.db.models import Payout as PayoutModel


class PayoutRepository(Protocol):
    async def create(self, **fields: Any) -> PayoutModel:
        ...

    async def get(self, payout_id: str) -> PayoutModel | None:
        ...

    async def transition(self, payout_id: str, from_status: str, changes: dict[str, Any]) -> bool:
        ...

    async def update(self, payout_id: str, changes: dict[str, Any]) -> PayoutModel:
        ...

    async def list_by_wallet(self, wallet_id: str) -> Sequence[PayoutModel]:
        ...

    async def list_all(self, status: str | None, limit: int, offset: int) -> Sequence[PayoutModel]:
        ...

    async def count_by_status(self, status: str) -> int:
        ...
