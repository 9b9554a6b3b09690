"""Repository protocol for payment intents."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from heyspender.db.models import PaymentIntent as PaymentIntentModel


class PaymentIntentRepository(Protocol):
    async def create(self, **fields: Any) -> PaymentIntentModel:
        ...

    async def get_by_reference(self, reference: str) -> PaymentIntentModel | None:
        ...

    async def update(self, intent_id: str, changes: dict[str, Any]) -> PaymentIntentModel:
        ...

    async def claim_for_settlement(self, intent_id: str, changes: dict[str, Any]) -> bool:
        ...

    async def list_intents(self, status: str | None, limit: int, offset: int) -> Sequence[PaymentIntentModel]:
        ...
