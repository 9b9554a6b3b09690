"""Repository protocol for contributions."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from heyspender.db.models import Contribution as ContributionModel, Goal as GoalModel


class ContributionRepository(Protocol):
    async def get_goal(self, goal_id: str) -> GoalModel | None:
        ...

    async def add_to_goal(self, goal_id: str, amount_kobo: int) -> None:
        ...

    async def create(self, **fields: Any) -> ContributionModel:
        ...

    async def get(self, contribution_id: str) -> ContributionModel | None:
        ...

    async def get_by_ref(self, payment_ref: str) -> ContributionModel | None:
        ...

    async def set_status(self, contribution_id: str, status: str) -> ContributionModel:
        ...

    async def list_for_goal(self, goal_id: str, status: str | None) -> Sequence[ContributionModel]:
        ...

    async def list_all(self, status: str | None, limit: int, offset: int) -> Sequence[ContributionModel]:
        ...
