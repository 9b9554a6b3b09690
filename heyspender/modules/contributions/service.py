"""Contribution domain service"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.db.models import Contribution as ContributionModel
from heyspender.infrastructure.database.repositories.contribution_repository import SqlContributionRepository
from heyspender.modules.notifications import NotificationService
from heyspender.modules.wallets import WalletService
from heyspender.modules.wishlists.exceptions import GoalNotFoundError

from .exceptions import ContributionNotFoundError, ContributionValidationError
from .models import Contribution
from .repository import ContributionRepository

logger = logging.getLogger(__name__)


class ContributionService:
    def __init__(
        self,
        repository: ContributionRepository,
        *,
        wallets: WalletService,
        notifications: NotificationService,
    ) -> None:
        self._repository = repository
        self._wallets = wallets
        self._notifications = notifications

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ContributionService":
        return cls(
            SqlContributionRepository(session),
            wallets=WalletService.with_session(session),
            notifications=NotificationService.with_session(session),
        )

    async def create_pending(
        self,
        goal_id: str,
        *,
        amount_kobo: int,
        payment_ref: str,
        display_name: Optional[str] = None,
        is_anonymous: bool = False,
        supporter_id: Optional[str] = None,
        currency: str = "NGN",
        provider: Optional[str] = "paystack",
    ) -> Contribution:
        if amount_kobo <= 0:
            raise ContributionValidationError("amount must be positive")
        goal = await self._repository.get_goal(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        if goal.wishlist.owner_id == supporter_id:
            raise ContributionValidationError("You cannot contribute to your own goal")
        model = await self._repository.create(
            goal_id=goal_id,
            supporter_user_id=supporter_id,
            display_name=(display_name or "").strip() or None,
            is_anonymous=is_anonymous,
            amount_kobo=amount_kobo,
            currency=currency,
            payment_provider=provider,
            payment_ref=payment_ref,
            status="pending",
        )
        return self._to_domain(model)

    async def get_by_ref(self, payment_ref: str) -> Contribution:
        model = await self._repository.get_by_ref(payment_ref)
        if model is None:
            raise ContributionNotFoundError(payment_ref)
        return self._to_domain(model)

    async def mark_success(self, payment_ref: str) -> Contribution:
        """Settle a paid contribution; settling twice is a no-op."""
        model = await self._repository.get_by_ref(payment_ref)
        if model is None:
            raise ContributionNotFoundError(payment_ref)
        if model.status == "success":
            return self._to_domain(model)

        goal = model.goal
        await self._repository.add_to_goal(goal.id, model.amount_kobo)
        model = await self._repository.set_status(model.id, "success")
        owner_id = goal.wishlist.owner_id
        await self._wallets.credit(
            account_id=owner_id,
            amount_kobo=model.amount_kobo,
            source="contribution",
            description=f'Contribution to "{goal.title}" - Ref: {payment_ref}',
            reference=payment_ref,
        )
        if model.supporter_user_id:
            await self._wallets.record_sent(
                account_id=model.supporter_user_id,
                amount_kobo=model.amount_kobo,
                source="contribution_sent",
                description=f'Contribution sent to "{goal.title}" - Ref: {payment_ref}',
                reference=payment_ref,
            )
        contribution = self._to_domain(model)
        await self._notifications.notify(
            owner_id,
            "contribution_received",
            "New contribution",
            f'{contribution.public_name} contributed to "{goal.title}".',
            {"contribution_id": model.id, "amount_kobo": model.amount_kobo},
        )
        logger.info("Contribution %s settled (%d kobo to goal %s)", payment_ref, model.amount_kobo, goal.id)
        return contribution

    async def mark_failed(self, payment_ref: str) -> Contribution:
        model = await self._repository.get_by_ref(payment_ref)
        if model is None:
            raise ContributionNotFoundError(payment_ref)
        if model.status != "pending":
            return self._to_domain(model)
        logger.info("Contribution %s failed", payment_ref)
        return self._to_domain(await self._repository.set_status(model.id, "failed"))

    async def list_for_goal(self, goal_id: str, *, successful_only: bool = True) -> list[Contribution]:
        rows = await self._repository.list_for_goal(goal_id, "success" if successful_only else None)
        return [self._to_domain(row) for row in rows]

    async def list_admin(self, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> list[Contribution]:
        rows = await self._repository.list_all(status, limit, offset)
        return [self._to_domain(row) for row in rows]

    @staticmethod
    def _to_domain(model: ContributionModel) -> Contribution:
        goal = model.goal
        return Contribution(
            id=model.id,
            goal_id=model.goal_id,
            supporter_user_id=model.supporter_user_id,
            display_name=model.display_name,
            is_anonymous=bool(model.is_anonymous),
            amount_kobo=model.amount_kobo,
            currency=model.currency,
            payment_provider=model.payment_provider,
            payment_ref=model.payment_ref,
            status=model.status,
            created_at=model.created_at,
            goal_title=goal.title if goal is not None else None,
            owner_id=goal.wishlist.owner_id if goal is not None and goal.wishlist is not None else None,
        )
