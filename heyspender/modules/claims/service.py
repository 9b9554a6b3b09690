"""Claim domain service: claiming items, cash payments and purchase reminders."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.core.clock import as_utc, utcnow
from heyspender.core.config import get_settings
from heyspender.db.models import Claim as ClaimModel, Reminder as ReminderModel
from heyspender.infrastructure.database.repositories.claim_repository import SqlClaimRepository
from heyspender.modules.accounts import Account, AccountCreateInput, AccountService
from heyspender.modules.notifications import NotificationService
from heyspender.modules.wallets import WalletService
from heyspender.modules.wishlists.exceptions import WishlistItemNotFoundError

from . import state
from .exceptions import (
    ClaimNotFoundError,
    ClaimOwnershipError,
    ClaimValidationError,
    ItemFullyClaimedError,
)
from .models import REMINDER_CHANNELS, CashPaymentResult, Claim, ClaimStats, Reminder
from .repository import ClaimRepository

logger = logging.getLogger(__name__)

# Statuses in which a claim holds one unit of the item's quantity.
HOLDING_STATUSES = (state.PENDING, state.CONFIRMED, state.FULFILLED)


class ClaimService:
    def __init__(
        self,
        repository: ClaimRepository,
        *,
        accounts: AccountService,
        wallets: WalletService,
        notifications: NotificationService,
        expiry_days: int = 30,
    ) -> None:
        self._repository = repository
        self._accounts = accounts
        self._wallets = wallets
        self._notifications = notifications
        self._expiry_days = expiry_days

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ClaimService":
        return cls(
            SqlClaimRepository(session),
            accounts=AccountService.with_session(session),
            wallets=WalletService.with_session(session),
            notifications=NotificationService.with_session(session),
            expiry_days=get_settings().claims.expiry_days,
        )

    async def claim_item(
        self,
        item_id: str,
        *,
        supporter: Account,
        note: Optional[str] = None,
        contact: Optional[str] = None,
    ) -> Claim:
        item = await self._repository.get_item(item_id)
        if item is None:
            raise WishlistItemNotFoundError(item_id)
        if item.wishlist.owner_id == supporter.id:
            raise ClaimValidationError("You cannot claim items on your own wishlist")
        if item.wishlist.status != "active":
            raise ClaimValidationError("This wishlist is not accepting claims")
        if not await self._repository.adjust_item_claimed(item_id, 1):
            raise ItemFullyClaimedError(item_id)

        model = await self._repository.create_claim(
            wishlist_item_id=item_id,
            supporter_user_id=supporter.id,
            supporter_contact=contact or supporter.email or supporter.username,
            note=note,
            status=state.PENDING,
            amount_paid_kobo=0,
            expire_at=utcnow() + timedelta(days=self._expiry_days),
        )
        logger.info("Item %s claimed by %s (claim %s)", item_id, supporter.id, model.id)
        await self._notifications.notify(
            item.wishlist.owner_id,
            "item_claimed",
            "Someone claimed an item",
            f'"{item.name}" on {item.wishlist.title} was claimed.',
            {"claim_id": model.id, "item_id": item_id},
        )
        return await self.get_claim(model.id)

    async def claim_item_as_guest(
        self,
        item_id: str,
        *,
        email: str,
        username: str,
        password: str,
        full_name: str = "",
        note: Optional[str] = None,
    ) -> tuple[Account, Claim]:
        """Create a lightweight, unverified account for an anonymous spender and claim with it."""
        account = await self._accounts.create_account(
            AccountCreateInput(username=username, password=password, full_name=full_name, email=email)
        )
        claim = await self.claim_item(item_id, supporter=account, note=note, contact=email)
        return account, claim

    async def get_claim(self, claim_id: str) -> Claim:
        model = await self._repository.get_claim(claim_id)
        if model is None:
            raise ClaimNotFoundError(claim_id)
        return self._to_domain(model)

    async def list_user_claims(self, user_id: str) -> list[Claim]:
        return [self._to_domain(model) for model in await self._repository.list_by_supporter(user_id)]

    async def list_owner_claims(self, owner_id: str) -> list[Claim]:
        return [self._to_domain(model) for model in await self._repository.list_for_owner(owner_id)]

    async def claim_stats(self, user_id: str, now: Optional[datetime] = None) -> ClaimStats:
        stats = ClaimStats()
        for claim in await self.list_user_claims(user_id):
            status = state.effective_status(claim.status, claim.expire_at, now)
            stats.total += 1
            stats.by_status[status] = stats.by_status.get(status, 0) + 1
            if status != state.CANCELLED:
                stats.value_kobo += claim.unit_price_kobo
            stats.paid_kobo += claim.amount_paid_kobo
        return stats

    async def update_status(self, claim_id: str, actor_id: str, target: str) -> Claim:
        claim = await self.get_claim(claim_id)
        if actor_id not in (claim.supporter_user_id, claim.owner_id):
            raise ClaimOwnershipError(claim_id)
        current = state.effective_status(claim.status, claim.expire_at)
        state.ensure_transition(current, target)
        return await self._apply_status(claim, target)

    async def expire_overdue(self, now: Optional[datetime] = None) -> int:
        """Mark open claims past ``expire_at`` as expired and release their units."""
        now = now or utcnow()
        expired = 0
        for model in await self._repository.list_overdue(now, state.OPEN_STATUSES):
            claim = self._to_domain(model)
            state.ensure_transition(claim.status, state.EXPIRED)
            await self._apply_status(claim, state.EXPIRED)
            expired += 1
        if expired:
            logger.info("Expired %d overdue claims", expired)
        return expired

    async def remove_claim(self, claim_id: str, actor_id: str) -> None:
        """Delete a claim and give its unit back to the item.

        Runs in the caller's unit of work.  When the delete fails the
        decrement is reverted before the error propagates.
        """
        claim = await self.get_claim(claim_id)
        if actor_id != claim.supporter_user_id:
            raise ClaimOwnershipError(claim_id)

        released = False
        if claim.status in HOLDING_STATUSES:
            released = await self._repository.adjust_item_claimed(claim.wishlist_item_id, -1)
        try:
            deleted = await self._repository.delete_claim(claim_id)
            if not deleted:
                raise ClaimNotFoundError(claim_id)
        except Exception:
            if released:
                logger.warning("Claim %s delete failed, restoring qty_claimed on %s", claim_id, claim.wishlist_item_id)
                await self._repository.adjust_item_claimed(claim.wishlist_item_id, 1)
            raise
        logger.info("Claim %s removed by %s", claim_id, actor_id)

    async def record_cash_payment(
        self,
        claim_id: str,
        *,
        amount_kobo: int,
        reference: str,
        sender_id: Optional[str] = None,
        collected: bool = False,
    ) -> CashPaymentResult:
        """Apply a cash payment to a claim and credit the wishlist owner.

        ``collected`` marks money the gateway or an admin already holds: it is
        credited even when the claim closed in the meantime, without moving
        the claim's status.
        """
        if amount_kobo <= 0:
            raise ClaimValidationError("amount must be positive")
        claim = await self.get_claim(claim_id)
        current = state.effective_status(claim.status, claim.expire_at)
        is_holding = current in HOLDING_STATUSES
        if not is_holding and not collected:
            raise ClaimValidationError(f"Cannot pay towards a {current} claim")
        if not is_holding:
            logger.warning("Payment %s arrived for %s claim %s; crediting owner only", reference, current, claim_id)

        paid = claim.amount_paid_kobo + amount_kobo
        changes: dict[str, object] = {"amount_paid_kobo": paid}
        fulfilled = is_holding and claim.unit_price_kobo > 0 and paid >= claim.unit_price_kobo
        if fulfilled and current != state.FULFILLED:
            state.ensure_transition(current, state.FULFILLED)
            changes["status"] = state.FULFILLED
        model = await self._repository.update_claim(claim_id, changes)

        tx = await self._wallets.credit(
            account_id=claim.owner_id,
            amount_kobo=amount_kobo,
            source="cash_payment",
            description=f'Cash payment for "{claim.item_name}" - Ref: {reference}',
            reference=reference,
            claim_id=claim_id,
        )
        if sender_id:
            await self._wallets.record_sent(
                account_id=sender_id,
                amount_kobo=amount_kobo,
                source="cash_sent",
                description=f'Cash sent for "{claim.item_name}" - Ref: {reference}',
                reference=reference,
                claim_id=claim_id,
            )
        await self._notifications.notify(
            claim.owner_id,
            "cash_received",
            "You received cash",
            f'A spender sent cash for "{claim.item_name}".',
            {"claim_id": claim_id, "amount_kobo": amount_kobo, "reference": reference},
        )
        logger.info("Cash payment %s of %d kobo recorded on claim %s", reference, amount_kobo, claim_id)
        return CashPaymentResult(claim=self._to_domain(model), fulfilled=fulfilled, transaction_id=tx.id)

    async def set_reminder(
        self,
        claim_id: str,
        actor_id: str,
        *,
        schedule_at: datetime,
        channel: str = "email",
        contact: Optional[str] = None,
    ) -> Reminder:
        claim = await self.get_claim(claim_id)
        if actor_id != claim.supporter_user_id:
            raise ClaimOwnershipError(claim_id)
        if channel not in REMINDER_CHANNELS:
            raise ClaimValidationError(f"channel must be one of: {', '.join(REMINDER_CHANNELS)}")
        schedule_at = as_utc(schedule_at)
        if schedule_at <= utcnow():
            raise ClaimValidationError("Reminder must be scheduled in the future")
        if schedule_at > as_utc(claim.expire_at):
            raise ClaimValidationError("Reminder cannot be later than the claim expiry")

        await self._repository.update_claim(
            claim_id,
            {"scheduled_purchase_date": schedule_at.date(), "reminder_channel": channel},
        )
        model = await self._repository.add_reminder(
            claim_id=claim_id,
            contact=contact or claim.supporter_contact,
            channel=channel,
            schedule_at=schedule_at,
            status="queued",
        )
        return self._to_reminder(model)

    async def dispatch_due_reminders(self, now: Optional[datetime] = None, limit: int = 100) -> int:
        """Turn due reminders into notifications; reminders of closed claims are marked failed."""
        now = now or utcnow()
        sent = 0
        for reminder in await self._repository.list_due_reminders(now, limit):
            model = await self._repository.get_claim(reminder.claim_id)
            if model is None or model.status not in state.OPEN_STATUSES:
                await self._repository.update_reminder(reminder.id, {"status": "failed"})
                continue
            claim = self._to_domain(model)
            await self._notifications.notify(
                claim.supporter_user_id,
                "purchase_reminder",
                "Purchase reminder",
                f'Don\'t forget to purchase "{claim.item_name}" from {claim.owner_username}\'s wishlist.',
                {"claim_id": claim.id, "channel": reminder.channel, "contact": reminder.contact},
            )
            await self._repository.update_reminder(reminder.id, {"status": "sent", "sent_at": now})
            sent += 1
        return sent

    async def _apply_status(self, claim: Claim, target: str) -> Claim:
        model = await self._repository.update_claim(claim.id, {"status": target})
        if claim.status in HOLDING_STATUSES and target not in HOLDING_STATUSES:
            await self._repository.adjust_item_claimed(claim.wishlist_item_id, -1)
        logger.info("Claim %s moved %s -> %s", claim.id, claim.status, target)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: ClaimModel) -> Claim:
        item = model.item
        wishlist = item.wishlist if item is not None else None
        owner = wishlist.owner if wishlist is not None else None
        return Claim(
            id=model.id,
            wishlist_item_id=model.wishlist_item_id,
            supporter_user_id=model.supporter_user_id,
            supporter_contact=model.supporter_contact,
            note=model.note,
            status=model.status,
            amount_paid_kobo=model.amount_paid_kobo or 0,
            expire_at=model.expire_at,
            scheduled_purchase_date=model.scheduled_purchase_date,
            reminder_channel=model.reminder_channel,
            created_at=model.created_at,
            updated_at=model.updated_at,
            item_name=item.name if item is not None else None,
            unit_price_kobo=(item.unit_price_kobo or 0) if item is not None else 0,
            wishlist_id=wishlist.id if wishlist is not None else None,
            wishlist_title=wishlist.title if wishlist is not None else None,
            wishlist_slug=wishlist.slug if wishlist is not None else None,
            wishlist_date=wishlist.wishlist_date if wishlist is not None else None,
            owner_id=wishlist.owner_id if wishlist is not None else None,
            owner_username=owner.username if owner is not None else None,
        )

    @staticmethod
    def _to_reminder(model: ReminderModel) -> Reminder:
        return Reminder(
            id=model.id,
            claim_id=model.claim_id,
            contact=model.contact,
            channel=model.channel,
            schedule_at=model.schedule_at,
            status=model.status,
            sent_at=model.sent_at,
        )
