from datetime import timedelta

import pytest
from conftest import make_account, make_wishlist

from heyspender.core.clock import utcnow
from heyspender.infrastructure.database.repositories.claim_repository import SqlClaimRepository
from heyspender.modules.accounts import AccountService
from heyspender.modules.claims import (
    ClaimOwnershipError,
    ClaimService,
    ClaimValidationError,
    InvalidClaimTransitionError,
    ItemFullyClaimedError,
)
from heyspender.modules.notifications import NotificationService
from heyspender.modules.wallets import WalletService
from heyspender.modules.wishlists import WishlistService


class BrokenDeleteRepository(SqlClaimRepository):
    async def delete_claim(self, claim_id: str) -> bool:
        raise RuntimeError("database went away")


async def _item(db, item_id):
    return await WishlistService.with_session(db).get_item(item_id)


async def test_claim_reserves_a_unit_and_notifies_owner(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    wishlist = await make_wishlist(session, owner.id, qty_total=2)
    item = wishlist.items[0]

    claim = await ClaimService.with_session(session).claim_item(item.id, supporter=spender, note="On it")

    assert claim.status == "pending"
    assert claim.supporter_contact == "bola@example.com"
    assert claim.owner_id == owner.id
    assert (await _item(session, item.id)).qty_claimed == 1
    notes = await NotificationService.with_session(session).list_for_user(owner.id)
    assert [n.type for n in notes] == ["item_claimed"]


async def test_claiming_fully_claimed_item_fails(session):
    owner = await make_account(session, "ada")
    first = await make_account(session, "bola")
    second = await make_account(session, "chidi")
    item = (await make_wishlist(session, owner.id, qty_total=1)).items[0]
    service = ClaimService.with_session(session)

    await service.claim_item(item.id, supporter=first)
    with pytest.raises(ItemFullyClaimedError):
        await service.claim_item(item.id, supporter=second)
    assert (await _item(session, item.id)).qty_claimed == 1


async def test_owner_cannot_claim_own_item(session):
    owner = await make_account(session, "ada")
    item = (await make_wishlist(session, owner.id)).items[0]
    with pytest.raises(ClaimValidationError):
        await ClaimService.with_session(session).claim_item(item.id, supporter=owner)


async def test_archived_wishlist_rejects_claims(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    wishlist = await make_wishlist(session, owner.id)
    await WishlistService.with_session(session).set_status(wishlist.id, "archived")
    with pytest.raises(ClaimValidationError):
        await ClaimService.with_session(session).claim_item(wishlist.items[0].id, supporter=spender)


async def test_remove_claim_releases_unit(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id, qty_total=3)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)
    assert (await _item(session, item.id)).qty_available == 2

    await service.remove_claim(claim.id, spender.id)

    assert (await _item(session, item.id)).qty_available == 3
    assert await service.list_user_claims(spender.id) == []


async def test_failed_delete_restores_claimed_quantity(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id, qty_total=3)).items[0]
    claim = await ClaimService.with_session(session).claim_item(item.id, supporter=spender)

    broken = ClaimService(
        BrokenDeleteRepository(session),
        accounts=AccountService.with_session(session),
        wallets=WalletService.with_session(session),
        notifications=NotificationService.with_session(session),
    )
    with pytest.raises(RuntimeError):
        await broken.remove_claim(claim.id, spender.id)

    assert (await _item(session, item.id)).qty_claimed == 1
    assert (await broken.get_claim(claim.id)).status == "pending"


async def test_only_supporter_can_remove(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)
    with pytest.raises(ClaimOwnershipError):
        await service.remove_claim(claim.id, owner.id)


async def test_cash_payment_covering_price_fulfils_claim(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id, price_kobo=500_000)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)

    result = await service.record_cash_payment(
        claim.id, amount_kobo=500_000, reference="cash_1_abc", sender_id=spender.id
    )

    assert result.fulfilled
    assert result.claim.status == "fulfilled"
    assert result.claim.amount_paid_kobo == 500_000
    wallets = WalletService.with_session(session)
    summary = await wallets.summarize(owner.id)
    assert summary.totals.balance_kobo == 500_000
    owner_rows = await wallets.list_transactions(owner.id)
    assert owner_rows[0].category == "wishlist_purchase"
    assert owner_rows[0].description == 'Cash payment for "Blender" - Ref: cash_1_abc'
    sender_rows = await wallets.list_transactions(spender.id)
    assert [row.category for row in sender_rows] == ["sent"]
    assert (await wallets.summarize(spender.id)).totals.balance_kobo == 0


async def test_partial_cash_payment_keeps_claim_open(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id, price_kobo=500_000)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)

    result = await service.record_cash_payment(claim.id, amount_kobo=200_000, reference="cash_2_abc")

    assert not result.fulfilled
    assert result.claim.status == "pending"
    assert result.claim.amount_remaining_kobo == 300_000


async def test_cancelling_releases_unit_and_is_final(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)

    cancelled = await service.update_status(claim.id, spender.id, "cancelled")

    assert cancelled.status == "cancelled"
    assert (await _item(session, item.id)).qty_claimed == 0
    with pytest.raises(InvalidClaimTransitionError):
        await service.update_status(claim.id, spender.id, "confirmed")


async def test_expire_overdue(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)

    assert await service.expire_overdue(utcnow() + timedelta(days=31)) == 1
    assert (await service.get_claim(claim.id)).status == "expired"
    assert (await _item(session, item.id)).qty_claimed == 0
    assert await service.expire_overdue(utcnow() + timedelta(days=31)) == 0


async def test_reminders(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)

    with pytest.raises(ClaimValidationError):
        await service.set_reminder(claim.id, spender.id, schedule_at=utcnow() - timedelta(hours=1))
    with pytest.raises(ClaimValidationError):
        await service.set_reminder(claim.id, spender.id, schedule_at=utcnow() + timedelta(days=45))
    with pytest.raises(ClaimValidationError):
        await service.set_reminder(claim.id, spender.id, schedule_at=utcnow() + timedelta(days=1), channel="pigeon")

    when = utcnow() + timedelta(days=2)
    reminder = await service.set_reminder(claim.id, spender.id, schedule_at=when, channel="sms")
    assert reminder.status == "queued"
    assert reminder.contact == "bola@example.com"
    assert (await service.get_claim(claim.id)).scheduled_purchase_date == when.date()

    assert await service.dispatch_due_reminders(utcnow()) == 0
    assert await service.dispatch_due_reminders(when + timedelta(minutes=1)) == 1
    notes = await NotificationService.with_session(session).list_for_user(spender.id)
    assert [n.type for n in notes] == ["purchase_reminder"]


async def test_claim_stats(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    wishlist = await make_wishlist(session, owner.id, qty_total=2, price_kobo=300_000)
    service = ClaimService.with_session(session)
    first = await service.claim_item(wishlist.items[0].id, supporter=spender)
    await service.claim_item(wishlist.items[0].id, supporter=spender)
    await service.record_cash_payment(first.id, amount_kobo=300_000, reference="cash_3_abc")

    stats = await service.claim_stats(spender.id)

    assert stats.total == 2
    assert stats.value_kobo == 600_000
    assert stats.paid_kobo == 300_000
    assert stats.by_status == {"fulfilled": 1, "pending": 1}


async def test_guest_claim_creates_account(session):
    owner = await make_account(session, "ada")
    item = (await make_wishlist(session, owner.id)).items[0]

    account, claim = await ClaimService.with_session(session).claim_item_as_guest(
        item.id, email="guest@example.com", username="guest", password="secret123"
    )

    assert not account.is_verified
    assert claim.supporter_user_id == account.id
    assert claim.supporter_contact == "guest@example.com"


async def test_failed_delete_with_three_claims_restores_three(session):
    owner = await make_account(session, "ada")
    item = (await make_wishlist(session, owner.id, qty_total=3)).items[0]
    service = ClaimService.with_session(session)
    spenders = [await make_account(session, name) for name in ("bola", "chidi", "dayo")]
    claims = [await service.claim_item(item.id, supporter=spender) for spender in spenders]
    assert (await _item(session, item.id)).qty_claimed == 3

    broken = ClaimService(
        BrokenDeleteRepository(session),
        accounts=AccountService.with_session(session),
        wallets=WalletService.with_session(session),
        notifications=NotificationService.with_session(session),
    )
    with pytest.raises(RuntimeError):
        await broken.remove_claim(claims[1].id, spenders[1].id)

    assert (await _item(session, item.id)).qty_claimed == 3
    assert len(await service.list_owner_claims(owner.id)) == 3


async def test_direct_payment_on_expired_claim_is_refused(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    item = (await make_wishlist(session, owner.id)).items[0]
    service = ClaimService.with_session(session)
    claim = await service.claim_item(item.id, supporter=spender)
    await SqlClaimRepository(session).update_claim(claim.id, {"expire_at": utcnow() - timedelta(minutes=5)})

    with pytest.raises(ClaimValidationError):
        await service.record_cash_payment(claim.id, amount_kobo=500_000, reference="cash_4_abc")

    late = await service.record_cash_payment(claim.id, amount_kobo=500_000, reference="cash_4_abc", collected=True)
    assert not late.fulfilled
    assert late.claim.amount_paid_kobo == 500_000
    assert (await WalletService.with_session(session).summarize(owner.id)).totals.received_kobo == 500_000
