from datetime import date, timedelta

import pytest
from conftest import make_account, make_wishlist

from heyspender.infrastructure.database.repositories.wishlist_repository import SqlWishlistRepository
from heyspender.modules.claims import ClaimService
from heyspender.modules.wishlists import (
    GoalInput,
    ItemInput,
    WishlistOwnershipError,
    WishlistService,
    WishlistValidationError,
    slugify,
    wishlist_state,
)


def test_slugify():
    assert slugify("Ada's 30th Birthday!") == "ada-s-30th-birthday"
    assert slugify("Ọjọ́ Ìbí") == "ojo-ibi"
    assert slugify("!!!") == "wishlist"


async def test_taken_slugs_get_numbered_suffixes(session):
    owner = await make_account(session, "ada")
    slugs = [(await make_wishlist(session, owner.id)).slug for _ in range(3)]
    assert slugs == ["ada-s-30th-birthday", "ada-s-30th-birthday-1", "ada-s-30th-birthday-2"]


async def test_state_follows_the_occasion_date(session):
    owner = await make_account(session, "ada")
    wishlist = await make_wishlist(session, owner.id)
    today = date(2026, 10, 18)

    assert wishlist_state(wishlist, today) == "live"
    wishlist.wishlist_date = today
    assert wishlist_state(wishlist, today) == "live"
    wishlist.wishlist_date = today - timedelta(days=1)
    assert wishlist_state(wishlist, today) == "completed"


async def test_qty_total_cannot_drop_below_claimed(session):
    owner = await make_account(session, "ada")
    item = (await make_wishlist(session, owner.id, qty_total=3)).items[0]
    claims = ClaimService.with_session(session)
    for name in ("bola", "chidi"):
        await claims.claim_item(item.id, supporter=await make_account(session, name))
    service = WishlistService.with_session(session)

    with pytest.raises(WishlistValidationError):
        await service.update_item(item.id, owner.id, {"qty_total": 1})

    updated = await service.update_item(item.id, owner.id, {"qty_total": 2})
    assert updated.qty_available == 0


@pytest.mark.parametrize("field", ["qty_total", "unit_price_kobo", "name"])
async def test_item_update_rejects_null_for_required_fields(session, field):
    owner = await make_account(session, "ada")
    item = (await make_wishlist(session, owner.id)).items[0]
    with pytest.raises(WishlistValidationError):
        await WishlistService.with_session(session).update_item(item.id, owner.id, {field: None})


async def test_goal_and_wishlist_updates_reject_null(session):
    owner = await make_account(session, "ada")
    wishlist = await make_wishlist(session, owner.id)
    service = WishlistService.with_session(session)

    with pytest.raises(WishlistValidationError):
        await service.update_goal(wishlist.goals[0].id, owner.id, {"target_amount_kobo": None})
    with pytest.raises(WishlistValidationError):
        await service.update_wishlist(wishlist.id, owner.id, {"visibility": None})

    goal = await service.update_goal(wishlist.goals[0].id, owner.id, {"deadline": None, "title": "Trip"})
    assert goal.title == "Trip"


async def test_list_occasions_is_distinct(session):
    owner = await make_account(session, "ada")
    await make_wishlist(session, owner.id)
    await make_wishlist(session, owner.id)
    service = WishlistService.with_session(session)
    await service.create_wishlist(owner_id=owner.id, title="Tolu & Ada", occasion="wedding")

    occasions = await service.list_occasions(owner.id)

    assert sorted(occasions) == ["Ada's 30th Birthday", "Tolu & Ada"]


async def test_only_owner_can_change_wishlists_items_and_goals(session):
    owner = await make_account(session, "ada")
    intruder = await make_account(session, "bola")
    wishlist = await make_wishlist(session, owner.id)
    item, goal = wishlist.items[0], wishlist.goals[0]
    service = WishlistService.with_session(session)

    attempts = [
        service.update_wishlist(wishlist.id, intruder.id, {"title": "Mine now"}),
        service.delete_wishlist(wishlist.id, intruder.id),
        service.add_items(wishlist.id, intruder.id, [ItemInput(name="Kettle")]),
        service.update_item(item.id, intruder.id, {"name": "Kettle"}),
        service.delete_item(item.id, intruder.id),
        service.add_goal(wishlist.id, intruder.id, GoalInput(title="Rent", target_amount_kobo=100)),
        service.update_goal(goal.id, intruder.id, {"title": "Rent"}),
        service.delete_goal(goal.id, intruder.id),
    ]
    for attempt in attempts:
        with pytest.raises(WishlistOwnershipError):
            await attempt

    unchanged = await service.get_wishlist(wishlist.id)
    assert len(unchanged.items) == 1
    assert len(unchanged.goals) == 1


async def test_owner_analytics(session):
    owner = await make_account(session, "ada")
    first = await make_wishlist(session, owner.id)
    await make_wishlist(session, owner.id)
    service = WishlistService.with_session(session)
    await service.create_wishlist(
        owner_id=owner.id,
        title="Tolu & Ada",
        occasion="wedding",
        wishlist_date=date(2026, 1, 10),
        goals=[GoalInput(title="Honeymoon", target_amount_kobo=1_000_000)],
    )
    await SqlWishlistRepository(session).update_goal(first.goals[0].id, {"amount_raised_kobo": 750_000})

    analytics = await service.owner_analytics(owner.id, today=date(2026, 10, 18))

    assert analytics.total_wishlists == 3
    assert analytics.live_wishlists == 2
    assert analytics.completed_wishlists == 1
    assert analytics.total_goals == 3
    assert analytics.amount_raised_kobo == 750_000
    assert analytics.target_amount_kobo == 3_000_000
    assert analytics.completion_rate == pytest.approx(25.0)
    assert analytics.average_items == 1
    assert analytics.most_popular_occasion == "birthday"


async def test_analytics_for_owner_without_wishlists(session):
    owner = await make_account(session, "ada")
    analytics = await WishlistService.with_session(session).owner_analytics(owner.id)
    assert analytics.total_wishlists == 0
    assert analytics.completion_rate == 0.0
    assert analytics.most_popular_occasion is None
