"""Domain objects to response schemas."""

from typing import Iterable, Optional

from heyspender.core.config import get_settings
from heyspender.modules.claims import share_url
from heyspender.modules.contributions import Contribution
from heyspender.modules.payments import CheckoutResult
from heyspender.modules.wallets import WalletSummary, WalletTransactionRecord, calculate_progress
from heyspender.modules.wishlists import Goal, Wishlist, wishlist_state
from heyspender.schemas import (
    CheckoutResponse,
    GoalResponse,
    ItemResponse,
    WalletResponse,
    WalletSummaryResponse,
    WalletTransactionResponse,
    WishlistResponse,
)


def goal_response(goal: Goal, contributions: Iterable[Contribution] = ()) -> GoalResponse:
    response = GoalResponse.model_validate(goal)
    response.progress = calculate_progress(goal.amount_raised_kobo, goal.target_amount_kobo)
    response.contributors = [c.public_name for c in contributions if c.status == "success"]
    return response


def wishlist_response(
    wishlist: Wishlist,
    contributions: Optional[dict[str, list[Contribution]]] = None,
) -> WishlistResponse:
    contributions = contributions or {}
    return WishlistResponse(
        id=wishlist.id,
        owner_id=wishlist.owner_id,
        owner_username=wishlist.owner_username,
        title=wishlist.title,
        slug=wishlist.slug,
        occasion=wishlist.occasion,
        wishlist_date=wishlist.wishlist_date,
        story=wishlist.story,
        cover_image_url=wishlist.cover_image_url,
        visibility=wishlist.visibility,
        status=wishlist.status,
        state=wishlist_state(wishlist),
        share_url=share_url(get_settings().site.base_url, wishlist.owner_username, wishlist.slug),
        created_at=wishlist.created_at,
        items=[ItemResponse.model_validate(item) for item in wishlist.items],
        goals=[goal_response(goal, contributions.get(goal.id, ())) for goal in wishlist.goals],
    )


def wallet_response(summary: WalletSummary, transactions: Iterable[WalletTransactionRecord]) -> WalletResponse:
    return WalletResponse(
        summary=wallet_summary_response(summary),
        transactions=[WalletTransactionResponse.model_validate(tx) for tx in transactions],
    )


def wallet_summary_response(summary: WalletSummary) -> WalletSummaryResponse:
    return WalletSummaryResponse(
        wallet_id=summary.wallet.id,
        currency=summary.wallet.currency,
        balance_kobo=summary.totals.balance_kobo,
        received_kobo=summary.totals.received_kobo,
        withdrawn_kobo=summary.totals.withdrawn_kobo,
        reserved_kobo=summary.reserved_kobo,
        available_kobo=summary.available_kobo,
        stored_balance_kobo=summary.wallet.balance_kobo,
    )


def checkout_response(result: CheckoutResult) -> CheckoutResponse:
    return CheckoutResponse(
        mode=result.mode,
        reference=result.intent.reference,
        amount_kobo=result.intent.amount_kobo,
        currency=result.intent.currency,
        authorization_url=result.authorization_url,
        public_key=result.public_key,
        instructions=result.instructions,
    )
