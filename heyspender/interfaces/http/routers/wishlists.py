"""Wishlist, item and cash-goal endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from heyspender.core.security import get_current_account, get_optional_account
from heyspender.interfaces.http.deps import get_claim_service, get_contribution_service, get_wishlist_service
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.interfaces.http.presenters import goal_response, wishlist_response
from heyspender.modules.accounts import Account
from heyspender.modules.claims import ClaimService
from heyspender.modules.contributions import ContributionService
from heyspender.modules.wishlists import GoalInput, ItemInput, WishlistService
from heyspender.schemas import (
    ClaimListResponse,
    ClaimResponse,
    GoalCreate,
    GoalResponse,
    GoalUpdate,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
    OccasionListResponse,
    WishlistAnalyticsResponse,
    WishlistCreate,
    WishlistListResponse,
    WishlistResponse,
    WishlistUpdate,
)

router = APIRouter()


@router.post("", response_model=WishlistResponse, status_code=status.HTTP_201_CREATED, summary="Create a wishlist")
async def create_wishlist(
    payload: WishlistCreate,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistResponse:
    try:
        wishlist = await service.create_wishlist(
            owner_id=account.id,
            title=payload.title,
            occasion=payload.occasion,
            wishlist_date=payload.wishlist_date,
            story=payload.story,
            cover_image_url=payload.cover_image_url,
            visibility=payload.visibility,
            items=[ItemInput(**item.model_dump()) for item in payload.items],
            goals=[GoalInput(**goal.model_dump()) for goal in payload.goals],
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return wishlist_response(wishlist)


@router.get("/mine", response_model=WishlistListResponse, summary="Wishlists owned by the current user")
async def my_wishlists(
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistListResponse:
    wishlists = await service.list_for_owner(account.id)
    return WishlistListResponse(wishlists=[wishlist_response(w) for w in wishlists])


@router.get("/public", response_model=WishlistListResponse, summary="Browse public wishlists")
async def public_wishlists(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistListResponse:
    wishlists = await service.list_public(limit=limit, offset=offset)
    return WishlistListResponse(wishlists=[wishlist_response(w) for w in wishlists])


@router.get("/occasions", response_model=OccasionListResponse, summary="Occasion filters for the current user")
async def my_occasions(
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> OccasionListResponse:
    return OccasionListResponse(occasions=await service.list_occasions(account.id))


@router.get("/analytics", response_model=WishlistAnalyticsResponse, summary="Dashboard analytics for the current user")
async def my_analytics(
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistAnalyticsResponse:
    return WishlistAnalyticsResponse.model_validate(await service.owner_analytics(account.id))


@router.get("/by-slug/{slug}", response_model=WishlistResponse, summary="Shared wishlist page")
async def wishlist_by_slug(
    slug: str,
    viewer: Optional[Account] = Depends(get_optional_account),
    service: WishlistService = Depends(get_wishlist_service),
    contributions: ContributionService = Depends(get_contribution_service),
) -> WishlistResponse:
    try:
        wishlist = await service.get_by_slug(slug, viewer_id=viewer.id if viewer else None)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    by_goal = {goal.id: await contributions.list_for_goal(goal.id) for goal in wishlist.goals}
    return wishlist_response(wishlist, by_goal)


@router.get("/{wishlist_id}", response_model=WishlistResponse, summary="Wishlist detail for its owner")
async def get_wishlist(
    wishlist_id: str,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
    contributions: ContributionService = Depends(get_contribution_service),
) -> WishlistResponse:
    try:
        wishlist = await service.get_wishlist(wishlist_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if wishlist.owner_id != account.id and wishlist.visibility == "private":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wishlist not found")
    by_goal = {goal.id: await contributions.list_for_goal(goal.id) for goal in wishlist.goals}
    return wishlist_response(wishlist, by_goal)


@router.patch("/{wishlist_id}", response_model=WishlistResponse, summary="Edit a wishlist")
async def update_wishlist(
    wishlist_id: str,
    payload: WishlistUpdate,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistResponse:
    try:
        wishlist = await service.update_wishlist(wishlist_id, account.id, payload.model_dump(exclude_unset=True))
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return wishlist_response(wishlist)


@router.delete("/{wishlist_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a wishlist")
async def delete_wishlist(
    wishlist_id: str,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> Response:
    try:
        await service.delete_wishlist(wishlist_id, account.id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{wishlist_id}/claims", response_model=ClaimListResponse, summary="Claims on a wishlist's items")
async def wishlist_claims(
    wishlist_id: str,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
    claims: ClaimService = Depends(get_claim_service),
) -> ClaimListResponse:
    try:
        wishlist = await service.get_wishlist(wishlist_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if wishlist.owner_id != account.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your wishlist")
    rows = [claim for claim in await claims.list_owner_claims(account.id) if claim.wishlist_id == wishlist_id]
    return ClaimListResponse(claims=[ClaimResponse.model_validate(claim) for claim in rows])


@router.post(
    "/{wishlist_id}/items",
    response_model=list[ItemResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add items to a wishlist",
)
async def add_items(
    wishlist_id: str,
    payload: list[ItemCreate],
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> list[ItemResponse]:
    try:
        items = await service.add_items(wishlist_id, account.id, [ItemInput(**item.model_dump()) for item in payload])
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return [ItemResponse.model_validate(item) for item in items]


@router.patch("/items/{item_id}", response_model=ItemResponse, summary="Edit an item")
async def update_item(
    item_id: str,
    payload: ItemUpdate,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> ItemResponse:
    try:
        item = await service.update_item(item_id, account.id, payload.model_dump(exclude_unset=True))
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return ItemResponse.model_validate(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove an item")
async def delete_item(
    item_id: str,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> Response:
    try:
        await service.delete_item(item_id, account.id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{wishlist_id}/goals",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a cash goal",
)
async def add_goal(
    wishlist_id: str,
    payload: GoalCreate,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> GoalResponse:
    try:
        goal = await service.add_goal(wishlist_id, account.id, GoalInput(**payload.model_dump()))
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return goal_response(goal)


@router.patch("/goals/{goal_id}", response_model=GoalResponse, summary="Edit a cash goal")
async def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> GoalResponse:
    try:
        goal = await service.update_goal(goal_id, account.id, payload.model_dump(exclude_unset=True))
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return goal_response(goal)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a cash goal")
async def delete_goal(
    goal_id: str,
    account: Account = Depends(get_current_account),
    service: WishlistService = Depends(get_wishlist_service),
) -> Response:
    try:
        await service.delete_goal(goal_id, account.id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
