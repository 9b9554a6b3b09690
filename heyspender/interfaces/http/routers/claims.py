"""Claiming items, the spender list and purchase reminders."""
from fastapi import APIRouter, Depends, HTTPException, Response, status

from heyspender.core.config import get_settings
from heyspender.core.security import create_access_token, get_current_account
from heyspender.interfaces.http.deps import get_claim_service
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.modules.accounts import Account
from heyspender.modules.claims import ClaimService, google_calendar_url, ics_event, share_url
from heyspender.schemas import (
    AccountResponse,
    CalendarLinkResponse,
    ClaimCreate,
    ClaimListResponse,
    ClaimResponse,
    ClaimStatsResponse,
    ClaimStatusUpdate,
    GuestClaimCreate,
    GuestClaimResponse,
    ReminderCreate,
    ReminderResponse,
)

router = APIRouter()


@router.post(
    "/items/{item_id}/claims",
    response_model=ClaimResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Claim an item",
)
async def claim_item(
    item_id: str,
    payload: ClaimCreate,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimResponse:
    try:
        claim = await service.claim_item(item_id, supporter=account, note=payload.note, contact=payload.contact)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return ClaimResponse.model_validate(claim)


@router.post(
    "/items/{item_id}/claims/guest",
    response_model=GuestClaimResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Claim an item while signing up",
)
async def claim_item_as_guest(
    item_id: str,
    payload: GuestClaimCreate,
    service: ClaimService = Depends(get_claim_service),
) -> GuestClaimResponse:
    try:
        account, claim = await service.claim_item_as_guest(
            item_id,
            email=payload.email,
            username=payload.username,
            password=payload.password,
            full_name=payload.full_name,
            note=payload.note,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return GuestClaimResponse(
        claim=ClaimResponse.model_validate(claim),
        account=AccountResponse.model_validate(account),
        access_token=create_access_token(account.id, account.username, account.role),
    )


@router.get("/claims/mine", response_model=ClaimListResponse, summary="My spender list")
async def my_claims(
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimListResponse:
    claims = await service.list_user_claims(account.id)
    return ClaimListResponse(claims=[ClaimResponse.model_validate(claim) for claim in claims])


@router.get("/claims/stats", response_model=ClaimStatsResponse, summary="Spender list statistics")
async def claim_stats(
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimStatsResponse:
    return ClaimStatsResponse.model_validate(await service.claim_stats(account.id))


@router.get("/claims/{claim_id}", response_model=ClaimResponse, summary="Claim detail")
async def get_claim(
    claim_id: str,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimResponse:
    try:
        claim = await service.get_claim(claim_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if account.id not in (claim.supporter_user_id, claim.owner_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your claim")
    return ClaimResponse.model_validate(claim)


@router.patch("/claims/{claim_id}/status", response_model=ClaimResponse, summary="Change a claim's status")
async def update_claim_status(
    claim_id: str,
    payload: ClaimStatusUpdate,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimResponse:
    try:
        claim = await service.update_status(claim_id, account.id, payload.status)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return ClaimResponse.model_validate(claim)


@router.delete("/claims/{claim_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a claim")
async def remove_claim(
    claim_id: str,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> Response:
    try:
        await service.remove_claim(claim_id, account.id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/claims/{claim_id}/reminders",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a purchase reminder",
)
async def set_reminder(
    claim_id: str,
    payload: ReminderCreate,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> ReminderResponse:
    try:
        reminder = await service.set_reminder(
            claim_id,
            account.id,
            schedule_at=payload.schedule_at,
            channel=payload.channel,
            contact=payload.contact,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return ReminderResponse.model_validate(reminder)


@router.get("/claims/{claim_id}/calendar", response_model=CalendarLinkResponse, summary="Add-to-calendar link")
async def claim_calendar_link(
    claim_id: str,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> CalendarLinkResponse:
    try:
        claim = await service.get_claim(claim_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if account.id != claim.supporter_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your claim")
    return CalendarLinkResponse(
        google_calendar_url=google_calendar_url(claim),
        share_url=share_url(get_settings().site.base_url, claim.owner_username, claim.wishlist_slug or ""),
    )


@router.get("/claims/{claim_id}/calendar.ics", summary="Download the purchase date as iCalendar")
async def claim_calendar_file(
    claim_id: str,
    account: Account = Depends(get_current_account),
    service: ClaimService = Depends(get_claim_service),
) -> Response:
    try:
        claim = await service.get_claim(claim_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if account.id != claim.supporter_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your claim")
    content = ics_event(claim, get_settings().site.base_url)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No date set for this item")
    return Response(
        content=content,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="claim-{claim.id}.ics"'},
    )
