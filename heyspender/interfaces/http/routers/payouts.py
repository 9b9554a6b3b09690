"""Withdrawal requests."""
from fastapi import APIRouter, Depends, HTTPException, status

from heyspender.core.security import get_current_account
from heyspender.interfaces.http.deps import get_payout_service
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.modules.accounts import Account
from heyspender.modules.payouts import PayoutService
from heyspender.schemas import PayoutListResponse, PayoutRequest, PayoutResponse

router = APIRouter()


@router.post("", response_model=PayoutResponse, status_code=status.HTTP_201_CREATED, summary="Request a withdrawal")
async def request_payout(
    payload: PayoutRequest,
    account: Account = Depends(get_current_account),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutResponse:
    try:
        payout = await service.request_payout(
            account,
            amount_kobo=payload.amount_kobo,
            bank_code=payload.bank_code,
            account_number=payload.account_number,
            account_name=payload.account_name,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return PayoutResponse.model_validate(payout)


@router.get("", response_model=PayoutListResponse, summary="My withdrawals")
async def my_payouts(
    account: Account = Depends(get_current_account),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutListResponse:
    payouts = await service.list_for_account(account.id)
    return PayoutListResponse(payouts=[PayoutResponse.model_validate(p) for p in payouts])


@router.get("/{payout_id}", response_model=PayoutResponse, summary="Withdrawal detail")
async def get_payout(
    payout_id: str,
    account: Account = Depends(get_current_account),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutResponse:
    try:
        payout = await service.get_payout(payout_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if payout.account_id != account.id and not account.is_admin():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payout not found")
    return PayoutResponse.model_validate(payout)
