"""Checkout, verification and gateway webhooks."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from heyspender.core.security import get_current_account, get_optional_account
from heyspender.interfaces.http.deps import get_contribution_service, get_payment_service
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.interfaces.http.presenters import checkout_response
from heyspender.modules.accounts import Account
from heyspender.modules.contributions import ContributionService
from heyspender.modules.payments import PaymentService
from heyspender.schemas import (
    CashPaymentRequest,
    CheckoutResponse,
    ContributionListResponse,
    ContributionRequest,
    ContributionResponse,
    PaymentIntentResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/cash", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED, summary="Pay cash for a claimed item")
async def start_cash_payment(
    payload: CashPaymentRequest,
    account: Account = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> CheckoutResponse:
    email = payload.email or account.email
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="An email address is required")
    try:
        result = await service.start_cash_payment(
            payload.claim_id,
            amount_kobo=payload.amount_kobo,
            email=email,
            payer_id=account.id,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return checkout_response(result)


@router.post(
    "/contributions",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Contribute to a cash goal",
)
async def start_contribution(
    payload: ContributionRequest,
    account: Optional[Account] = Depends(get_optional_account),
    service: PaymentService = Depends(get_payment_service),
) -> CheckoutResponse:
    try:
        result = await service.start_contribution(
            payload.goal_id,
            amount_kobo=payload.amount_kobo,
            email=payload.email,
            display_name=payload.display_name,
            is_anonymous=payload.is_anonymous,
            payer_id=account.id if account else None,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return checkout_response(result)


@router.get("/goals/{goal_id}/contributions", response_model=ContributionListResponse, summary="Supporters of a goal")
async def goal_contributions(
    goal_id: str,
    service: ContributionService = Depends(get_contribution_service),
) -> ContributionListResponse:
    rows = await service.list_for_goal(goal_id)
    return ContributionListResponse(contributions=[ContributionResponse.model_validate(c) for c in rows])


@router.post("/webhook", summary="Gateway event callback")
async def payment_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(None),
    service: PaymentService = Depends(get_payment_service),
) -> dict[str, str]:
    body = await request.body()
    try:
        await service.handle_webhook(body, x_paystack_signature)
    except DOMAIN_ERRORS as exc:
        logger.warning("Webhook rejected: %s", exc)
        raise to_http_error(exc) from exc
    return {"status": "ok"}


@router.get("/{reference}", response_model=PaymentIntentResponse, summary="Payment status")
async def get_payment(
    reference: str,
    account: Account = Depends(get_current_account),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    try:
        intent = await service.get_intent(reference)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    if account.id not in (intent.payer_id, intent.recipient_id) and not account.is_admin():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return PaymentIntentResponse.model_validate(intent)


@router.post("/{reference}/verify", response_model=PaymentIntentResponse, summary="Confirm a checkout with the gateway")
async def verify_payment(
    reference: str,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    try:
        intent = await service.verify(reference)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return PaymentIntentResponse.model_validate(intent)


@router.post("/{reference}/cancel", response_model=PaymentIntentResponse, summary="Payer closed the checkout")
async def cancel_payment(
    reference: str,
    account: Optional[Account] = Depends(get_optional_account),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    try:
        intent = await service.cancel(reference, account.id if account else None)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    return PaymentIntentResponse.model_validate(intent)
