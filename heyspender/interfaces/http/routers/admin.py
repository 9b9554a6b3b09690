"""Administrative endpoints: moderation, withdrawals, settlement and reporting.

Every mutation here is written to the audit log in the same transaction.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from heyspender.core.security import get_current_admin
from heyspender.interfaces.http.deps import (
    get_account_service,
    get_audit_service,
    get_claim_service,
    get_contribution_service,
    get_payment_service,
    get_payout_service,
    get_wallet_service,
    get_wishlist_service,
)
from heyspender.interfaces.http.errors import DOMAIN_ERRORS, to_http_error
from heyspender.interfaces.http.presenters import wallet_response, wishlist_response
from heyspender.modules.accounts import Account, AccountService
from heyspender.modules.audit import AuditService
from heyspender.modules.claims import ClaimService
from heyspender.modules.contributions import ContributionService
from heyspender.modules.payments import PaymentService
from heyspender.modules.payouts import PayoutService
from heyspender.modules.wallets import WalletService
from heyspender.modules.wishlists import WishlistService
from heyspender.schemas import (
    AccountResponse,
    AccountStatusUpdate,
    AdminStatsResponse,
    AuditEntryResponse,
    AuditListResponse,
    ContributionListResponse,
    ContributionResponse,
    MaintenanceResponse,
    ManualSettleRequest,
    PaymentIntentResponse,
    PayoutListResponse,
    PayoutResponse,
    PayoutStatusUpdate,
    ReconciliationResponse,
    WalletResponse,
    WalletTransactionResponse,
    WishlistListResponse,
    WishlistResponse,
    WishlistStatusUpdate,
)

router = APIRouter()


@router.get("/stats", response_model=AdminStatsResponse)
async def admin_stats(
    admin: Account = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    wishlists: WishlistService = Depends(get_wishlist_service),
    payouts: PayoutService = Depends(get_payout_service),
) -> AdminStatsResponse:
    return AdminStatsResponse(
        total_users=await accounts.count_accounts(),
        total_wishlists=await wishlists.count_wishlists(),
        pending_payouts=await payouts.count_pending(),
    )


# Users

@router.get("/users", response_model=List[AccountResponse])
async def list_users(
    admin: Account = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
) -> List[AccountResponse]:
    return [AccountResponse.model_validate(account) for account in await accounts.list_accounts()]


@router.patch("/users/{account_id}/status", response_model=AccountResponse)
async def set_user_status(
    account_id: str,
    payload: AccountStatusUpdate,
    admin: Account = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    audit: AuditService = Depends(get_audit_service),
) -> AccountResponse:
    if account_id == admin.id and not payload.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot disable your own account")
    try:
        account = await accounts.set_active(account_id, payload.is_active)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    await audit.record(
        admin.id,
        "account.set_active",
        target_table="users",
        target_id=account_id,
        diff={"is_active": payload.is_active},
    )
    return AccountResponse.model_validate(account)


@router.delete("/users/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    account_id: str,
    admin: Account = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    audit: AuditService = Depends(get_audit_service),
) -> Response:
    if account_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    try:
        await accounts.delete_account(account_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    await audit.record(admin.id, "account.delete", target_table="users", target_id=account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{account_id}/wallet", response_model=WalletResponse)
async def user_wallet(
    account_id: str,
    admin: Account = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    payouts: PayoutService = Depends(get_payout_service),
    wallets: WalletService = Depends(get_wallet_service),
) -> WalletResponse:
    if await accounts.get_by_id(account_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    summary = await payouts.wallet_summary(account_id)
    return wallet_response(summary, await wallets.list_transactions(account_id, limit=None))


@router.get("/users/{account_id}/reconcile", response_model=ReconciliationResponse)
async def reconcile_wallet(
    account_id: str,
    admin: Account = Depends(get_current_admin),
    accounts: AccountService = Depends(get_account_service),
    payouts: PayoutService = Depends(get_payout_service),
) -> ReconciliationResponse:
    if await accounts.get_by_id(account_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    report = await payouts.reconcile(account_id)
    return ReconciliationResponse(
        wallet_id=report.wallet_id,
        account_id=report.account_id,
        stored_balance_kobo=report.stored_balance_kobo,
        ledger_received_kobo=report.ledger.received_kobo,
        ledger_withdrawn_kobo=report.ledger.withdrawn_kobo,
        payouts_withdrawn_kobo=report.payouts.withdrawn_kobo,
        withdrawn_divergence_kobo=report.withdrawn_divergence_kobo,
        balance_divergence_kobo=report.balance_divergence_kobo,
        is_consistent=report.is_consistent,
    )


# Wishlists

@router.get("/wishlists", response_model=WishlistListResponse)
async def list_wishlists(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(get_current_admin),
    wishlists: WishlistService = Depends(get_wishlist_service),
) -> WishlistListResponse:
    rows = await wishlists.list_admin(status=status_filter, limit=limit, offset=offset)
    return WishlistListResponse(wishlists=[wishlist_response(w) for w in rows])


@router.patch("/wishlists/{wishlist_id}/status", response_model=WishlistResponse)
async def set_wishlist_status(
    wishlist_id: str,
    payload: WishlistStatusUpdate,
    admin: Account = Depends(get_current_admin),
    wishlists: WishlistService = Depends(get_wishlist_service),
    audit: AuditService = Depends(get_audit_service),
) -> WishlistResponse:
    try:
        wishlist = await wishlists.set_status(wishlist_id, payload.status)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    await audit.record(
        admin.id,
        "wishlist.set_status",
        target_table="wishlists",
        target_id=wishlist_id,
        diff={"status": payload.status},
    )
    return wishlist_response(wishlist)


# Withdrawals

@router.get("/payouts", response_model=PayoutListResponse)
async def list_payouts(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(get_current_admin),
    payouts: PayoutService = Depends(get_payout_service),
) -> PayoutListResponse:
    rows = await payouts.list_admin(status_filter, limit, offset)
    return PayoutListResponse(payouts=[PayoutResponse.model_validate(p) for p in rows])


@router.patch("/payouts/{payout_id}/status", response_model=PayoutResponse)
async def set_payout_status(
    payout_id: str,
    payload: PayoutStatusUpdate,
    admin: Account = Depends(get_current_admin),
    payouts: PayoutService = Depends(get_payout_service),
    audit: AuditService = Depends(get_audit_service),
) -> PayoutResponse:
    try:
        previous = await payouts.get_payout(payout_id)
        payout = await payouts.set_status(payout_id, payload.status, reason=payload.reason)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    await audit.record(
        admin.id,
        "payout.set_status",
        target_table="payouts",
        target_id=payout_id,
        diff={"from": previous.status, "to": payout.status, "reason": payload.reason},
    )
    return PayoutResponse.model_validate(payout)


# Money movements

@router.get("/contributions", response_model=ContributionListResponse)
async def list_contributions(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(get_current_admin),
    contributions: ContributionService = Depends(get_contribution_service),
) -> ContributionListResponse:
    rows = await contributions.list_admin(status_filter, limit, offset)
    return ContributionListResponse(contributions=[ContributionResponse.model_validate(c) for c in rows])


@router.get("/transactions", response_model=List[WalletTransactionResponse])
async def list_transactions(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(get_current_admin),
    wallets: WalletService = Depends(get_wallet_service),
) -> List[WalletTransactionResponse]:
    rows = await wallets.list_recent_transactions(limit, offset)
    return [WalletTransactionResponse.model_validate(row) for row in rows]


@router.get("/payments", response_model=List[PaymentIntentResponse])
async def list_payments(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(get_current_admin),
    payments: PaymentService = Depends(get_payment_service),
) -> List[PaymentIntentResponse]:
    rows = await payments.list_intents(status_filter, limit, offset)
    return [PaymentIntentResponse.model_validate(row) for row in rows]


@router.post("/payments/{reference}/settle", response_model=PaymentIntentResponse)
async def settle_payment(
    reference: str,
    payload: ManualSettleRequest,
    admin: Account = Depends(get_current_admin),
    payments: PaymentService = Depends(get_payment_service),
    audit: AuditService = Depends(get_audit_service),
) -> PaymentIntentResponse:
    """Confirm a manually settled payment; settling twice is a no-op."""
    try:
        intent = await payments.settle(reference, gateway_ref=payload.gateway_ref)
    except DOMAIN_ERRORS as exc:
        raise to_http_error(exc) from exc
    await audit.record(
        admin.id,
        "payment.settle",
        target_table="payment_intents",
        target_id=intent.id,
        diff={"reference": reference, "gateway_ref": payload.gateway_ref},
    )
    return PaymentIntentResponse.model_validate(intent)


@router.get("/audit", response_model=AuditListResponse)
async def audit_log(
    target_table: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(get_current_admin),
    audit: AuditService = Depends(get_audit_service),
) -> AuditListResponse:
    entries = await audit.list_recent(limit, offset, target_table)
    return AuditListResponse(entries=[AuditEntryResponse.model_validate(e) for e in entries])


@router.post("/maintenance/run", response_model=MaintenanceResponse)
async def run_maintenance(
    admin: Account = Depends(get_current_admin),
    claims: ClaimService = Depends(get_claim_service),
    audit: AuditService = Depends(get_audit_service),
) -> MaintenanceResponse:
    """Expire overdue claims and send due purchase reminders."""
    expired = await claims.expire_overdue()
    sent = await claims.dispatch_due_reminders()
    await audit.record(
        admin.id,
        "maintenance.run",
        diff={"expired_claims": expired, "reminders_sent": sent},
    )
    return MaintenanceResponse(expired_claims=expired, reminders_sent=sent)
