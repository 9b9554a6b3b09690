"""Wallet balance and transaction history for the signed-in user."""
from fastapi import APIRouter, Depends, Query

from heyspender.core.security import get_current_account
from heyspender.interfaces.http.deps import get_payout_service, get_wallet_service
from heyspender.interfaces.http.presenters import wallet_response
from heyspender.modules.accounts import Account
from heyspender.modules.payouts import PayoutService
from heyspender.modules.wallets import WalletService
from heyspender.schemas import WalletResponse, WalletTransactionResponse

router = APIRouter()


@router.get("", response_model=WalletResponse, summary="Wallet summary with recent transactions")
async def get_wallet(
    account: Account = Depends(get_current_account),
    payouts: PayoutService = Depends(get_payout_service),
    wallets: WalletService = Depends(get_wallet_service),
) -> WalletResponse:
    summary = await payouts.wallet_summary(account.id)
    transactions = await wallets.list_transactions(account.id, limit=20)
    return wallet_response(summary, transactions)


@router.get("/transactions", response_model=list[WalletTransactionResponse], summary="Wallet transaction history")
async def list_transactions(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    wallets: WalletService = Depends(get_wallet_service),
) -> list[WalletTransactionResponse]:
    rows = await wallets.list_transactions(account.id, limit=limit, offset=offset)
    return [WalletTransactionResponse.model_validate(row) for row in rows]
