import httpx
import pytest
from conftest import make_account

from heyspender.infrastructure.payments.paystack import PaystackClient
from heyspender.modules.accounts import AccountService
from heyspender.modules.notifications import NotificationService
from heyspender.modules.payments import PaymentGatewayError, TransferResult
from heyspender.modules.payouts import InvalidPayoutTransitionError, PayoutService, PayoutValidationError
from heyspender.modules.wallets import InsufficientBalanceError, WalletService


class RecordingGateway:
    name = "paystack"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.transfers: list[dict] = []

    async def create_transfer_recipient(self, *, name, account_number, bank_code, currency):
        if self.fail:
            raise PaymentGatewayError("bank unreachable", status_code=503)
        return f"RCP_{account_number}"

    async def initiate_transfer(self, *, amount_kobo, recipient_code, reference, reason):
        self.transfers.append({"amount": amount_kobo, "recipient": recipient_code, "reference": reference})
        return TransferResult(reference=reference, transfer_code="TRF_1", status="pending")


async def _funded(session, username, amount_kobo=1_000_000, verified=True):
    account = await make_account(session, username, verified=verified)
    await WalletService.with_session(session).credit(
        account_id=account.id, amount_kobo=amount_kobo, source="cash_payment", description="seed"
    )
    return account


def _request(service, account, amount_kobo):
    return service.request_payout(account, amount_kobo=amount_kobo, bank_code="058", account_number="0123456789")


async def test_small_payout_from_verified_user_is_auto_approved(session):
    account = await _funded(session, "ada")
    gateway = RecordingGateway()
    service = PayoutService.with_session(session, gateway)

    payout = await _request(service, account, 300_000)

    assert payout.status == "processing"
    assert payout.debited
    assert payout.provider_ref == "TRF_1"
    assert gateway.transfers[0]["reference"] == f"payout_{payout.id}"
    summary = await service.wallet_summary(account.id)
    assert summary.totals.balance_kobo == 700_000
    assert summary.available_kobo == 700_000
    assert summary.wallet.balance_kobo == 700_000


async def test_large_payout_waits_for_review_and_reserves_funds(session):
    account = await _funded(session, "ada")
    admin = await make_account(session, "boss", role="admin")
    service = PayoutService.with_session(session)

    payout = await _request(service, account, 600_000)

    assert payout.status == "requested"
    assert not payout.debited
    summary = await service.wallet_summary(account.id)
    assert summary.totals.balance_kobo == 1_000_000
    assert summary.reserved_kobo == 600_000
    assert summary.available_kobo == 400_000
    admin_notes = await NotificationService.with_session(session).list_for_user(admin.id)
    assert [n.type for n in admin_notes] == ["withdrawal_request"]
    with pytest.raises(InsufficientBalanceError):
        await _request(service, account, 500_000)


async def test_unverified_user_always_needs_review(session):
    account = await _funded(session, "ada", verified=False)
    payout = await _request(PayoutService.with_session(session), account, 100_000)
    assert payout.status == "requested"


async def test_validation(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    with pytest.raises(PayoutValidationError):
        await _request(service, account, 5_000)
    with pytest.raises(PayoutValidationError):
        await service.request_payout(account, amount_kobo=100_000, bank_code="058", account_number="12345")
    with pytest.raises(PayoutValidationError):
        await service.request_payout(account, amount_kobo=100_000, bank_code=" ", account_number="0123456789")
    with pytest.raises(InsufficientBalanceError):
        await _request(service, account, 2_000_000)


async def test_approve_then_mark_paid(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    payout = await _request(service, account, 600_000)

    approved = await service.approve(payout.id)
    assert approved.status == "processing"
    assert approved.debited
    paid = await service.mark_paid(payout.id, provider_ref="bank-123")
    assert paid.status == "paid"
    assert paid.provider_ref == "bank-123"
    with pytest.raises(InvalidPayoutTransitionError):
        await service.reject(payout.id)
    assert (await service.reconcile(account.id)).is_consistent


async def test_rejecting_a_debited_payout_refunds_the_wallet(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    payout = await _request(service, account, 300_000)
    assert payout.debited

    failed = await service.reject(payout.id, "Account name mismatch")

    assert failed.status == "failed"
    assert failed.failure_reason == "Account name mismatch"
    summary = await service.wallet_summary(account.id)
    assert summary.totals.balance_kobo == 1_000_000
    assert summary.wallet.balance_kobo == 1_000_000
    report = await service.reconcile(account.id)
    assert report.is_consistent
    categories = [tx.category for tx in await WalletService.with_session(session).list_transactions(account.id)]
    assert sorted(categories) == ["payout", "refund", "wishlist_purchase"]


async def test_rejecting_a_requested_payout_needs_no_refund(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    payout = await _request(service, account, 600_000)

    await service.reject(payout.id)

    assert len(await WalletService.with_session(session).list_transactions(account.id)) == 1
    assert (await service.wallet_summary(account.id)).available_kobo == 1_000_000


async def test_gateway_failure_leaves_payout_processing(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session, RecordingGateway(fail=True))

    payout = await _request(service, account, 200_000)

    assert payout.status == "processing"
    assert payout.provider_ref is None
    assert payout.debited


async def test_set_status_rejects_unknown_target(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    payout = await _request(service, account, 600_000)
    with pytest.raises(InvalidPayoutTransitionError):
        await service.set_status(payout.id, "requested")


async def test_count_pending(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    await _request(service, account, 600_000)
    assert await service.count_pending() == 1
    assert len(await service.list_admin("requested")) == 1
    assert await AccountService.with_session(session).count_accounts() == 1


async def test_rejecting_an_approved_payout_refunds_and_notifies_owner(session):
    account = await _funded(session, "ada")
    service = PayoutService.with_session(session)
    payout = await _request(service, account, 600_000)
    approved = await service.set_status(payout.id, "processing")
    assert approved.debited

    failed = await service.set_status(payout.id, "failed", reason="Bank rejected transfer")

    assert failed.status == "failed"
    assert failed.account_username == "ada"
    assert (await service.wallet_summary(account.id)).totals.balance_kobo == 1_000_000
    notes = await NotificationService.with_session(session).list_for_user(account.id)
    assert {"requested", "processing", "failed"} <= {n.payload["status"] for n in notes if n.type == "payout_status"}


async def test_incomplete_recipient_response_leaves_payout_processing(session):
    account = await _funded(session, "ada")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "data": {}})

    gateway = PaystackClient("sk_test_123", transport=httpx.MockTransport(handler))
    payout = await _request(PayoutService.with_session(session, gateway), account, 200_000)

    assert payout.status == "processing"
    assert payout.debited
    assert payout.provider_ref is None
