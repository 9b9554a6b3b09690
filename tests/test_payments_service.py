import json
from datetime import timedelta

import httpx
import pytest
from conftest import make_account, make_wishlist

from heyspender.core.clock import utcnow
from heyspender.core.crypto import sign_payload
from heyspender.infrastructure.database.repositories.claim_repository import SqlClaimRepository
from heyspender.infrastructure.payments.paystack import PaystackClient
from heyspender.modules.claims import ClaimService
from heyspender.modules.contributions import ContributionService, ContributionValidationError
from heyspender.modules.payments import (
    CheckoutSession,
    InvalidWebhookSignatureError,
    PaymentGatewayTimeout,
    PaymentService,
    PaymentValidationError,
    TransactionVerification,
    generate_reference,
)
from heyspender.modules.wallets import WalletService
from heyspender.modules.wishlists import WishlistService

SECRET = "sk_test_webhook"


class FakeGateway:
    name = "paystack"

    def __init__(self, *, status: str = "success", amount_kobo: int | None = None, down: bool = False) -> None:
        self.status = status
        self.amount_kobo = amount_kobo
        self.down = down
        self.initialized: list[dict] = []

    async def initialize_transaction(self, **kwargs):
        if self.down:
            raise PaymentGatewayTimeout("Paystack did not respond within 10.0s")
        self.initialized.append(kwargs)
        return CheckoutSession(
            reference=kwargs["reference"],
            authorization_url=f"https://checkout.paystack.com/{kwargs['reference']}",
            access_code="code",
        )

    async def verify_transaction(self, reference):
        amount = self.amount_kobo
        if amount is None:
            amount = self.initialized[-1]["amount_kobo"]
        return TransactionVerification(reference=reference, status=self.status, amount_kobo=amount, currency="NGN", gateway_id="42")


def _service(session, gateway=None) -> PaymentService:
    service = PaymentService.with_session(session, gateway)
    service._webhook_secret = SECRET
    return service


async def _claimed(session, price_kobo=500_000):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    wishlist = await make_wishlist(session, owner.id, price_kobo=price_kobo)
    claim = await ClaimService.with_session(session).claim_item(wishlist.items[0].id, supporter=spender)
    return owner, spender, wishlist, claim


def test_reference_format():
    assert generate_reference("cash_payment").startswith("cash_")
    assert generate_reference("contribution").startswith("contrib_")
    assert generate_reference("cash_payment") != generate_reference("cash_payment")


async def test_without_gateway_checkout_falls_back_to_manual(session):
    owner, spender, _, claim = await _claimed(session)

    result = await _service(session).start_cash_payment(
        claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id
    )

    assert result.mode == "manual"
    assert result.intent.status == "pending"
    assert result.intent.reference in result.instructions
    assert "₦5,000.00" in result.instructions
    assert result.intent.recipient_id == owner.id


async def test_gateway_timeout_falls_back_to_manual(session):
    _, spender, _, claim = await _claimed(session)
    result = await _service(session, FakeGateway(down=True)).start_cash_payment(
        claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id
    )
    assert result.mode == "manual"


async def test_gateway_checkout_and_verify_fulfils_claim(session):
    owner, spender, _, claim = await _claimed(session)
    gateway = FakeGateway()
    service = _service(session, gateway)

    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    assert result.mode == "gateway"
    assert result.authorization_url.endswith(result.intent.reference)
    assert gateway.initialized[0]["metadata"]["claim_id"] == claim.id

    intent = await service.verify(result.intent.reference)

    assert intent.status == "success"
    assert intent.gateway_ref == "42"
    assert (await ClaimService.with_session(session).get_claim(claim.id)).status == "fulfilled"
    assert (await WalletService.with_session(session).summarize(owner.id)).totals.balance_kobo == 500_000


async def test_verify_rejects_short_amount(session):
    _, spender, _, claim = await _claimed(session)
    service = _service(session, FakeGateway(amount_kobo=100))
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    with pytest.raises(PaymentValidationError):
        await service.verify(result.intent.reference)


async def test_failed_verification_marks_intent_failed(session):
    _, spender, _, claim = await _claimed(session)
    service = _service(session, FakeGateway(status="failed"))
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    assert (await service.verify(result.intent.reference)).status == "failed"


async def test_settle_is_idempotent(session):
    owner, spender, _, claim = await _claimed(session)
    service = _service(session)
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)

    await service.settle(result.intent.reference, gateway_ref="manual-1")
    again = await service.settle(result.intent.reference, gateway_ref="manual-2")

    assert again.status == "success"
    assert again.gateway_ref == "manual-1"
    wallets = WalletService.with_session(session)
    assert len(await wallets.list_transactions(owner.id)) == 1
    assert (await wallets.summarize(owner.id)).totals.balance_kobo == 500_000


async def test_contribution_settles_into_goal_and_wallet(session):
    owner = await make_account(session, "ada")
    spender = await make_account(session, "bola")
    wishlist = await make_wishlist(session, owner.id)
    goal = wishlist.goals[0]
    service = _service(session)

    result = await service.start_contribution(
        goal.id, amount_kobo=250_000, email="bola@example.com", display_name="Bola", payer_id=spender.id
    )
    assert result.intent.reference.startswith("contrib_")
    await service.settle(result.intent.reference)

    assert (await WishlistService.with_session(session).get_goal(goal.id)).amount_raised_kobo == 250_000
    contributions = await ContributionService.with_session(session).list_for_goal(goal.id)
    assert [c.public_name for c in contributions] == ["Bola"]
    wallets = WalletService.with_session(session)
    assert [tx.category for tx in await wallets.list_transactions(owner.id)] == ["contribution"]
    assert [tx.category for tx in await wallets.list_transactions(spender.id)] == ["sent"]


async def test_anonymous_contribution_hides_name(session):
    owner = await make_account(session, "ada")
    goal = (await make_wishlist(session, owner.id)).goals[0]
    service = _service(session)
    result = await service.start_contribution(
        goal.id, amount_kobo=100_000, email="x@example.com", display_name="Secret", is_anonymous=True
    )
    await service.settle(result.intent.reference)
    contributions = await ContributionService.with_session(session).list_for_goal(goal.id)
    assert contributions[0].public_name == "Anonymous Spender"


async def test_owner_cannot_fund_own_goal(session):
    owner = await make_account(session, "ada")
    goal = (await make_wishlist(session, owner.id)).goals[0]
    with pytest.raises(ContributionValidationError):
        await _service(session).start_contribution(
            goal.id, amount_kobo=100_000, email="ada@example.com", payer_id=owner.id
        )


async def test_webhook_requires_valid_signature(session):
    service = _service(session)
    body = json.dumps({"event": "charge.success", "data": {"reference": "nope", "amount": 1}}).encode()
    with pytest.raises(InvalidWebhookSignatureError):
        await service.handle_webhook(body, "bad-signature")
    with pytest.raises(InvalidWebhookSignatureError):
        await service.handle_webhook(body, None)


async def test_webhook_settles_charge_once(session):
    owner, spender, _, claim = await _claimed(session)
    service = _service(session)
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    body = json.dumps(
        {"event": "charge.success", "data": {"reference": result.intent.reference, "amount": 500_000, "id": 77}}
    ).encode()

    first = await service.handle_webhook(body, sign_payload(SECRET, body))
    second = await service.handle_webhook(body, sign_payload(SECRET, body))

    assert first.status == "success"
    assert second.status == "success"
    assert len(await WalletService.with_session(session).list_transactions(owner.id)) == 1


async def test_webhook_ignores_other_events_and_unknown_references(session):
    service = _service(session)
    for payload in (
        {"event": "transfer.success", "data": {"reference": "payout_1"}},
        {"event": "charge.success", "data": {"reference": "cash_0_unknown", "amount": 100}},
    ):
        body = json.dumps(payload).encode()
        assert await service.handle_webhook(body, sign_payload(SECRET, body)) is None


async def test_cancel_leaves_settled_intent_alone(session):
    _, spender, _, claim = await _claimed(session)
    service = _service(session)
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    await service.settle(result.intent.reference)
    assert (await service.cancel(result.intent.reference, spender.id)).status == "success"


async def test_cancel_pending_intent(session):
    _, spender, _, claim = await _claimed(session)
    service = _service(session)
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    assert (await service.cancel(result.intent.reference, spender.id)).status == "cancelled"


async def test_payment_collected_after_expiry_still_credits_owner(session):
    owner, spender, _, claim = await _claimed(session)
    service = _service(session)
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    claims = ClaimService.with_session(session)
    assert await claims.expire_overdue(utcnow() + timedelta(days=365)) == 1

    intent = await service.settle(result.intent.reference, gateway_ref="bank-9")

    assert intent.status == "success"
    settled_claim = await claims.get_claim(claim.id)
    assert settled_claim.status == "expired"
    assert settled_claim.amount_paid_kobo == 500_000
    assert (await WalletService.with_session(session).summarize(owner.id)).totals.received_kobo == 500_000


async def test_checkout_refused_for_claim_past_expiry(session):
    _, spender, _, claim = await _claimed(session)
    await SqlClaimRepository(session).update_claim(claim.id, {"expire_at": utcnow() - timedelta(days=1)})

    with pytest.raises(PaymentValidationError):
        await _service(session).start_cash_payment(
            claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id
        )


async def test_incomplete_gateway_response_falls_back_to_manual(session):
    _, spender, _, claim = await _claimed(session)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "data": {"access_code": "abc"}})

    gateway = PaystackClient("sk_test_123", transport=httpx.MockTransport(handler))
    result = await _service(session, gateway).start_cash_payment(
        claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id
    )

    assert result.mode == "manual"
    assert result.intent.status == "pending"


@pytest.mark.parametrize(
    "payload",
    [
        ["charge.success"],
        {"event": "charge.success", "data": "cash_1_abc"},
    ],
)
async def test_signed_webhook_with_unexpected_shape_is_rejected(session, payload):
    body = json.dumps(payload).encode()
    with pytest.raises(PaymentValidationError):
        await _service(session).handle_webhook(body, sign_payload(SECRET, body))


async def test_signed_webhook_with_non_numeric_amount_is_rejected(session):
    _, spender, _, claim = await _claimed(session)
    service = _service(session)
    result = await service.start_cash_payment(claim.id, amount_kobo=500_000, email="bola@example.com", payer_id=spender.id)
    body = json.dumps(
        {"event": "charge.success", "data": {"reference": result.intent.reference, "amount": "five thousand"}}
    ).encode()

    with pytest.raises(PaymentValidationError):
        await service.handle_webhook(body, sign_payload(SECRET, body))
    assert (await service.get_intent(result.intent.reference)).status == "pending"
