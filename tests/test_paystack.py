import json

import httpx
import pytest

from heyspender.infrastructure.payments import build_gateway
from heyspender.infrastructure.payments.paystack import PaystackClient
from heyspender.modules.payments import PaymentGatewayError, PaymentGatewayTimeout


def _client(handler) -> PaystackClient:
    return PaystackClient("sk_test_123", transport=httpx.MockTransport(handler))


async def test_initialize_transaction_sends_kobo_and_reference():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": True,
                "data": {"authorization_url": "https://checkout.paystack.com/abc", "access_code": "abc"},
            },
        )

    session = await _client(handler).initialize_transaction(
        email="bola@example.com",
        amount_kobo=500_000,
        reference="cash_1_abc",
        currency="NGN",
        callback_url="https://heyspender.com/payment/callback",
        metadata={"kind": "cash_payment"},
    )

    assert seen["path"] == "/transaction/initialize"
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["body"]["amount"] == 500_000
    assert seen["body"]["callback_url"] == "https://heyspender.com/payment/callback"
    assert session.authorization_url == "https://checkout.paystack.com/abc"
    assert session.reference == "cash_1_abc"


async def test_verify_transaction():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/transaction/verify/cash_1_abc"
        return httpx.Response(
            200,
            json={
                "status": True,
                "data": {
                    "id": 987,
                    "reference": "cash_1_abc",
                    "status": "success",
                    "amount": 500_000,
                    "currency": "NGN",
                    "paid_at": "2026-10-18T10:00:00.000Z",
                },
            },
        )

    result = await _client(handler).verify_transaction("cash_1_abc")

    assert result.is_successful
    assert result.amount_kobo == 500_000
    assert result.gateway_id == "987"
    assert result.paid_at.year == 2026


async def test_transfer_flow():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path == "/transferrecipient":
            assert body["type"] == "nuban"
            return httpx.Response(201, json={"status": True, "data": {"recipient_code": "RCP_1"}})
        assert body["recipient"] == "RCP_1"
        return httpx.Response(200, json={"status": True, "data": {"transfer_code": "TRF_1", "status": "pending"}})

    client = _client(handler)
    recipient = await client.create_transfer_recipient(
        name="Ada", account_number="0123456789", bank_code="058", currency="NGN"
    )
    result = await client.initiate_transfer(amount_kobo=100_000, recipient_code=recipient, reference="payout_1", reason="x")

    assert result.transfer_code == "TRF_1"
    assert result.reference == "payout_1"


async def test_rejected_request_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"status": False, "message": "Invalid key"})

    with pytest.raises(PaymentGatewayError) as excinfo:
        await _client(handler).verify_transaction("ref")
    assert excinfo.value.status_code == 401
    assert "Invalid key" in str(excinfo.value)


async def test_non_json_response_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(PaymentGatewayError):
        await _client(handler).verify_transaction("ref")


async def test_timeout_raises_gateway_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(PaymentGatewayTimeout):
        await _client(handler).verify_transaction("ref")


def test_gateway_disabled_in_development():
    from heyspender.core.config import Settings

    assert build_gateway(Settings(environment="development", payments={"secret_key": "sk"})) is None
    assert build_gateway(Settings(environment="production", payments={"secret_key": ""})) is None
    assert isinstance(build_gateway(Settings(environment="production", payments={"secret_key": "sk"})), PaystackClient)


@pytest.mark.parametrize(
    "body",
    [
        {"status": True, "data": {}},
        {"status": True, "data": ["unexpected"]},
        ["status", True],
    ],
)
async def test_malformed_initialize_response_raises_gateway_error(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(PaymentGatewayError):
        await _client(handler).initialize_transaction(
            email="bola@example.com", amount_kobo=500_000, reference="cash_1_abc", currency="NGN"
        )


async def test_missing_recipient_code_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "data": {"active": True}})

    with pytest.raises(PaymentGatewayError):
        await _client(handler).create_transfer_recipient(
            name="Ada", account_number="0123456789", bank_code="058", currency="NGN"
        )


async def test_non_numeric_amount_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "data": {"status": "success", "amount": "lots"}})

    with pytest.raises(PaymentGatewayError):
        await _client(handler).verify_transaction("ref")
