"""Paystack REST client."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from heyspender.modules.payments.exceptions import PaymentGatewayError, PaymentGatewayTimeout
from heyspender.modules.payments.gateway import CheckoutSession, TransactionVerification, TransferResult

logger = logging.getLogger(__name__)


class PaystackClient:
    name = "paystack"

    def __init__(
        self,
        secret_key: str,
        *,
        base_url: str = "https://api.paystack.co",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, payload: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._secret_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=headers,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, path, json=payload)
            except httpx.TimeoutException as exc:
                logger.warning("Paystack %s %s timed out", method, path)
                raise PaymentGatewayTimeout(f"Paystack did not respond within {self._timeout}s") from exc
            except httpx.HTTPError as exc:
                logger.warning("Paystack %s %s failed: %s", method, path, exc)
                raise PaymentGatewayError(f"Paystack request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise PaymentGatewayError("Paystack returned a non-JSON response", status_code=response.status_code) from exc
        if not isinstance(body, dict):
            raise PaymentGatewayError("Paystack returned an unexpected response", status_code=response.status_code)

        if response.status_code >= 400 or not body.get("status"):
            message = body.get("message") or f"HTTP {response.status_code}"
            logger.warning("Paystack %s %s rejected: %s", method, path, message)
            raise PaymentGatewayError(message, status_code=response.status_code)
        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise PaymentGatewayError(f"Paystack {path} returned malformed data", status_code=response.status_code)
        return data

    async def initialize_transaction(
        self,
        *,
        email: str,
        amount_kobo: int,
        reference: str,
        currency: str,
        callback_url: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> CheckoutSession:
        payload: dict[str, Any] = {
            "email": email,
            "amount": amount_kobo,
            "reference": reference,
            "currency": currency,
            "metadata": metadata or {},
        }
        if callback_url:
            payload["callback_url"] = callback_url
        data = await self._request("POST", "/transaction/initialize", payload)
        return CheckoutSession(
            reference=data.get("reference", reference),
            authorization_url=_required(data, "authorization_url"),
            access_code=data.get("access_code"),
        )

    async def verify_transaction(self, reference: str) -> TransactionVerification:
        data = await self._request("GET", f"/transaction/verify/{reference}")
        paid_at = data.get("paid_at") or data.get("paidAt")
        return TransactionVerification(
            reference=data.get("reference", reference),
            status=data.get("status", "unknown"),
            amount_kobo=_as_int(data.get("amount")),
            currency=data.get("currency", "NGN"),
            gateway_id=str(data["id"]) if data.get("id") is not None else None,
            paid_at=_parse_timestamp(paid_at),
            raw=data,
        )

    async def create_transfer_recipient(
        self, *, name: str, account_number: str, bank_code: str, currency: str
    ) -> str:
        data = await self._request(
            "POST",
            "/transferrecipient",
            {
                "type": "nuban",
                "name": name,
                "account_number": account_number,
                "bank_code": bank_code,
                "currency": currency,
            },
        )
        return _required(data, "recipient_code")

    async def initiate_transfer(
        self, *, amount_kobo: int, recipient_code: str, reference: str, reason: str
    ) -> TransferResult:
        data = await self._request(
            "POST",
            "/transfer",
            {
                "source": "balance",
                "amount": amount_kobo,
                "recipient": recipient_code,
                "reference": reference,
                "reason": reason,
            },
        )
        return TransferResult(
            reference=data.get("reference", reference),
            transfer_code=data.get("transfer_code"),
            status=data.get("status", "pending"),
        )


def _required(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if not value:
        raise PaymentGatewayError(f"Paystack response is missing {key}")
    return value


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError) as exc:
        raise PaymentGatewayError(f"Paystack returned a non-numeric amount: {value!r}") from exc


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
