"""Payment intents: hosted checkout with a manual-settlement fallback.

A checkout always creates a ``payment_intents`` row first.  When the gateway
is disabled, or fails to answer, the caller receives manual settlement
instructions for the same reference and an admin settles it later.
Settlement of a reference happens at most once, whichever path (verify,
webhook, admin) reaches it first.
"""

from __future__ import annotations

import json
import logging
import secrets
import time
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from heyspender.core.clock import utcnow
from heyspender.core.config import get_settings
from heyspender.core.crypto import verify_signature
from heyspender.core.money import format_naira
from heyspender.db.models import PaymentIntent as PaymentIntentModel
from heyspender.infrastructure.database.repositories.payment_repository import SqlPaymentIntentRepository
from heyspender.modules.claims import ClaimService
from heyspender.modules.claims import state as claim_state
from heyspender.modules.claims.service import HOLDING_STATUSES
from heyspender.modules.contributions import ContributionService

from .exceptions import (
    InvalidWebhookSignatureError,
    PaymentError,
    PaymentGatewayError,
    PaymentIntentNotFoundError,
    PaymentValidationError,
)
from .gateway import PaymentGateway
from .models import CASH_PAYMENT, CONTRIBUTION, CheckoutResult, PaymentIntent
from .repository import PaymentIntentRepository

logger = logging.getLogger(__name__)

REFERENCE_PREFIXES = {CASH_PAYMENT: "cash", CONTRIBUTION: "contrib"}


def generate_reference(kind: str) -> str:
    """``cash_<millis>_<random>`` or ``contrib_<millis>_<random>``."""
    prefix = REFERENCE_PREFIXES[kind]
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(5)}"


def manual_instructions(intent: PaymentIntent, site_name: str = "HeySpender") -> str:
    return (
        f"Online checkout is unavailable. Send {format_naira(intent.amount_kobo)} to the {site_name} "
        f"account and quote reference {intent.reference}. The payment is credited once an admin confirms it."
    )


class PaymentService:
    def __init__(
        self,
        repository: PaymentIntentRepository,
        *,
        claims: ClaimService,
        contributions: ContributionService,
        gateway: Optional[PaymentGateway] = None,
        currency: str = "NGN",
        callback_url: Optional[str] = None,
        public_key: Optional[str] = None,
        webhook_secret: str = "",
    ) -> None:
        self._repository = repository
        self._claims = claims
        self._contributions = contributions
        self._gateway = gateway
        self._currency = currency
        self._callback_url = callback_url
        self._public_key = public_key
        self._webhook_secret = webhook_secret

    @classmethod
    def with_session(cls, session: AsyncSession, gateway: Optional[PaymentGateway] = None) -> "PaymentService":
        settings = get_settings()
        return cls(
            SqlPaymentIntentRepository(session),
            claims=ClaimService.with_session(session),
            contributions=ContributionService.with_session(session),
            gateway=gateway,
            currency=settings.payments.currency,
            callback_url=settings.payments.callback_url,
            public_key=settings.payments.public_key or None,
            webhook_secret=settings.payments.secret_key,
        )

    async def start_cash_payment(
        self,
        claim_id: str,
        *,
        amount_kobo: int,
        email: str,
        payer_id: Optional[str] = None,
    ) -> CheckoutResult:
        if amount_kobo <= 0:
            raise PaymentValidationError("amount must be positive")
        claim = await self._claims.get_claim(claim_id)
        current = claim_state.effective_status(claim.status, claim.expire_at)
        if current not in HOLDING_STATUSES:
            raise PaymentValidationError(f"Cannot pay towards a {current} claim")
        reference = generate_reference(CASH_PAYMENT)
        metadata = {
            "kind": CASH_PAYMENT,
            "claim_id": claim.id,
            "item_name": claim.item_name,
            "recipient_id": claim.owner_id,
        }
        model = await self._repository.create(
            reference=reference,
            kind=CASH_PAYMENT,
            amount_kobo=amount_kobo,
            currency=self._currency,
            email=email,
            payer_id=payer_id,
            recipient_id=claim.owner_id,
            claim_id=claim.id,
            status="pending",
            meta=json.dumps(metadata),
        )
        return await self._open_checkout(self._to_domain(model), metadata)

    async def start_contribution(
        self,
        goal_id: str,
        *,
        amount_kobo: int,
        email: str,
        display_name: Optional[str] = None,
        is_anonymous: bool = False,
        payer_id: Optional[str] = None,
    ) -> CheckoutResult:
        reference = generate_reference(CONTRIBUTION)
        contribution = await self._contributions.create_pending(
            goal_id,
            amount_kobo=amount_kobo,
            payment_ref=reference,
            display_name=display_name,
            is_anonymous=is_anonymous,
            supporter_id=payer_id,
            currency=self._currency,
            provider=self._gateway.name if self._gateway is not None else "manual",
        )
        metadata = {
            "kind": CONTRIBUTION,
            "goal_id": goal_id,
            "contribution_id": contribution.id,
            "recipient_id": contribution.owner_id,
        }
        model = await self._repository.create(
            reference=reference,
            kind=CONTRIBUTION,
            amount_kobo=amount_kobo,
            currency=self._currency,
            email=email,
            payer_id=payer_id,
            recipient_id=contribution.owner_id,
            contribution_id=contribution.id,
            status="pending",
            meta=json.dumps(metadata),
        )
        return await self._open_checkout(self._to_domain(model), metadata)

    async def get_intent(self, reference: str) -> PaymentIntent:
        return self._to_domain(await self._require_intent(reference))

    async def list_intents(self, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> list[PaymentIntent]:
        return [self._to_domain(row) for row in await self._repository.list_intents(status, limit, offset)]

    async def verify(self, reference: str) -> PaymentIntent:
        """Ask the gateway about a reference and settle or fail the intent accordingly."""
        model = await self._require_intent(reference)
        if model.status == "success" or self._gateway is None:
            return self._to_domain(model)
        result = await self._gateway.verify_transaction(reference)
        if result.is_successful:
            if result.amount_kobo < model.amount_kobo:
                raise PaymentValidationError(
                    f"Gateway amount {result.amount_kobo} is below the expected {model.amount_kobo}"
                )
            return await self.settle(reference, gateway_ref=result.gateway_id)
        if result.status in ("failed", "abandoned", "reversed"):
            return await self.mark_failed(reference)
        return self._to_domain(model)

    async def handle_webhook(self, body: bytes, signature: Optional[str]) -> Optional[PaymentIntent]:
        if not self._webhook_secret or not verify_signature(self._webhook_secret, body, signature or ""):
            raise InvalidWebhookSignatureError("Invalid webhook signature")
        try:
            event = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PaymentValidationError("Webhook body is not valid JSON") from exc
        if not isinstance(event, dict):
            raise PaymentValidationError("Webhook body must be a JSON object")
        data = event.get("data") or {}
        if not isinstance(data, dict):
            raise PaymentValidationError("Webhook data must be a JSON object")
        reference = data.get("reference")
        logger.info("Webhook %s for %s", event.get("event"), reference)
        if not reference or event.get("event") != "charge.success":
            return None
        model = await self._repository.get_by_reference(reference)
        if model is None:
            logger.warning("Webhook for unknown reference %s ignored", reference)
            return None
        try:
            amount_kobo = int(data.get("amount") or 0)
        except (TypeError, ValueError) as exc:
            raise PaymentValidationError(f"Webhook amount for {reference} is not a number") from exc
        if amount_kobo < model.amount_kobo:
            raise PaymentValidationError(f"Webhook amount for {reference} is below the expected amount")
        gateway_id = data.get("id")
        return await self.settle(reference, gateway_ref=str(gateway_id) if gateway_id is not None else None)

    async def settle(self, reference: str, *, gateway_ref: Optional[str] = None) -> PaymentIntent:
        """Apply a paid intent to its claim or contribution, once."""
        model = await self._require_intent(reference)
        changes: dict[str, Any] = {"settled_at": utcnow()}
        if gateway_ref:
            changes["gateway_ref"] = gateway_ref
        if not await self._repository.claim_for_settlement(model.id, changes):
            logger.info("Payment %s already settled", reference)
            return self._to_domain(await self._require_intent(reference))

        if model.kind == CASH_PAYMENT:
            await self._claims.record_cash_payment(
                model.claim_id,
                amount_kobo=model.amount_kobo,
                reference=reference,
                sender_id=model.payer_id,
                collected=True,
            )
        elif model.kind == CONTRIBUTION:
            await self._contributions.mark_success(reference)
        else:
            raise PaymentError(f"Unknown payment kind {model.kind!r}")
        logger.info("Payment %s settled (%s, %d kobo)", reference, model.kind, model.amount_kobo)
        return self._to_domain(await self._require_intent(reference))

    async def mark_failed(self, reference: str) -> PaymentIntent:
        model = await self._require_intent(reference)
        if model.status != "pending":
            return self._to_domain(model)
        if model.kind == CONTRIBUTION:
            await self._contributions.mark_failed(reference)
        return self._to_domain(await self._repository.update(model.id, {"status": "failed"}))

    async def cancel(self, reference: str, payer_id: Optional[str] = None) -> PaymentIntent:
        """Checkout closed by the payer; informational, leaves settled intents alone."""
        model = await self._require_intent(reference)
        if payer_id is not None and model.payer_id not in (None, payer_id):
            raise PaymentValidationError("This payment belongs to another user")
        if model.status != "pending":
            return self._to_domain(model)
        logger.info("Payment %s cancelled by payer", reference)
        return self._to_domain(await self._repository.update(model.id, {"status": "cancelled"}))

    async def _open_checkout(self, intent: PaymentIntent, metadata: dict[str, Any]) -> CheckoutResult:
        if self._gateway is None:
            return CheckoutResult(intent=intent, mode="manual", instructions=manual_instructions(intent))
        try:
            session = await self._gateway.initialize_transaction(
                email=intent.email,
                amount_kobo=intent.amount_kobo,
                reference=intent.reference,
                currency=intent.currency,
                callback_url=self._callback_url,
                metadata=metadata,
            )
        except PaymentGatewayError as exc:
            logger.warning("Checkout for %s falls back to manual settlement: %s", intent.reference, exc)
            return CheckoutResult(intent=intent, mode="manual", instructions=manual_instructions(intent))

        model = await self._repository.update(
            intent.id,
            {"authorization_url": session.authorization_url, "gateway_ref": session.access_code},
        )
        return CheckoutResult(
            intent=self._to_domain(model),
            mode="gateway",
            authorization_url=session.authorization_url,
            public_key=self._public_key,
        )

    async def _require_intent(self, reference: str) -> PaymentIntentModel:
        model = await self._repository.get_by_reference(reference)
        if model is None:
            raise PaymentIntentNotFoundError(reference)
        return model

    @staticmethod
    def _to_domain(model: PaymentIntentModel) -> PaymentIntent:
        return PaymentIntent(
            id=model.id,
            reference=model.reference,
            kind=model.kind,
            amount_kobo=model.amount_kobo,
            currency=model.currency,
            email=model.email,
            status=model.status,
            payer_id=model.payer_id,
            recipient_id=model.recipient_id,
            claim_id=model.claim_id,
            contribution_id=model.contribution_id,
            authorization_url=model.authorization_url,
            gateway_ref=model.gateway_ref,
            meta=json.loads(model.meta) if model.meta else {},
            created_at=model.created_at,
            settled_at=model.settled_at,
        )
