"""Payment gateway adapters."""

from __future__ import annotations

from heyspender.core.config import Settings

from .paystack import PaystackClient


def build_gateway(settings: Settings) -> PaystackClient | None:
    """Gateway client, or None when checkout has to fall back to manual settlement."""
    if not settings.payments_enabled:
        return None
    return PaystackClient(
        settings.payments.secret_key,
        base_url=settings.payments.base_url,
        timeout=settings.payments.timeout_seconds,
    )


__all__ = ["PaystackClient", "build_gateway"]
