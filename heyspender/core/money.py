"""Naira amounts are stored as integer kobo."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

KOBO_PER_NAIRA = 100


def naira_to_kobo(amount: Decimal | int | float | str) -> int:
    value = Decimal(str(amount)) * KOBO_PER_NAIRA
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def kobo_to_naira(amount_kobo: int) -> Decimal:
    return (Decimal(amount_kobo) / KOBO_PER_NAIRA).quantize(Decimal("0.01"))


def format_naira(amount_kobo: int) -> str:
    return f"₦{kobo_to_naira(amount_kobo):,.2f}"


__all__ = ["KOBO_PER_NAIRA", "format_naira", "kobo_to_naira", "naira_to_kobo"]
