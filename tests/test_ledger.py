from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import pytest

from heyspender.core.crypto import sign_payload, verify_signature
from heyspender.core.money import format_naira, kobo_to_naira, naira_to_kobo
from heyspender.modules.wallets import TransactionCategory, calculate_progress, categorize, ledger, summarize


@dataclass
class Entry:
    type: str
    amount_kobo: int
    source: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None


@dataclass
class PayoutRow:
    amount_kobo: int
    debited: bool


@pytest.mark.parametrize(
    "source, description, tx_type, expected",
    [
        ("contribution_sent", None, "debit", TransactionCategory.SENT),
        ("contribution", None, "credit", TransactionCategory.CONTRIBUTION),
        (None, "Cash sent for blender", "debit", TransactionCategory.OTHER),
        ("cash_sent", None, "debit", TransactionCategory.SENT),
        ("withdrawal", None, "debit", TransactionCategory.PAYOUT),
        ("bank refund", None, "credit", TransactionCategory.REFUND),
        (None, 'Cash payment for "Blender"', "credit", TransactionCategory.WISHLIST_PURCHASE),
        ("mystery", None, "credit", TransactionCategory.WISHLIST_PURCHASE),
        ("mystery", None, "debit", TransactionCategory.OTHER),
    ],
)
def test_normalize_source(source, description, tx_type, expected):
    assert ledger.normalize_source(source, description, tx_type) is expected


def test_known_sources_ignore_description():
    category = ledger.category_for_source("refund", "Refund for failed withdrawal", "credit")
    assert category is TransactionCategory.REFUND


def test_stored_category_wins_over_text():
    entry = Entry("debit", 100, source="payout", category="sent")
    assert categorize(entry) is TransactionCategory.SENT


def test_unknown_stored_category_falls_back_to_rules():
    entry = Entry("debit", 100, source="payout", category="bogus")
    assert categorize(entry) is TransactionCategory.PAYOUT


def test_summarize_only_counts_payout_debits():
    rows = [
        Entry("credit", 500_000, source="cash_payment"),
        Entry("credit", 200_000, source="contribution"),
        Entry("debit", 150_000, source="payout"),
        Entry("debit", 80_000, source="contribution_sent"),
        Entry("credit", 150_000, source="refund"),
    ]
    totals = summarize(rows)
    assert totals.received_kobo == 850_000
    assert totals.withdrawn_kobo == 150_000
    assert totals.balance_kobo == 700_000


def test_payout_view_counts_only_debited_payouts():
    rows = [Entry("credit", 500_000, source="cash_payment"), Entry("debit", 100_000, source="payout")]
    payouts = [PayoutRow(100_000, True), PayoutRow(40_000, False)]
    assert ledger.summarize_with_payouts(rows, payouts).withdrawn_kobo == 100_000
    assert ledger.withdrawn_divergence(rows, payouts) == 0


def test_divergence_when_payout_debit_missing_from_ledger():
    rows = [Entry("credit", 500_000, source="cash_payment")]
    assert ledger.withdrawn_divergence(rows, [PayoutRow(100_000, True)]) == -100_000


@pytest.mark.parametrize(
    "raised, target, expected",
    [(0, 1000, 0.0), (250, 1000, 25.0), (1500, 1000, 100.0), (100, 0, 0.0), (-5, 100, 0.0)],
)
def test_calculate_progress(raised, target, expected):
    assert calculate_progress(raised, target) == expected


def test_money_helpers():
    assert naira_to_kobo("5000") == 500_000
    assert naira_to_kobo(12.345) == 1_235
    assert kobo_to_naira(500_050) == Decimal("5000.50")
    assert format_naira(500_000) == "₦5,000.00"


def test_webhook_signature():
    body = b'{"event":"charge.success"}'
    signature = sign_payload("sk_test", body)
    assert verify_signature("sk_test", body, signature)
    assert not verify_signature("sk_test", body + b" ", signature)
    assert not verify_signature("sk_test", body, None)
    assert not verify_signature("", body, signature)
