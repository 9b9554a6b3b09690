from datetime import date, datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest

from heyspender.modules.claims import Claim, InvalidClaimTransitionError, google_calendar_url, ics_event, share_url, state

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _claim(**overrides) -> Claim:
    fields = dict(
        id="c1",
        wishlist_item_id="i1",
        supporter_user_id="u2",
        supporter_contact="bola@example.com",
        note=None,
        status=state.PENDING,
        amount_paid_kobo=0,
        expire_at=NOW + timedelta(days=30),
        item_name="Blender",
        unit_price_kobo=500_000,
        wishlist_slug="adas-30th-birthday",
        owner_username="ada",
    )
    fields.update(overrides)
    return Claim(**fields)


@pytest.mark.parametrize(
    "current, target",
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("pending", "fulfilled"),
        ("confirmed", "fulfilled"),
        ("confirmed", "expired"),
    ],
)
def test_allowed_transitions(current, target):
    state.ensure_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        ("fulfilled", "pending"),
        ("cancelled", "confirmed"),
        ("expired", "pending"),
        ("confirmed", "cancelled"),
        ("pending", "shipped"),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidClaimTransitionError):
        state.ensure_transition(current, target)


def test_open_claim_past_expiry_reads_as_expired():
    past = NOW - timedelta(seconds=1)
    assert state.effective_status("pending", past, NOW) == "expired"
    assert state.effective_status("confirmed", past, NOW) == "expired"
    assert state.effective_status("fulfilled", past, NOW) == "fulfilled"
    assert state.effective_status("pending", NOW + timedelta(days=1), NOW) == "pending"


def test_naive_expiry_is_treated_as_utc():
    assert state.is_expired(datetime(2026, 10, 18, 11, 0), NOW)


def test_share_url():
    assert share_url("https://heyspender.com/", "ada", "bday") == "https://heyspender.com/ada/bday"
    assert share_url("https://heyspender.com", None, "bday") == "https://heyspender.com/bday"


def test_google_calendar_url_uses_scheduled_date():
    url = google_calendar_url(_claim(scheduled_purchase_date=date(2026, 11, 2)), NOW)
    query = parse_qs(urlparse(url).query)
    assert query["action"] == ["TEMPLATE"]
    assert query["text"] == ["Purchase: Blender"]
    assert query["dates"] == ["20261102T090000Z/20261102T100000Z"]


def test_google_calendar_url_defaults_to_tomorrow():
    query = parse_qs(urlparse(google_calendar_url(_claim(), NOW)).query)
    assert query["dates"] == ["20261019T120000Z/20261019T130000Z"]


def test_ics_event():
    content = ics_event(_claim(scheduled_purchase_date=date(2026, 11, 2)), "https://heyspender.com", NOW)
    assert content.startswith("BEGIN:VCALENDAR\r\n")
    assert "DTSTART;VALUE=DATE:20261102" in content
    assert "UID:c1@heyspender.com" in content
    assert "https://heyspender.com/ada/adas-30th-birthday" in content


def test_ics_event_without_date():
    assert ics_event(_claim(), "https://heyspender.com", NOW) is None
