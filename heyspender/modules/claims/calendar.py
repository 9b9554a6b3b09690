"""Share links and calendar exports for claimed items."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from urllib.parse import quote, urlencode

from heyspender.core.clock import utcnow

from .models import Claim

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
_STAMP = "%Y%m%dT%H%M%SZ"


def share_url(base_url: str, username: Optional[str], slug: str) -> str:
    base = base_url.rstrip("/")
    if username:
        return f"{base}/{username}/{slug}"
    return f"{base}/{slug}"


def _purchase_start(claim: Claim, now: Optional[datetime] = None) -> datetime:
    if claim.scheduled_purchase_date is not None:
        return datetime.combine(claim.scheduled_purchase_date, time(9, 0), tzinfo=timezone.utc)
    return (now or utcnow()) + timedelta(days=1)


def google_calendar_url(claim: Claim, now: Optional[datetime] = None) -> str:
    """Google Calendar "create event" link, one hour long."""
    start = _purchase_start(claim, now)
    end = start + timedelta(hours=1)
    owner = claim.owner_username or "the owner"
    params = {
        "action": "TEMPLATE",
        "text": f"Purchase: {claim.item_name}",
        "dates": f"{start.strftime(_STAMP)}/{end.strftime(_STAMP)}",
        "details": f'Don\'t forget to purchase "{claim.item_name}" from {owner}\'s wishlist.',
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params, quote_via=quote)}"


def ics_event(claim: Claim, base_url: str, now: Optional[datetime] = None) -> Optional[str]:
    """All-day iCalendar event on the purchase date, or None when no date is known."""
    event_date: Optional[date] = claim.scheduled_purchase_date or claim.wishlist_date
    if event_date is None:
        return None
    day = event_date.strftime("%Y%m%d")
    item_url = share_url(base_url, claim.owner_username, claim.wishlist_slug or "")
    host = base_url.split("://", 1)[-1].rstrip("/")
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//HeySpender//NONSGML v1.0//EN",
        "BEGIN:VEVENT",
        f"UID:{claim.id}@{host}",
        f"DTSTAMP:{(now or utcnow()).strftime(_STAMP)}",
        f"DTSTART;VALUE=DATE:{day}",
        f"DTEND;VALUE=DATE:{day}",
        f"SUMMARY:Purchase {claim.item_name}",
        f"DESCRIPTION:Reminder to purchase {claim.item_name} for {claim.owner_username}'s wishlist: {item_url}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"
