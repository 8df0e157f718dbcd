"""Parsing of the publish-date formats returned by search providers."""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

_RELATIVE_DATE = re.compile(
    r"^\s*(\d+|an?|one)\s+(second|minute|hour|day|week|month|year)s?\s+ago\s*$",
    re.IGNORECASE,
)

_UNIT_DELTAS = {
    "second": timedelta(seconds=1),
    "minute": timedelta(minutes=1),
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}

_ABSOLUTE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%d %b %Y", "%Y-%m-%d")


def parse_published_at(value: Any, now: Optional[datetime] = None) -> Optional[datetime]:
    """Parse a provider publish date into an aware UTC datetime.

    Supports ISO-8601 timestamps, ``"Mar 5, 2024"`` style dates and
    relative forms such as ``"3 hours ago"``. Returns None when the value
    cannot be understood.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    match = _RELATIVE_DATE.match(text)
    if match:
        amount, unit = match.groups()
        count = 1 if amount.lower() in ("a", "an", "one") else int(amount)
        now = now or datetime.now(timezone.utc)
        return now - count * _UNIT_DELTAS[unit.lower()]

    for fmt in _ABSOLUTE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None
