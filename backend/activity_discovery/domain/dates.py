from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from .models import Period

_DASH_VARIANTS = re.compile("[–—−]")
_DATE_SEPARATORS = re.compile(r"[/\-.]")
_SPACED_HYPHEN = re.compile(r"\s+-\s+")


def parse_instant(text: Optional[str]) -> Optional[datetime]:
    """Parse a single date.

    ISO-8601 first, then three numeric tokens split on ``/``, ``-`` or ``.``.
    A first token above 31 reads as ``YYYY/MM/DD``, anything else as
    ``DD/MM/YYYY``.
    """
    if not text:
        return None
    value = text.strip()
    if not value:
        return None
    try:
        return _naive(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        pass

    parts = _DATE_SEPARATORS.split(value)
    if len(parts) != 3:
        return None
    try:
        a, b, c = (int(part) for part in parts)
    except ValueError:
        return None
    try:
        if a > 31:
            return datetime(a, b, c)
        return datetime(c, b, a)
    except ValueError:
        return None


def normalize_dashes(text: str) -> str:
    return _DASH_VARIANTS.sub("-", text)


def parse_period(text: Optional[str]) -> Optional[Period]:
    if not text:
        return None
    value = normalize_dashes(text).strip()
    if not value:
        return None

    # "2025-06-10" is one date, not a range
    if parse_instant(value) is not None:
        tokens = [value]
    elif _SPACED_HYPHEN.search(value):
        tokens = [t.strip() for t in _SPACED_HYPHEN.split(value)]
    else:
        tokens = [t.strip() for t in value.split("-")]
    tokens = [t for t in tokens if t]
    if not tokens:
        return None

    start = parse_instant(tokens[0])
    if start is None:
        return None
    end = parse_instant(tokens[1]) if len(tokens) > 1 else start
    if end is None:
        end = start
    return Period(start=start, end=end)


def periods_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start <= b_end and b_start <= a_end


def period_end(when: Optional[str]) -> Optional[datetime]:
    """Last day of an activity, or None when any part of ``when`` is unreadable.

    Unlike ``parse_period`` there is no single-day fallback for a bad
    second token, so such an activity never expires.
    """
    if not when:
        return None
    value = normalize_dashes(when).strip()
    if not value:
        return None
    whole = parse_instant(value)
    if whole is not None:
        return whole
    if _SPACED_HYPHEN.search(value):
        tokens = [t.strip() for t in _SPACED_HYPHEN.split(value)]
    else:
        tokens = [t.strip() for t in value.split("-")]
    if len(tokens) != 2 or parse_instant(tokens[0]) is None:
        return None
    return parse_instant(tokens[1])


def is_expired(when: Optional[str], today: date) -> bool:
    end = period_end(when)
    if end is None:
        return False
    return today >= end.date() + timedelta(days=1)


def _naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)
