"""
Date helpers for waiting lists.

Every list is keyed by a calendar date. Timestamps coming from clients may
carry any offset (or none); they are reduced to a date key in UTC so that the
same arrival always resolves to the same list. Naive datetimes are taken to
already be UTC.

Stored timestamps are timezone-aware UTC. SQLite keeps no offset, so values
read back from it are naive but still UTC.

Parsers raise ValueError; callers translate that into their own error type.
"""

import calendar
import re
from datetime import date, datetime, timezone
from typing import Tuple, Union

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive input is labelled UTC, not converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc_date(value: Union[date, datetime]) -> date:
    """Discard time-of-day after moving to UTC."""
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def _parse_iso_datetime(raw: str) -> datetime:
    # fromisoformat only understands a trailing "Z" from Python 3.11 on
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


def parse_date_key(raw: Union[str, date, datetime]) -> date:
    """
    Parse a list date.

    Accepts a ``YYYY-MM-DD`` string, a full ISO-8601 datetime string, or
    date/datetime objects. Datetimes are normalized to their UTC date.
    """
    if isinstance(raw, (date, datetime)):
        return to_utc_date(raw)
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("Invalid date format. Please use YYYY-MM-DD format")

    text = raw.strip()
    try:
        if _DATE_RE.match(text):
            return date.fromisoformat(text)
        return to_utc_date(_parse_iso_datetime(text))
    except ValueError as e:
        raise ValueError("Invalid date format. Please use YYYY-MM-DD format") from e


def parse_strict_date(raw: str) -> date:
    """Parse exactly ``YYYY-MM-DD`` (used for path and query parameters)."""
    if not raw or not _DATE_RE.match(raw):
        raise ValueError("Invalid date format. Please use YYYY-MM-DD format")
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise ValueError("Invalid date format. Please use YYYY-MM-DD format") from e


def parse_month(raw: str) -> Tuple[date, date]:
    """Return the first and last day of a ``YYYY-MM`` month."""
    match = _MONTH_RE.match(raw or "")
    if not match:
        raise ValueError("Invalid month format. Please use YYYY-MM format")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValueError("Invalid month format. Please use YYYY-MM format")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
