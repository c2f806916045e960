"""
Date value parsing.

Event records and options carry dates as strings or date objects. Strings go
through a fallback chain, first success wins:

1. ISO 8601 calendar date or datetime ("2024-03-10", "2024-03-10T09:30Z")
2. RFC 2822 email/HTTP date ("Sun, 10 Mar 2024 09:30:00 +0000")
3. permissive parse via dateutil ("March 10, 2024", "10 Mar 2024 9:30")

The permissive parser fills a missing year, month or day from the reference
date when one is given, otherwise from the system clock.

Everything comes back as an aware datetime in the requested timezone.
"""

from datetime import datetime, date, time as dt_time
from email.utils import parsedate_to_datetime
from typing import Any, Optional

from dateutil import parser as date_parser

from .timezone_utils import to_local_datetime, start_of_day


def _parse_iso(text: str) -> Optional[datetime]:
    candidate = text
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def _parse_rfc2822(text: str) -> Optional[datetime]:
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def _parse_generic(text: str, reference: Optional[date] = None) -> Optional[datetime]:
    default = datetime.combine(reference, dt_time.min) if reference is not None else None
    try:
        return date_parser.parse(text, default=default)
    except (ValueError, OverflowError):
        return None


def parse_datetime(value: Any, tz=None, reference: Optional[date] = None) -> Optional[datetime]:
    """
    Parse a date-like value into an aware datetime.

    Args:
        value: str, date, datetime, or None.
        tz: calendar timezone (pytz object or name); default timezone if None.
        reference: date supplying the parts a partial string leaves out.

    Returns:
        Aware datetime, or None if the value is empty or no parser accepts it.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_datetime(value, tz)
    if isinstance(value, date):
        return start_of_day(value, tz)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    parsed = _parse_iso(text) or _parse_rfc2822(text) or _parse_generic(text, reference)
    return to_local_datetime(parsed, tz) if parsed is not None else None


def parse_date(value: Any, tz=None, reference: Optional[date] = None) -> Optional[date]:
    """Parse a date-like value and keep only its calendar date."""
    parsed = parse_datetime(value, tz, reference)
    return parsed.date() if parsed is not None else None


def coerce_date(value: Any, tz=None, reference: Optional[date] = None) -> date:
    """Like parse_date(), but a value that cannot be parsed is an error."""
    parsed = parse_date(value, tz, reference)
    if parsed is None:
        raise ValueError(f"Cannot interpret {value!r} as a date")
    return parsed
