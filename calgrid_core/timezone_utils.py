"""
Timezone utilities for calgrid.

Provides the calendar's notion of "now" and converts parsed values into
timezone-aware datetimes in the calendar timezone.
"""

from datetime import datetime, date, time as dt_time
import time as _time
from typing import Callable, Optional
import pytz


Clock = Callable[[], datetime]

# Default timezone - can be overridden by config
_local_timezone_name: str = "UTC"


def set_timezone(timezone_name: str):
    """Set the default timezone used by calendars created afterwards."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_local_timezone():
    """
    Get the configured timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the configured timezone.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fallback: system timezone name, then a fixed offset
        try:
            return pytz.timezone(_time.tzname[0])
        except pytz.UnknownTimeZoneError:
            is_dst = _time.localtime().tm_isdst
            if is_dst:
                offset_seconds = -_time.altzone
            else:
                offset_seconds = -_time.timezone
            return pytz.FixedOffset(offset_seconds // 60)


def resolve_timezone(tz=None):
    """Accept a pytz timezone, an IANA name, or None for the default."""
    if tz is None:
        return get_local_timezone()
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def now(tz=None) -> datetime:
    """The current instant in the given (or default) timezone."""
    return datetime.now(pytz.UTC).astimezone(resolve_timezone(tz))


def system_clock(tz=None) -> Clock:
    """A clock callable bound to a timezone."""
    zone = resolve_timezone(tz)
    return lambda: now(zone)


def to_local_datetime(dt: datetime, tz=None) -> datetime:
    """
    Bring a datetime into the calendar timezone.

    Naive datetimes are taken to be wall-clock time in that timezone;
    aware ones are converted.
    """
    zone = resolve_timezone(tz)
    if dt.tzinfo is None:
        return zone.localize(dt)
    return dt.astimezone(zone)


def start_of_day(d: date, tz=None) -> datetime:
    """Aware datetime for 00:00 on date d."""
    return resolve_timezone(tz).localize(datetime.combine(d, dt_time.min))


def end_of_day(d: date, tz=None) -> datetime:
    """Aware datetime for the last microsecond of date d."""
    return resolve_timezone(tz).localize(datetime.combine(d, dt_time.max))


def local_date(value: datetime, tz=None) -> date:
    """Calendar date of an instant, seen from the calendar timezone."""
    return to_local_datetime(value, tz).date()


def today(clock: Optional[Clock] = None, tz=None) -> date:
    """Today's date according to the clock (or the system clock)."""
    current = clock() if clock is not None else now(tz)
    return local_date(current, tz)
