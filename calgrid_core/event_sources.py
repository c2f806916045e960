"""
Event files for the desktop application.

Turns a JSON list of records or an iCalendar (.ics) file into the raw event
records a Calendar indexes. Recurring iCalendar events are expanded with
recurring_ical_events over a window, since the calendar only knows single
occurrences.
"""

import json
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from dateutil.relativedelta import relativedelta
from icalendar import Calendar as ICalCalendar
from recurring_ical_events import of as recurring_events_of

from .debug import debug_print
from .errors import EventSourceError
from .event_index import EventFields, MultiDayFields
from .timezone_utils import now, to_local_datetime


def _debug_print(msg: str) -> None:
    debug_print("SOURCES", msg)


# Expansion window around "now" when the caller gives none
DEFAULT_WINDOW_BEFORE = relativedelta(years=1)
DEFAULT_WINDOW_AFTER = relativedelta(years=2)


def load_json_events(path: Union[str, Path]) -> list[dict]:
    """Read a JSON file holding a list of event objects."""
    path = Path(path)
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise EventSourceError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise EventSourceError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise EventSourceError(f"{path} must contain a list of event objects")
    _debug_print(f"loaded {len(data)} events from {path}")
    return data


def _ical_value(value, tz) -> Union[date, datetime]:
    """Date for all-day values, aware datetime in tz otherwise."""
    if isinstance(value, datetime):
        return to_local_datetime(value, tz)
    return value


def _as_text(component, name: str) -> str:
    value = component.get(name)
    return str(value) if value is not None else ""


def ical_to_records(
    ical_text: str,
    window_start: datetime,
    window_end: datetime,
    fields: Optional[EventFields] = None,
    tz=None,
) -> list[dict]:
    """
    Expand VCALENDAR text into raw event records.

    Args:
        ical_text: VCALENDAR data
        window_start: recurring events are expanded from here...
        window_end: ...up to here
        fields: field layout the records are written for
        tz: calendar timezone for timed events

    Returns:
        One record per occurrence with title, location, description, uid and
        the start/end (or single date) fields named by the layout.
    """
    fields = fields if fields is not None else MultiDayFields()
    try:
        vcal = ICalCalendar.from_ical(ical_text)
        occurrences = recurring_events_of(vcal).between(window_start, window_end)
    except ValueError as e:
        raise EventSourceError(f"Invalid iCalendar data: {e}") from e

    records = []
    for ical_event in occurrences:
        dtstart = ical_event.get('DTSTART')
        if dtstart is None:
            continue
        start = _ical_value(dtstart.dt, tz)

        dtend = ical_event.get('DTEND')
        if dtend is not None:
            end = _ical_value(dtend.dt, tz)
            # All-day DTEND is exclusive
            if not isinstance(end, datetime):
                end = max(start, end - timedelta(days=1))
        else:
            end = start

        record = {
            'title': _as_text(ical_event, 'SUMMARY'),
            'location': _as_text(ical_event, 'LOCATION'),
            'description': _as_text(ical_event, 'DESCRIPTION'),
            'uid': _as_text(ical_event, 'UID'),
        }
        if isinstance(fields, MultiDayFields):
            record[fields.start_date] = start.isoformat()
            record[fields.end_date] = end.isoformat()
        else:
            record[fields.date_parameter] = start.isoformat()
        records.append(record)

    _debug_print(f"expanded {len(records)} occurrences between "
                 f"{window_start.date()} and {window_end.date()}")
    return records


def load_ics_events(
    path: Union[str, Path],
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
    fields: Optional[EventFields] = None,
    tz=None,
) -> list[dict]:
    """Read an .ics file and expand it with ical_to_records()."""
    path = Path(path)
    try:
        ical_text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise EventSourceError(f"Cannot read {path}: {e}") from e

    current = now(tz)
    if window_start is None:
        window_start = current - DEFAULT_WINDOW_BEFORE
    if window_end is None:
        window_end = current + DEFAULT_WINDOW_AFTER
    return ical_to_records(ical_text, window_start, window_end, fields=fields, tz=tz)


def load_events(
    path: Union[str, Path],
    fields: Optional[EventFields] = None,
    tz=None,
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
) -> list[dict]:
    """Load events from a .json or .ics file, chosen by extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in ('.ics', '.ical', '.ifb'):
        return load_ics_events(path, window_start, window_end, fields=fields, tz=tz)
    if suffix == '.json':
        return load_json_events(path)
    raise EventSourceError(f"Unsupported event file type: {path.name}")
