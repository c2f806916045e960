import json
from datetime import date, datetime

import pytest
import pytz

from calgrid_core.errors import EventSourceError
from calgrid_core.event_index import EventIndex, MultiDayFields, SingleDayFields
from calgrid_core.event_sources import ical_to_records, load_events, load_json_events

ICS = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//calgrid//tests//EN
BEGIN:VEVENT
UID:trip@example.com
DTSTAMP:20240101T000000Z
SUMMARY:Trip
LOCATION:Lisbon
DTSTART;VALUE=DATE:20240310
DTEND;VALUE=DATE:20240313
END:VEVENT
BEGIN:VEVENT
UID:standup@example.com
DTSTAMP:20240101T000000Z
SUMMARY:Standup
DTSTART:20240304T090000Z
DTEND:20240304T093000Z
RRULE:FREQ=WEEKLY;COUNT=3
END:VEVENT
END:VCALENDAR
"""

WINDOW = (pytz.UTC.localize(datetime(2024, 1, 1)), pytz.UTC.localize(datetime(2024, 12, 31)))


def test_all_day_end_is_made_inclusive():
    records = ical_to_records(ICS, *WINDOW, tz="UTC")
    trip = [r for r in records if r["uid"] == "trip@example.com"]

    assert len(trip) == 1
    assert trip[0]["title"] == "Trip"
    assert trip[0]["location"] == "Lisbon"
    assert trip[0]["startDate"] == "2024-03-10"
    assert trip[0]["endDate"] == "2024-03-12"


def test_recurring_events_are_expanded():
    records = ical_to_records(ICS, *WINDOW, tz="UTC")
    standups = sorted(r["startDate"] for r in records if r["title"] == "Standup")

    assert standups == [
        "2024-03-04T09:00:00+00:00",
        "2024-03-11T09:00:00+00:00",
        "2024-03-18T09:00:00+00:00",
    ]


def test_records_resolve_in_the_index():
    index = EventIndex(MultiDayFields(), tz="UTC")
    outcomes = index.add_events(ical_to_records(ICS, *WINDOW, tz="UTC"))

    assert all(outcome.ok for outcome in outcomes)
    assert sorted(e.title for e in index.events_on(date(2024, 3, 11))) == ["Standup", "Trip"]
    assert [e.title for e in index.events_on(date(2024, 3, 13))] == []


def test_single_day_layout_gets_start_only():
    records = ical_to_records(ICS, *WINDOW, fields=SingleDayFields(date_parameter="day"), tz="UTC")
    trip = next(r for r in records if r["title"] == "Trip")
    assert trip["day"] == "2024-03-10"
    assert "startDate" not in trip


def test_load_events_by_extension(tmp_path):
    ics_path = tmp_path / "cal.ics"
    ics_path.write_text(ICS, encoding="utf-8")
    json_path = tmp_path / "events.json"
    json_path.write_text(json.dumps([{"title": "A", "date": "2024-03-11"}]), encoding="utf-8")

    assert load_events(json_path) == [{"title": "A", "date": "2024-03-11"}]
    records = load_events(ics_path, tz="UTC", window_start=WINDOW[0], window_end=WINDOW[1])
    assert any(r["title"] == "Trip" for r in records)

    with pytest.raises(EventSourceError):
        load_events(tmp_path / "events.csv")


def test_json_errors(tmp_path):
    with pytest.raises(EventSourceError):
        load_json_events(tmp_path / "missing.json")

    not_list = tmp_path / "object.json"
    not_list.write_text('{"title": "A"}', encoding="utf-8")
    with pytest.raises(EventSourceError):
        load_json_events(not_list)

    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")
    with pytest.raises(EventSourceError):
        load_json_events(broken)
