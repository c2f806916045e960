from datetime import date

from calgrid_core.event_index import (
    EventIndex, MultiDayFields, Resolved, SingleDayFields, Unresolved, resolve_event,
)


def titles(events):
    return [event.title for event in events]


def test_multi_day_event_overlap_is_inclusive():
    index = EventIndex(MultiDayFields(), tz="UTC")
    index.add_events([{"title": "Trip", "startDate": "2024-03-10", "endDate": "2024-03-12"}])

    assert titles(index.events_on(date(2024, 3, 10))) == ["Trip"]
    assert titles(index.events_on(date(2024, 3, 11))) == ["Trip"]
    assert titles(index.events_on(date(2024, 3, 12))) == ["Trip"]
    assert index.events_on(date(2024, 3, 13)) == []
    assert index.events_on(date(2024, 3, 9)) == []


def test_single_day_field_layout():
    index = EventIndex(SingleDayFields(date_parameter="when"), tz="UTC")
    index.add_events([{"title": "Dentist", "when": "2024-03-11"}])

    assert titles(index.events_on(date(2024, 3, 11))) == ["Dentist"]
    assert index.events_on(date(2024, 3, 12)) == []


def test_unparsable_dates_are_reported_not_raised():
    index = EventIndex(SingleDayFields(), tz="UTC")
    outcomes = index.add_events([
        {"title": "Good", "date": "2024-03-11"},
        {"title": "Bad", "date": "not a date"},
    ])

    assert isinstance(outcomes[0], Resolved)
    assert isinstance(outcomes[1], Unresolved)
    assert outcomes[1].ok is False
    assert "not a date" in outcomes[1].reason
    assert len(index) == 1
    assert [u.raw["title"] for u in index.unresolved] == ["Bad"]


def test_end_before_start_is_unresolved():
    outcome = resolve_event(
        {"title": "Backwards", "startDate": "2024-03-12", "endDate": "2024-03-10"},
        MultiDayFields(), "UTC",
    )
    assert isinstance(outcome, Unresolved)


def test_missing_bound_collapses_onto_the_other():
    outcome = resolve_event({"title": "Open", "startDate": "2024-03-10"}, MultiDayFields(), "UTC")
    assert isinstance(outcome, Resolved)
    assert outcome.event.start.date() == date(2024, 3, 10)
    assert outcome.event.end == outcome.event.start


def test_single_day_fallback_field():
    fields = MultiDayFields(single_day="date")
    index = EventIndex(fields, tz="UTC")
    index.add_events([
        {"title": "Call", "date": "2024-03-14"},
        {"title": "Trip", "startDate": "2024-03-13", "endDate": "2024-03-15"},
    ])
    assert titles(index.events_on(date(2024, 3, 14))) == ["Call", "Trip"]


def test_no_date_fields_without_fallback_is_unresolved():
    outcome = resolve_event({"title": "Nothing"}, MultiDayFields(), "UTC")
    assert isinstance(outcome, Unresolved)


def test_query_results_keep_insertion_order():
    index = EventIndex(MultiDayFields(), tz="UTC")
    index.add_events([
        {"title": "B", "startDate": "2024-03-12", "endDate": "2024-03-12"},
        {"title": "A", "startDate": "2024-03-10", "endDate": "2024-03-12"},
    ])
    assert titles(index.events_on(date(2024, 3, 12))) == ["B", "A"]
    assert titles(index.query_dates(date(2024, 3, 1), date(2024, 3, 31))) == ["B", "A"]


def test_remove_events_by_predicate():
    index = EventIndex(SingleDayFields(), tz="UTC")
    index.add_events([
        {"title": "A", "date": "2024-03-11"},
        {"title": "B", "date": "2024-03-11"},
        {"title": "C", "date": "2024-03-12"},
    ])

    assert index.remove_events(lambda raw: raw["title"] == "A") == 1
    assert titles(index.events_on(date(2024, 3, 11))) == ["B"]
    assert len(index) == 2
    assert index.remove_events(lambda raw: False) == 0


def test_set_events_replaces_everything():
    index = EventIndex(SingleDayFields(), tz="UTC")
    index.add_events([{"title": "Old", "date": "2024-03-11"}, {"title": "Broken", "date": "?"}])
    index.set_events([{"title": "New", "date": "2024-03-11"}])

    assert titles(index) == ["New"]
    assert index.unresolved == []


def test_timestamps_are_placed_by_calendar_timezone():
    index = EventIndex(SingleDayFields(), tz="UTC")
    index.add_events([{"title": "Late", "date": "2024-03-11T23:30:00-05:00"}])

    # 23:30 at UTC-5 is 04:30 UTC the next day
    assert index.events_on(date(2024, 3, 11)) == []
    assert titles(index.events_on(date(2024, 3, 12))) == ["Late"]


def test_rfc2822_and_date_objects():
    index = EventIndex(MultiDayFields(), tz="UTC")
    index.add_events([
        {"title": "Mail", "startDate": "Mon, 11 Mar 2024 09:30:00 +0000", "endDate": "Mon, 11 Mar 2024 10:00:00 +0000"},
        {"title": "Native", "startDate": date(2024, 3, 11), "endDate": date(2024, 3, 11)},
    ])
    assert titles(index.events_on(date(2024, 3, 11))) == ["Mail", "Native"]
