from datetime import date, datetime

import pytest
import pytz

from calgrid_core.dateparse import coerce_date, parse_date, parse_datetime


@pytest.mark.parametrize("value, expected", [
    ("2024-03-10", date(2024, 3, 10)),
    ("2024-03-10T09:30:00Z", date(2024, 3, 10)),
    ("Sun, 10 Mar 2024 09:30:00 +0000", date(2024, 3, 10)),
    ("March 10, 2024", date(2024, 3, 10)),
    (date(2024, 3, 10), date(2024, 3, 10)),
    (datetime(2024, 3, 10, 18, 0), date(2024, 3, 10)),
])
def test_parse_date_fallback_chain(value, expected):
    assert parse_date(value, "UTC") == expected


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2024-02-30", 42])
def test_unparsable_values_give_none(value):
    assert parse_datetime(value, "UTC") is None


def test_results_are_aware_in_calendar_timezone():
    berlin = pytz.timezone("Europe/Berlin")
    parsed = parse_datetime("2024-03-10T23:30:00Z", berlin)
    assert parsed.tzinfo is not None
    # 23:30 UTC is already the next day in Berlin
    assert parsed.date() == date(2024, 3, 11)

    naive = parse_datetime("2024-03-10T08:00:00", berlin)
    assert naive.hour == 8
    assert naive.utcoffset().total_seconds() == 3600


def test_date_values_become_local_midnight():
    parsed = parse_datetime(date(2024, 7, 1), "Europe/Berlin")
    assert (parsed.hour, parsed.minute) == (0, 0)
    assert parsed.utcoffset().total_seconds() == 7200


def test_coerce_date_rejects_garbage():
    assert coerce_date("2024-01-05", "UTC") == date(2024, 1, 5)
    with pytest.raises(ValueError):
        coerce_date("someday", "UTC")


def test_partial_dates_are_completed_from_the_reference():
    assert parse_date("March 10", "UTC", reference=date(2019, 6, 1)) == date(2019, 3, 10)
    assert parse_date("June 2031", "UTC", reference=date(2019, 6, 1)) == date(2031, 6, 1)
    # Complete strings ignore the reference
    assert parse_date("2024-03-10", "UTC", reference=date(2019, 6, 1)) == date(2024, 3, 10)
