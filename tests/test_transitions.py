from datetime import date

from calgrid_core.model import DayWindow, MultiMonth, SingleMonth
from calgrid_core.periods import interval_for
from calgrid_core.transitions import Transition, TransitionClassifier

T = Transition
classify = TransitionClassifier().classify


def month(year, m):
    return interval_for(date(year, m, 1), SingleMonth())


def test_next_month():
    assert classify(month(2024, 1), month(2024, 2), SingleMonth()) == [T.NEXT_MONTH, T.MONTH_CHANGE]


def test_december_to_january_is_next_month_and_next_year():
    assert classify(month(2023, 12), month(2024, 1), SingleMonth()) == [
        T.NEXT_MONTH, T.MONTH_CHANGE, T.NEXT_YEAR, T.YEAR_CHANGE,
    ]


def test_january_to_december_is_previous_month_and_previous_year():
    assert classify(month(2024, 1), month(2023, 12), SingleMonth()) == [
        T.PREVIOUS_MONTH, T.MONTH_CHANGE, T.PREVIOUS_YEAR, T.YEAR_CHANGE,
    ]


def test_same_month_next_year():
    assert classify(month(2024, 3), month(2025, 3), SingleMonth()) == [
        T.MONTH_CHANGE, T.NEXT_YEAR, T.YEAR_CHANGE,
    ]


def test_jump_within_year_only_changes_month():
    assert classify(month(2024, 1), month(2024, 6), SingleMonth()) == [T.MONTH_CHANGE]


def test_no_change():
    assert classify(month(2024, 1), month(2024, 1), SingleMonth()) == []


def test_ranged_modes_speak_in_intervals():
    mode = MultiMonth(2)
    old = interval_for(date(2024, 1, 1), mode)
    new = interval_for(date(2024, 2, 1), mode)
    assert classify(old, new, mode) == [T.NEXT_INTERVAL, T.INTERVAL_CHANGE]
    assert classify(new, old, mode) == [T.PREVIOUS_INTERVAL, T.INTERVAL_CHANGE]

    window = DayWindow(7)
    assert classify(interval_for(date(2024, 1, 1), window), interval_for(date(2024, 1, 1), window), window) == []


def test_callback_names():
    assert T.MONTH_CHANGE.callback_name == "on_month_change"
    assert T.NEXT_INTERVAL.is_interval
    assert not T.NEXT_YEAR.is_interval
