from datetime import date

from calgrid_core.constraints import ConstraintClamp
from calgrid_core.model import OPEN_GATES, Constraints, DayWindow, Interval, MultiMonth, SingleMonth
from calgrid_core.periods import interval_for

TODAY = date(2024, 3, 15)


def test_clamp_to_start_month():
    clamp = ConstraintClamp(Constraints(start=date(2024, 2, 15)))
    mode = SingleMonth()

    clamped = clamp.clamp(interval_for(date(2024, 1, 1), mode), mode)

    assert clamped == Interval(date(2024, 2, 1), date(2024, 2, 29))
    gates = clamp.gates(clamped, mode, TODAY)
    assert gates.can_prev is False
    assert gates.can_next is True


def test_single_reachable_interval_when_bounds_coincide():
    day = date(2024, 5, 10)
    clamp = ConstraintClamp(Constraints(start=day, end=day))
    mode = SingleMonth()

    for start in (date(2023, 1, 1), date(2024, 5, 1), date(2025, 9, 1)):
        assert clamp.clamp(interval_for(start, mode), mode) == interval_for(date(2024, 5, 1), mode)

    gates = clamp.gates(interval_for(day, mode), mode, TODAY)
    assert gates.can_prev is False
    assert gates.can_next is False
    assert gates.can_prev_year is False
    assert gates.can_next_year is False


def test_clamp_to_end_keeps_span():
    clamp = ConstraintClamp(Constraints(end=date(2024, 6, 20)))
    mode = MultiMonth(3)

    clamped = clamp.clamp(interval_for(date(2024, 6, 1), mode), mode)

    assert clamped == Interval(date(2024, 4, 1), date(2024, 6, 30))


def test_start_bound_wins_when_range_is_shorter_than_span():
    clamp = ConstraintClamp(Constraints(start=date(2024, 3, 1), end=date(2024, 5, 31)))
    mode = MultiMonth(6)

    clamped = clamp.clamp(interval_for(date(2024, 1, 1), mode), mode)

    assert clamped.start == date(2024, 3, 1)
    assert clamped.end == date(2024, 8, 31)


def test_day_window_bounds_use_the_constraint_week():
    # 2024-03-13 is a Wednesday; its week starts Sunday the 10th
    clamp = ConstraintClamp(Constraints(start=date(2024, 3, 13)))
    mode = DayWindow(7)

    clamped = clamp.clamp(interval_for(date(2024, 3, 1), mode), mode)
    assert clamped.start == date(2024, 3, 10)

    monday_clamp = ConstraintClamp(Constraints(start=date(2024, 3, 13)), week_offset=1)
    assert monday_clamp.clamp(interval_for(date(2024, 3, 1), mode), mode).start == date(2024, 3, 11)


def test_inside_interval_is_untouched():
    clamp = ConstraintClamp(Constraints(start=date(2024, 1, 1), end=date(2024, 12, 31)))
    interval = interval_for(date(2024, 6, 1), SingleMonth())
    assert clamp.clamp(interval, SingleMonth()) is interval


def test_year_gates():
    clamp = ConstraintClamp(Constraints(start=date(2023, 6, 1), end=date(2025, 2, 1)))
    gates = clamp.gates(interval_for(date(2024, 3, 1), SingleMonth()), SingleMonth(), TODAY)

    assert gates.can_prev is True
    assert gates.can_next is True
    assert gates.can_prev_year is False
    assert gates.can_next_year is False


def test_today_gate_compares_months():
    mode = SingleMonth()
    interval = interval_for(date(2024, 6, 1), mode)

    future = ConstraintClamp(Constraints(start=date(2024, 5, 1)))
    assert future.gates(interval, mode, TODAY).can_today is False

    ends_this_month = ConstraintClamp(Constraints(end=date(2024, 3, 1)))
    assert ends_this_month.gates(interval_for(date(2024, 2, 1), mode), mode, TODAY).can_today is True


def test_no_constraints_opens_every_gate():
    clamp = ConstraintClamp()
    assert clamp.gates(interval_for(TODAY, SingleMonth()), SingleMonth(), TODAY) == OPEN_GATES
