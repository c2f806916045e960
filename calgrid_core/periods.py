"""
Calendar arithmetic for intervals.

Month and week alignment, building an interval for a view mode from its
first (or last) day, and the stepping used by navigation. Month arithmetic
goes through dateutil's relativedelta so that day-of-month overflow clamps
to the end of the month (Jan 31 + 1 month = Feb 29 in a leap year).
"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from .model import Interval, ViewMode, weekday_index


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return start_of_month(d) + relativedelta(months=1, days=-1)


def add_months(d: date, months: int) -> date:
    return d + relativedelta(months=months)


def add_years(d: date, years: int) -> date:
    return d + relativedelta(years=years)


def month_key(d: date) -> tuple[int, int]:
    """(year, month) for comparisons at month granularity."""
    return (d.year, d.month)


def start_of_week(d: date, week_offset: int = 0) -> date:
    """
    First day of the week containing d.

    week_offset picks the first weekday (0=Sunday, 1=Monday, ...).
    """
    diff = (weekday_index(d) - week_offset) % 7
    return d - timedelta(days=diff)


def end_of_week(d: date, week_offset: int = 0) -> date:
    return start_of_week(d, week_offset) + timedelta(days=6)


def align_start(d: date, mode: ViewMode) -> date:
    """Align a date to the start of the mode's unit."""
    if mode.is_month_based:
        return start_of_month(d)
    return d


def interval_for(start: date, mode: ViewMode) -> Interval:
    """The interval of the given mode beginning at (the aligned) start."""
    start = align_start(start, mode)
    if mode.is_month_based:
        end = end_of_month(add_months(start, mode.span - 1))
    else:
        end = start + timedelta(days=mode.span - 1)
    return Interval(start, end)


def interval_ending(end: date, mode: ViewMode) -> Interval:
    """The interval of the given mode whose last unit contains end."""
    if mode.is_month_based:
        start = add_months(start_of_month(end), -(mode.span - 1))
        return Interval(start, end_of_month(end))
    return Interval(end - timedelta(days=mode.span - 1), end)


def step(interval: Interval, mode: ViewMode, direction: int) -> Interval:
    """
    Move the interval by one stride.

    direction is +1 (forward) or -1 (back). Month modes re-align to the first
    of the resulting month.
    """
    if mode.is_month_based:
        start = add_months(interval.start, direction * mode.step)
    else:
        start = interval.start + timedelta(days=direction * mode.step)
    return interval_for(start, mode)


def shift_years(interval: Interval, mode: ViewMode, years: int) -> Interval:
    """
    Move the interval by whole years, keeping month and day of month.

    The end is re-derived from the shifted start so the interval keeps its
    span across leap days.
    """
    return interval_for(add_years(interval.start, years), mode)


def month_starts(interval: Interval) -> list[date]:
    """First day of every month the interval touches."""
    months = []
    current = start_of_month(interval.start)
    while current <= interval.end:
        months.append(current)
        current = add_months(current, 1)
    return months


def iter_days(first: date, last: date):
    """Every date from first to last inclusive."""
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)
