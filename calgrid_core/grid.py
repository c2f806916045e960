"""
Grid construction.

Turns the committed interval into the ordered list of day cells the
renderer lays out seven to a row. Month-based modes pad every month to
whole weeks (optionally to six full rows) with either the neighbouring
months' days or empty placeholders. Day windows are laid out as-is.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from .event_index import EventIndex
from .model import (
    Constraints, DayCell, DayFlag, Grid, Interval, MonthBlock, ViewMode,
    weekday_index,
)
from .periods import add_months, end_of_month, iter_days, month_starts, start_of_month

FULL_GRID_CELLS = 42


@dataclass
class GridOptions:
    """Layout switches for GridBuilder."""
    week_offset: int = 0
    show_adjacent_months: bool = True
    force_six_rows: bool = False


class GridBuilder:
    """Builds a Grid from an interval, the event index and the layout options."""

    def __init__(self, options: Optional[GridOptions] = None):
        self.options = options if options is not None else GridOptions()

    def build(
        self,
        interval: Interval,
        mode: ViewMode,
        index: EventIndex,
        today: date,
        constraints: Optional[Constraints] = None,
        selected_date: Optional[date] = None,
    ) -> Grid:
        """
        Build the grid for interval.

        Args:
            interval: committed interval
            mode: view mode the interval belongs to
            index: events to attach to cells
            today: current date, for the today/past flags
            constraints: dates outside them are flagged inactive
            selected_date: date to flag as selected

        Returns:
            Grid with cells, per-month blocks (month modes) and the events of
            the interval and its adjacent months.
        """
        constraints = constraints or Constraints()
        classifier = _DayClassifier(index, today, constraints, selected_date)

        if not mode.is_month_based:
            cells = tuple(classifier.cell(d) for d in iter_days(interval.start, interval.end))
            return Grid(
                cells=cells,
                events_this_interval=tuple(index.query_dates(interval.start, interval.end)),
            )

        blocks = tuple(
            MonthBlock(month=month, cells=self._month_cells(month, classifier))
            for month in month_starts(interval)
        )
        cells = tuple(cell for block in blocks for cell in block.cells)

        events_last_month: tuple = ()
        events_next_month: tuple = ()
        if self.options.show_adjacent_months:
            last_month = add_months(start_of_month(interval.start), -1)
            next_month = add_months(start_of_month(interval.end), 1)
            events_last_month = tuple(index.query_dates(last_month, end_of_month(last_month)))
            events_next_month = tuple(index.query_dates(next_month, end_of_month(next_month)))

        return Grid(
            cells=cells,
            months=blocks,
            events_this_interval=tuple(index.query_dates(interval.start, interval.end)),
            events_last_month=events_last_month,
            events_next_month=events_next_month,
        )

    def _month_cells(self, month: date, classifier: '_DayClassifier') -> tuple:
        opts = self.options
        first = month
        last = end_of_month(month)
        cells: list[DayCell] = []

        # Leading days of the previous month (or blanks) up to the week start
        diff = (weekday_index(first) - opts.week_offset) % 7
        for i in range(diff, 0, -1):
            if opts.show_adjacent_months:
                cells.append(classifier.cell(first - timedelta(days=i), reference=month))
            else:
                cells.append(DayCell(date=None, flags=frozenset({DayFlag.LAST_MONTH})))

        for d in iter_days(first, last):
            cells.append(classifier.cell(d, reference=month))

        # Trailing days until the last row is full, then up to six rows if forced
        following = last + timedelta(days=1)
        target = len(cells) + (-len(cells) % 7)
        if opts.force_six_rows:
            target = max(target, FULL_GRID_CELLS)
        while len(cells) < target:
            if opts.show_adjacent_months:
                cells.append(classifier.cell(following, reference=month))
                following += timedelta(days=1)
            else:
                cells.append(DayCell(date=None, flags=frozenset({DayFlag.NEXT_MONTH})))

        return tuple(cells)


class _DayClassifier:
    """Computes flags and events for single days."""

    def __init__(self, index: EventIndex, today: date, constraints: Constraints,
                 selected_date: Optional[date]):
        self.index = index
        self.today = today
        self.constraints = constraints
        self.selected_date = selected_date

    def cell(self, d: date, reference: Optional[date] = None) -> DayCell:
        flags = set()
        events = self.index.events_on(d)

        if d == self.today:
            flags.add(DayFlag.TODAY)
        if d < self.today:
            flags.add(DayFlag.PAST)
        if events:
            flags.add(DayFlag.EVENT)

        if reference is not None:
            flags.update(adjacent_month_flags(d, reference))

        if self.constraints.excludes(d):
            flags.add(DayFlag.INACTIVE)
        if self.selected_date is not None and d == self.selected_date:
            flags.add(DayFlag.SELECTED)

        return DayCell(date=d, flags=frozenset(flags), events=tuple(events))


def adjacent_month_flags(d: date, reference: date) -> set:
    """
    Flags for a day shown in the grid of reference's month.

    Only the month number is compared, so a January day in a December grid
    has a smaller month but a different year and counts as next month.
    """
    if d.month < reference.month:
        side = DayFlag.LAST_MONTH if d.year == reference.year else DayFlag.NEXT_MONTH
    elif d.month > reference.month:
        side = DayFlag.NEXT_MONTH if d.year == reference.year else DayFlag.LAST_MONTH
    else:
        return set()
    return {DayFlag.ADJACENT_MONTH, side}
