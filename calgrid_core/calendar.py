"""
The calendar controller.

A Calendar is bound to one anchor (the container its grid is rendered into)
and owns the committed interval, the event index, the constraints and the
grid built from them. Every navigation call is one synchronous transition:

    candidate interval -> gate check -> clamp -> commit -> rebuild grid
    -> classify (old, new) -> callbacks

Callbacks only run after the new state is committed, so a callback that
navigates again sees the calendar as it is, not half-updated.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Iterable, Optional, Union

from .constraints import ConstraintClamp
from .dateparse import coerce_date, parse_date
from .debug import debug_print
from .event_index import EventFields, EventIndex, RawEvent, Resolution, SingleDayFields
from .grid import GridBuilder, GridOptions
from .model import (
    Constraints, DayCell, DayFlag, Grid, Interval, NavigationGates, RenderData,
    ResolvedEvent, SingleMonth, ViewMode, weekday_index,
)
from .periods import interval_for, shift_years, start_of_week, step
from .registry import AnchorRegistry, default_registry
from .timezone_utils import Clock, resolve_timezone, system_clock, today as clock_today
from .transitions import Transition, TransitionClassifier


def _debug_print(msg: str) -> None:
    debug_print("CALENDAR", msg)


DEFAULT_DAY_NAMES = ("S", "M", "T", "W", "T", "F", "S")
DEFAULT_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

CALLBACK_NAMES = frozenset({
    "click", "today", "ready", "done_rendering",
    "next_month", "previous_month", "on_month_change",
    "next_year", "previous_year", "on_year_change",
    "next_interval", "previous_interval", "on_interval_change",
})

DateLike = Union[date, str]


@dataclass
class CalendarOptions:
    """Construction options for a Calendar."""
    view_mode: ViewMode = field(default_factory=SingleMonth)
    # First day of the initial interval (ranged modes), e.g. "2024-03-10"
    start_date: Optional[DateLike] = None
    # Month to open on when start_date is not given
    start_with_month: Optional[DateLike] = None
    constraints: Constraints = field(default_factory=Constraints)
    event_fields: EventFields = field(default_factory=SingleDayFields)
    week_offset: int = 0
    show_adjacent_months: bool = True
    adjacent_days_change_month: bool = False
    force_six_rows: bool = False
    track_selected_date: bool = False
    selected_date: Optional[DateLike] = None
    ignore_inactive_days_in_selection: bool = False
    # Weekday names starting with Sunday; rotated by week_offset for display
    day_names: tuple = DEFAULT_DAY_NAMES
    month_names: tuple = DEFAULT_MONTH_NAMES
    timezone: Optional[str] = None
    extras: Any = None


@dataclass(frozen=True)
class NavigationResult:
    """
    Outcome of a navigation call.

    blocked is set when a navigation gate vetoed the call, warning when the
    call does not apply to the current view mode. Either way the interval is
    unchanged and no callbacks ran.
    """
    changed: bool
    interval: Interval
    transitions: tuple = ()
    warning: Optional[str] = None
    blocked: bool = False

    @property
    def ok(self) -> bool:
        return self.warning is None and not self.blocked


@dataclass(frozen=True)
class ClickTarget:
    """What a click on a grid cell refers to."""
    date: Optional[date]
    events: tuple = ()
    cell: Optional[DayCell] = None


class Calendar:
    """
    Navigable calendar bound to an anchor.

    Args:
        anchor: the container this calendar renders into; one calendar per anchor
        options: CalendarOptions
        events: initial raw event records
        callbacks: callback name -> callable (see CALLBACK_NAMES)
        clock: zero-argument callable returning the current aware datetime
        registry: anchor registry, defaults to the process-wide one

    Raises:
        DuplicateBindingError: anchor already has a calendar.
    """

    def __init__(
        self,
        anchor,
        options: Optional[CalendarOptions] = None,
        events: Iterable[RawEvent] = (),
        callbacks: Optional[dict[str, Callable]] = None,
        clock: Optional[Clock] = None,
        registry: Optional[AnchorRegistry] = None,
    ):
        self._callbacks: dict[str, Callable] = {}
        for name, callback in (callbacks or {}).items():
            self.on(name, callback)

        self._options = options if options is not None else CalendarOptions()
        self.tz = resolve_timezone(self._options.timezone)
        self._clock: Clock = clock if clock is not None else system_clock(self.tz)

        self._index = EventIndex(self._options.event_fields, self.tz, today=self.today_date)
        self._index.set_events(events)

        self._selected_date: Optional[date] = parse_date(self._options.selected_date, self.tz, self.today_date())
        self._classifier = TransitionClassifier()
        self._grid = Grid()
        self._gates = NavigationGates()
        self._configure_layout()

        self._interval = self._clamp.clamp(self._initial_interval(), self.mode)

        self._registry = registry if registry is not None else default_registry
        # Bound only once the state is complete
        self._registry.bind(anchor, self)
        self.anchor = anchor
        try:
            self._render()
            self._fire("ready")
        except BaseException:
            self.destroy()
            raise

    # ==================== Properties ====================

    @property
    def options(self) -> CalendarOptions:
        """A copy of the current options."""
        return dataclasses.replace(self._options)

    @property
    def mode(self) -> ViewMode:
        return self._options.view_mode

    @property
    def constraints(self) -> Constraints:
        return self._options.constraints

    @property
    def interval(self) -> Interval:
        return self._interval

    @property
    def month(self) -> date:
        """First day of the month the interval starts in."""
        return self._interval.month

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def gates(self) -> NavigationGates:
        return self._gates

    @property
    def selected_date(self) -> Optional[date]:
        return self._selected_date

    @property
    def events(self) -> list[ResolvedEvent]:
        return self._index.events

    @property
    def unresolved_events(self):
        """Records left out because their dates could not be parsed."""
        return self._index.unresolved

    @property
    def days_of_the_week(self) -> tuple:
        """Weekday names rotated so the configured first weekday comes first."""
        names = tuple(self._options.day_names)
        offset = self._options.week_offset % 7
        return names[offset:] + names[:offset]

    @property
    def render_data(self) -> RenderData:
        mode = self.mode
        single = not mode.is_ranged
        return RenderData(
            days=self._grid.cells,
            months=self._grid.months,
            days_of_the_week=self.days_of_the_week,
            number_of_rows=self._grid.rows,
            month=self._options.month_names[self.month.month - 1] if single else None,
            year=self.month.year if single else None,
            interval_start=self._interval.start,
            interval_end=self._interval.end,
            events_this_interval=self._grid.events_this_interval,
            events_last_month=self._grid.events_last_month,
            events_next_month=self._grid.events_next_month,
            gates=self._gates,
            extras=self._options.extras,
        )

    def today_date(self) -> date:
        return clock_today(self._clock, self.tz)

    # ==================== Callbacks ====================

    def on(self, name: str, callback: Optional[Callable]):
        """Register (or with None, remove) the callback for name."""
        if name not in CALLBACK_NAMES:
            raise ValueError(f"Unknown callback {name!r}")
        if callback is None:
            self._callbacks.pop(name, None)
        else:
            self._callbacks[name] = callback

    def _fire(self, name: str, *args):
        callback = self._callbacks.get(name)
        if callback is not None:
            callback(self, *args)

    def _dispatch(self, transitions: Iterable[Transition]):
        for transition in transitions:
            if transition.is_interval:
                self._fire(transition.callback_name, self._interval.start, self._interval.end)
            else:
                self._fire(transition.callback_name, self.month)

    # ==================== Internals ====================

    def _configure_layout(self):
        opts = self._options
        self._clamp = ConstraintClamp(opts.constraints, opts.week_offset)
        self._builder = GridBuilder(GridOptions(
            week_offset=opts.week_offset,
            show_adjacent_months=opts.show_adjacent_months,
            force_six_rows=opts.force_six_rows,
        ))

    def _initial_interval(self) -> Interval:
        opts = self._options
        mode = self.mode
        start = parse_date(opts.start_date, self.tz, self.today_date()) if mode.is_ranged else None
        if start is None:
            start = parse_date(opts.start_with_month, self.tz, self.today_date())
            if start is not None:
                start = start.replace(day=1)
        if start is None:
            today = self.today_date()
            start = today if mode.is_month_based else start_of_week(today, opts.week_offset)
        return interval_for(start, mode)

    def _render(self):
        """Rebuild grid and gates from the committed state."""
        today = self.today_date()
        self._grid = self._builder.build(
            self._interval,
            self.mode,
            self._index,
            today,
            constraints=self.constraints,
            selected_date=self._selected_date,
        )
        self._gates = self._clamp.gates(self._interval, self.mode, today)
        self._fire("done_rendering")

    def _navigate(self, candidate: Interval, allowed: bool = True,
                  with_callbacks: bool = False, always_render: bool = True) -> NavigationResult:
        old = self._interval
        if not allowed:
            _debug_print(f"navigation blocked at {old.start}..{old.end}")
            return NavigationResult(changed=False, interval=old, blocked=True)

        new = self._clamp.clamp(candidate, self.mode)
        changed = new != old
        self._interval = new
        if changed or always_render:
            self._render()

        transitions = tuple(self._classifier.classify(old, new, self.mode))
        if with_callbacks:
            self._dispatch(transitions)
        return NavigationResult(changed=changed, interval=new, transitions=transitions)

    def _reject(self, message: str) -> NavigationResult:
        _debug_print(f"warning: {message}")
        return NavigationResult(changed=False, interval=self._interval, warning=message)

    # ==================== Navigation ====================

    def back(self, with_callbacks: bool = False) -> NavigationResult:
        """Go back one stride."""
        return self._navigate(step(self._interval, self.mode, -1),
                              allowed=self._gates.can_prev, with_callbacks=with_callbacks)

    def forward(self, with_callbacks: bool = False) -> NavigationResult:
        """Go forward one stride."""
        return self._navigate(step(self._interval, self.mode, 1),
                              allowed=self._gates.can_next, with_callbacks=with_callbacks)

    previous = back
    next = forward

    def previous_year(self, with_callbacks: bool = False) -> NavigationResult:
        return self._navigate(shift_years(self._interval, self.mode, -1),
                              allowed=self._gates.can_prev_year, with_callbacks=with_callbacks)

    def next_year(self, with_callbacks: bool = False) -> NavigationResult:
        return self._navigate(shift_years(self._interval, self.mode, 1),
                              allowed=self._gates.can_next_year, with_callbacks=with_callbacks)

    def today(self, with_callbacks: bool = False) -> NavigationResult:
        """
        Go to the interval containing today.

        Day windows start on the weekday of the configured start date, or on
        Sunday when none is configured. The grid is only rebuilt when the
        interval actually moves, but the today callback fires regardless.
        """
        today = self.today_date()
        if self.mode.is_month_based:
            candidate = interval_for(today, self.mode)
        else:
            configured = parse_date(self._options.start_date, self.tz, self.today_date())
            anchor_weekday = weekday_index(configured) if configured is not None else 0
            offset = (weekday_index(today) - anchor_weekday) % 7
            candidate = interval_for(today - timedelta(days=offset), self.mode)

        result = self._navigate(candidate, allowed=self._gates.can_today,
                                with_callbacks=False, always_render=False)
        if with_callbacks and not result.blocked:
            self._fire("today", self.month)
            self._dispatch(result.transitions)
        return result

    def set_month(self, month: int, with_callbacks: bool = False) -> NavigationResult:
        """Jump to month (1-12) of the current year. Single-month calendars only."""
        if self.mode.is_ranged:
            return self._reject("set_month() does not apply to a custom interval; "
                                "use set_interval_start() instead")
        if not 1 <= month <= 12:
            raise ValueError(f"month must be within 1..12, got {month!r}")
        candidate = interval_for(self._interval.start.replace(month=month, day=1), self.mode)
        return self._navigate(candidate, with_callbacks=with_callbacks)

    def set_year(self, year: int, with_callbacks: bool = False) -> NavigationResult:
        """Jump to the current month of year. Single-month calendars only."""
        if self.mode.is_ranged:
            return self._reject("set_year() does not apply to a custom interval; "
                                "use set_interval_start() instead")
        candidate = interval_for(self._interval.start.replace(year=year, day=1), self.mode)
        return self._navigate(candidate, with_callbacks=with_callbacks)

    def set_interval_start(self, new_start: DateLike, with_callbacks: bool = False) -> NavigationResult:
        """Start the interval at new_start (aligned to the mode's unit). Ranged calendars only."""
        if not self.mode.is_ranged:
            return self._reject("set_interval_start() needs a custom interval; "
                                "use set_month() or set_year() instead")
        candidate = interval_for(coerce_date(new_start, self.tz, self.today_date()), self.mode)
        return self._navigate(candidate, with_callbacks=with_callbacks)

    # ==================== Bulk Replacement ====================

    def set_view_mode(self, mode: ViewMode, start: Optional[DateLike] = None) -> Interval:
        """Switch view mode, re-deriving the interval from start (or the current start)."""
        self._options = dataclasses.replace(self._options, view_mode=mode)
        first = coerce_date(start, self.tz, self.today_date()) if start is not None else self._interval.start
        self._interval = self._clamp.clamp(interval_for(first, mode), mode)
        self._render()
        return self._interval

    def set_constraints(self, constraints: Optional[Constraints]) -> Interval:
        """Replace the constraints and pull the interval inside them."""
        self._options = dataclasses.replace(self._options, constraints=constraints or Constraints())
        self._configure_layout()
        self._interval = self._clamp.clamp(self._interval, self.mode)
        self._render()
        return self._interval

    def set_extras(self, extras: Any):
        self._options = dataclasses.replace(self._options, extras=extras)
        self._render()

    # ==================== Events ====================

    def set_events(self, events: Iterable[RawEvent]) -> list[Resolution]:
        """Replace all events and re-render."""
        outcomes = self._index.set_events(events)
        self._render()
        return outcomes

    def add_events(self, events: Iterable[RawEvent], rerender: bool = True) -> list[Resolution]:
        outcomes = self._index.add_events(events)
        if rerender:
            self._render()
        return outcomes

    def remove_events(self, predicate: Callable[[RawEvent], bool]) -> int:
        """Drop events whose raw record matches predicate and re-render."""
        removed = self._index.remove_events(predicate)
        self._render()
        return removed

    # ==================== Selection & Clicks ====================

    def select(self, day: Optional[DateLike]):
        """Mark day as selected (None clears the selection)."""
        self._selected_date = coerce_date(day, self.tz, self.today_date()) if day is not None else None
        self._render()

    def click(self, target: Union[DayCell, DateLike]) -> ClickTarget:
        """
        Handle a click on a grid cell.

        target is the clicked DayCell, its stable id or its date. Fires the
        click callback, pages to the adjacent month when configured, and
        updates the selected date when tracking is on.
        """
        if isinstance(target, DayCell):
            cell = target
            day = cell.date
        else:
            day = coerce_date(target, self.tz, self.today_date())
            cell = self._grid.find(day.isoformat())

        events = tuple(self._index.events_on(day)) if day is not None else ()
        click_target = ClickTarget(date=day, events=events, cell=cell)
        self._fire("click", click_target)

        if self._options.adjacent_days_change_month and cell is not None:
            if cell.has(DayFlag.LAST_MONTH):
                self.back(with_callbacks=True)
            elif cell.has(DayFlag.NEXT_MONTH):
                self.forward(with_callbacks=True)

        if self._options.track_selected_date and day is not None:
            inactive = cell.is_inactive if cell is not None else self.constraints.excludes(day)
            if not (self._options.ignore_inactive_days_in_selection and inactive):
                self.select(day)

        return click_target

    # ==================== Lifecycle ====================

    def destroy(self):
        """Release the anchor. The calendar must not be used afterwards."""
        if self.anchor is None:
            return
        self._registry.unbind(self.anchor)
        self.anchor = None

    @classmethod
    def from_anchor(cls, anchor, registry: Optional[AnchorRegistry] = None) -> Optional['Calendar']:
        """The calendar bound to anchor, if any."""
        return (registry if registry is not None else default_registry).lookup(anchor)
