"""
Constraint clamping and navigation gates.

Constraints bound how far the calendar may navigate. Month-based modes
compare at month granularity (a start constraint of Feb 15 still allows the
February page); day windows compare at week granularity, so the window may
begin on the first day of the week that contains the constraint.
"""

from datetime import date
from typing import Optional

from .debug import debug_print
from .model import Constraints, Interval, NavigationGates, ViewMode, OPEN_GATES
from .periods import (
    end_of_month, end_of_week, interval_ending, interval_for, month_key,
    shift_years, start_of_month, start_of_week, step,
)


def _debug_print(msg: str) -> None:
    debug_print("CLAMP", msg)


class ConstraintClamp:
    """Keeps intervals inside Constraints and derives NavigationGates."""

    def __init__(self, constraints: Optional[Constraints] = None, week_offset: int = 0):
        self.constraints = constraints or Constraints()
        self.week_offset = week_offset

    # ==================== Bounds ====================

    def lower_bound(self, mode: ViewMode) -> Optional[date]:
        """Earliest date an interval may start on, or None."""
        start = self.constraints.start
        if start is None:
            return None
        if mode.is_month_based:
            return start_of_month(start)
        return start_of_week(start, self.week_offset)

    def upper_bound(self, mode: ViewMode) -> Optional[date]:
        """Latest date an interval may end on, or None."""
        end = self.constraints.end
        if end is None:
            return None
        if mode.is_month_based:
            return end_of_month(end)
        return end_of_week(end, self.week_offset)

    # ==================== Clamping ====================

    def clamp(self, interval: Interval, mode: ViewMode) -> Interval:
        """
        Move interval inside the constraints, keeping its span.

        When the constraint range is shorter than the span the start bound
        wins and the interval overhangs the end bound.
        """
        lower = self.lower_bound(mode)
        upper = self.upper_bound(mode)
        clamped = interval

        if lower is not None and clamped.start < lower:
            clamped = interval_for(lower, mode)

        if upper is not None and clamped.end > upper:
            clamped = interval_ending(upper, mode)
            if lower is not None and clamped.start < lower:
                clamped = interval_for(lower, mode)

        if clamped != interval:
            _debug_print(f"clamped {interval.start}..{interval.end} to {clamped.start}..{clamped.end}")
        return clamped

    # ==================== Gates ====================

    def allows_start(self, interval: Interval, mode: ViewMode) -> bool:
        lower = self.lower_bound(mode)
        return lower is None or interval.start >= lower

    def allows_end(self, interval: Interval, mode: ViewMode) -> bool:
        upper = self.upper_bound(mode)
        return upper is None or interval.end <= upper

    def gates(self, interval: Interval, mode: ViewMode, today: date) -> NavigationGates:
        """Which navigation steps from interval stay inside the constraints."""
        if self.constraints.is_empty:
            return OPEN_GATES

        start = self.constraints.start
        end = self.constraints.end
        today_key = month_key(today)
        can_today = not (
            (start is not None and month_key(start) > today_key)
            or (end is not None and month_key(end) < today_key)
        )

        return NavigationGates(
            can_prev=self.allows_start(step(interval, mode, -1), mode),
            can_next=self.allows_end(step(interval, mode, 1), mode),
            can_prev_year=self.allows_start(shift_years(interval, mode, -1), mode),
            can_next_year=self.allows_end(shift_years(interval, mode, 1), mode),
            can_today=can_today,
        )
