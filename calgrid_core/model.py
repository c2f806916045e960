"""
Data model for calgrid.

View modes, the committed interval, constraints, navigation gates and the
grid cells handed to the rendering layer. Everything here is immutable;
the Calendar replaces values instead of mutating them.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterator, Mapping, Optional


# ==================== View Modes ====================

class ViewMode:
    """
    Base class for the three view modes.

    unit is the alignment unit of the interval ("month" or "day"), span the
    number of units the interval covers and stride the number of units
    back()/forward() move by.
    """
    unit: str = "month"
    is_ranged: bool = False

    @property
    def span(self) -> int:
        raise NotImplementedError

    @property
    def step(self) -> int:
        raise NotImplementedError

    @property
    def is_month_based(self) -> bool:
        return self.unit == "month"


def _check_positive(name: str, value):
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class SingleMonth(ViewMode):
    """The classic one-month calendar."""

    @property
    def span(self) -> int:
        return 1

    @property
    def step(self) -> int:
        return 1


@dataclass(frozen=True)
class MultiMonth(ViewMode):
    """count consecutive months, paged by stride months."""
    count: int
    stride: int = 1
    is_ranged = True

    def __post_init__(self):
        _check_positive("count", self.count)
        _check_positive("stride", self.stride)

    @property
    def span(self) -> int:
        return self.count

    @property
    def step(self) -> int:
        return self.stride


@dataclass(frozen=True)
class DayWindow(ViewMode):
    """A run of days, e.g. DayWindow(14, stride=7) for a two-week view paged by week."""
    days: int
    stride: int = 1
    unit = "day"
    is_ranged = True

    def __post_init__(self):
        _check_positive("days", self.days)
        _check_positive("stride", self.stride)

    @property
    def span(self) -> int:
        return self.days

    @property
    def step(self) -> int:
        return self.stride


# ==================== Interval & Constraints ====================

@dataclass(frozen=True)
class Interval:
    """The committed date range, both ends inclusive."""
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Interval end {self.end} precedes start {self.start}")

    @property
    def month(self) -> date:
        """First day of the month the interval starts in."""
        return self.start.replace(day=1)


@dataclass(frozen=True)
class Constraints:
    """Optional navigation boundaries."""
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None

    def excludes(self, d: date) -> bool:
        """True if d lies strictly outside the boundaries."""
        if self.start is not None and d < self.start:
            return True
        if self.end is not None and d > self.end:
            return True
        return False


@dataclass(frozen=True)
class NavigationGates:
    """Which navigation actions are currently permitted."""
    can_prev: bool = True
    can_next: bool = True
    can_prev_year: bool = True
    can_next_year: bool = True
    can_today: bool = True


OPEN_GATES = NavigationGates()


# ==================== Events ====================

@dataclass(frozen=True, eq=False)
class ResolvedEvent:
    """An event normalized to an inclusive [start, end] instant range."""
    start: datetime
    end: datetime
    raw: Mapping[str, Any]

    @property
    def title(self) -> str:
        title = self.raw.get('title')
        return str(title) if title is not None else ''

    def get(self, key: str, default=None):
        """Read a field of the original record."""
        return self.raw.get(key, default)


# ==================== Grid ====================

class DayFlag(Enum):
    TODAY = "today"
    PAST = "past"
    EVENT = "event"
    ADJACENT_MONTH = "adjacent-month"
    LAST_MONTH = "last-month"
    NEXT_MONTH = "next-month"
    INACTIVE = "inactive"
    SELECTED = "selected"


def weekday_index(d: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class DayCell:
    """
    One grid position.

    Real cells carry their date and the events touching it. Placeholder
    cells (adjacent months hidden) have no date and only carry LAST_MONTH or
    NEXT_MONTH so the renderer knows which side of the month they pad.
    """
    date: Optional[date]
    flags: frozenset = frozenset()
    events: tuple = ()

    @property
    def is_placeholder(self) -> bool:
        return self.date is None

    @property
    def day(self) -> Optional[int]:
        return self.date.day if self.date is not None else None

    @property
    def weekday(self) -> Optional[int]:
        return weekday_index(self.date) if self.date is not None else None

    @property
    def stable_id(self) -> Optional[str]:
        """ISO date string identifying the cell, None for placeholders."""
        return self.date.isoformat() if self.date is not None else None

    def has(self, flag: DayFlag) -> bool:
        return flag in self.flags

    @property
    def is_today(self) -> bool:
        return DayFlag.TODAY in self.flags

    @property
    def is_inactive(self) -> bool:
        return DayFlag.INACTIVE in self.flags

    @property
    def is_adjacent_month(self) -> bool:
        return DayFlag.ADJACENT_MONTH in self.flags

    @property
    def class_names(self) -> list[str]:
        """Flag names in a stable order, for styling."""
        return [flag.value for flag in DayFlag if flag in self.flags]


@dataclass(frozen=True)
class MonthBlock:
    """The cells of one month in a month-based grid."""
    month: date
    cells: tuple

    @property
    def rows(self) -> int:
        return -(-len(self.cells) // 7)


@dataclass(frozen=True)
class Grid:
    cells: tuple = ()
    months: tuple = ()
    events_this_interval: tuple = ()
    events_last_month: tuple = ()
    events_next_month: tuple = ()

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[DayCell]:
        return iter(self.cells)

    @property
    def rows(self) -> int:
        if self.months:
            return sum(block.rows for block in self.months)
        return -(-len(self.cells) // 7)

    def find(self, stable_id: str) -> Optional[DayCell]:
        """The first real cell with the given stable id."""
        for cell in self.cells:
            if cell.stable_id == stable_id:
                return cell
        return None


@dataclass(frozen=True)
class RenderData:
    """Everything the rendering layer needs after a navigation step."""
    days: tuple
    months: tuple
    days_of_the_week: tuple
    number_of_rows: int
    month: Optional[str]
    year: Optional[int]
    interval_start: date
    interval_end: date
    events_this_interval: tuple
    events_last_month: tuple
    events_next_month: tuple
    gates: NavigationGates
    extras: Any = None
