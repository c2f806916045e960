"""
Event index.

Raw event records are plain mappings whose date fields are named by the
caller. They are resolved once, on insertion, into ResolvedEvent ranges and
stored in an interval tree; nothing downstream sees the raw field layout.

Two field layouts are supported:

    SingleDayFields(date_parameter="date")
        {"title": "Dentist", "date": "2024-03-11"}

    MultiDayFields(start_date="startDate", end_date="endDate", single_day="date")
        {"title": "Trip", "startDate": "2024-03-10", "endDate": "2024-03-12"}
        {"title": "Call", "date": "2024-03-14"}   # falls back to single_day

Records whose dates cannot be parsed are left out of the index. That outcome
is reported as an Unresolved value rather than raised.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from .dateparse import parse_datetime
from .debug import debug_print
from .interval_tree import IntervalTree, IntervalNode
from .model import ResolvedEvent
from .timezone_utils import resolve_timezone, start_of_day, end_of_day


RawEvent = Mapping[str, Any]


def _debug_print(msg: str) -> None:
    debug_print("INDEX", msg)


# ==================== Field Layouts ====================

@dataclass(frozen=True)
class SingleDayFields:
    """Every event sits on one day, read from date_parameter."""
    date_parameter: str = "date"


@dataclass(frozen=True)
class MultiDayFields:
    """Events span start_date..end_date; single_day is the fallback field."""
    start_date: str = "startDate"
    end_date: str = "endDate"
    single_day: Optional[str] = None


EventFields = Union[SingleDayFields, MultiDayFields]


# ==================== Resolution Outcomes ====================

@dataclass(frozen=True)
class Resolved:
    event: ResolvedEvent
    ok = True


@dataclass(frozen=True)
class Unresolved:
    raw: RawEvent
    reason: str
    ok = False


Resolution = Union[Resolved, Unresolved]


def _has_value(value) -> bool:
    return value is not None and value != ""


def resolve_event(raw: RawEvent, fields: EventFields, tz=None, reference: Optional[date] = None) -> Resolution:
    """
    Resolve one raw record into a ResolvedEvent.

    Args:
        raw: the caller's record
        fields: which fields hold the dates
        tz: calendar timezone
        reference: date that completes partial date strings

    Returns:
        Resolved(event) or Unresolved(raw, reason).
    """
    if isinstance(fields, MultiDayFields):
        start_value = raw.get(fields.start_date)
        end_value = raw.get(fields.end_date)
        if not _has_value(start_value) and not _has_value(end_value):
            if fields.single_day is None:
                return Unresolved(raw, f"no '{fields.start_date}' or '{fields.end_date}' value")
            start_value = end_value = raw.get(fields.single_day)
        else:
            # A record missing one bound collapses onto the other
            if not _has_value(start_value):
                start_value = end_value
            if not _has_value(end_value):
                end_value = start_value
    else:
        start_value = end_value = raw.get(fields.date_parameter)

    start = parse_datetime(start_value, tz, reference)
    end = parse_datetime(end_value, tz, reference)
    if start is None or end is None:
        bad = start_value if start is None else end_value
        return Unresolved(raw, f"unparsable date {bad!r}")
    if end < start:
        return Unresolved(raw, f"end {end.isoformat()} before start {start.isoformat()}")

    return Resolved(ResolvedEvent(start=start, end=end, raw=raw))


# ==================== Index ====================

class EventIndex:
    """
    Resolved events with inclusive overlap queries.

    Query results come back in insertion order, matching the order of the
    records the caller supplied.
    """

    def __init__(self, fields: Optional[EventFields] = None, tz=None,
                 today: Optional[Callable[[], date]] = None):
        self.fields: EventFields = fields if fields is not None else SingleDayFields()
        self.tz = resolve_timezone(tz)
        # Supplies the reference date for partial date strings
        self._today = today
        self._tree: IntervalTree[datetime] = IntervalTree()
        self._nodes: list[IntervalNode[datetime]] = []
        self._unresolved: list[Unresolved] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ResolvedEvent]:
        return (node.data for node in self._nodes)

    @property
    def events(self) -> list[ResolvedEvent]:
        return list(self)

    @property
    def unresolved(self) -> list[Unresolved]:
        """Records dropped because their dates could not be resolved."""
        return list(self._unresolved)

    # ==================== Mutation ====================

    def resolve(self, raw: RawEvent) -> Resolution:
        reference = self._today() if self._today is not None else None
        return resolve_event(raw, self.fields, self.tz, reference)

    def add_events(self, raws: Iterable[RawEvent]) -> list[Resolution]:
        """Resolve and index records; returns one outcome per record."""
        outcomes = []
        for raw in raws:
            outcome = self.resolve(raw)
            if isinstance(outcome, Resolved):
                event = outcome.event
                self._nodes.append(self._tree.insert(event.start, event.end, event))
            else:
                self._unresolved.append(outcome)
                _debug_print(f"dropping event {raw.get('title', '')!r}: {outcome.reason}")
            outcomes.append(outcome)
        return outcomes

    def set_events(self, raws: Iterable[RawEvent]) -> list[Resolution]:
        """Replace every event."""
        self.clear()
        return self.add_events(raws)

    def remove_events(self, predicate: Callable[[RawEvent], bool]) -> int:
        """Remove every event whose raw record satisfies predicate; returns the count."""
        keep = []
        removed = 0
        for node in self._nodes:
            if predicate(node.data.raw):
                self._tree.remove(node)
                removed += 1
            else:
                keep.append(node)
        self._nodes = keep
        self._unresolved = [u for u in self._unresolved if not predicate(u.raw)]
        if removed:
            _debug_print(f"removed {removed} events, {len(keep)} left")
        return removed

    def clear(self):
        self._tree.clear()
        self._nodes = []
        self._unresolved = []

    # ==================== Queries ====================

    def query_overlap(self, range_start: datetime, range_end: datetime) -> list[ResolvedEvent]:
        """
        Events touching [range_start, range_end].

        An event matches unless it ends before range_start or starts after
        range_end.
        """
        nodes = self._tree.overlapping(range_start, range_end)
        nodes.sort(key=lambda node: node.seq)
        return [node.data for node in nodes]

    def query_dates(self, first: date, last: date) -> list[ResolvedEvent]:
        """Events touching any day from first to last inclusive."""
        return self.query_overlap(start_of_day(first, self.tz), end_of_day(last, self.tz))

    def events_on(self, day: date) -> list[ResolvedEvent]:
        return self.query_dates(day, day)
