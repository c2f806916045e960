"""
Transition classification.

Compares the interval before and after a navigation step and names what
happened, so the calendar can fire the matching callbacks. Single-month
calendars speak in months and years; ranged calendars only know whether the
interval moved forward or back.
"""

from enum import Enum

from .model import Interval, ViewMode


class Transition(Enum):
    """A semantic navigation signal; the value is the callback name."""
    NEXT_MONTH = "next_month"
    PREVIOUS_MONTH = "previous_month"
    MONTH_CHANGE = "on_month_change"
    NEXT_YEAR = "next_year"
    PREVIOUS_YEAR = "previous_year"
    YEAR_CHANGE = "on_year_change"
    NEXT_INTERVAL = "next_interval"
    PREVIOUS_INTERVAL = "previous_interval"
    INTERVAL_CHANGE = "on_interval_change"

    @property
    def callback_name(self) -> str:
        return self.value

    @property
    def is_interval(self) -> bool:
        return self in (Transition.NEXT_INTERVAL, Transition.PREVIOUS_INTERVAL,
                        Transition.INTERVAL_CHANGE)


class TransitionClassifier:
    """Maps an (old, new) interval pair to the transitions it represents."""

    def classify(self, old: Interval, new: Interval, mode: ViewMode) -> list[Transition]:
        if mode.is_ranged:
            return self._classify_ranged(old, new)
        return self._classify_months(old, new)

    @staticmethod
    def _classify_ranged(old: Interval, new: Interval) -> list[Transition]:
        if new.start > old.start:
            return [Transition.NEXT_INTERVAL, Transition.INTERVAL_CHANGE]
        if new.start < old.start:
            return [Transition.PREVIOUS_INTERVAL, Transition.INTERVAL_CHANGE]
        return []

    @staticmethod
    def _classify_months(old: Interval, new: Interval) -> list[Transition]:
        found = []
        old_start, new_start = old.start, new.start

        # Month index distance taken mod 12 so December -> January counts as +1
        if new_start > old_start and (new_start.month - old_start.month) % 12 == 1:
            found.append(Transition.NEXT_MONTH)
        elif new_start < old_start and (old_start.month - new_start.month) % 12 == 1:
            found.append(Transition.PREVIOUS_MONTH)

        if new_start.month != old_start.month or new_start.year != old_start.year:
            found.append(Transition.MONTH_CHANGE)

        # Start and end are checked separately: a span can cross a year boundary
        # on one side only
        if new_start.year - old_start.year == 1 or new.end.year - old.end.year == 1:
            found.append(Transition.NEXT_YEAR)
        elif old_start.year - new_start.year == 1 or old.end.year - new.end.year == 1:
            found.append(Transition.PREVIOUS_YEAR)

        if new_start.year != old_start.year:
            found.append(Transition.YEAR_CHANGE)

        return found
