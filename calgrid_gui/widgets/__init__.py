"""
calgrid GUI Widgets

Custom widgets for displaying calendar grids.
"""

from .event_widget import EventChip
from .calendar_widget import CalendarView, MonthGridView, DayCellWidget

__all__ = ['EventChip', 'CalendarView', 'MonthGridView', 'DayCellWidget']
