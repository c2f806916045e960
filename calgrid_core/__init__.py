"""
calgrid core

Calendar navigation and grid construction, independent of any toolkit:
- Data model (model.py) - view modes, intervals, day cells, grids
- Event index (event_index.py) - raw records resolved into an interval tree
- Grid builder (grid.py) - padded month grids and day windows
- Constraint clamp (constraints.py) - navigation bounds and gates
- Transition classifier (transitions.py) - which callbacks a step fires
- Calendar (calendar.py) - the navigation controller bound to an anchor
- Configuration (config.py) and event files (event_sources.py)
"""

from .calendar import Calendar, CalendarOptions, ClickTarget, NavigationResult
from .config import Config
from .errors import CalgridError, ConfigError, DuplicateBindingError, EventSourceError
from .event_index import EventIndex, MultiDayFields, Resolved, SingleDayFields, Unresolved
from .model import (
    Constraints, DayCell, DayFlag, DayWindow, Grid, Interval, MultiMonth,
    NavigationGates, RenderData, ResolvedEvent, SingleMonth,
)
from .registry import AnchorRegistry, default_registry
from .transitions import Transition

__all__ = [
    'Calendar',
    'CalendarOptions',
    'ClickTarget',
    'NavigationResult',
    'Config',
    'CalgridError',
    'ConfigError',
    'DuplicateBindingError',
    'EventSourceError',
    'EventIndex',
    'SingleDayFields',
    'MultiDayFields',
    'Resolved',
    'Unresolved',
    'Constraints',
    'DayCell',
    'DayFlag',
    'DayWindow',
    'Grid',
    'Interval',
    'MultiMonth',
    'NavigationGates',
    'RenderData',
    'ResolvedEvent',
    'SingleMonth',
    'AnchorRegistry',
    'default_registry',
    'Transition',
]
