"""
Configuration parser for calgrid.

Reads the TOML configuration file into dataclasses and turns it into the
CalendarOptions the core works with.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytz

from .calendar import CalendarOptions, DEFAULT_MONTH_NAMES
from .dateparse import parse_date
from .debug import debug_print
from .errors import ConfigError
from .event_index import EventFields, MultiDayFields, SingleDayFields
from .model import Constraints, DayWindow, MultiMonth, SingleMonth, ViewMode
from .timezone_utils import resolve_timezone


def _debug_print(msg: str) -> None:
    debug_print("CONFIG", msg)


@dataclass
class ViewConfig:
    """Which interval the calendar shows and how the grid is laid out."""
    months: Optional[int] = None    # Show this many months at once
    days: Optional[int] = None      # Or this many days at once
    interval: int = 1               # Stride for ranged views
    start_date: Optional[str] = None
    start_with_month: Optional[str] = None
    week_offset: int = 0            # 0 = weeks start on Sunday, 1 = Monday
    show_adjacent_months: bool = True
    adjacent_days_change_month: bool = False
    force_six_rows: bool = False
    track_selected_date: bool = False
    selected_date: Optional[str] = None
    ignore_inactive_days_in_selection: bool = False

    def view_mode(self) -> ViewMode:
        """The ViewMode these settings describe."""
        if self.months is not None and self.days is not None:
            raise ConfigError("[View] months and days are mutually exclusive")
        try:
            if self.months is not None:
                return MultiMonth(self.months, stride=self.interval)
            if self.days is not None:
                return DayWindow(self.days, stride=self.interval)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"[View] {e}") from e
        return SingleMonth()


@dataclass
class EventsConfig:
    """Names of the date fields in event records."""
    date_parameter: str = "date"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    single_day: Optional[str] = None

    @property
    def multi_day(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def event_fields(self) -> EventFields:
        if self.multi_day:
            return MultiDayFields(
                start_date=self.start_date or "startDate",
                end_date=self.end_date or "endDate",
                single_day=self.single_day,
            )
        return SingleDayFields(date_parameter=self.date_parameter)


@dataclass
class ConstraintsConfig:
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class LayoutConfig:
    """Configuration for UI layout and fonts."""
    interface_font: str = "Sans"
    interface_font_size: int = 12
    cell_min_height: int = 72       # Minimum height of a day cell in pixels
    max_event_chips: int = 3        # Event chips shown per cell before "+N more"


@dataclass
class BindingsConfig:
    """Configuration for keyboard bindings."""
    next: str = "Right"
    prev: str = "Left"
    next_year: str = "Shift+Right"
    prev_year: str = "Shift+Left"
    today: str = "T"


@dataclass
class ColorsConfig:
    """Configuration for UI colors."""
    header_background: str = "#f5f5f5"
    cell_border: str = "#e0e0e0"
    today_highlight_background: str = "#e3f2fd"
    today_highlight_text: str = "#1976d2"
    selected_background: str = "#fff3cd"
    month_cell_current: str = "#ffffff"
    month_cell_other: str = "#f5f5f5"
    month_text_current: str = "#000000"
    month_text_other: str = "#999999"
    inactive_background: str = "#eeeeee"
    inactive_text: str = "#c0c0c0"
    event_chip: str = "#4285f4"
    secondary_text: str = "rgba(0, 0, 0, 0.6)"


@dataclass
class LabelsConfig:
    """Configuration for UI labels."""
    window_title: str = "calgrid"
    button_prev: str = "◀"
    button_next: str = "▶"
    button_prev_year: str = "◀◀"
    button_next_year: str = "▶▶"
    button_today: str = "Today"
    button_quit: str = "Quit"
    no_events: str = "No events"
    more_events: str = "+{} more"
    blocked_notice: str = "Outside the allowed date range"


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Seven day names starting with Sunday
    day_names: list[str] = None
    month_names: list[str] = None

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        if self.month_names is None:
            self.month_names = list(DEFAULT_MONTH_NAMES)
        if len(self.day_names) != 7:
            raise ConfigError(f"[Localization] day_names needs 7 names, got {len(self.day_names)}")
        if len(self.month_names) != 12:
            raise ConfigError(f"[Localization] month_names needs 12 names, got {len(self.month_names)}")

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""


def _section(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _typed(section: dict, section_name: str, key: str, kind, default):
    """Read key from section, checking its type."""
    value = section.get(key, default)
    if value is None or value is default:
        return value
    # bool is an int subclass; keep them apart
    if kind is int and isinstance(value, bool):
        raise ConfigError(f"[{section_name}] {key} must be an integer, got {value!r}")
    if not isinstance(value, kind):
        raise ConfigError(f"[{section_name}] {key} must be {kind.__name__}, got {value!r}")
    return value


def _date_string(section: dict, section_name: str, key: str) -> Optional[str]:
    """A date value; TOML dates are accepted as well as strings."""
    value = section.get(key)
    if value is None:
        return None
    text = value.isoformat() if hasattr(value, "isoformat") else value
    if not isinstance(text, str) or parse_date(text) is None:
        raise ConfigError(f"[{section_name}] {key} is not a date: {value!r}")
    return text


@dataclass
class Config:
    """Main configuration container for calgrid."""

    timezone: str = "UTC"
    debug: bool = False
    view: ViewConfig = field(default_factory=ViewConfig)
    events: EventsConfig = field(default_factory=EventsConfig)
    constraints: ConstraintsConfig = field(default_factory=ConstraintsConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    bindings: BindingsConfig = field(default_factory=BindingsConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    labels: LabelsConfig = field(default_factory=LabelsConfig)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'calgrid' / 'calgrid.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"{config_path}: {e}") from e

        _debug_print(f"TOML sections in {config_path}: {list(data.keys())}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from already parsed TOML data."""
        # Parse General section
        general = _section(data, 'General')
        timezone = _typed(general, 'General', 'timezone', str, 'UTC')
        debug = _typed(general, 'General', 'debug', bool, False)
        try:
            resolve_timezone(timezone)
        except pytz.UnknownTimeZoneError as e:
            raise ConfigError(f"[General] unknown timezone {timezone!r}") from e

        # Parse View section
        view_data = _section(data, 'View')
        view = ViewConfig(
            months=_typed(view_data, 'View', 'months', int, None),
            days=_typed(view_data, 'View', 'days', int, None),
            interval=_typed(view_data, 'View', 'interval', int, ViewConfig.interval),
            start_date=_date_string(view_data, 'View', 'start_date'),
            start_with_month=_date_string(view_data, 'View', 'start_with_month'),
            week_offset=_typed(view_data, 'View', 'week_offset', int, ViewConfig.week_offset),
            show_adjacent_months=_typed(view_data, 'View', 'show_adjacent_months', bool,
                                        ViewConfig.show_adjacent_months),
            adjacent_days_change_month=_typed(view_data, 'View', 'adjacent_days_change_month', bool,
                                              ViewConfig.adjacent_days_change_month),
            force_six_rows=_typed(view_data, 'View', 'force_six_rows', bool, ViewConfig.force_six_rows),
            track_selected_date=_typed(view_data, 'View', 'track_selected_date', bool,
                                       ViewConfig.track_selected_date),
            selected_date=_date_string(view_data, 'View', 'selected_date'),
            ignore_inactive_days_in_selection=_typed(view_data, 'View', 'ignore_inactive_days_in_selection',
                                                     bool, ViewConfig.ignore_inactive_days_in_selection),
        )
        if not 0 <= view.week_offset <= 6:
            raise ConfigError(f"[View] week_offset must be within 0..6, got {view.week_offset}")
        # Validates months/days/interval
        view.view_mode()

        # Parse Events section
        events_data = _section(data, 'Events')
        events = EventsConfig(
            date_parameter=_typed(events_data, 'Events', 'date_parameter', str, EventsConfig.date_parameter),
            start_date=_typed(events_data, 'Events', 'start_date', str, None),
            end_date=_typed(events_data, 'Events', 'end_date', str, None),
            single_day=_typed(events_data, 'Events', 'single_day', str, None),
        )

        # Parse Constraints section
        constraints_data = _section(data, 'Constraints')
        constraints = ConstraintsConfig(
            start_date=_date_string(constraints_data, 'Constraints', 'start_date'),
            end_date=_date_string(constraints_data, 'Constraints', 'end_date'),
        )
        if constraints.start_date and constraints.end_date and \
                parse_date(constraints.start_date) > parse_date(constraints.end_date):
            raise ConfigError("[Constraints] start_date is after end_date")

        # Parse Layout section
        layout_data = _section(data, 'Layout')
        layout = LayoutConfig(
            interface_font=layout_data.get('interface_font', LayoutConfig.interface_font),
            interface_font_size=_typed(layout_data, 'Layout', 'interface_font_size', int,
                                       LayoutConfig.interface_font_size),
            cell_min_height=_typed(layout_data, 'Layout', 'cell_min_height', int, LayoutConfig.cell_min_height),
            max_event_chips=_typed(layout_data, 'Layout', 'max_event_chips', int, LayoutConfig.max_event_chips),
        )

        # Parse Bindings section
        bindings_data = _section(data, 'Bindings')
        bindings = BindingsConfig(**{
            name: bindings_data.get(name, getattr(BindingsConfig, name))
            for name in ('next', 'prev', 'next_year', 'prev_year', 'today')
        })

        # Parse Localization section: space-separated names
        localization_data = _section(data, 'Localization')
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')
        localization = LocalizationConfig(
            day_names=day_names_str.split() if day_names_str else None,
            month_names=month_names_str.split() if month_names_str else None,
        )

        # Parse Colors and Labels sections: any known key overrides its default
        colors_data = _section(data, 'Colors')
        colors = ColorsConfig(**{
            name: colors_data[name] for name in ColorsConfig.__dataclass_fields__ if name in colors_data
        })
        labels_data = _section(data, 'Labels')
        labels = LabelsConfig(**{
            name: labels_data[name] for name in LabelsConfig.__dataclass_fields__ if name in labels_data
        })

        return cls(
            timezone=timezone,
            debug=debug,
            view=view,
            events=events,
            constraints=constraints,
            layout=layout,
            bindings=bindings,
            localization=localization,
            colors=colors,
            labels=labels,
        )

    def calendar_options(self, extras=None) -> CalendarOptions:
        """The core CalendarOptions described by this configuration."""
        view = self.view
        constraints = Constraints(
            start=parse_date(self.constraints.start_date, self.timezone),
            end=parse_date(self.constraints.end_date, self.timezone),
        )
        return CalendarOptions(
            view_mode=view.view_mode(),
            start_date=view.start_date,
            start_with_month=view.start_with_month,
            constraints=constraints,
            event_fields=self.events.event_fields(),
            week_offset=view.week_offset,
            show_adjacent_months=view.show_adjacent_months,
            adjacent_days_change_month=view.adjacent_days_change_month,
            force_six_rows=view.force_six_rows,
            track_selected_date=view.track_selected_date,
            selected_date=view.selected_date,
            ignore_inactive_days_in_selection=view.ignore_inactive_days_in_selection,
            day_names=tuple(self.localization.day_names),
            month_names=tuple(self.localization.month_names),
            timezone=self.timezone,
            extras=extras,
        )
