"""
Calendar widget rendering a calgrid Calendar.

CalendarView is the anchor a Calendar is bound to. Every time the calendar
finishes rendering, the view lays out the grid's month blocks (or the plain
day window) from the RenderData.
"""

from typing import Callable, Iterable, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QFrame
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFontMetrics, QMouseEvent

from calgrid_core.calendar import Calendar, CalendarOptions, NavigationResult
from calgrid_core.config import LayoutConfig, LocalizationConfig, ColorsConfig, LabelsConfig
from calgrid_core.debug import debug_print
from calgrid_core.model import DayCell, DayFlag, RenderData
from calgrid_core.registry import AnchorRegistry
from .event_widget import EventChip, set_event_layout_config, set_event_colors_config


def _debug_print(msg: str) -> None:
    debug_print("VIEW", msg)


# Module-level configs (set by MainWindow at startup)
_layout_config: LayoutConfig = LayoutConfig()
_localization_config: LocalizationConfig = LocalizationConfig()
_colors_config: ColorsConfig = ColorsConfig()
_labels_config: LabelsConfig = LabelsConfig()

# Month blocks per row when several months are shown
MONTHS_PER_ROW = 3


def set_layout_config(config: LayoutConfig):
    """Set the layout configuration for this module and event chips."""
    global _layout_config
    _layout_config = config
    set_event_layout_config(config)


def set_localization_config(config: LocalizationConfig):
    global _localization_config
    _localization_config = config


def get_localization_config() -> LocalizationConfig:
    return _localization_config


def set_colors_config(config: ColorsConfig):
    """Set the colors configuration for this module and event chips."""
    global _colors_config
    _colors_config = config
    set_event_colors_config(config)


def get_colors_config() -> ColorsConfig:
    return _colors_config


def set_labels_config(config: LabelsConfig):
    global _labels_config
    _labels_config = config


def get_interface_font() -> tuple[str, int]:
    """Get the configured interface font name and size."""
    return (_layout_config.interface_font, _layout_config.interface_font_size)


def _clear_layout(layout):
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()


class DayCellWidget(QFrame):
    """Single day cell, styled from the cell's flags."""

    clicked = Signal(object)        # DayCell
    event_clicked = Signal(object)  # ResolvedEvent

    def __init__(self, cell: DayCell, parent=None):
        super().__init__(parent)
        self._cell = cell
        self._event_widgets: list[QWidget] = []
        self._setup_ui()
        self.set_cell(cell)

    @property
    def cell(self) -> DayCell:
        return self._cell

    def _setup_ui(self):
        self.setFrameStyle(QFrame.Box | QFrame.Plain)
        fm = QFontMetrics(self.font())
        min_width = fm.horizontalAdvance("00") + 16
        self.setMinimumSize(max(min_width, 40), _layout_config.cell_min_height)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(1)

        self._day_label = QLabel()
        self._day_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        layout.addWidget(self._day_label)

        self._events_layout = QVBoxLayout()
        self._events_layout.setSpacing(1)
        layout.addLayout(self._events_layout)
        layout.addStretch()

    def set_cell(self, cell: DayCell):
        self._cell = cell
        self._day_label.setText(str(cell.day) if cell.day is not None else "")
        self.setCursor(Qt.ArrowCursor if cell.is_placeholder else Qt.PointingHandCursor)
        self.setProperty("flags", " ".join(cell.class_names))
        self._update_style()
        self._set_events(cell.events)

    def _set_events(self, events: Iterable):
        for widget in self._event_widgets:
            widget.deleteLater()
        self._event_widgets.clear()

        events = list(events)
        shown = events[:_layout_config.max_event_chips]
        for event in shown:
            chip = EventChip(event)
            chip.clicked.connect(self.event_clicked.emit)
            self._events_layout.addWidget(chip)
            self._event_widgets.append(chip)

        hidden = len(events) - len(shown)
        if hidden > 0:
            more = QLabel(_labels_config.more_events.format(hidden))
            more.setStyleSheet(f"color: {_colors_config.secondary_text};")
            self._events_layout.addWidget(more)
            self._event_widgets.append(more)

    def _update_style(self):
        colors = get_colors_config()
        cell = self._cell

        if cell.is_placeholder:
            self._day_label.setStyleSheet("")
            self.setStyleSheet(f"background-color: {colors.month_cell_other}; border: 1px solid {colors.cell_border};")
            return

        if cell.is_inactive:
            bg, text = colors.inactive_background, colors.inactive_text
        elif cell.is_adjacent_month:
            bg, text = colors.month_cell_other, colors.month_text_other
        else:
            bg, text = colors.month_cell_current, colors.month_text_current
        if cell.has(DayFlag.SELECTED):
            bg = colors.selected_background

        if cell.is_today:
            self._day_label.setStyleSheet(
                f"color: {colors.today_highlight_text}; font-weight: bold; "
                f"background: {colors.today_highlight_background}; border-radius: 10px; padding: 2px 6px;"
            )
        else:
            self._day_label.setStyleSheet(f"color: {text};")

        self.setStyleSheet(f"DayCellWidget {{ background-color: {bg}; border: 1px solid {colors.cell_border}; }}")

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self._cell)
        super().mousePressEvent(event)


class MonthGridView(QWidget):
    """Optional title, a row of day names and the cells laid out seven per row."""

    cell_clicked = Signal(object)
    event_clicked = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._cells: list[DayCellWidget] = []
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        font_name, font_size = get_interface_font()
        self._title_label = QLabel()
        self._title_label.setAlignment(Qt.AlignCenter)
        self._title_label.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 4px;")
        self._title_label.hide()
        layout.addWidget(self._title_label)

        header = QWidget()
        self._header_layout = QHBoxLayout(header)
        self._header_layout.setContentsMargins(0, 0, 0, 0)
        self._header_layout.setSpacing(1)
        layout.addWidget(header)

        grid_widget = QWidget()
        self._grid_layout = QGridLayout(grid_widget)
        self._grid_layout.setContentsMargins(0, 0, 0, 0)
        self._grid_layout.setSpacing(1)
        for col in range(7):
            self._grid_layout.setColumnStretch(col, 1)
        layout.addWidget(grid_widget, 1)

    def set_cells(self, cells: Iterable[DayCell], day_names: Iterable[str], title: Optional[str] = None):
        """Lay out cells seven per row under the day-name header."""
        if title:
            self._title_label.setText(title)
            self._title_label.show()
        else:
            self._title_label.hide()

        _clear_layout(self._header_layout)
        font_name, font_size = get_interface_font()
        colors = get_colors_config()
        for day_name in day_names:
            label = QLabel(day_name)
            label.setAlignment(Qt.AlignCenter)
            label.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 6px; background: {colors.header_background};")
            self._header_layout.addWidget(label, 1)

        _clear_layout(self._grid_layout)
        self._cells.clear()
        for i, cell in enumerate(cells):
            widget = DayCellWidget(cell)
            widget.clicked.connect(self.cell_clicked.emit)
            widget.event_clicked.connect(self.event_clicked.emit)
            self._grid_layout.addWidget(widget, i // 7, i % 7)
            self._cells.append(widget)


class CalendarView(QWidget):
    """
    Widget a Calendar is bound to.

    Navigation methods forward to the calendar with callbacks enabled and
    announce the outcome through navigated; rendered fires after every
    re-render with the new RenderData.
    """

    rendered = Signal(object)       # RenderData
    navigated = Signal(object)      # NavigationResult
    day_clicked = Signal(object)    # ClickTarget
    event_clicked = Signal(object)  # ResolvedEvent

    def __init__(
        self,
        options: Optional[CalendarOptions] = None,
        events: Iterable = (),
        callbacks: Optional[dict[str, Callable]] = None,
        clock=None,
        registry: Optional[AnchorRegistry] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._month_views: list[MonthGridView] = []
        self._render_data: Optional[RenderData] = None
        self._user_callbacks = dict(callbacks or {})
        self._setup_ui()

        callbacks = dict(self._user_callbacks)
        callbacks['done_rendering'] = self._on_done_rendering
        self.calendar = Calendar(
            self,
            options=options,
            events=events,
            callbacks=callbacks,
            clock=clock,
            registry=registry,
        )

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._months_widget = QWidget()
        self._months_layout = QGridLayout(self._months_widget)
        self._months_layout.setContentsMargins(0, 0, 0, 0)
        self._months_layout.setSpacing(12)
        layout.addWidget(self._months_widget, 1)

    @property
    def render_data(self) -> Optional[RenderData]:
        return self._render_data

    @property
    def month_views(self) -> list[MonthGridView]:
        return list(self._month_views)

    # ==================== Rendering ====================

    def _on_done_rendering(self, calendar: Calendar):
        # Runs inside Calendar.__init__ too, before self.calendar is assigned
        self._render(calendar, calendar.render_data)
        user_callback = self._user_callbacks.get('done_rendering')
        if user_callback is not None:
            user_callback(calendar)

    def _render(self, calendar: Calendar, data: RenderData):
        self._render_data = data
        _clear_layout(self._months_layout)
        self._month_views.clear()

        localization = get_localization_config()
        if data.months:
            multiple = len(data.months) > 1
            for i, block in enumerate(data.months):
                title = None
                if multiple:
                    title = f"{localization.get_month_name(block.month.month)} {block.month.year}"
                self._add_month_view(block.cells, data.days_of_the_week, title, i)
        else:
            # Day window: the header follows the window's own first weekday
            options = calendar.options
            day_names = [options.day_names[cell.weekday] for cell in data.days[:7]]
            self._add_month_view(data.days, day_names, None, 0)

        _debug_print(f"rendered {len(data.days)} cells, {data.number_of_rows} rows")
        self.rendered.emit(data)

    def _add_month_view(self, cells, day_names, title, position):
        view = MonthGridView()
        view.set_cells(cells, day_names, title)
        view.cell_clicked.connect(self._on_cell_clicked)
        view.event_clicked.connect(self.event_clicked.emit)
        self._months_layout.addWidget(view, position // MONTHS_PER_ROW, position % MONTHS_PER_ROW)
        self._month_views.append(view)

    # ==================== Navigation ====================

    def _emit(self, result: NavigationResult) -> NavigationResult:
        self.navigated.emit(result)
        return result

    def go_previous(self) -> NavigationResult:
        return self._emit(self.calendar.back(with_callbacks=True))

    def go_next(self) -> NavigationResult:
        return self._emit(self.calendar.forward(with_callbacks=True))

    def go_previous_year(self) -> NavigationResult:
        return self._emit(self.calendar.previous_year(with_callbacks=True))

    def go_next_year(self) -> NavigationResult:
        return self._emit(self.calendar.next_year(with_callbacks=True))

    def go_today(self) -> NavigationResult:
        return self._emit(self.calendar.today(with_callbacks=True))

    def set_events(self, events: Iterable):
        return self.calendar.set_events(events)

    def _on_cell_clicked(self, cell: DayCell):
        target = self.calendar.click(cell)
        self.day_clicked.emit(target)

    # ==================== Lifecycle ====================

    def release(self):
        """Unbind the calendar from this widget."""
        self.calendar.destroy()

    def closeEvent(self, event):
        self.release()
        super().closeEvent(event)
