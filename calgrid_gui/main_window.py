"""
Main Window for calgrid.

The application window: navigation toolbar, the calendar view and a status
bar showing what was clicked.
"""

from typing import Iterable, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QToolBar, QPushButton, QLabel,
    QStatusBar, QApplication, QSizePolicy
)
from PySide6.QtGui import QCloseEvent, QFont, QKeySequence, QShortcut

from calgrid_core.calendar import ClickTarget, NavigationResult
from calgrid_core.config import Config
from calgrid_core.model import RenderData, ResolvedEvent
from calgrid_core.registry import AnchorRegistry

from .widgets.calendar_widget import (
    CalendarView, set_layout_config, set_localization_config, set_colors_config, set_labels_config
)


class MainWindow(QMainWindow):
    """
    Main application window.

    Contains:
    - Toolbar with period label and year/period/today navigation
    - Calendar view showing the current interval
    - Status bar with navigation notices and the clicked day's events
    """

    def __init__(
        self,
        config: Config,
        events: Iterable = (),
        clock=None,
        registry: Optional[AnchorRegistry] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.config = config

        # Module configs must be in place before any widget is created
        set_layout_config(config.layout)
        set_localization_config(config.localization)
        set_colors_config(config.colors)
        set_labels_config(config.labels)

        self._interface_font = QFont(config.layout.interface_font, config.layout.interface_font_size)
        QApplication.instance().setFont(self._interface_font)

        self._setup_window()
        self._setup_toolbar()
        self._setup_ui(events, clock, registry)
        self._setup_shortcuts()
        self._setup_statusbar()
        self._on_rendered(self._calendar_view.render_data)

    @property
    def calendar_view(self) -> CalendarView:
        return self._calendar_view

    def _setup_window(self):
        self.setWindowTitle(self.config.labels.window_title)
        self.setMinimumSize(640, 480)
        self.resize(1000, 760)

    def _setup_ui(self, events, clock, registry):
        main_widget = QWidget()
        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self._calendar_view = CalendarView(
            options=self.config.calendar_options(),
            events=events,
            clock=clock,
            registry=registry,
        )
        self._calendar_view.rendered.connect(self._on_rendered)
        self._calendar_view.navigated.connect(self._on_navigated)
        self._calendar_view.day_clicked.connect(self._on_day_clicked)
        self._calendar_view.event_clicked.connect(self._on_event_clicked)

        main_layout.addWidget(self._calendar_view)
        self.setCentralWidget(main_widget)

        self._prev_year_btn.clicked.connect(self._calendar_view.go_previous_year)
        self._prev_btn.clicked.connect(self._calendar_view.go_previous)
        self._today_btn.clicked.connect(self._calendar_view.go_today)
        self._next_btn.clicked.connect(self._calendar_view.go_next)
        self._next_year_btn.clicked.connect(self._calendar_view.go_next_year)

    def _make_button(self, toolbar: QToolBar, text: str, tooltip: str) -> QPushButton:
        button = QPushButton(text)
        button.setFont(self._interface_font)
        button.setToolTip(tooltip)
        toolbar.addWidget(button)
        return button

    def _setup_toolbar(self):
        """Set up the navigation toolbar."""
        labels = self.config.labels
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)
        if toolbar.layout():
            toolbar.layout().setContentsMargins(8, 8, 8, 8)

        self._date_label = QLabel()
        date_font = QFont(self._interface_font)
        date_font.setBold(True)
        self._date_label.setFont(date_font)
        self._date_label.setMinimumWidth(200)
        toolbar.addWidget(self._date_label)

        toolbar.addSeparator()

        self._prev_year_btn = self._make_button(toolbar, labels.button_prev_year, "Previous year")
        self._prev_btn = self._make_button(toolbar, labels.button_prev, "Previous")
        self._today_btn = self._make_button(toolbar, labels.button_today, "Today")
        self._next_btn = self._make_button(toolbar, labels.button_next, "Next")
        self._next_year_btn = self._make_button(toolbar, labels.button_next_year, "Next year")

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        self._quit_btn = self._make_button(toolbar, labels.button_quit, "Exit application")
        self._quit_btn.clicked.connect(self.close)

    def _setup_shortcuts(self):
        """Set up keyboard shortcuts from config bindings."""
        bindings = self.config.bindings
        view = self._calendar_view
        for key, slot in (
            (bindings.prev, view.go_previous),
            (bindings.next, view.go_next),
            (bindings.prev_year, view.go_previous_year),
            (bindings.next_year, view.go_next_year),
            (bindings.today, view.go_today),
        ):
            if key:
                shortcut = QShortcut(QKeySequence(key), self)
                shortcut.activated.connect(slot)

    def _setup_statusbar(self):
        self._statusbar = QStatusBar()
        self._statusbar.setFont(self._interface_font)
        self.setStatusBar(self._statusbar)
        self._statusbar.showMessage("Ready")

    # ==================== View Updates ====================

    def _period_text(self, data: RenderData) -> str:
        """'March 2024' for single months, 'yyyy/mm/dd - yyyy/mm/dd' for ranges."""
        if data.month is not None:
            return f"{data.month} {data.year}"
        start, end = data.interval_start, data.interval_end
        if start.year == end.year and start.month == end.month:
            return f"{start.strftime('%Y/%m/%d')}-{end.day:02d}"
        return f"{start.strftime('%Y/%m/%d')} - {end.strftime('%Y/%m/%d')}"

    def _on_rendered(self, data: Optional[RenderData]):
        if data is None:
            return
        self._date_label.setText(self._period_text(data))
        gates = data.gates
        self._prev_btn.setEnabled(gates.can_prev)
        self._next_btn.setEnabled(gates.can_next)
        self._prev_year_btn.setEnabled(gates.can_prev_year)
        self._next_year_btn.setEnabled(gates.can_next_year)
        self._today_btn.setEnabled(gates.can_today)

    def _on_navigated(self, result: NavigationResult):
        if result.blocked:
            self._statusbar.showMessage(self.config.labels.blocked_notice, 3000)
        elif result.warning:
            self._statusbar.showMessage(result.warning, 5000)

    def _on_day_clicked(self, target: ClickTarget):
        if target.date is None:
            return
        titles = [event.title for event in target.events]
        summary = ", ".join(titles) if titles else self.config.labels.no_events
        self._statusbar.showMessage(f"{target.date.strftime('%Y/%m/%d')}: {summary}")

    def _on_event_clicked(self, event: ResolvedEvent):
        text = event.title
        location = event.get('location')
        if location:
            text += f"  📍 {location}"
        self._statusbar.showMessage(text)

    def closeEvent(self, event: QCloseEvent):
        self._calendar_view.release()
        super().closeEvent(event)
