import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import date, datetime

import pytest
import pytz

QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from calgrid_core.calendar import CalendarOptions
from calgrid_core.config import Config, ConstraintsConfig
from calgrid_core.model import MultiMonth


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


def test_calendar_view_renders_and_navigates(qapp, clock, registry):
    from calgrid_gui.widgets import CalendarView

    view = CalendarView(options=CalendarOptions(timezone="UTC"), clock=clock, registry=registry)

    assert view.render_data.month == "March"
    assert view.render_data.year == 2024
    assert len(view.month_views) == 1

    result = view.go_next()

    assert result.changed
    assert view.render_data.month == "April"
    assert view.render_data.interval_start == date(2024, 4, 1)
    view.release()


def test_calendar_view_lays_out_one_grid_per_month(qapp, clock, registry):
    from calgrid_gui.widgets import CalendarView

    options = CalendarOptions(timezone="UTC", view_mode=MultiMonth(3))
    view = CalendarView(options=options, clock=clock, registry=registry)

    assert len(view.month_views) == 3
    view.release()


def test_main_window_disables_blocked_navigation(qapp, clock, registry):
    from calgrid_gui import MainWindow

    config = Config(constraints=ConstraintsConfig(start_date="2024-03-01"))
    window = MainWindow(config, clock=clock, registry=registry)

    assert not window._prev_btn.isEnabled()
    assert window._next_btn.isEnabled()

    window.calendar_view.go_next()
    assert window._prev_btn.isEnabled()
    window.close()


def test_event_chip_tooltip_escapes_markup(qapp):
    from calgrid_gui.widgets import EventChip
    from calgrid_core.model import ResolvedEvent

    start = pytz.UTC.localize(datetime(2024, 3, 11, 9, 0))
    event = ResolvedEvent(start=start, end=start, raw={
        "title": "<i>Q&A</i>",
        "location": "Room <3>",
        "description": "a < b",
    })
    tooltip = EventChip(event).toolTip()

    assert "<b>&lt;i&gt;Q&amp;A&lt;/i&gt;</b>" in tooltip
    assert "Room &lt;3&gt;" in tooltip
    assert "a &lt; b" in tooltip
