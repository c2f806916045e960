from datetime import date

import pytest

from calgrid_core.config import Config
from calgrid_core.errors import ConfigError
from calgrid_core.event_index import MultiDayFields, SingleDayFields
from calgrid_core.model import Constraints, DayWindow, MultiMonth, SingleMonth

FULL_CONFIG = """
[General]
timezone = "Europe/Berlin"
debug = true

[View]
months = 2
interval = 2
week_offset = 1
start_date = "2024-05-01"
track_selected_date = true

[Events]
start_date = "from"
end_date = "to"

[Constraints]
start_date = 2024-01-01
end_date = "2024-12-31"

[Localization]
day_names = "So Mo Di Mi Do Fr Sa"

[Colors]
event_chip = "#ff0000"

[Labels]
button_today = "Heute"
"""


def write(tmp_path, text):
    path = tmp_path / "calgrid.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_full_config(tmp_path):
    config = Config.load(write(tmp_path, FULL_CONFIG))

    assert config.timezone == "Europe/Berlin"
    assert config.debug is True
    assert config.colors.event_chip == "#ff0000"
    assert config.colors.cell_border == "#e0e0e0"
    assert config.labels.button_today == "Heute"
    assert config.localization.day_names[1] == "Mo"

    options = config.calendar_options()
    assert options.view_mode == MultiMonth(2, stride=2)
    assert options.event_fields == MultiDayFields(start_date="from", end_date="to", single_day=None)
    assert options.constraints == Constraints(start=date(2024, 1, 1), end=date(2024, 12, 31))
    assert options.week_offset == 1
    assert options.track_selected_date is True
    assert options.start_date == "2024-05-01"
    assert options.day_names == ("So", "Mo", "Di", "Mi", "Do", "Fr", "Sa")
    assert options.timezone == "Europe/Berlin"


def test_defaults(tmp_path):
    options = Config.load(write(tmp_path, "")).calendar_options()

    assert options.view_mode == SingleMonth()
    assert options.event_fields == SingleDayFields(date_parameter="date")
    assert options.constraints.is_empty
    assert options.show_adjacent_months is True


def test_day_window(tmp_path):
    options = Config.load(write(tmp_path, "[View]\ndays = 14\ninterval = 7\n")).calendar_options()
    assert options.view_mode == DayWindow(14, stride=7)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load(tmp_path / "nope.toml")


def test_default_path_follows_xdg(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert Config.get_default_config_path() == tmp_path / "calgrid" / "calgrid.toml"


@pytest.mark.parametrize("text", [
    "[View]\nmonths = 2\ndays = 7\n",
    "[View]\nmonths = 0\n",
    "[View]\nmonths = \"two\"\n",
    "[View]\nweek_offset = 9\n",
    "[View]\nforce_six_rows = \"yes\"\n",
    "[General]\ntimezone = \"Mars/Olympus\"\n",
    "[Constraints]\nstart_date = \"whenever\"\n",
    "[Constraints]\nstart_date = \"2024-05-01\"\nend_date = \"2024-01-01\"\n",
    "[Localization]\nday_names = \"Mo Di\"\n",
    "View = 3\n",
    "[View\n",
])
def test_bad_values_raise_config_error(tmp_path, text):
    with pytest.raises(ConfigError):
        Config.load(write(tmp_path, text))
