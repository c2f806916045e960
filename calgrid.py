#!/usr/bin/env python3
"""
calgrid - A PySide6 desktop month/interval calendar grid.

This is the main entry point for the application.
"""

import sys
import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from calgrid_core.config import Config
from calgrid_core.debug import set_debug, debug_print
from calgrid_core.errors import CalgridError
from calgrid_core.event_sources import load_events
from calgrid_core.timezone_utils import set_timezone
from calgrid_gui.main_window import MainWindow


EXAMPLE_CONFIG = """
[General]
timezone = "Europe/Berlin"

[View]
months = 2
week_offset = 1
track_selected_date = true

[Events]
start_date = "startDate"
end_date = "endDate"

[Constraints]
start_date = "2024-01-01"
end_date = "2026-12-31"
"""


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="calgrid - A desktop calendar grid with constrained navigation"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "-e", "--events",
        type=Path,
        help="JSON or .ics file with events to show"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args(argv)


def load_config(path):
    """Load the configuration, falling back to defaults when no file exists."""
    try:
        return Config.load(path)
    except FileNotFoundError as e:
        if path is not None:
            print(f"Error: {e}", file=sys.stderr)
            print("\nExample configuration:", file=sys.stderr)
            print(EXAMPLE_CONFIG, file=sys.stderr)
            sys.exit(1)
        return Config()
    except CalgridError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """Main entry point."""
    args = parse_args()

    config = load_config(args.config)
    set_debug(args.debug or config.debug)
    set_timezone(config.timezone)
    debug_print("MAIN", f"configuration from {args.config or Config.get_default_config_path()}")

    events = []
    if args.events is not None:
        try:
            events = load_events(args.events, fields=config.events.event_fields(), tz=config.timezone)
        except CalgridError as e:
            print(f"Error loading events: {e}", file=sys.stderr)
            sys.exit(1)
        debug_print("MAIN", f"{len(events)} events from {args.events}")

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("calgrid")
    app.setApplicationVersion("0.1")
    app.setStyle("Fusion")

    window = MainWindow(config, events=events)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
