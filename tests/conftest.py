"""
Shared test fixtures for the calgrid test suite.

Provides:
- A fixed clock (Friday 2024-03-15 12:00 UTC) for deterministic grids
- A private anchor registry per test
- A calendar factory wired to both
"""

import dataclasses
import sys
from datetime import datetime
from pathlib import Path

import pytest
import pytz

# Add parent to path for module imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from calgrid_core.calendar import Calendar, CalendarOptions
from calgrid_core.registry import AnchorRegistry


FIXED_NOW = pytz.UTC.localize(datetime(2024, 3, 15, 12, 0))


@pytest.fixture
def tz():
    return pytz.UTC


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def registry() -> AnchorRegistry:
    return AnchorRegistry()


@pytest.fixture
def make_calendar(clock, registry):
    """Factory for calendars on fresh anchors, in UTC, on the fixed clock."""
    def _make(options=None, events=(), callbacks=None, anchor=None, **option_fields):
        if options is None:
            options = CalendarOptions(**option_fields)
        if options.timezone is None:
            options = dataclasses.replace(options, timezone="UTC")
        return Calendar(
            anchor if anchor is not None else object(),
            options=options,
            events=events,
            callbacks=callbacks,
            clock=clock,
            registry=registry,
        )
    return _make


@pytest.fixture
def recorder():
    """Callback factory that records (name, args) for every call."""
    calls = []

    def _callback(name):
        def _record(calendar, *args):
            calls.append((name, args))
        return _record

    _callback.calls = calls
    return _callback
