"""
Debug output for calgrid.

Modules keep a local _debug_print() that forwards here with their own tag,
producing timestamped lines on stderr like "[14:02:11] INDEX: ...".
"""

import sys
from datetime import datetime


_enabled: bool = False


def set_debug(enabled: bool):
    """Turn debug output on or off for the whole application."""
    global _enabled
    _enabled = enabled


def debug_print(tag: str, msg: str) -> None:
    if not _enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {tag}: {msg}", file=sys.stderr)
