"""
Exceptions raised by calgrid.

Non-fatal conditions (unparsable event dates, operations that do not fit the
view mode, navigation blocked by constraints) are reported on return values
instead of being raised.
"""


class CalgridError(Exception):
    """Base class for all calgrid errors."""


class DuplicateBindingError(CalgridError):
    """An anchor already owns a calendar instance."""

    def __init__(self, anchor):
        super().__init__(f"There's already a calendar bound to anchor {anchor!r}")
        self.anchor = anchor


class ConfigError(CalgridError):
    """A configuration value could not be interpreted."""


class EventSourceError(CalgridError):
    """An event file could not be read or parsed."""
