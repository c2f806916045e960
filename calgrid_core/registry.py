"""
Anchor registry.

A calendar owns the container it renders into (its anchor). The registry
maps anchors to their calendar so a second calendar cannot take over an
anchor that is still bound, and lets the rendering layer find the calendar
behind a container.
"""

from typing import Any, Callable, Optional

from .debug import debug_print
from .errors import DuplicateBindingError


def _debug_print(msg: str) -> None:
    debug_print("REGISTRY", msg)


class AnchorRegistry:
    """
    anchor -> calendar map with bind/unbind hooks.

    Anchors are keyed by identity, so unhashable containers work too.
    """

    def __init__(self):
        self._owners: dict[int, tuple[Any, Any]] = {}
        self._on_bind: list[Callable[[Any, Any], None]] = []
        self._on_unbind: list[Callable[[Any, Any], None]] = []

    def __len__(self) -> int:
        return len(self._owners)

    def __contains__(self, anchor) -> bool:
        return id(anchor) in self._owners

    def add_bind_hook(self, hook: Callable[[Any, Any], None]):
        """hook(anchor, calendar) runs after every successful bind."""
        self._on_bind.append(hook)

    def add_unbind_hook(self, hook: Callable[[Any, Any], None]):
        """hook(anchor, calendar) runs after every unbind."""
        self._on_unbind.append(hook)

    def bind(self, anchor, calendar):
        """
        Make calendar the owner of anchor.

        Raises:
            DuplicateBindingError: anchor is already owned by a calendar.
        """
        key = id(anchor)
        if key in self._owners:
            raise DuplicateBindingError(anchor)
        self._owners[key] = (anchor, calendar)
        _debug_print(f"bound {type(calendar).__name__} to {type(anchor).__name__}")
        for hook in self._on_bind:
            hook(anchor, calendar)

    def unbind(self, anchor) -> Optional[Any]:
        """Release anchor; returns the calendar that owned it, if any."""
        entry = self._owners.pop(id(anchor), None)
        if entry is None:
            return None
        _, calendar = entry
        _debug_print(f"unbound {type(calendar).__name__} from {type(anchor).__name__}")
        for hook in self._on_unbind:
            hook(anchor, calendar)
        return calendar

    def lookup(self, anchor) -> Optional[Any]:
        entry = self._owners.get(id(anchor))
        return entry[1] if entry is not None else None

    def clear(self):
        for anchor, _ in list(self._owners.values()):
            self.unbind(anchor)


# Registry used by calendars that are not given one explicitly
default_registry = AnchorRegistry()
