import pytest

from calgrid_core.errors import DuplicateBindingError
from calgrid_core.registry import AnchorRegistry


def test_bind_lookup_unbind():
    registry = AnchorRegistry()
    anchor, calendar = object(), object()

    registry.bind(anchor, calendar)
    assert anchor in registry
    assert registry.lookup(anchor) is calendar
    assert len(registry) == 1

    assert registry.unbind(anchor) is calendar
    assert registry.lookup(anchor) is None
    assert registry.unbind(anchor) is None


def test_second_binding_is_rejected():
    registry = AnchorRegistry()
    anchor = object()
    registry.bind(anchor, "first")

    with pytest.raises(DuplicateBindingError) as excinfo:
        registry.bind(anchor, "second")
    assert excinfo.value.anchor is anchor
    assert registry.lookup(anchor) == "first"


def test_unhashable_anchors():
    registry = AnchorRegistry()
    anchor = {"id": "container"}
    registry.bind(anchor, "calendar")
    assert registry.lookup(anchor) == "calendar"
    assert registry.lookup({"id": "container"}) is None


def test_hooks_and_clear():
    registry = AnchorRegistry()
    events = []
    registry.add_bind_hook(lambda anchor, calendar: events.append(("bind", calendar)))
    registry.add_unbind_hook(lambda anchor, calendar: events.append(("unbind", calendar)))

    registry.bind(object(), "a")
    registry.bind(object(), "b")
    registry.clear()

    assert events == [("bind", "a"), ("bind", "b"), ("unbind", "a"), ("unbind", "b")]
    assert len(registry) == 0
