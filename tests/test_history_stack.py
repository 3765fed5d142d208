"""Low-level history stack and observable value holder."""

import threading

from smartnav import HistoryEntry, Navigator, Observable, RouteRegistry
from smartnav.core.history import HistoryStack


def test_back_and_forward_move_entries_between_sides():
    stack = HistoryStack()
    stack.push(HistoryEntry("/a"))
    stack.push(HistoryEntry("/b"))

    previous = stack.back(HistoryEntry("/c"))
    assert previous == HistoryEntry("/b")
    assert stack.past == [HistoryEntry("/a")]
    assert stack.future == [HistoryEntry("/c")]

    following = stack.forward(HistoryEntry("/b"))
    assert following == HistoryEntry("/c")
    assert stack.past == [HistoryEntry("/a"), HistoryEntry("/b")]
    assert stack.future == []


def test_empty_sides_leave_stack_untouched():
    stack = HistoryStack()
    assert stack.back(HistoryEntry("/a")) is None
    assert stack.forward(HistoryEntry("/a")) is None
    assert stack.past == [] and stack.future == []


def test_exposed_lists_are_copies():
    stack = HistoryStack()
    stack.push(HistoryEntry("/a"))
    stack.past.append(HistoryEntry("/x"))
    assert len(stack.past) == 1


def test_capture_copies_params_and_nested_props_deeply():
    params = {"filters": {"loader": "fabric"}}
    props = {"filters": {"loader": ["fabric"]}, "on_close": print}

    entry = HistoryEntry.capture("/a", params, props)
    params["filters"]["loader"] = "forge"
    props["filters"]["loader"].append("forge")
    props["other"] = 1

    assert entry.params == {"filters": {"loader": "fabric"}}
    assert entry.props == {"filters": {"loader": ["fabric"]}, "on_close": print}
    assert HistoryEntry.capture("/a").props is None


def test_uncopyable_props_are_kept_by_reference():
    lock = threading.Lock()
    entry = HistoryEntry.capture("/a", None, {"lock": lock, "tags": ["x"]})
    assert entry.props["lock"] is lock
    assert entry.props["tags"] == ["x"]


def test_navigator_history_survives_nested_prop_mutation():
    nav = Navigator(RouteRegistry({"/a": lambda **p: "A", "/b": lambda **p: "B"}))
    props = {"filters": {"loader": ["fabric"]}}
    nav.navigate("/a", None, props)
    nav.navigate("/b")
    props["filters"]["loader"].append("forge")

    assert nav.history.past[0].props == {"filters": {"loader": ["fabric"]}}


def test_observable_skips_identical_value():
    seen = []
    value = {"a": 1}
    holder = Observable(value, name="params")
    holder.subscribe(lambda new, old: seen.append((new, old)))

    holder.set(value)
    assert seen == []

    holder.set({"a": 1})
    assert seen == [({"a": 1}, {"a": 1})]
    assert holder.value == {"a": 1}
