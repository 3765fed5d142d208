"""Navigation state store and back/forward history."""

import pytest

from smartnav import HistoryEntry, Navigator, RouteRegistry, route_path
from smartnav.core.base_navigator import BaseNavigator


def component_a(**props):
    return ("A", props)


def component_b(**props):
    return ("B", props)


def component_c(**props):
    return ("C", props)


def invalid_page(**props):
    return ("404", props)


def make_registry():
    return RouteRegistry(
        {
            **route_path("/a", component_a, "Page A"),
            **route_path("/b", component_b, "Page B", {"activeTab": "overview"}),
            **route_path("/c", component_c, "Page C"),
        },
        invalid=invalid_page,
    )


def make_navigator(**options):
    return Navigator(make_registry(), **options)


def test_bootstrap_navigation_records_no_history():
    nav = make_navigator()
    nav.navigate("/a")

    assert nav.current_path.get() == "/a"
    assert nav.history.past == []
    assert nav.can_go_back() is False


def test_navigate_pushes_previous_state_and_clears_future():
    nav = make_navigator()
    nav.navigate("/a")
    nav.navigate("/b", {"tab": "x"})

    assert nav.history.past == [HistoryEntry("/a", {}, None)]
    assert nav.history.future == []

    nav.backwards()
    assert nav.current_path.get() == "/a"
    assert nav.current_params.get() == {}
    assert nav.history.future == [HistoryEntry("/b", {"tab": "x"}, None)]

    nav.navigate("/c")
    assert nav.history.future == []
    assert nav.history.past == [HistoryEntry("/a", {}, None)]
    assert nav.can_go_forward() is False


def test_each_navigate_grows_past_by_one_without_dedup():
    nav = make_navigator()
    nav.navigate("/a")
    for expected in range(1, 4):
        nav.navigate("/a")
        assert len(nav.history.past) == expected


def test_back_then_forward_restores_full_triple():
    nav = make_navigator()
    nav.navigate("/a", {"slug": "one"})
    nav.navigate("/b", {"slug": "two", "page": 3}, {"activeTab": "mods"})

    nav.backwards()
    assert nav.current_params.get() == {"slug": "one"}
    assert nav.current_props.get() is None

    nav.forwards()
    assert nav.current_path.get() == "/b"
    assert nav.current_params.get() == {"slug": "two", "page": 3}
    assert nav.current_props.get() == {"activeTab": "mods"}
    assert len(nav.history.past) == 1
    assert nav.history.future == []


def test_backwards_and_forwards_are_noops_on_empty_side():
    nav = make_navigator()
    nav.navigate("/a")
    nav.backwards()
    nav.forwards()

    assert nav.current_path.get() == "/a"
    assert nav.history.past == []
    assert nav.history.future == []


def test_history_entries_are_isolated_from_later_mutation():
    nav = make_navigator()
    params = {"tags": ["survival"]}
    nav.navigate("/a", params)
    nav.navigate("/b")
    params["tags"].append("creative")

    assert nav.history.past[0].params == {"tags": ["survival"]}


def test_unknown_path_resolves_to_fallback():
    nav = make_navigator()
    nav.navigate("/missing", {"slug": "x"})

    element = nav.current_element()
    assert element.key == "404"
    assert element.is_fallback is True
    assert element.render is invalid_page
    assert nav.render_view() == ("404", {"slug": "x"})


def test_empty_path_renders_fallback_before_first_navigation():
    nav = make_navigator()
    assert nav.current_path.get() == ""
    assert nav.current_element().key == "404"


def test_current_element_merges_entry_props_params_and_props():
    nav = make_navigator()
    nav.navigate("/b", {"slug": "vanilla"}, {"activeTab": "mods"})

    element = nav.current_element()
    assert element.props == {"activeTab": "mods", "slug": "vanilla"}
    assert element.name == "Page B"


def test_params_take_precedence_over_props_for_shared_keys():
    nav = make_navigator()
    nav.navigate("/b", {"activeTab": "from-params"}, {"activeTab": "from-props", "open": True})

    props = nav.current_element().props
    assert props["activeTab"] == "from-params"
    assert props["open"] is True


def test_render_view_passes_extra_props():
    nav = make_navigator()
    nav.navigate("/a", {"slug": "x"})
    assert nav.render_view(compact=True) == ("A", {"slug": "x", "compact": True})


def test_update_query_without_push_replaces_params_in_place():
    nav = make_navigator()
    nav.navigate("/a")
    nav.navigate("/b")
    for term in ("mine", "minec", "minecraft"):
        nav.update_query("q", term)

    assert nav.current_params.get() == {"q": "minecraft"}
    assert len(nav.history.past) == 1
    assert nav.history.future == []


def test_update_query_with_push_records_entry():
    nav = make_navigator()
    nav.navigate("/a")
    nav.update_query("tab", "details", push=True)

    assert nav.current_params.get() == {"tab": "details"}
    assert nav.history.past == [HistoryEntry("/a", {}, None)]

    nav.backwards()
    assert nav.current_params.get() == {}


def test_update_query_none_and_remove_query_drop_key():
    nav = make_navigator()
    nav.navigate("/a", {"q": "x", "page": 2})

    nav.update_query("q", None)
    assert nav.current_params.get() == {"page": 2}

    nav.remove_query("page")
    assert nav.current_params.get() == {}
    nav.remove_query("absent")
    assert nav.current_params.get() == {}


def test_set_state_merges_props_without_history():
    nav = make_navigator()
    nav.navigate("/a", props={"a": 1})
    nav.set_state({"b": 2}, c=3)

    assert nav.current_props.get() == {"a": 1, "b": 2, "c": 3}
    assert nav.history.past == []


def test_custom_name_is_reset_on_navigation():
    nav = make_navigator()
    nav.navigate("/a")
    nav.custom_name.set("Vanilla 1.21")
    assert nav.display_name() == "Vanilla 1.21"

    nav.navigate("/b")
    assert nav.custom_name.get() is None
    assert nav.display_name() == "Page B"


def test_path_subscribers_see_new_params():
    nav = make_navigator()
    seen = []
    nav.current_path.subscribe(
        lambda new, old: seen.append((old, new, dict(nav.current_params.get())))
    )

    nav.navigate("/a", {"slug": "one"})
    nav.navigate("/b", {"slug": "two"})

    assert seen == [("", "/a", {"slug": "one"}), ("/a", "/b", {"slug": "two"})]


def test_unsubscribe_stops_notifications():
    nav = make_navigator()
    seen = []
    unsubscribe = nav.current_path.subscribe(lambda new, old: seen.append(new))
    nav.navigate("/a")
    unsubscribe()
    nav.navigate("/b")
    assert seen == ["/a"]


def test_failing_subscriber_does_not_break_navigation(caplog):
    nav = make_navigator()
    seen = []

    def broken(new, old):
        raise RuntimeError("view crashed")

    nav.current_path.subscribe(broken)
    nav.current_path.subscribe(lambda new, old: seen.append(new))

    with caplog.at_level("ERROR", logger="smartnav.core.observable"):
        nav.navigate("/a")

    assert nav.current_path.get() == "/a"
    assert seen == ["/a"]
    assert "Subscriber of current_path failed" in caplog.text


def test_navigators_are_independent():
    registry = make_registry()
    left = Navigator(registry)
    right = Navigator(registry)
    left.navigate("/a")
    left.navigate("/b")

    assert right.current_path.get() == ""
    assert right.history.past == []


def test_constructor_accepts_initial_state_and_plain_mapping():
    nav = BaseNavigator(
        {"/a": component_a},
        current_path="/a",
        initial_params={"slug": "x"},
        initial_props={"open": True},
    )
    assert isinstance(nav.registry, RouteRegistry)
    assert nav.current_element().props == {"slug": "x", "open": True}

    nav.navigate("/other")
    assert nav.history.past == [HistoryEntry("/a", {"slug": "x"}, {"open": True})]


def test_constructor_requires_registry():
    with pytest.raises(ValueError):
        Navigator(None)


def test_clear_history_keeps_current_state():
    nav = make_navigator()
    nav.navigate("/a")
    nav.navigate("/b")
    nav.navigate("/c")
    nav.backwards()
    nav.clear_history()

    assert nav.current_path.get() == "/b"
    assert nav.can_go_back() is False
    assert nav.can_go_forward() is False


def test_generate_url_uses_codec_scheme():
    nav = make_navigator(scheme="launcher")
    nav.navigate("/b", {"tab": "x", "page": 2})
    assert nav.generate_url() == "launcher:///b?page=2&tab=x"

    nav.navigate("/a")
    assert nav.generate_url() == "launcher:///a"


def test_operations_table_lists_public_operations():
    nav = make_navigator()
    assert nav.operations() == (
        "navigate",
        "update_query",
        "remove_query",
        "backwards",
        "forwards",
        "reload",
        "set_state",
    )
    assert "past=0" in repr(nav)
