"""Tests for route registration and resolution."""

import pytest

from smartnav import RouteRegistry, page, route_path
from smartnav.core.registry import RouteEntry


def component_a(**props):
    return ("A", props)


def component_b(**props):
    return ("B", props)


def invalid_page(**props):
    return "missing"


def test_resolve_known_and_unknown_keys():
    registry = RouteRegistry({"/a": component_a, "/b": component_b}, invalid=invalid_page)

    assert registry.resolve("/a").render is component_a
    fallback = registry.resolve("/missing")
    assert fallback.key == "404"
    assert fallback.render is invalid_page


def test_default_fallback_renders_nothing():
    registry = RouteRegistry()
    assert "404" in registry
    assert registry.resolve("/nowhere").render() is None
    assert len(registry) == 1


def test_route_path_tables_keep_name_and_default_props():
    paths = {
        **route_path("/config", component_a, "Settings"),
        **route_path("/instance", component_b, "Instance", {"activeTab": "overview"}),
    }
    registry = RouteRegistry(paths)

    entry = registry.resolve("/instance")
    assert entry == RouteEntry("/instance", component_b, "Instance", {"activeTab": "overview"})
    assert registry.resolve("/config").name == "Settings"
    assert registry.keys() == ("404", "/config", "/instance")


def test_register_rejects_collisions_unless_replace():
    registry = RouteRegistry({"/a": component_a})
    with pytest.raises(ValueError):
        registry.register("/a", component_b)

    registry.register("/a", component_b, "B", replace=True)
    assert registry.resolve("/a").render is component_b


def test_register_validates_key_and_render():
    registry = RouteRegistry()
    with pytest.raises(ValueError):
        registry.register("", component_a)
    with pytest.raises(TypeError):
        registry.register("/a", "not callable")


def test_registering_404_replaces_the_fallback():
    registry = RouteRegistry()
    registry.register("404", invalid_page, "Not found")
    assert registry.resolve("/x").name == "Not found"


def test_entry_props_are_copied_on_registration():
    defaults = {"tab": "one"}
    registry = RouteRegistry()
    registry.register("/a", component_a, props=defaults)
    defaults["tab"] = "two"
    assert registry.resolve("/a").props == {"tab": "one"}


def test_page_markers_register_units():
    @page("/resources", name="Resources", view="grid")
    @page("/mods", name="Mods")
    def browser(**props):
        return props

    registry = RouteRegistry().add_marked(browser)

    assert registry.resolve("/resources").props == {"view": "grid"}
    assert registry.resolve("/mods").name == "Mods"
    assert registry.resolve("/mods").render is browser


def test_add_marked_ignores_unmarked_units():
    registry = RouteRegistry().add_marked(component_a)
    assert registry.keys() == ("404",)


def test_members_describes_routes():
    registry = RouteRegistry(route_path("/a", component_a, "A", {"x": 1}))
    members = registry.members()
    assert members["/a"] == {"name": "A", "render": component_a, "props": {"x": 1}}
    assert "404" in members
