"""
Example showing a panel navigator detaching into a second window.
"""

from __future__ import annotations

from smartnav import HandoffChannel, Navigator, RouteRegistry, open_navigator, route_path


def settings_page(**props):
    return f"settings:{props.get('section', 'general')}"


def instance_page(**props):
    return f"instance:{props.get('slug')}:{props.get('activeTab', 'overview')}"


def invalid_page(**props):
    return "not-found"


PATHS = {
    **route_path("/config", settings_page, "Settings"),
    **route_path("/instance", instance_page, "Instance", {"activeTab": "overview"}),
}


def main() -> None:
    registry = RouteRegistry(PATHS, invalid=invalid_page)
    panel = Navigator(registry).plug("logging")
    panel.navigate("/config")
    panel.navigate("/instance", {"slug": "vanilla-1-21"})
    panel.register_state_provider("/instance", lambda: {"activeTab": "mods", "scroll": 420})
    print(panel.render_view(), panel.generate_url())

    # Both windows share the slot storage (here: one process, one dict).
    channel = HandoffChannel()
    handoff_id = panel.detach(channel)

    window = open_navigator(registry, {"handoff": handoff_id}, channel=channel)
    print(window.render_view(), window.can_go_back())
    window.backwards()
    print(window.render_view())


if __name__ == "__main__":
    main()
