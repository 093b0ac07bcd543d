"""Plugin commands -- list the sub-plugins discovery would load."""

from __future__ import annotations

import typer

from beaconkit.output import info, print_table


plugins_app = typer.Typer(no_args_is_help=True)


@plugins_app.command("list")
def plugins_list() -> None:
    """List sub-plugins registered under the ``beaconkit.plugins`` entry point.

    Enabled/disabled lists from the configuration are applied, so the
    output matches what ``beaconkit replay`` would load.
    """
    from beaconkit.config import resolve_config
    from beaconkit.plugins import PluginManager

    manager = PluginManager()
    try:
        manager.discover(resolve_config())
        plugins = manager.list_plugins()
        if not plugins:
            info("No sub-plugins found.")
            return
        rows = [[p["name"], p["version"], p["description"]] for p in plugins]
        print_table(["Name", "Version", "Description"], rows, title="Sub-plugins")
    finally:
        manager.cleanup()
