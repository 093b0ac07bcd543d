"""Config commands -- inspect the effective configuration.

Provides the ``beaconkit config`` sub-command group. Settings live in the
beaconkit config directory and are layered with ``./beaconkit.json`` and
environment variables by :func:`~beaconkit.config.resolve_config`.
"""

from __future__ import annotations

import typer

from beaconkit.output import format_response, info, print_data


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration after all precedence layers.

    Example::

        beaconkit config show
        beaconkit --json config show
    """
    from beaconkit.config import get_config_dir, resolve_config

    config = resolve_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the path of the user config file."""
    from beaconkit.config import global_config_path

    print_data(str(global_config_path()))
