"""Typer application and CLI entry point for beaconkit.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``replay``, ``plugins``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~beaconkit.exceptions.BeaconError` exits with its own code;
anything else is written to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from beaconkit import __version__
from beaconkit.commands.config import config_app
from beaconkit.commands.plugins import plugins_app
from beaconkit.commands.replay import replay_command
from beaconkit.exceptions import ConfigError, InvalidUsageError
from beaconkit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="beaconkit",
    help="Replay and inspect analytics beacons through the beacon plugin pipeline.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("replay")(replay_command)
app.add_typer(plugins_app, name="plugins", help="Sub-plugin discovery.")
app.add_typer(config_app, name="config", help="Configuration inspection.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"beaconkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and logging."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~beaconkit.output.OutputManager` and
    configures logging. ``--json``/``--plain`` override the configured
    ``output.format``; ``--verbose`` forces ``DEBUG``, otherwise the level
    comes from the resolved configuration (``BEACONKIT_LOG_LEVEL``, project
    and user config, ``WARNING``).

    Raises:
        InvalidUsageError: If both ``--json`` and ``--plain`` are given.
        ConfigError: If the configured format or log level is unknown.
    """
    from beaconkit.config import resolve_config
    from beaconkit.logging_config import setup_logging
    from beaconkit.output import OutputFormat, OutputManager, set_output

    if json_output and plain_output:
        raise InvalidUsageError("--json and --plain are mutually exclusive")

    cli_format = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    config = resolve_config(
        cli_format=cli_format,
        cli_log_level="DEBUG" if verbose else None,
    )
    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        raise ConfigError(f"Unknown output format '{config.output.format}'") from None

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    setup_logging(config.logging.level)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from beaconkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``beaconkit`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from beaconkit.exceptions import BeaconError
        from beaconkit.output import error

        if isinstance(exc, BeaconError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
