"""Shared test fixtures for beaconkit.

Provides an isolated config environment, a recording sink, set-up beacon
plugins, and a CLI runner. These fixtures are discovered automatically by
pytest and are available to all test modules without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from beaconkit.models import BeaconEvent
from beaconkit.output import reset_output
from beaconkit.plugin import BeaconPlugin


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point every config/data directory at a temp dir and run from it.

    Keeps ``./beaconkit.json`` and the user's real config out of tests.
    """
    monkeypatch.setattr("beaconkit.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("BEACONKIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("BEACONKIT_CANCEL_VIEWS", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Beacon plugin fixtures
# ---------------------------------------------------------------------------


class RecordingSink:
    """Sink callback that remembers every beacon it receives."""

    def __init__(self) -> None:
        self.calls: list[BeaconEvent] = []

    def __call__(self, event: BeaconEvent) -> None:
        self.calls.append(event)

    @property
    def actions(self) -> list[str]:
        return [event.action for event in self.calls]

    @property
    def view_ids(self) -> list[str | None]:
        return [event.view_id for event in self.calls]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def plugin(sink: RecordingSink) -> BeaconPlugin:
    """A set-up BeaconPlugin with no sub-plugins, delivering to ``sink``."""
    beacon_plugin = BeaconPlugin(plugins=[], on_beacon=sink)
    beacon_plugin.setup()
    return beacon_plugin


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo ``setup_logging`` calls made by CLI invocations.

    The CLI attaches a handler bound to the runner's temporary stderr,
    which is closed once the invocation returns.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
