"""End-to-end tests for the beaconkit CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from beaconkit import __version__
from beaconkit.app import app
from beaconkit.exceptions import ConfigError, InvalidBeaconError, InvalidUsageError
from beaconkit.plugins import CancelViewsPlugin, PluginManager

runner = CliRunner()

RECORDS = [
    {"action": "viewed", "element": "view", "assetId": "view-1", "viewId": "view-1"},
    {"action": "clicked", "element": "button", "assetId": "submit", "viewId": "view-1"},
    {"action": "clicked", "element": "button", "assetId": "submit", "viewId": "view-2",
     "metaData": {"field": "value"}},
]


class _NoEntryPoints:
    def select(self, group: str) -> list[Any]:
        return []


class _CancelViewsEntryPoints:
    class _EP:
        name = "cancel-views"

        def load(self) -> type:
            return CancelViewsPlugin

    def select(self, group: str) -> list[Any]:
        return [self._EP()]


@pytest.fixture
def no_entry_points():
    with patch(
        "beaconkit.plugins.manager.importlib.metadata.entry_points",
        return_value=_NoEntryPoints(),
    ):
        yield


@pytest.fixture
def capture(tmp_path: Path) -> Path:
    path = tmp_path / "capture.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"beaconkit {__version__}"

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "replay" in result.output

    def test_bad_log_level_is_a_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEACONKIT_LOG_LEVEL", "chatty")
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code != 0
        assert isinstance(result.exception, ConfigError)

    def test_json_and_plain_conflict(self) -> None:
        result = runner.invoke(app, ["--json", "--plain", "config", "path"])
        assert isinstance(result.exception, InvalidUsageError)

    def test_configured_output_format(self, tmp_path: Path) -> None:
        (tmp_path / "beaconkit.json").write_text(
            json.dumps({"output": {"format": "json"}}), encoding="utf-8"
        )
        result = runner.invoke(app, ["--quiet", "config", "show"])
        assert json.loads(result.stdout)["output"]["format"] == "json"

    def test_unknown_configured_format(self, tmp_path: Path) -> None:
        (tmp_path / "beaconkit.json").write_text(
            json.dumps({"output": {"format": "yaml"}}), encoding="utf-8"
        )
        result = runner.invoke(app, ["config", "path"])
        assert isinstance(result.exception, ConfigError)


@pytest.mark.usefixtures("no_entry_points")
class TestReplay:
    def test_delivers_everything_without_rules(self, capture: Path) -> None:
        result = runner.invoke(app, ["--json", "--quiet", "replay", str(capture)])
        assert result.exit_code == 0, result.output
        delivered = json.loads(result.stdout)
        assert [d["action"] for d in delivered] == ["viewed", "clicked", "clicked"]
        assert delivered[2]["metaData"] == {"field": "value"}

    def test_cancel_option_vetoes_view(self, capture: Path) -> None:
        result = runner.invoke(app, ["--json", "--quiet", "replay", str(capture), "--cancel", "view-1"])
        assert result.exit_code == 0, result.output
        delivered = json.loads(result.stdout)
        assert [d["viewId"] for d in delivered] == ["view-2"]

    def test_cancel_from_environment(self, capture: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BEACONKIT_CANCEL_VIEWS", "view-2")
        result = runner.invoke(app, ["--json", "--quiet", "replay", str(capture)])
        delivered = json.loads(result.stdout)
        assert [d["viewId"] for d in delivered] == ["view-1", "view-1"]

    def test_json_lines_input(self, tmp_path: Path) -> None:
        path = tmp_path / "capture.jsonl"
        path.write_text("\n".join(json.dumps(r) for r in RECORDS) + "\n", encoding="utf-8")
        result = runner.invoke(app, ["--json", "--quiet", "replay", str(path), "-c", "view-2"])
        assert len(json.loads(result.stdout)) == 2

    def test_summary_on_stderr(self, capture: Path) -> None:
        result = runner.invoke(app, ["--plain", "--no-color", "replay", str(capture), "-c", "view-1"])
        assert result.exit_code == 0
        assert "Delivered 1 of 3 beacon(s); cancelled 2." in result.output
        assert "clicked\tbutton\tsubmit\tview-2" in result.output

    def test_invalid_record(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"element": "button"}]), encoding="utf-8")
        result = runner.invoke(app, ["replay", str(path)])
        assert result.exit_code != 0
        assert isinstance(result.exception, InvalidBeaconError)
        assert "Record 0" in str(result.exception)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.jsonl"
        path.write_text('{"action": "viewed"}\n{oops\n', encoding="utf-8")
        result = runner.invoke(app, ["replay", str(path)])
        assert isinstance(result.exception, InvalidBeaconError)
        assert "line 2" in str(result.exception)

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["replay", str(tmp_path / "missing.json")])
        assert result.exit_code == 2


    def test_cancel_respects_disabled_plugin(self, capture: Path, tmp_path: Path) -> None:
        (tmp_path / "beaconkit.json").write_text(
            json.dumps({"plugins": {"disabled": ["cancel-views"]}}), encoding="utf-8"
        )
        result = runner.invoke(app, ["--json", "replay", str(capture), "--cancel", "view-1"])
        assert result.exit_code == 0, result.output
        assert "cancel-views is disabled" in result.output
        assert "Delivered 3 of 3 beacon(s); cancelled 0." in result.output


class TestReplayWithDiscoveredPlugin:
    def test_discovered_cancel_views_uses_config(self, capture: Path) -> None:
        with patch(
            "beaconkit.plugins.manager.importlib.metadata.entry_points",
            return_value=_CancelViewsEntryPoints(),
        ):
            result = runner.invoke(
                app, ["--json", "--quiet", "replay", str(capture), "--cancel", "view-2"]
            )
        assert result.exit_code == 0, result.output
        assert [d["viewId"] for d in json.loads(result.stdout)] == ["view-1", "view-1"]


class TestPluginsCommand:
    def test_list_empty(self, no_entry_points) -> None:
        result = runner.invoke(app, ["plugins", "list"])
        assert result.exit_code == 0
        assert "No sub-plugins found." in result.output

    def test_list_empty_still_cleans_up(self, no_entry_points) -> None:
        with patch.object(PluginManager, "cleanup") as cleanup:
            result = runner.invoke(app, ["plugins", "list"])
        assert result.exit_code == 0
        cleanup.assert_called_once_with()

    def test_list_discovered(self) -> None:
        with patch(
            "beaconkit.plugins.manager.importlib.metadata.entry_points",
            return_value=_CancelViewsEntryPoints(),
        ):
            result = runner.invoke(app, ["--json", "plugins", "list"])
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert rows[0]["Name"] == "cancel-views"
        assert rows[0]["Version"] == "0.1.0"


class TestConfigCommand:
    def test_path(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(tmp_path / "config" / "beaconkit" / "config.json")

    def test_show_merges_project_config(self, tmp_path: Path) -> None:
        (tmp_path / "beaconkit.json").write_text(
            json.dumps({"cancel": {"view_ids": ["view-9"]}}), encoding="utf-8"
        )
        result = runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0
        shown = json.loads(result.stdout)
        assert shown["cancel"]["view_ids"] == ["view-9"]
        assert shown["logging"]["level"] == "WARNING"
