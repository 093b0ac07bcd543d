"""Replay command -- push recorded beacons through the full pipeline.

Reads beacon records from a file, dispatches each one through a set-up
:class:`~beaconkit.plugin.BeaconPlugin` carrying the discovered sub-plugins,
and prints the beacons that reach the sink. Useful for checking cancellation
rules against a capture before shipping them.

Records use the wire field names (``action``, ``element``, ``assetId``,
``viewId``, ``metaData``, ``timestamp``) and may be stored either as a JSON
array or as JSON lines.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError

from beaconkit.exceptions import InvalidBeaconError
from beaconkit.models import BeaconEvent
from beaconkit.output import (
    OutputFormat,
    debug,
    format_response,
    get_output,
    info,
    print_table,
    warning,
)


def _parse_records(text: str) -> list[Any]:
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        try:
            records = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise InvalidBeaconError(f"Invalid JSON array: {exc}") from exc
        return records
    records = []
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise InvalidBeaconError(f"Invalid JSON on line {lineno}: {exc}") from exc
    return records


def load_beacon_records(path: Path) -> list[BeaconEvent]:
    """Load beacon records from a JSON array or JSON-lines file.

    Raises:
        InvalidBeaconError: If the file is not valid JSON or a record is not
            a valid beacon.
    """
    events = []
    for index, record in enumerate(_parse_records(path.read_text(encoding="utf-8"))):
        if not isinstance(record, dict):
            raise InvalidBeaconError(f"Record {index} is not an object")
        try:
            events.append(BeaconEvent.model_validate(record))
        except ValidationError as exc:
            raise InvalidBeaconError(f"Record {index} is not a valid beacon: {exc}") from exc
    return events


def _cell(value: Optional[str]) -> str:
    return "" if value is None else value


def replay_command(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Beacon records (JSON array or JSON lines)."
    ),
    cancel: Optional[list[str]] = typer.Option(
        None, "--cancel", "-c", help="Cancel beacons from this view id (repeatable)."
    ),
) -> None:
    """Replay recorded beacons and print the ones that would be delivered.

    Example::

        beaconkit replay capture.jsonl --cancel view-1
        beaconkit --json replay capture.json
    """
    from beaconkit.config import resolve_config
    from beaconkit.plugin import BeaconPlugin
    from beaconkit.plugins import CancelViewsPlugin, PluginManager

    config = resolve_config(cli_cancel_views=cancel)
    events = load_beacon_records(file)
    if not events:
        warning(f"No beacon records in {file}")

    manager = PluginManager()
    loaded = manager.discover(config)
    if "cancel-views" not in loaded and config.cancel.view_ids:
        enabled = config.plugins.enabled
        if "cancel-views" in config.plugins.disabled or (enabled and "cancel-views" not in enabled):
            warning("cancel-views is disabled in the configuration; ignoring cancelled view ids")
        else:
            manager.load_plugin("cancel-views", CancelViewsPlugin(), config)
    debug(f"Sub-plugins: {', '.join(p.name for p in manager.plugins()) or 'none'}")

    delivered: list[BeaconEvent] = []
    plugin = BeaconPlugin(plugins=manager.plugins(), on_beacon=delivered.append)
    plugin.setup()
    try:
        for event in events:
            plugin.dispatch(event)
    finally:
        plugin.teardown()

    if get_output().format == OutputFormat.JSON:
        format_response([event.to_wire() for event in delivered])
    else:
        rows = [
            [
                event.action,
                _cell(event.element),
                _cell(event.asset_id),
                _cell(event.view_id),
                json.dumps(event.to_wire()["metaData"], ensure_ascii=False),
            ]
            for event in delivered
        ]
        print_table(["Action", "Element", "Asset", "View", "Metadata"], rows, title="Delivered beacons")

    info(
        f"Delivered {len(delivered)} of {len(events)} beacon(s); "
        f"cancelled {len(events) - len(delivered)}."
    )
