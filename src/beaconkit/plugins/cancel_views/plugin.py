"""Cancel every beacon emitted from a fixed set of view instances."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Optional

from beaconkit.models import GlobalConfig
from beaconkit.plugins.base import Plugin

if TYPE_CHECKING:
    from beaconkit.plugin import BeaconPlugin

logger = logging.getLogger(__name__)


class CancelViewsPlugin(Plugin):
    """Vetoes beacons whose ``view_id`` is in :attr:`view_ids`.

    Matching is by view id alone; metadata is ignored. Ids come from the
    constructor or, when discovered through the plugin manager, from
    ``cancel.view_ids`` in the global configuration.
    """

    def __init__(self, view_ids: Optional[Iterable[str]] = None) -> None:
        self.view_ids: set[str] = set(view_ids or ())

    @property
    def name(self) -> str:
        return "cancel-views"

    @property
    def description(self) -> str:
        return "Cancel beacons emitted from configured view ids"

    def on_init(self, config: GlobalConfig) -> None:
        self.view_ids.update(config.cancel.view_ids)

    def apply(self, beacon_plugin: BeaconPlugin) -> None:
        beacon_plugin.hooks.cancel_beacon.tap(self.should_cancel)

    def should_cancel(self, view_id: Optional[str], meta_data: Any) -> bool:
        return view_id is not None and view_id in self.view_ids

    def cleanup(self) -> None:
        self.view_ids.clear()
