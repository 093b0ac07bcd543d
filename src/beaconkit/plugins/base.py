"""Abstract base class for beaconkit sub-plugins.

A sub-plugin composes with a :class:`~beaconkit.plugin.BeaconPlugin`: it is
listed in the beacon plugin's ``plugins`` configuration and, during
:meth:`~beaconkit.plugin.BeaconPlugin.setup`, gets a chance to tap the
beacon plugin's hooks. Every method except :attr:`name` has a no-op default
so plugins only override what they need.

Sub-plugins may also be registered as entry points in the
``beaconkit.plugins`` group and discovered at runtime by
:class:`~beaconkit.plugins.manager.PluginManager`.

Example:
    Minimal plugin that drops beacons from one view::

        class MutePlugin(Plugin):
            @property
            def name(self) -> str:
                return "mute"

            def apply(self, beacon_plugin):
                beacon_plugin.hooks.cancel_beacon.tap(
                    lambda view_id, meta_data: view_id == "ad-banner"
                )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from beaconkit.models import GlobalConfig

if TYPE_CHECKING:
    from beaconkit.plugin import BeaconPlugin


class Plugin(ABC):
    """Base class for all beaconkit sub-plugins.

    The plugin lifecycle is:

    1. Instantiation -- directly, or by the :class:`PluginManager` through
       the no-arg constructor.
    2. :meth:`on_init` -- called once with the global configuration when
       loaded through the manager.
    3. :meth:`apply` -- called once per beacon plugin the sub-plugin is
       listed in, after that plugin's hooks exist.
    4. :meth:`cleanup` -- called when the beacon plugin is torn down.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name used for discovery and logging.

        Returns:
            A short, human-readable identifier (e.g. ``"cancel-views"``).
        """
        ...

    @property
    def version(self) -> str:
        """Return the plugin version string. Defaults to ``"0.1.0"``."""
        return "0.1.0"

    @property
    def description(self) -> str:
        """Return a one-line description. Defaults to ``""``."""
        return ""

    def on_init(self, config: GlobalConfig) -> None:
        """Called once when the plugin is loaded by the :class:`PluginManager`.

        Args:
            config: The global beaconkit configuration.
        """

    def apply(self, beacon_plugin: BeaconPlugin) -> None:
        """Tap the hooks of *beacon_plugin*.

        Runs before the beacon plugin registers its own interceptors, so
        taps made here come first in every chain.

        Args:
            beacon_plugin: The plugin being set up. Its ``hooks`` are ready.
        """

    def cleanup(self) -> None:
        """Called when the owning beacon plugin is torn down."""
