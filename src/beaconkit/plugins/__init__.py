"""Sub-plugin system for beaconkit -- discovery, loading, and lifecycle.

Sub-plugins compose with a :class:`~beaconkit.plugin.BeaconPlugin` by
tapping its hooks during setup. Third-party packages can ship sub-plugins by
declaring an entry point in the ``beaconkit.plugins`` group; at runtime
:class:`PluginManager` discovers and loads them.

Key classes:

* :class:`Plugin` -- Abstract base class that all sub-plugins extend.
* :class:`PluginManager` -- Discovers, loads, and manages plugin lifecycle.
* :class:`CancelViewsPlugin` -- Bundled plugin vetoing beacons by view id.

Example:
    Typical usage from the CLI::

        from beaconkit.plugins import PluginManager

        manager = PluginManager()
        manager.discover(global_config)
        plugin = BeaconPlugin(plugins=manager.plugins(), on_beacon=send)
"""

from beaconkit.plugins.base import Plugin
from beaconkit.plugins.cancel_views import CancelViewsPlugin
from beaconkit.plugins.manager import PluginManager

__all__ = ["Plugin", "CancelViewsPlugin", "PluginManager"]
