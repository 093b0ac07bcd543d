"""Built-in CLI sub-commands for beaconkit.

* :mod:`~beaconkit.commands.replay` -- push recorded beacons through a
  fully set-up :class:`~beaconkit.plugin.BeaconPlugin`.
* :mod:`~beaconkit.commands.plugins` -- list discovered sub-plugins.
* :mod:`~beaconkit.commands.config` -- show the effective configuration.

Each module either exports a :class:`typer.Typer` sub-application (for
groups like ``plugins`` and ``config``) or a plain callback function
registered directly on the root app (``replay``).
"""
