"""Root logging setup for the beaconkit CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are attached here, once, by the CLI.

Level guidelines:

* ``debug`` -- per-beacon decisions (cancelled, dropped after teardown),
  individual taps.
* ``info`` -- lifecycle (plugin set up / torn down, sub-plugin loaded, bridge
  installed).
* ``warning`` -- discarded asynchronous votes, sub-plugins that failed to load
  or clean up.
"""

from __future__ import annotations

import logging
import sys

from beaconkit.exceptions import ConfigError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level_name: str) -> int:
    """Send log records at *level_name* and above to stderr.

    Returns:
        The numeric level applied.

    Raises:
        ConfigError: If *level_name* is not a standard level name.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level '{level_name}'")
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    return level
