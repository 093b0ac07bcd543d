"""Exception hierarchy for beaconkit.

All exceptions inherit from :class:`BeaconError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`beaconkit.exit_codes`.
The top-level error handler in :func:`beaconkit.app.main` catches
``BeaconError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Cancelled beacons and beacons emitted without an installed context are not
errors and never raise.

Subclass hierarchy::

    BeaconError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- InvalidBeaconError     (exit 2)
    +-- ConfigError            (exit 1)
    +-- PluginError            (exit 10)
    |   +-- HooksNotReadyError (exit 11)
    +-- ScriptBridgeError      (exit 12)
"""

from beaconkit.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_HOOKS_NOT_READY,
    EXIT_INVALID_USAGE,
    EXIT_PLUGIN_ERROR,
    EXIT_SCRIPT_BRIDGE_ERROR,
)


class BeaconError(Exception):
    """Base exception for all beaconkit errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`beaconkit.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(BeaconError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class InvalidBeaconError(BeaconError):
    """Raised when a beacon record cannot be turned into a :class:`~beaconkit.models.BeaconEvent`."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(BeaconError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class PluginError(BeaconError):
    """Raised when a plugin fails to load, is set up twice, or breaks a hook contract."""

    exit_code = EXIT_PLUGIN_ERROR


class HooksNotReadyError(PluginError):
    """Raised when hooks are used before :meth:`~beaconkit.plugin.BeaconPlugin.setup` ran.

    This is a programming-sequence error, not a transient one: the caller
    tapped or dispatched against a plugin (or script bridge) whose hooks do
    not exist yet, or no longer exist after teardown.
    """

    exit_code = EXIT_HOOKS_NOT_READY


class ScriptBridgeError(BeaconError):
    """Raised when a scripted interceptor is unknown or returns a value the native chain cannot use."""

    exit_code = EXIT_SCRIPT_BRIDGE_ERROR
