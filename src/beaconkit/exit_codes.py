"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~beaconkit.exceptions.BeaconError` subclass.
Shell wrappers around ``beaconkit replay`` can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ beaconkit replay beacons.jsonl
    $ echo $?
    2   # EXIT_INVALID_USAGE -- a record was not a valid beacon
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or malformed input."""

EXIT_PLUGIN_ERROR = 10
"""A sub-plugin failed to load, initialise, or apply its hooks."""

EXIT_HOOKS_NOT_READY = 11
"""Hooks were accessed before the beacon plugin was set up."""

EXIT_SCRIPT_BRIDGE_ERROR = 12
"""A scripted interceptor broke the script bridge contract."""
