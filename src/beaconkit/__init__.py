"""beaconkit -- Turn user-interface interactions into cancellable analytics beacons.

A :class:`~beaconkit.plugin.BeaconPlugin` wraps the root of a declarative
view tree, hands every view a :class:`~beaconkit.context.BeaconContext`, and
routes each beacon a view emits through a hookable pipeline before it reaches
a single sink callback. Hook consumers -- native sub-plugins or scripted
interceptors behind a :class:`~beaconkit.bridge.ScriptBridge` -- may veto
individual beacons by view identity.

Typical usage::

    plugin = BeaconPlugin(plugins=[CancelViewsPlugin(["view-1"])], on_beacon=send)
    plugin.setup()
    scope = plugin.render(view)
    scope.context.beacon("clicked", "button", "submit")

Modules:
    models: Pydantic models for beacons and configuration.
    hooks: Hook registry and the tap surface.
    gate: Cancellation decision over the ``cancelBeacon`` chain.
    context: Beacon capability handed to the view tree.
    plugin: The orchestrating :class:`~beaconkit.plugin.BeaconPlugin`.
    bridge: Serializable boundary for scripted interceptors.
    app: Typer developer CLI (``beaconkit replay``).
"""

__version__ = "0.1.0"
