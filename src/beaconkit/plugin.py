"""The beacon plugin: hooks, view wrapping, gating, and delivery.

:class:`BeaconPlugin` owns a :class:`~beaconkit.hooks.Hooks` surface, wraps
the root of the observed view tree in a
:class:`~beaconkit.context.BeaconScope` through the ``view`` chain, and
sends every beacon emitted under that scope through the ``buildBeacon``
chain and the :class:`~beaconkit.gate.CancellationGate` before handing
survivors to the ``on_beacon`` sink.

Lifecycle (one-way)::

    UNINITIALIZED --setup()--> SETUP --render()/dispatch()--> ACTIVE
          \\                      \\                           \\
           +----------------------+--------teardown()----------+--> TORN_DOWN
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from beaconkit.context import BeaconContext, BeaconScope, build_event, view_identity
from beaconkit.exceptions import HooksNotReadyError, PluginError
from beaconkit.gate import CancellationGate
from beaconkit.hooks import Hooks
from beaconkit.models import BeaconEvent
from beaconkit.plugins.base import Plugin

if TYPE_CHECKING:
    from beaconkit.bridge import ScriptBridge

logger = logging.getLogger(__name__)


class LifecycleState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    SETUP = "setup"
    ACTIVE = "active"
    TORN_DOWN = "torn_down"


class BeaconPluginConfig(BaseModel):
    """Options recognised by :class:`BeaconPlugin`.

    Attributes:
        plugins: Sub-plugins applied, in order, before the beacon plugin
            registers its own interceptors.
        on_beacon: Sink invoked once per delivered
            :class:`~beaconkit.models.BeaconEvent`.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    plugins: list[Plugin] = Field(default_factory=list)
    on_beacon: Callable[[BeaconEvent], Any]


class BeaconPlugin:
    """Turns beacons emitted under a view tree into sink calls.

    Args:
        plugins: Sub-plugins to activate alongside this one.
        on_beacon: Required sink callback. Exceptions it raises propagate to
            whoever emitted the beacon.

    Raises:
        PluginError: If *on_beacon* is missing or not callable, or a member
            of *plugins* is not a :class:`~beaconkit.plugins.base.Plugin`.

    Example::

        plugin = BeaconPlugin(on_beacon=events.append)
        plugin.setup()
        scope = plugin.render({"id": "view-1", "type": "info"})
        scope.appear()
    """

    def __init__(
        self,
        plugins: Optional[list[Plugin]] = None,
        on_beacon: Optional[Callable[[BeaconEvent], Any]] = None,
    ) -> None:
        try:
            self.config = BeaconPluginConfig(plugins=list(plugins or []), on_beacon=on_beacon)
        except ValidationError as exc:
            raise PluginError(f"Invalid beacon plugin configuration: {exc}") from exc
        self.state = LifecycleState.UNINITIALIZED
        self._hooks: Optional[Hooks] = None
        self._gate: Optional[CancellationGate] = None
        self._context: Optional[BeaconContext] = None
        self._bridge: Optional[ScriptBridge] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def hooks(self) -> Hooks:
        """The hook surface.

        Raises:
            HooksNotReadyError: Before :meth:`setup` or after :meth:`teardown`.
        """
        if self._hooks is None:
            if self.state == LifecycleState.TORN_DOWN:
                raise HooksNotReadyError("Beacon plugin has been torn down; its hooks are gone")
            raise HooksNotReadyError("Beacon plugin hooks are not initialized; call setup() first")
        return self._hooks

    @property
    def context(self) -> Optional[BeaconContext]:
        """The root :class:`~beaconkit.context.BeaconContext`, or ``None`` outside setup."""
        return self._context

    @property
    def bridge(self) -> Optional[ScriptBridge]:
        return self._bridge

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self, bridge: Optional[ScriptBridge] = None) -> Hooks:
        """Create the hooks, apply sub-plugins, and install into *bridge*.

        Sub-plugins tap first, then the plugin registers the ``view``
        interceptor that wraps views in a
        :class:`~beaconkit.context.BeaconScope`. When *bridge* is given the
        hooks are installed into it so scripted interceptors can tap them.

        Returns:
            The new :class:`~beaconkit.hooks.Hooks`.

        Raises:
            PluginError: If the plugin was already set up or torn down.
        """
        if self.state != LifecycleState.UNINITIALIZED:
            raise PluginError(f"Beacon plugin cannot be set up from state '{self.state.value}'")

        self._hooks = Hooks()
        self._gate = CancellationGate(self._hooks.registry)
        self._context = BeaconContext(self.dispatch)

        for plugin in self.config.plugins:
            plugin.apply(self)
            logger.debug("Applied sub-plugin '%s'", plugin.name)

        self._hooks.view.tap(self._wrap_view)

        if bridge is not None:
            bridge.install(self._hooks)
            self._bridge = bridge

        self.state = LifecycleState.SETUP
        logger.info(
            "Beacon plugin set up with %d sub-plugin(s)%s",
            len(self.config.plugins),
            " and a script bridge" if bridge is not None else "",
        )
        return self._hooks

    def teardown(self) -> None:
        """Release hooks, bridge, and context; clean up sub-plugins.

        Sub-plugin cleanup failures are logged and skipped. Calling
        teardown twice is harmless.
        """
        if self.state == LifecycleState.TORN_DOWN:
            return
        for plugin in self.config.plugins:
            try:
                plugin.cleanup()
            except Exception as exc:
                logger.warning("Error cleaning up sub-plugin '%s': %s", plugin.name, exc)
        if self._bridge is not None:
            self._bridge.uninstall()
        self._hooks = None
        self._gate = None
        self._context = None
        self._bridge = None
        self.state = LifecycleState.TORN_DOWN
        logger.info("Beacon plugin torn down")

    def _activate(self) -> None:
        if self.state == LifecycleState.SETUP:
            self.state = LifecycleState.ACTIVE

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def _wrap_view(self, view: Any) -> Optional[BeaconScope]:
        if isinstance(view, BeaconScope) or self._context is None:
            return None
        return BeaconScope(view=view, context=self._context.scoped(view_identity(view)))

    def render(self, view: Any) -> Any:
        """Run *view* through the ``view`` chain and return the result for the host.

        Raises:
            HooksNotReadyError: Before :meth:`setup`.
        """
        wrapped = self.hooks.view.call(view)
        self._activate()
        return wrapped

    # ------------------------------------------------------------------
    # Beacons
    # ------------------------------------------------------------------

    def beacon(
        self,
        action: str,
        element: Optional[str] = None,
        asset_id: Optional[str] = None,
        view_id: Optional[str] = None,
        meta_data: Any = None,
    ) -> bool:
        """Build a beacon from its parts and :meth:`dispatch` it."""
        return self.dispatch(build_event(action, element, asset_id, view_id, meta_data))

    def dispatch(self, event: BeaconEvent) -> bool:
        """Transform, gate, and deliver *event*.

        The ``cancelBeacon`` chain is captured when dispatch starts, so
        interceptors tapped while the event is being built only vote on
        later events.

        Returns:
            ``True`` if the sink was called, ``False`` if the event was
            cancelled or the plugin has been torn down.

        Raises:
            HooksNotReadyError: Before :meth:`setup`.
            PluginError: If a ``buildBeacon`` interceptor returns something
                other than a :class:`~beaconkit.models.BeaconEvent`.
        """
        if self.state == LifecycleState.TORN_DOWN:
            logger.debug("Dropping %r beacon emitted after teardown", event.action)
            return False

        hooks = self.hooks
        assert self._gate is not None
        # Interceptors tapped from here on only vote on later events.
        cancel_chain = self._gate.snapshot()
        self._activate()

        built = hooks.build_beacon.call(event)
        if not isinstance(built, BeaconEvent):
            raise PluginError(f"buildBeacon must produce a BeaconEvent, got {type(built).__name__}")

        if not self._gate.should_deliver(built, cancel_chain):
            return False

        self.config.on_beacon(built)
        return True
