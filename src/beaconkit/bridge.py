"""Boundary between native hooks and interceptors written in a scripting runtime.

Scripted interceptors never see native objects. Each hook kind has a narrow,
serializable contract:

* ``cancelBeacon`` -- called with ``(view_id, meta_data)`` where *meta_data*
  is a JSON-compatible copy; returns ``True`` to cancel, ``False`` or
  ``None`` otherwise.
* ``view`` -- called with a string handle standing for the view; returns a
  handle (the same one, or one published with :meth:`ScriptBridge.register_view`)
  or ``None`` to keep the view.
* ``buildBeacon`` -- called with :meth:`~beaconkit.models.BeaconEvent.to_wire`;
  returns ``None`` or a dict of fields to merge over the event. Keys may use
  the wire (``viewId``) or Python (``view_id``) spelling; fields the script
  leaves out keep their original values, metadata included.

Any runtime that can call a Python callable with those values (an embedded
interpreter, an RPC shim, a test double) can sit behind the same interface,
and its interceptors compose with native ones in a single chain.
"""

from __future__ import annotations

import inspect
import itertools
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from beaconkit.exceptions import HooksNotReadyError, ScriptBridgeError
from beaconkit.hooks import HookKind, Hooks, Interceptor
from beaconkit.models import BeaconEvent

logger = logging.getLogger(__name__)

ScriptFunction = Callable[..., Any]

# Wire and Python spellings of every BeaconEvent field, mapped to the field name.
_WIRE_FIELDS: dict[str, str] = {
    **{name: name for name in BeaconEvent.model_fields},
    **{
        field.alias: name
        for name, field in BeaconEvent.model_fields.items()
        if field.alias is not None
    },
}


def to_script_value(value: Any) -> Any:
    """Return a JSON-compatible copy of *value* for a scripted interceptor."""
    return to_jsonable_python(value, fallback=str)


class ScriptBridge:
    """Lets a scripting runtime tap the hooks of a :class:`~beaconkit.plugin.BeaconPlugin`.

    The bridge is inert until :meth:`BeaconPlugin.setup(bridge=...)
    <beaconkit.plugin.BeaconPlugin.setup>` installs the plugin's hooks.
    """

    def __init__(self) -> None:
        self._hooks: Optional[Hooks] = None
        self._handles: dict[str, Any] = {}
        self._handle_ids = itertools.count(1)

    @property
    def installed(self) -> bool:
        return self._hooks is not None

    @property
    def hooks(self) -> Hooks:
        """The installed hooks.

        Raises:
            HooksNotReadyError: If no plugin has installed its hooks yet.
        """
        if self._hooks is None:
            raise HooksNotReadyError(
                "Script bridge has no hooks; pass it to BeaconPlugin.setup() first"
            )
        return self._hooks

    def install(self, hooks: Hooks) -> None:
        self._hooks = hooks
        logger.info("Script bridge installed")

    def uninstall(self) -> None:
        self._hooks = None
        self._handles.clear()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def tap(self, hook_name: str, fn: ScriptFunction) -> Interceptor:
        """Register scripted *fn* on the hook called *hook_name*.

        Args:
            hook_name: ``"view"``, ``"buildBeacon"``, or ``"cancelBeacon"``.
            fn: The scripted interceptor.

        Returns:
            The native interceptor wrapping *fn*.

        Raises:
            HooksNotReadyError: If the bridge is not installed.
            ScriptBridgeError: If *hook_name* is unknown or *fn* is not callable.
        """
        hooks = self.hooks
        try:
            kind = HookKind(hook_name)
        except ValueError:
            raise ScriptBridgeError(f"Unknown hook '{hook_name}'") from None
        if not callable(fn):
            raise ScriptBridgeError(f"Scripted {hook_name} interceptor is not callable")

        adapt = {
            HookKind.VIEW: self._adapt_view,
            HookKind.BUILD_BEACON: self._adapt_build_beacon,
            HookKind.CANCEL_BEACON: self._adapt_cancel_beacon,
        }[kind]
        interceptor = adapt(fn)
        hooks.get(kind).tap(interceptor)
        logger.debug("Scripted interceptor tapped %s", kind.value)
        return interceptor

    # ------------------------------------------------------------------
    # View handles
    # ------------------------------------------------------------------

    def register_view(self, view: Any) -> str:
        """Publish *view* to scripts and return its handle."""
        handle = f"view-handle-{next(self._handle_ids)}"
        self._handles[handle] = view
        return handle

    def resolve_view(self, handle: str) -> Any:
        """Return the view published under *handle*.

        Raises:
            ScriptBridgeError: If *handle* is unknown.
        """
        try:
            return self._handles[handle]
        except KeyError:
            raise ScriptBridgeError(f"Unknown view handle '{handle}'") from None

    # ------------------------------------------------------------------
    # Adapters
    # ------------------------------------------------------------------

    def _adapt_cancel_beacon(self, fn: ScriptFunction) -> Interceptor:
        def interceptor(view_id: Optional[str], meta_data: Any) -> Any:
            vote = fn(view_id, to_script_value(meta_data))
            if vote is None or isinstance(vote, bool) or inspect.isawaitable(vote):
                return vote
            raise ScriptBridgeError(
                f"cancelBeacon script must return a boolean, got {type(vote).__name__}"
            )

        return interceptor

    def _adapt_view(self, fn: ScriptFunction) -> Interceptor:
        def interceptor(view: Any) -> Any:
            handle = self.register_view(view)
            try:
                result = fn(handle)
                if result is None or result == handle:
                    return None
                if not isinstance(result, str):
                    raise ScriptBridgeError(
                        f"view script must return a view handle, got {type(result).__name__}"
                    )
                return self.resolve_view(result)
            finally:
                del self._handles[handle]

        return interceptor

    def _adapt_build_beacon(self, fn: ScriptFunction) -> Interceptor:
        def interceptor(event: BeaconEvent) -> Optional[BeaconEvent]:
            result = fn(event.to_wire())
            if result is None:
                return None
            if not isinstance(result, Mapping):
                raise ScriptBridgeError(
                    f"buildBeacon script must return an object, got {type(result).__name__}"
                )
            fields = {name: getattr(event, name) for name in BeaconEvent.model_fields}
            for key, value in result.items():
                name = _WIRE_FIELDS.get(key)
                if name is None:
                    raise ScriptBridgeError(f"buildBeacon script returned unknown field '{key}'")
                fields[name] = value
            try:
                return BeaconEvent.model_validate(fields)
            except ValidationError as exc:
                raise ScriptBridgeError(f"buildBeacon script produced an invalid beacon: {exc}") from exc

        return interceptor
