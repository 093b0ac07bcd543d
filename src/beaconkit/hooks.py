"""Hook kinds, the interceptor registry, and the tap surface.

This module provides three layers:

* :class:`HookRegistry` -- an ordered list of interceptors per
  :class:`HookKind`. Registration is a pure append; :meth:`HookRegistry.run`
  dispatches through a table with one runner per kind.
* :class:`Hook` -- a single named hook point with ``tap`` / ``call``, bound to
  a registry and a kind.
* :class:`Hooks` -- the object a :class:`~beaconkit.plugin.BeaconPlugin`
  exposes after setup, with one :class:`Hook` attribute per kind.

Two runner shapes exist:

* **Waterfall** (``view``, ``buildBeacon``) -- each interceptor receives the
  previous interceptor's output. Returning ``None`` keeps the value unchanged.
* **Veto** (``cancelBeacon``) -- every interceptor receives
  ``(view_id, meta_data)`` and returns a vote; any truthy vote cancels.
"""

from __future__ import annotations

import enum
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Interceptor = Callable[..., Any]


class HookKind(str, enum.Enum):
    """The statically known family of hook points.

    Values are the names scripted interceptors use to address a hook.
    """

    VIEW = "view"
    BUILD_BEACON = "buildBeacon"
    CANCEL_BEACON = "cancelBeacon"


def run_waterfall(interceptors: tuple[Interceptor, ...], value: Any) -> Any:
    """Thread *value* through *interceptors* in order.

    Args:
        interceptors: Snapshot of the chain.
        value: Initial value.

    Returns:
        The last non-``None`` result, or *value* if every interceptor
        returned ``None`` or the chain is empty.
    """
    for interceptor in interceptors:
        result = interceptor(value)
        if result is not None:
            value = result
    return value


def run_veto(
    interceptors: tuple[Interceptor, ...],
    view_id: Optional[str],
    meta_data: Any,
) -> bool:
    """Collect cancellation votes from every interceptor.

    All interceptors are invoked, even after one has voted to cancel, so
    observers further down the chain still see every beacon.

    An interceptor that answers with an awaitable is deciding out of band.
    Such a decision cannot arrive before delivery, so it counts as no vote.

    Args:
        interceptors: Snapshot of the chain.
        view_id: The beacon's view instance id.
        meta_data: The beacon's metadata payload.

    Returns:
        ``True`` if any interceptor voted to cancel.
    """
    cancelled = False
    for interceptor in interceptors:
        vote = interceptor(view_id, meta_data)
        if inspect.isawaitable(vote):
            if inspect.iscoroutine(vote):
                vote.close()
            logger.warning(
                "Ignoring asynchronous cancelBeacon vote from %r for view %r",
                interceptor,
                view_id,
            )
            continue
        if vote:
            cancelled = True
    return cancelled


_RUNNERS: dict[HookKind, Callable[..., Any]] = {
    HookKind.VIEW: run_waterfall,
    HookKind.BUILD_BEACON: run_waterfall,
    HookKind.CANCEL_BEACON: run_veto,
}


class HookRegistry:
    """Ordered interceptors per :class:`HookKind`.

    The registry lives exactly as long as the plugin that owns it. It is
    append-only: there is no de-duplication and no removal.
    """

    def __init__(self) -> None:
        self._taps: dict[HookKind, list[Interceptor]] = {kind: [] for kind in HookKind}

    def register(self, kind: HookKind, interceptor: Interceptor) -> None:
        """Append *interceptor* to the chain for *kind*.

        Raises:
            TypeError: If *interceptor* is not callable.
        """
        kind = HookKind(kind)
        if not callable(interceptor):
            raise TypeError(f"{kind.value} interceptor must be callable, got {interceptor!r}")
        self._taps[kind].append(interceptor)
        logger.debug("Tapped %s (%d interceptors)", kind.value, len(self._taps[kind]))

    def interceptors(self, kind: HookKind) -> tuple[Interceptor, ...]:
        """Return an immutable snapshot of the chain for *kind*."""
        return tuple(self._taps[HookKind(kind)])

    def run(self, kind: HookKind, *args: Any) -> Any:
        """Run the chain for *kind* with *args*.

        The chain is snapshotted before the first interceptor runs, so taps
        added while the chain is running only take effect on the next run.
        """
        kind = HookKind(kind)
        return _RUNNERS[kind](self.interceptors(kind), *args)

    def __len__(self) -> int:
        return sum(len(taps) for taps in self._taps.values())


class Hook:
    """One hook point: ``tap`` to register, ``call`` to run."""

    def __init__(self, kind: HookKind, registry: HookRegistry) -> None:
        self.kind = kind
        self._registry = registry

    def tap(self, interceptor: Interceptor) -> Interceptor:
        """Register *interceptor*. Returns it, so ``tap`` works as a decorator."""
        self._registry.register(self.kind, interceptor)
        return interceptor

    def call(self, *args: Any) -> Any:
        return self._registry.run(self.kind, *args)

    @property
    def taps(self) -> tuple[Interceptor, ...]:
        return self._registry.interceptors(self.kind)

    def __repr__(self) -> str:
        return f"Hook({self.kind.value!r}, taps={len(self.taps)})"


class Hooks:
    """The hook surface of a set-up :class:`~beaconkit.plugin.BeaconPlugin`.

    Attributes:
        view: Waterfall over the root view value.
        build_beacon: Waterfall over each :class:`~beaconkit.models.BeaconEvent`.
        cancel_beacon: Veto over ``(view_id, meta_data)``.
        registry: The underlying :class:`HookRegistry`.
    """

    def __init__(self, registry: Optional[HookRegistry] = None) -> None:
        self.registry = registry if registry is not None else HookRegistry()
        self.view = Hook(HookKind.VIEW, self.registry)
        self.build_beacon = Hook(HookKind.BUILD_BEACON, self.registry)
        self.cancel_beacon = Hook(HookKind.CANCEL_BEACON, self.registry)

    def get(self, kind: HookKind) -> Hook:
        """Return the :class:`Hook` for *kind*."""
        return {
            HookKind.VIEW: self.view,
            HookKind.BUILD_BEACON: self.build_beacon,
            HookKind.CANCEL_BEACON: self.cancel_beacon,
        }[HookKind(kind)]
