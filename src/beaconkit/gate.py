"""Cancellation decision for constructed beacons."""

from __future__ import annotations

import logging
from typing import Optional

from beaconkit.hooks import HookKind, HookRegistry, Interceptor, run_veto
from beaconkit.models import BeaconEvent

logger = logging.getLogger(__name__)


class CancellationGate:
    """Consults the ``cancelBeacon`` chain of a :class:`~beaconkit.hooks.HookRegistry`.

    The gate never mutates the event it inspects. With no interceptors
    registered every beacon is delivered.
    """

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    def snapshot(self) -> tuple[Interceptor, ...]:
        """Return the ``cancelBeacon`` chain as it stands now."""
        return self._registry.interceptors(HookKind.CANCEL_BEACON)

    def should_deliver(
        self,
        event: BeaconEvent,
        chain: Optional[tuple[Interceptor, ...]] = None,
    ) -> bool:
        """Return ``False`` if any ``cancelBeacon`` interceptor vetoes *event*.

        Interceptors receive ``event.view_id`` and ``event.meta_data``.

        Args:
            event: The beacon to decide on.
            chain: A chain captured earlier with :meth:`snapshot`. Taps made
                after it was captured do not vote. Defaults to the current
                chain.
        """
        if chain is None:
            chain = self.snapshot()
        cancelled = run_veto(chain, event.view_id, event.meta_data)
        if cancelled:
            logger.debug("Cancelled %r beacon for view %r", event.action, event.view_id)
        return not cancelled
