"""Tests for beaconkit.gate.CancellationGate."""

from __future__ import annotations

from typing import Any

from beaconkit.gate import CancellationGate
from beaconkit.hooks import HookKind, HookRegistry
from beaconkit.models import BeaconEvent


def _event(view_id: str | None = "view-1", meta_data: Any = None) -> BeaconEvent:
    return BeaconEvent(action="clicked", element="button", asset_id="submit", view_id=view_id, meta_data=meta_data)


class TestCancellationGate:
    def test_delivers_without_interceptors(self) -> None:
        gate = CancellationGate(HookRegistry())
        assert gate.should_deliver(_event()) is True
        assert gate.should_deliver(_event(view_id=None)) is True

    def test_vetoed_view_is_not_delivered(self) -> None:
        registry = HookRegistry()
        registry.register(HookKind.CANCEL_BEACON, lambda view_id, meta: view_id == "view-1")
        gate = CancellationGate(registry)
        assert gate.should_deliver(_event("view-1")) is False
        assert gate.should_deliver(_event("view-2")) is True

    def test_interceptors_receive_view_id_and_metadata(self) -> None:
        registry = HookRegistry()
        received: list[tuple[Any, Any]] = []
        registry.register(
            HookKind.CANCEL_BEACON, lambda view_id, meta: received.append((view_id, meta))
        )
        CancellationGate(registry).should_deliver(_event("view-3", {"field": "value"}))
        assert received == [("view-3", {"field": "value"})]

    def test_can_match_on_metadata(self) -> None:
        registry = HookRegistry()
        registry.register(
            HookKind.CANCEL_BEACON,
            lambda view_id, meta: isinstance(meta, dict) and meta.get("internal") is True,
        )
        gate = CancellationGate(registry)
        assert gate.should_deliver(_event(meta_data={"internal": True})) is False
        assert gate.should_deliver(_event(meta_data={"internal": False})) is True

    def test_does_not_mutate_event(self) -> None:
        registry = HookRegistry()
        registry.register(HookKind.CANCEL_BEACON, lambda view_id, meta: False)
        event = _event(meta_data={"field": "value"})
        before = event.model_dump()
        CancellationGate(registry).should_deliver(event)
        assert event.model_dump() == before

    def test_snapshot_ignores_later_taps(self) -> None:
        registry = HookRegistry()
        gate = CancellationGate(registry)
        chain = gate.snapshot()
        registry.register(HookKind.CANCEL_BEACON, lambda view_id, meta: True)
        assert gate.should_deliver(_event("view-1"), chain) is True
        assert gate.should_deliver(_event("view-1")) is False
