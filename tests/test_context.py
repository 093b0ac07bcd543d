"""Tests for beaconkit.context -- BeaconContext, BeaconScope, emit_beacon."""

from __future__ import annotations

import pytest

from beaconkit.context import (
    BeaconContext,
    BeaconScope,
    build_event,
    emit_beacon,
    view_identity,
)
from beaconkit.exceptions import InvalidBeaconError
from beaconkit.models import BeaconEvent, MetaData


class TestBuildEvent:
    def test_merges_all_parts(self) -> None:
        event = build_event("clicked", "button", "submit", "view-1", {"field": "value"})
        assert event.action == "clicked"
        assert event.element == "button"
        assert event.asset_id == "submit"
        assert event.view_id == "view-1"
        assert event.meta_data == {"field": "value"}

    def test_metadata_model_contributes_beacon_payload(self) -> None:
        event = build_event("clicked", meta_data=MetaData(beacon={"field": "value"}))
        assert event.meta_data == {"field": "value"}

    def test_empty_action_raises(self) -> None:
        with pytest.raises(InvalidBeaconError):
            build_event("")


class TestViewIdentity:
    def test_mapping(self) -> None:
        assert view_identity({"id": "view-1"}) == "view-1"

    def test_attribute(self) -> None:
        class View:
            id = "view-2"

        assert view_identity(View()) == "view-2"

    def test_missing_or_non_string(self) -> None:
        assert view_identity({"type": "text"}) is None
        assert view_identity({"id": 3}) is None
        assert view_identity("plain") is None


class TestBeaconContext:
    def test_beacon_dispatches_event(self) -> None:
        received: list[BeaconEvent] = []
        context = BeaconContext(received.append, view_id="view-1")

        context.beacon("clicked", "button", "test")

        assert len(received) == 1
        assert received[0].action == "clicked"
        assert received[0].element == "button"
        assert received[0].asset_id == "test"
        assert received[0].view_id == "view-1"
        assert received[0].meta_data is None

    def test_beacon_with_metadata(self) -> None:
        received: list[BeaconEvent] = []
        context = BeaconContext(received.append)

        context.beacon("clicked", "button", "test", MetaData(beacon={"field": "value"}))

        assert received[0].meta_data == {"field": "value"}

    def test_scoped_binds_view_id(self) -> None:
        received: list[BeaconEvent] = []
        root = BeaconContext(received.append)
        child = root.scoped("view-7")

        child.beacon("clicked", "button", "test")

        assert child.view_id == "view-7"
        assert root.view_id is None
        assert received[0].view_id == "view-7"


class TestEmitBeacon:
    def test_absent_context_is_noop(self) -> None:
        assert emit_beacon(None, "clicked", "button", "test") is False

    def test_present_context_emits(self) -> None:
        received: list[BeaconEvent] = []
        assert emit_beacon(BeaconContext(received.append), "clicked", "button", "test") is True
        assert [event.action for event in received] == ["clicked"]


class TestBeaconScope:
    def test_appear_emits_viewed(self) -> None:
        received: list[BeaconEvent] = []
        view = {"id": "view-1"}
        scope = BeaconScope(view=view, context=BeaconContext(received.append, "view-1"))

        scope.appear()

        assert received[0].action == "viewed"
        assert received[0].element == "view"
        assert received[0].asset_id == "view-1"
        assert received[0].view_id == "view-1"
        assert scope.view is view
