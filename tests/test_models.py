"""Tests for beaconkit.models -- beacon events, metadata, and config models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from beaconkit.models import (
    BeaconEvent,
    GlobalConfig,
    MetaData,
    MetaDataKind,
    classify_meta_data,
)


class TestBeaconEvent:
    def test_minimal_event(self) -> None:
        event = BeaconEvent(action="viewed")
        assert event.action == "viewed"
        assert event.element is None
        assert event.asset_id is None
        assert event.view_id is None
        assert event.meta_data is None
        assert event.timestamp > 0

    def test_empty_action_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BeaconEvent(action="")

    def test_missing_action_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BeaconEvent.model_validate({"element": "button"})

    def test_accepts_wire_aliases(self) -> None:
        event = BeaconEvent.model_validate(
            {"action": "clicked", "assetId": "submit", "viewId": "view-1", "metaData": {"a": 1}}
        )
        assert event.asset_id == "submit"
        assert event.view_id == "view-1"
        assert event.meta_data == {"a": 1}

    def test_accepts_field_names(self) -> None:
        event = BeaconEvent(action="clicked", asset_id="submit", view_id="view-1")
        assert event.asset_id == "submit"
        assert event.view_id == "view-1"

    def test_is_immutable(self) -> None:
        event = BeaconEvent(action="clicked")
        with pytest.raises(ValidationError):
            event.action = "viewed"  # type: ignore[misc]

    def test_metadata_of_any_shape_is_kept(self) -> None:
        payload = ["not", "a", "dict", 3]
        event = BeaconEvent(action="clicked", meta_data=payload)
        assert event.meta_data == payload
        assert event.meta_data_kind == MetaDataKind.OTHER

    def test_to_wire_uses_camel_case(self) -> None:
        event = BeaconEvent(
            action="clicked",
            element="button",
            asset_id="submit",
            view_id="view-1",
            meta_data={"field": "value"},
            timestamp=1000,
        )
        assert event.to_wire() == {
            "action": "clicked",
            "element": "button",
            "assetId": "submit",
            "viewId": "view-1",
            "metaData": {"field": "value"},
            "timestamp": 1000,
        }

    def test_to_wire_stringifies_unserializable_metadata(self) -> None:
        class Opaque:
            def __str__(self) -> str:
                return "opaque"

        event = BeaconEvent(action="clicked", meta_data={"obj": Opaque()})
        assert event.to_wire()["metaData"] == {"obj": "opaque"}


class TestMetaData:
    def test_classify(self) -> None:
        assert classify_meta_data(None) == MetaDataKind.ABSENT
        assert classify_meta_data({"k": "v"}) == MetaDataKind.DICTIONARY
        assert classify_meta_data("text") == MetaDataKind.OTHER

    def test_extra_keys_preserved(self) -> None:
        meta = MetaData(beacon={"field": "value"}, role="primary")
        assert meta.beacon == {"field": "value"}
        assert meta.model_extra == {"role": "primary"}


class TestGlobalConfig:
    def test_defaults(self) -> None:
        config = GlobalConfig()
        assert config.output.format == "auto"
        assert config.plugins.enabled == []
        assert config.plugins.disabled == []
        assert config.cancel.view_ids == []
        assert config.logging.level == "WARNING"

    def test_round_trip_through_json(self) -> None:
        config = GlobalConfig.model_validate({"cancel": {"view_ids": ["view-1"]}})
        again = GlobalConfig.model_validate(config.model_dump(mode="json"))
        assert again.cancel.view_ids == ["view-1"]
