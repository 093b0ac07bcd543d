"""Canonical Pydantic models shared across all beaconkit modules.

The models fall into two groups:

**Beacon models** -- one analytics occurrence and the metadata attached to it:
    :class:`BeaconEvent`, :class:`MetaData`, and :class:`MetaDataKind`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`PluginsConfig`, :class:`CancelConfig`,
    :class:`LoggingConfig`, and :class:`GlobalConfig`.

All models use Pydantic v2. Beacon fields are snake_case in Python and
camelCase on the wire (``assetId``, ``viewId``, ``metaData``); both spellings
are accepted on input.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python


# --- Beacons ---


def _now_ms() -> int:
    return int(time.time() * 1000)


class MetaDataKind(str, enum.Enum):
    """Shape of a beacon's metadata payload."""

    ABSENT = "absent"
    DICTIONARY = "dictionary"
    OTHER = "other"


def classify_meta_data(value: Any) -> MetaDataKind:
    """Return the :class:`MetaDataKind` of an arbitrary metadata payload."""
    if value is None:
        return MetaDataKind.ABSENT
    if isinstance(value, Mapping):
        return MetaDataKind.DICTIONARY
    return MetaDataKind.OTHER


class MetaData(BaseModel):
    """Metadata an asset carries alongside its content.

    Only ``beacon`` matters to this package: it is the payload attached to
    every beacon the asset emits. Other keys are preserved in
    ``model_extra`` for whoever else reads asset metadata.

    Example::

        MetaData(beacon={"field": "value"})
    """

    model_config = ConfigDict(extra="allow")

    beacon: Any = None


class BeaconEvent(BaseModel):
    """Immutable description of one analytics occurrence.

    Built by :class:`~beaconkit.context.BeaconContext` (or directly by the
    plugin), transformed by the ``buildBeacon`` hook, gated by the
    ``cancelBeacon`` hook, and finally handed to the sink.

    Attributes:
        action: What happened (e.g. ``"viewed"``, ``"clicked"``). Never empty.
        element: The kind of UI element involved (e.g. ``"button"``).
        asset_id: Identity of the asset the beacon is reported against.
        view_id: Identity of the rendered view instance. Unique within one
            render pass only; used as the cancellation key.
        meta_data: Arbitrary payload attached verbatim. Never validated.
        timestamp: Milliseconds since the epoch at construction time.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: str = Field(min_length=1)
    element: Optional[str] = None
    asset_id: Optional[str] = Field(default=None, alias="assetId")
    view_id: Optional[str] = Field(default=None, alias="viewId")
    meta_data: Any = Field(default=None, alias="metaData")
    timestamp: int = Field(default_factory=_now_ms)

    @property
    def meta_data_kind(self) -> MetaDataKind:
        """The :class:`MetaDataKind` of :attr:`meta_data`."""
        return classify_meta_data(self.meta_data)

    def to_wire(self) -> dict[str, Any]:
        """Return a JSON-compatible dict keyed by the camelCase wire names.

        The metadata payload is converted to plain JSON values; anything that
        has no JSON form is rendered with ``str()``.
        """
        return {
            "action": self.action,
            "element": self.element,
            "assetId": self.asset_id,
            "viewId": self.view_id,
            "metaData": to_jsonable_python(self.meta_data, fallback=str),
            "timestamp": self.timestamp,
        }


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class PluginsConfig(BaseModel):
    """Explicit sub-plugin allow/deny lists stored in :class:`GlobalConfig`."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class CancelConfig(BaseModel):
    """View ids whose beacons the bundled ``cancel-views`` plugin vetoes."""

    view_ids: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Root log level applied by the CLI."""

    level: str = Field(default="WARNING", description="Standard logging level name")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/beaconkit/config.json``.

    Loaded and saved by :func:`~beaconkit.config.load_global_config` and
    :func:`~beaconkit.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~beaconkit.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    cancel: CancelConfig = Field(default_factory=CancelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
