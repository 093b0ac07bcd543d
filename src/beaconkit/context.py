"""The beacon capability handed to the view tree.

A :class:`BeaconContext` is passed explicitly to the views that may emit
beacons; there is no ambient lookup. Holding ``None`` instead of a context
is legal: views null-check before emitting, or use :func:`emit_beacon`,
which does it for them.

:class:`BeaconScope` is what the plugin's own ``view`` interceptor wraps the
root view in. The host mounts the scope, passes ``scope.context`` down the
tree, and calls :meth:`BeaconScope.appear` once the view is on screen.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import ValidationError

from beaconkit.exceptions import InvalidBeaconError
from beaconkit.models import BeaconEvent, MetaData

Dispatch = Callable[[BeaconEvent], Any]


def build_event(
    action: str,
    element: Optional[str] = None,
    asset_id: Optional[str] = None,
    view_id: Optional[str] = None,
    meta_data: Any = None,
) -> BeaconEvent:
    """Merge beacon arguments into a :class:`~beaconkit.models.BeaconEvent`.

    A :class:`~beaconkit.models.MetaData` contributes its ``beacon``
    payload; any other *meta_data* is attached as-is.

    Raises:
        InvalidBeaconError: If *action* is empty.
    """
    if isinstance(meta_data, MetaData):
        meta_data = meta_data.beacon
    try:
        return BeaconEvent(
            action=action,
            element=element,
            asset_id=asset_id,
            view_id=view_id,
            meta_data=meta_data,
        )
    except ValidationError as exc:
        raise InvalidBeaconError(f"Invalid beacon {action!r}: {exc}") from exc


def view_identity(view: Any) -> Optional[str]:
    """Best-effort id of a view value: its ``id`` attribute or ``"id"`` key."""
    if isinstance(view, Mapping):
        value = view.get("id")
    else:
        value = getattr(view, "id", None)
    return value if isinstance(value, str) else None


class BeaconContext:
    """Lets any view under the scope it was installed in emit beacons.

    Args:
        dispatch: Callable receiving each constructed event; normally
            :meth:`~beaconkit.plugin.BeaconPlugin.dispatch`.
        view_id: Id of the rendered view instance the context is bound to.
    """

    def __init__(self, dispatch: Dispatch, view_id: Optional[str] = None) -> None:
        self._dispatch = dispatch
        self.view_id = view_id

    def beacon(
        self,
        action: str,
        element: Optional[str] = None,
        id: Optional[str] = None,
        meta_data: Any = None,
    ) -> None:
        """Emit a beacon for asset *id*, tagged with this context's view id."""
        event = build_event(action, element, asset_id=id, view_id=self.view_id, meta_data=meta_data)
        self._dispatch(event)

    def scoped(self, view_id: Optional[str]) -> BeaconContext:
        """Return a context bound to a nested view instance."""
        return BeaconContext(self._dispatch, view_id)

    def __repr__(self) -> str:
        return f"BeaconContext(view_id={self.view_id!r})"


def emit_beacon(
    context: Optional[BeaconContext],
    action: str,
    element: Optional[str] = None,
    id: Optional[str] = None,
    meta_data: Any = None,
) -> bool:
    """Emit through *context* if there is one.

    Returns:
        ``False`` when *context* is ``None`` (nothing was emitted).
    """
    if context is None:
        return False
    context.beacon(action, element, id, meta_data)
    return True


@dataclass(frozen=True)
class BeaconScope:
    """A view wrapped together with the beacon context for its subtree."""

    view: Any
    context: BeaconContext

    def appear(self) -> None:
        """Emit the ``viewed`` beacon for the wrapped view."""
        self.context.beacon("viewed", "view", self.context.view_id)
