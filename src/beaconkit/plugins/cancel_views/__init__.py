"""Bundled sub-plugin that cancels beacons from configured views."""

from beaconkit.plugins.cancel_views.plugin import CancelViewsPlugin

__all__ = ["CancelViewsPlugin"]
