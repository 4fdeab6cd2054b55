"""Exceptions raised by the route estimation core."""

from __future__ import annotations


class DataLoadError(Exception):
    """The location catalog source could not be reached or parsed."""


class InsufficientSelection(ValueError):
    """A route was requested with fewer than two selected locations."""

    def __init__(self, selected: int) -> None:
        super().__init__(f"At least two locations are required to generate a route (selected: {selected}).")
        self.selected = selected


class RouteUnavailable(Exception):
    """The routing provider could not produce a route for the requested waypoints."""
