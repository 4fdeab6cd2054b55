"""Route session orchestration.

``SessionState`` is an immutable snapshot. The module level transition
functions take a snapshot and return the next one; ``RouteSession`` holds the
current snapshot, runs the single suspending provider call and notifies
subscribers whenever the snapshot changes.

Every toggle and every generate bumps ``generation``. A provider result only
applies when its token still matches, so a superseded request can never move
the session out of ``FETCHING``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Sequence

from ..config import settings
from ..errors import InsufficientSelection, RouteUnavailable
from ..models.domain import DayType, GeoPoint, Location, RouteMetrics, ScenarioParameters, Weather
from .geospatial import apportion_segments, segments_from_waypoints, total_distance_km
from .routing.base import FetchOutcome, RouteProvider
from .selection import SelectionSet
from .travel_time import base_time_minutes, estimate

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    selection: SelectionSet = field(default_factory=SelectionSet)
    parameters: ScenarioParameters = field(default_factory=ScenarioParameters)
    route: tuple[GeoPoint, ...] = ()
    metrics: Optional[RouteMetrics] = None
    base_time_minutes: Optional[int] = None
    generation: int = 0
    error: Optional[str] = None

    @property
    def estimated_minutes(self) -> Optional[int]:
        """Duration under the current parameters, or None without a route."""
        if self.base_time_minutes is None:
            return None
        return estimate(self.base_time_minutes, self.parameters)

    @property
    def can_generate(self) -> bool:
        return len(self.selection) >= 2


def build_metrics(route: Sequence[GeoPoint], selection: Sequence[Location]) -> RouteMetrics:
    """Total routed distance plus a per-waypoint breakdown that sums to it."""
    total = total_distance_km(route)
    segments = apportion_segments(segments_from_waypoints(selection), total)
    return RouteMetrics(total_distance_km=total, segments=tuple(segments))


def toggle_location(state: SessionState, location: Location) -> SessionState:
    return replace(
        state,
        status=SessionStatus.IDLE,
        selection=state.selection.toggle(location),
        route=(),
        metrics=None,
        base_time_minutes=None,
        generation=state.generation + 1,
        error=None,
    )


def begin_fetch(state: SessionState) -> SessionState:
    if not state.can_generate:
        raise InsufficientSelection(len(state.selection))
    return replace(state, status=SessionStatus.FETCHING, generation=state.generation + 1, error=None)


def complete_fetch(state: SessionState, outcome: FetchOutcome) -> SessionState:
    """Apply a provider result; results from superseded requests are ignored."""
    if state.status != SessionStatus.FETCHING or outcome.token != state.generation:
        logger.debug(f"Discarding stale route response (token {outcome.token}, current {state.generation})")
        return state

    if not outcome.ok:
        return replace(
            state,
            status=SessionStatus.FAILED,
            route=(),
            metrics=None,
            base_time_minutes=None,
            error=str(outcome.error) if outcome.error else "Unable to generate route.",
        )

    metrics = build_metrics(outcome.route, state.selection.locations)
    return replace(
        state,
        status=SessionStatus.READY,
        route=outcome.route,
        metrics=metrics,
        base_time_minutes=base_time_minutes(metrics.total_distance_km),
        error=None,
    )


def update_parameters(
    state: SessionState,
    traffic_level: Optional[int] = None,
    weather: Optional[Weather] = None,
    day_type: Optional[DayType] = None,
) -> SessionState:
    return replace(state, parameters=state.parameters.merged(traffic_level, weather, day_type))


Listener = Callable[[SessionState], None]


class RouteSession:
    """Single-user orchestrator over the session state machine."""

    def __init__(
        self,
        provider: RouteProvider,
        state: SessionState | None = None,
        route_timeout: float | None = None,
    ) -> None:
        self.provider = provider
        self.route_timeout = route_timeout if route_timeout is not None else settings.route_timeout_seconds
        self._state = state or SessionState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, new_state: SessionState) -> SessionState:
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def toggle(self, location: Location) -> SessionState:
        return self._publish(toggle_location(self._state, location))

    def set_parameters(
        self,
        traffic_level: Optional[int] = None,
        weather: Optional[Weather] = None,
        day_type: Optional[DayType] = None,
    ) -> SessionState:
        return self._publish(update_parameters(self._state, traffic_level, weather, day_type))

    async def generate(self) -> SessionState:
        """Request a route for the current selection.

        With fewer than two selected locations this does nothing. Otherwise
        the session enters ``FETCHING`` and the result is applied only if no
        newer toggle or generate happened meanwhile.
        """
        if not self._state.can_generate:
            logger.debug(f"Generate ignored: {len(self._state.selection)} location(s) selected")
            return self._state

        fetching = self._publish(begin_fetch(self._state))
        token = fetching.generation
        waypoints = fetching.selection.waypoints()
        logger.info(f"Requesting route through {len(waypoints)} waypoints (generation {token})")

        try:
            route = await asyncio.wait_for(self.provider.compute_route(waypoints), timeout=self.route_timeout)
            outcome = FetchOutcome(token=token, route=route)
        except RouteUnavailable as exc:
            logger.warning(f"Route generation failed: {exc}")
            outcome = FetchOutcome(token=token, error=exc)
        except asyncio.TimeoutError:
            logger.warning(f"Route generation timed out after {self.route_timeout:.1f}s")
            outcome = FetchOutcome(
                token=token,
                error=RouteUnavailable(f"Routing service did not respond within {self.route_timeout:.0f} seconds."),
            )
        except Exception as exc:
            # A provider bug must still settle this generation
            logger.exception(f"Route provider raised an unexpected error: {exc}")
            outcome = FetchOutcome(token=token, error=RouteUnavailable(f"Route computation failed: {exc}"))

        return self._publish(complete_fetch(self._state, outcome))
