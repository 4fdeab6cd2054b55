"""Contracts shared by routing providers and the session orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ...errors import RouteUnavailable
from ...models.domain import GeoPoint


class RouteProvider(Protocol):
    async def compute_route(self, waypoints: Sequence[GeoPoint]) -> tuple[GeoPoint, ...]:
        ...


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Result of one provider call, tagged with the generation that issued it."""

    token: int
    route: Optional[tuple[GeoPoint, ...]] = None
    error: Optional[RouteUnavailable] = None

    @property
    def ok(self) -> bool:
        return bool(self.route) and self.error is None
