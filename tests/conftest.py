from __future__ import annotations

import asyncio
from typing import Sequence

import pytest

from routewise.errors import RouteUnavailable
from routewise.models.domain import GeoPoint, Location


def make_location(lid: int, name: str, lat: float, lng: float) -> Location:
    return Location(id=lid, name=name, lat=lat, lng=lng)


class StaticProvider:
    """Returns the waypoints themselves as the route."""

    def __init__(self) -> None:
        self.calls: list[list[GeoPoint]] = []

    async def compute_route(self, waypoints: Sequence[GeoPoint]) -> tuple[GeoPoint, ...]:
        self.calls.append(list(waypoints))
        return tuple(waypoints)


class FailingProvider:
    def __init__(self) -> None:
        self.calls = 0

    async def compute_route(self, waypoints: Sequence[GeoPoint]) -> tuple[GeoPoint, ...]:
        self.calls += 1
        raise RouteUnavailable("OSRM route request failed: NoRoute")


class ControlledProvider:
    """Each call blocks until the test resolves its future."""

    def __init__(self) -> None:
        self.pending: list[asyncio.Future] = []

    async def compute_route(self, waypoints: Sequence[GeoPoint]) -> tuple[GeoPoint, ...]:
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


async def wait_for_calls(provider: ControlledProvider, count: int) -> None:
    while len(provider.pending) < count:
        await asyncio.sleep(0)


@pytest.fixture
def location_a() -> Location:
    return make_location(1, "A", 28.60, 77.20)


@pytest.fixture
def location_b() -> Location:
    return make_location(2, "B", 28.65, 77.25)


@pytest.fixture
def location_c() -> Location:
    return make_location(3, "C", 28.55, 77.30)
