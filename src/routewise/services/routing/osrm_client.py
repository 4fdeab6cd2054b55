"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Sequence

import httpx

from ...config import settings
from ...errors import RouteUnavailable
from ...models.domain import GeoPoint

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        geometries: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.geometries = geometries or settings.osrm_geometries
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    def route_url(self, waypoints: Sequence[GeoPoint]) -> str:
        # OSRM expects "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{point.lng},{point.lat}" for point in waypoints)
        return f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

    async def compute_route(self, waypoints: Sequence[GeoPoint]) -> tuple[GeoPoint, ...]:
        """Get the driving route through the waypoints, in the given order.

        Args:
            waypoints: At least two points, in visiting order

        Returns:
            The route polyline as (lat, lng) points

        Raises:
            RouteUnavailable: on network failure, a non-Ok response or an empty geometry
        """
        if len(waypoints) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        url = self.route_url(waypoints)
        params = {
            "overview": "full",
            "geometries": self.geometries,
            "steps": "false",
        }

        attempt = 0
        async with self._get_client() as client:
            while True:
                try:
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    return self._parse_route(response.json())
                except RouteUnavailable:
                    raise
                except httpx.HTTPStatusError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RouteUnavailable(
                            f"OSRM route request failed with status {e.response.status_code}"
                        ) from e
                    await asyncio.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request timed out after {attempt} attempt(s): {e}")
                        raise RouteUnavailable("OSRM route request timed out") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    await asyncio.sleep(wait_time)
                except (httpx.TransportError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RouteUnavailable(
                            f"Failed to connect to OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    await asyncio.sleep(wait_time)
                except (httpx.HTTPError, ValueError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RouteUnavailable(f"OSRM returned an unreadable response: {e}") from e
                    await asyncio.sleep(self.backoff_seconds * attempt)

    def _parse_route(self, data: Any) -> tuple[GeoPoint, ...]:
        if not isinstance(data, dict):
            raise RouteUnavailable("OSRM returned an unexpected payload.")
        if data.get("code") != "Ok":
            error_msg = data.get("message", "Unknown OSRM route error")
            raise RouteUnavailable(f"OSRM route request failed: {error_msg}")

        try:
            points = self._route_points(data)
        except (TypeError, ValueError, IndexError, AttributeError) as e:
            raise RouteUnavailable(f"OSRM returned a malformed route geometry: {e}") from e

        if not points:
            raise RouteUnavailable("OSRM response did not include a route geometry.")
        return tuple(points)

    @staticmethod
    def _route_points(data: dict[str, Any]) -> list[GeoPoint]:
        routes = data.get("routes") or []
        geometry = routes[0].get("geometry") if routes and isinstance(routes[0], dict) else None
        if isinstance(geometry, str):
            pairs = decode_polyline(geometry)
        elif isinstance(geometry, dict):
            # GeoJSON coordinates are [lon, lat]
            pairs = [
                (float(pair[1]), float(pair[0]))
                for pair in geometry.get("coordinates") or []
                if isinstance(pair, (list, tuple)) and len(pair) >= 2
            ]
        else:
            pairs = []

        for lat, lng in pairs:
            if not (math.isfinite(lat) and math.isfinite(lng)):
                raise ValueError(f"non-finite coordinate ({lat}, {lng})")
        return [GeoPoint(lat=lat, lng=lng) for lat, lng in pairs]


def decode_polyline(polyline: str) -> list[tuple[float, float]]:
    """Decode Google polyline string to list of (lat, lon) coordinates.

    OSRM uses Google's polyline encoding format (precision 5) when
    ``geometries=polyline`` is requested.
    """
    coordinates = []
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        values = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1f) << shift
                shift += 5
                if b < 0x20:
                    break
            values.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += values[0]
        lon += values[1]
        coordinates.append((lat / 1e5, lon / 1e5))

    return coordinates


async def check_health(base_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None) -> bool:
    """Check OSRM service health by routing between two fixed points.

    Public OSRM endpoints may not have a /health endpoint, so connectivity is
    tested with a minimal route request inside the map bounds.
    """
    client = OSRMClient(base_url=base_url, timeout=5.0, max_retries=0, transport=transport)
    probe = [GeoPoint(lat=28.6139, lng=77.2090), GeoPoint(lat=28.6562, lng=77.2410)]
    try:
        await client.compute_route(probe)
        return True
    except RouteUnavailable:
        return False
