"""Domain models for locations, routes and scenario parameters."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Location:
    """A point of interest from the location catalog."""

    id: int
    name: str
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A single polyline vertex in (lat, lng) order."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class RouteSegment:
    label: str
    distance_km: float


@dataclass(frozen=True, slots=True)
class RouteMetrics:
    """Distance figures derived from a generated route."""

    total_distance_km: float
    segments: tuple[RouteSegment, ...] = ()


class Weather(str, Enum):
    CLEAR = "clear"
    RAIN = "rain"


class DayType(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


@dataclass(frozen=True, slots=True)
class ScenarioParameters:
    """User-adjustable inputs to the travel time model."""

    traffic_level: int = 50
    weather: Weather = Weather.CLEAR
    day_type: DayType = DayType.WEEKDAY

    def __post_init__(self) -> None:
        if isinstance(self.traffic_level, bool) or not isinstance(self.traffic_level, int):
            raise ValueError(f"traffic_level must be an integer, got {self.traffic_level!r}")
        if not 0 <= self.traffic_level <= 100:
            raise ValueError(f"traffic_level must be within [0, 100], got {self.traffic_level}")
        # Accept plain strings such as "rain" from callers.
        object.__setattr__(self, "weather", Weather(self.weather))
        object.__setattr__(self, "day_type", DayType(self.day_type))

    def merged(
        self,
        traffic_level: Optional[int] = None,
        weather: Optional[Weather] = None,
        day_type: Optional[DayType] = None,
    ) -> "ScenarioParameters":
        """Return a copy with the given fields replaced; ``None`` keeps the current value."""
        changes = {}
        if traffic_level is not None:
            changes["traffic_level"] = traffic_level
        if weather is not None:
            changes["weather"] = weather
        if day_type is not None:
            changes["day_type"] = day_type
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class MapBounds:
    """Geographic bounding box of the map."""

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_tuple(cls, values: tuple[float, float, float, float]) -> "MapBounds":
        south, west, north, east = values
        return cls(south=south, west=west, north=north, east=east)

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=(self.south + self.north) / 2, lng=(self.west + self.east) / 2)
