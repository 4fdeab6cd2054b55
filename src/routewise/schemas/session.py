"""Session and location request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt

from ..models.domain import DayType, Location, Weather
from ..services.session import SessionState
from ..services.travel_time import format_duration, traffic_description


class LocationModel(BaseModel):
    id: int
    name: str
    lat: float
    lng: float

    @classmethod
    def from_domain(cls, location: Location) -> "LocationModel":
        return cls(id=location.id, name=location.name, lat=location.lat, lng=location.lng)


class LocationsResponse(BaseModel):
    total: int
    items: List[LocationModel]
    notice: Optional[str] = Field(default=None, description="Set when the catalog could not be loaded.")


class ScenarioParametersModel(BaseModel):
    traffic_level: int = Field(..., ge=0, le=100)
    weather: Weather
    day_type: DayType


class ParametersUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    traffic_level: Optional[StrictInt] = Field(default=None, ge=0, le=100)
    weather: Optional[Weather] = None
    day_type: Optional[DayType] = None


class RouteSegmentModel(BaseModel):
    label: str
    distance_km: float


class RouteMetricsModel(BaseModel):
    total_distance_km: float
    segments: List[RouteSegmentModel]


class EstimateModel(BaseModel):
    base_time_minutes: int
    duration_minutes: int
    duration_text: str
    traffic_description: str


class SessionStateModel(BaseModel):
    status: str
    selection: List[LocationModel]
    route: List[List[float]] = Field(default_factory=list, description="Route polyline as [lat, lng] pairs.")
    metrics: Optional[RouteMetricsModel] = None
    parameters: ScenarioParametersModel
    estimate: Optional[EstimateModel] = None
    can_generate: bool
    error: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionStateModel":
        metrics = None
        if state.metrics is not None:
            metrics = RouteMetricsModel(
                total_distance_km=state.metrics.total_distance_km,
                segments=[
                    RouteSegmentModel(label=segment.label, distance_km=segment.distance_km)
                    for segment in state.metrics.segments
                ],
            )
        return cls(
            status=state.status.value,
            selection=[LocationModel.from_domain(location) for location in state.selection],
            route=[[point.lat, point.lng] for point in state.route],
            metrics=metrics,
            parameters=ScenarioParametersModel(
                traffic_level=state.parameters.traffic_level,
                weather=state.parameters.weather,
                day_type=state.parameters.day_type,
            ),
            estimate=estimate_from_state(state),
            can_generate=state.can_generate,
            error=state.error,
        )


def estimate_from_state(state: SessionState) -> Optional[EstimateModel]:
    minutes = state.estimated_minutes
    if minutes is None or state.base_time_minutes is None:
        return None
    return EstimateModel(
        base_time_minutes=state.base_time_minutes,
        duration_minutes=minutes,
        duration_text=format_duration(minutes),
        traffic_description=traffic_description(state.parameters.traffic_level),
    )


class TrafficPointModel(BaseModel):
    hour: int
    traffic: int
