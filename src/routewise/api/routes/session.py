"""Route session endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, Request, status

from ...schemas.session import (
    EstimateModel,
    ParametersUpdate,
    SessionStateModel,
    TrafficPointModel,
    estimate_from_state,
)
from ...services.export import route_to_feature_collection
from ...services.session import RouteSession
from ...services.travel_time import hourly_traffic_profile
from .locations import get_catalog

router = APIRouter(prefix="/session", tags=["session"])


def get_session(request: Request) -> RouteSession:
    return request.app.state.session


@router.get("", response_model=SessionStateModel, status_code=status.HTTP_200_OK)
def read_session(request: Request) -> SessionStateModel:
    return SessionStateModel.from_state(get_session(request).state)


@router.post("/toggle/{location_id}", response_model=SessionStateModel, status_code=status.HTTP_200_OK)
def toggle_location(location_id: int, request: Request) -> SessionStateModel:
    """Add the location to the selection, or remove it if already selected."""
    location = get_catalog(request).get(location_id)
    if location is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location {location_id} not found",
        )
    return SessionStateModel.from_state(get_session(request).toggle(location))


@router.post("/generate", response_model=SessionStateModel, status_code=status.HTTP_200_OK)
async def generate_route(request: Request) -> SessionStateModel:
    """Generate a route through the selected locations.

    Returns the resulting state; routing failures show up as status
    ``failed`` with an error message rather than an HTTP error.
    """
    try:
        state = await get_session(request).generate()
    except Exception as exc:
        logging.exception(f"Error generating route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate route: {str(exc)}"
        ) from exc
    return SessionStateModel.from_state(state)


@router.patch("/parameters", response_model=SessionStateModel, status_code=status.HTTP_200_OK)
def update_parameters(payload: ParametersUpdate, request: Request) -> SessionStateModel:
    state = get_session(request).set_parameters(
        traffic_level=payload.traffic_level,
        weather=payload.weather,
        day_type=payload.day_type,
    )
    return SessionStateModel.from_state(state)


@router.get("/estimate", response_model=EstimateModel, status_code=status.HTTP_200_OK)
def read_estimate(request: Request) -> EstimateModel:
    estimate = estimate_from_state(get_session(request).state)
    if estimate is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No route has been generated for the current selection",
        )
    return estimate


@router.get("/traffic-profile", response_model=List[TrafficPointModel], status_code=status.HTTP_200_OK)
def read_traffic_profile(seed: int | None = Query(default=None, ge=0)) -> List[TrafficPointModel]:
    return [TrafficPointModel(**entry) for entry in hourly_traffic_profile(seed)]


@router.get("/route.geojson", status_code=status.HTTP_200_OK)
def read_route_geojson(request: Request) -> dict:
    state = get_session(request).state
    return route_to_feature_collection(state.route, state.selection.locations, state.metrics)
