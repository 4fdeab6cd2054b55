"""Location catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request, status

from ...data.locations_repository import LocationCatalog
from ...schemas.session import LocationModel, LocationsResponse

router = APIRouter(prefix="/locations", tags=["locations"])


def get_catalog(request: Request) -> LocationCatalog:
    return request.app.state.catalog


@router.get("", response_model=LocationsResponse, status_code=status.HTTP_200_OK)
def list_locations(
    request: Request,
    search: str | None = Query(default=None, description="Case-insensitive name filter"),
) -> LocationsResponse:
    catalog = get_catalog(request)
    items = [LocationModel.from_domain(location) for location in catalog.search(search)]
    return LocationsResponse(total=len(items), items=items, notice=request.app.state.catalog_notice)
