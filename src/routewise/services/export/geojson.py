"""GeoJSON export of the current route for map overlays."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ...models.domain import GeoPoint, Location, RouteMetrics

ROUTE_COLOR = "#3388ff"


def waypoint_feature(location: Location, sequence: int) -> Dict[str, Any]:
    # GeoJSON uses lon,lat order (x,y)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [location.lng, location.lat]},
        "properties": {
            "kind": "waypoint",
            "id": location.id,
            "name": location.name,
            "sequence": sequence,
        },
    }


def route_feature(route: Sequence[GeoPoint], metrics: RouteMetrics | None = None) -> Dict[str, Any]:
    if len(route) < 2:
        raise ValueError("LineString must have at least 2 coordinates")
    properties: Dict[str, Any] = {"kind": "route", "stroke": ROUTE_COLOR}
    if metrics is not None:
        properties["total_distance_km"] = round(metrics.total_distance_km, 3)
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": [[point.lng, point.lat] for point in route]},
        "properties": properties,
    }


def route_to_feature_collection(
    route: Sequence[GeoPoint],
    waypoints: Sequence[Location],
    metrics: RouteMetrics | None = None,
) -> Dict[str, Any]:
    """Build a FeatureCollection with the route line (if any) and numbered waypoints."""

    features: List[Dict[str, Any]] = []
    if len(route) >= 2:
        features.append(route_feature(route, metrics))
    features.extend(waypoint_feature(location, index) for index, location in enumerate(waypoints, start=1))
    return {"type": "FeatureCollection", "features": features}
