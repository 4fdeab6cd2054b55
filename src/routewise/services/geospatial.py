"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Point, box

from ..models.domain import GeoPoint, Location, MapBounds, RouteSegment

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def total_distance_km(route: Sequence[GeoPoint]) -> float:
    """Sum the great-circle distance between consecutive route points.

    Empty and single-point routes have zero length.
    """

    distance = 0.0
    for previous, current in zip(route, route[1:]):
        distance += haversine_km(previous.lat, previous.lng, current.lat, current.lng)
    return distance


def segments_from_waypoints(selection: Sequence[Location]) -> list[RouteSegment]:
    """Build one labelled straight-line segment per consecutive pair of waypoints."""

    return [
        RouteSegment(
            label=f"{start.name} to {end.name}",
            distance_km=haversine_km(start.lat, start.lng, end.lat, end.lng),
        )
        for start, end in zip(selection, selection[1:])
    ]


def apportion_segments(segments: Sequence[RouteSegment], total_km: float) -> list[RouteSegment]:
    """Scale straight-line segment distances so they add up to the routed total.

    Each segment keeps its share of the straight-line sum. If every segment is
    zero length the total is split evenly.
    """

    if not segments:
        return []
    straight_sum = sum(segment.distance_km for segment in segments)
    if straight_sum <= 0:
        share = total_km / len(segments)
        return [RouteSegment(label=segment.label, distance_km=share) for segment in segments]
    return [
        RouteSegment(label=segment.label, distance_km=total_km * segment.distance_km / straight_sum)
        for segment in segments
    ]


def is_within_bounds(lat: float, lng: float, bounds: MapBounds) -> bool:
    """Return True if the point lies inside (or on the edge of) the bounding box."""

    area = box(bounds.west, bounds.south, bounds.east, bounds.north)
    return area.covers(Point(lng, lat))
