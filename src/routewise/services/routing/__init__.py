"""Routing provider adapters."""

from .base import FetchOutcome, RouteProvider
from .osrm_client import OSRMClient, check_health, decode_polyline

__all__ = ["FetchOutcome", "RouteProvider", "OSRMClient", "check_health", "decode_polyline"]
