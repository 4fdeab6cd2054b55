"""Application configuration and settings management."""

from typing import Annotated, Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEWISE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Routewise Route Estimator API"
    api_prefix: str = "/api"
    location_file: str = Field(
        default="data/locationdata.csv",
        description="Location catalog CSV (local path or http(s) URL) with name, lat, lng columns.",
    )
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile used for route requests.",
    )
    osrm_geometries: Literal["geojson", "polyline"] = Field(
        default="geojson",
        description="Geometry encoding requested from OSRM.",
    )
    osrm_timeout_seconds: float = Field(default=15.0, gt=0.0)
    osrm_max_retries: int = Field(default=0, ge=0)
    osrm_backoff_seconds: float = Field(default=1.0, ge=0.0)
    route_timeout_seconds: float = Field(
        default=20.0,
        gt=0.0,
        description="Upper bound on a single generate action before the session fails it.",
    )
    minutes_per_km: float = Field(
        default=3.0,
        gt=0.0,
        description="Base travel time per kilometre (3 min/km is an average speed of 20 km/h).",
    )
    map_bounds: Annotated[tuple[float, float, float, float], NoDecode] = Field(
        default=(28.4, 76.8, 28.9, 77.6),
        description="Map bounding box as (south, west, north, east).",
    )
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("map_bounds", mode="before")
    @classmethod
    def _parse_bounds_from_env(cls, value: Any) -> tuple[float, ...]:
        """Parse the bounding box from a JSON array or a comma-separated string."""
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except (json.JSONDecodeError, TypeError):
                parsed = [item.strip() for item in value.split(",") if item.strip()]
            value = parsed
        if isinstance(value, (list, tuple)):
            if len(value) != 4:
                raise ValueError("map_bounds needs exactly four values: south, west, north, east")
            south, west, north, east = (float(item) for item in value)
            if south >= north or west >= east:
                raise ValueError("map_bounds must satisfy south < north and west < east")
            return (south, west, north, east)
        return value


settings = Settings()
