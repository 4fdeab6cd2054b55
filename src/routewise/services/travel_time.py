"""Travel time estimation model.

The estimate starts from a base time fixed when the route is generated and
applies a multiplier driven by the current scenario parameters:

    multiplier = 0.8 + (traffic_level / 100) * 0.7
    rain     -> multiplier * 1.1
    weekend  -> multiplier * 0.9
"""

from __future__ import annotations

import math

import numpy as np

from ..config import settings
from ..models.domain import DayType, ScenarioParameters, Weather

MIN_TRAFFIC_MULTIPLIER = 0.8
TRAFFIC_MULTIPLIER_RANGE = 0.7
RAIN_FACTOR = 1.1
WEEKEND_FACTOR = 0.9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, never truncating."""
    return int(math.floor(value + 0.5))


def base_time_minutes(total_distance_km: float, minutes_per_km: float | None = None) -> int:
    rate = minutes_per_km if minutes_per_km is not None else settings.minutes_per_km
    return round_half_up(total_distance_km * rate)


def scenario_multiplier(params: ScenarioParameters) -> float:
    multiplier = MIN_TRAFFIC_MULTIPLIER + (params.traffic_level / 100) * TRAFFIC_MULTIPLIER_RANGE
    if params.weather == Weather.RAIN:
        multiplier *= RAIN_FACTOR
    if params.day_type == DayType.WEEKEND:
        multiplier *= WEEKEND_FACTOR
    return multiplier


def estimate(base_minutes: float, params: ScenarioParameters) -> int:
    """Return the estimated duration in whole minutes."""
    if base_minutes < 0:
        raise ValueError(f"base_minutes must be non-negative, got {base_minutes}")
    return round_half_up(base_minutes * scenario_multiplier(params))


def format_duration(minutes: int) -> str:
    """Render minutes as e.g. ``"1 hour 5 minutes"``."""
    hours, remaining = divmod(int(minutes), 60)
    return (
        f"{hours} hour{'' if hours == 1 else 's'} "
        f"{remaining} minute{'' if remaining == 1 else 's'}"
    )


def traffic_description(level: int) -> str:
    if level < 33:
        return "Light"
    if level < 66:
        return "Moderate"
    return "Heavy"


def hourly_traffic_profile(seed: int | None = None) -> list[dict[str, int]]:
    """Illustrative traffic level (0-99) for each hour of the day, for chart display."""
    rng = np.random.default_rng(seed)
    levels = rng.integers(0, 100, size=24)
    return [{"hour": hour, "traffic": int(level)} for hour, level in enumerate(levels)]
