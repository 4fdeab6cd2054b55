import pytest

from routewise.models.domain import DayType, ScenarioParameters, Weather
from routewise.services.travel_time import (
    base_time_minutes,
    estimate,
    format_duration,
    hourly_traffic_profile,
    round_half_up,
    scenario_multiplier,
    traffic_description,
)


@pytest.mark.parametrize("base", [0, 7, 22, 100, 333])
def test_estimate_traffic_extremes(base):
    light = ScenarioParameters(traffic_level=0, weather=Weather.CLEAR, day_type=DayType.WEEKDAY)
    heavy = ScenarioParameters(traffic_level=100, weather=Weather.CLEAR, day_type=DayType.WEEKDAY)

    assert estimate(base, light) == round_half_up(base * 0.8)
    assert estimate(base, heavy) == round_half_up(base * 1.5)


def test_estimate_rain_on_weekend():
    params = ScenarioParameters(traffic_level=50, weather=Weather.RAIN, day_type=DayType.WEEKEND)

    assert scenario_multiplier(params) == pytest.approx(1.1385)
    assert estimate(100, params) == 114


def test_estimate_rounds_instead_of_truncating():
    params = ScenarioParameters(traffic_level=100)
    # 9 * 1.5 = 13.5
    assert estimate(9, params) == 14


def test_estimate_rejects_negative_base():
    with pytest.raises(ValueError):
        estimate(-1, ScenarioParameters())


def test_base_time_uses_three_minutes_per_km():
    assert base_time_minutes(7.4) == 22
    assert base_time_minutes(0.0) == 0
    assert base_time_minutes(10.0, minutes_per_km=1.5) == 15


def test_scenario_parameters_validation():
    with pytest.raises(ValueError):
        ScenarioParameters(traffic_level=101)
    with pytest.raises(ValueError):
        ScenarioParameters(weather="snow")

    with pytest.raises(ValueError):
        ScenarioParameters(traffic_level=50.5)
    with pytest.raises(ValueError):
        ScenarioParameters(traffic_level=True)

    params = ScenarioParameters(weather="rain", day_type="weekend")
    assert params.weather is Weather.RAIN
    assert params.day_type is DayType.WEEKEND


def test_parameters_merge_keeps_unset_fields():
    params = ScenarioParameters(traffic_level=20, weather=Weather.RAIN)

    merged = params.merged(day_type=DayType.WEEKEND)

    assert merged == ScenarioParameters(traffic_level=20, weather=Weather.RAIN, day_type=DayType.WEEKEND)


def test_format_duration():
    assert format_duration(0) == "0 hours 0 minutes"
    assert format_duration(61) == "1 hour 1 minute"
    assert format_duration(125) == "2 hours 5 minutes"


def test_traffic_description_thresholds():
    assert traffic_description(0) == "Light"
    assert traffic_description(32) == "Light"
    assert traffic_description(33) == "Moderate"
    assert traffic_description(65) == "Moderate"
    assert traffic_description(66) == "Heavy"


def test_hourly_traffic_profile_is_seedable():
    profile = hourly_traffic_profile(seed=7)

    assert [entry["hour"] for entry in profile] == list(range(24))
    assert all(0 <= entry["traffic"] < 100 for entry in profile)
    assert profile == hourly_traffic_profile(seed=7)
