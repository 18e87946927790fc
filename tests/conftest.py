"""Shared fixtures: nominal Open-Meteo style payloads and snapshots."""

import copy

import pytest

from models import WeatherSnapshot

HOURS = 72


def nominal_payload():
    """A forecast payload where every rule is satisfied at 14:00 local time."""
    return {
        "latitude": 51.45,
        "longitude": -2.58,
        "timezone": "Europe/London",
        "current": {
            "time": "2026-10-19T14:00",
            "temperature_2m": 15.0,
            "relative_humidity_2m": 50,
            "precipitation": 0.0,
            "rain": 0.0,
            "weather_code": 1,
            "wind_speed_10m": 10.0,
            "wind_gusts_10m": 15.0,
        },
        "hourly": {
            "time": [f"2026-10-{19 + h // 24}T{h % 24:02d}:00" for h in range(HOURS)],
            "precipitation": [0.0] * HOURS,
            "soil_moisture_0_to_1cm": [0.25] * HOURS,
            "temperature_2m": [15.0] * HOURS,
            "weather_code": [1] * HOURS,
        },
        "daily": {
            "time": ["2026-10-19", "2026-10-20", "2026-10-21"],
            "temperature_2m_max": [18.0, 19.0, 20.0],
            "temperature_2m_min": [10.0, 11.0, 12.0],
            "precipitation_sum": [0.0, 0.0, 0.0],
            "precipitation_hours": [0.0, 0.0, 0.0],
        },
    }


@pytest.fixture
def payload():
    return nominal_payload()


@pytest.fixture
def make_snapshot():
    """
    Build a WeatherSnapshot from the nominal payload.

    Keyword arguments are merged into the matching section, e.g.
    make_snapshot(current={"temperature_2m": 3}).
    """

    def _make(current=None, hourly=None, daily=None):
        data = copy.deepcopy(nominal_payload())
        data["current"].update(current or {})
        data["hourly"].update(hourly or {})
        data["daily"].update(daily or {})
        return WeatherSnapshot.model_validate(data)

    return _make
