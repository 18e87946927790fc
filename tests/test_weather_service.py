"""
Unit tests for the geocoding and forecast client.

HTTP traffic is served by httpx.MockTransport so no network is used.
"""

import asyncio
from datetime import date, datetime

import httpx
import pytest

from models import Location, ProviderConfig
from weather_service import (
    CURRENT_VARIABLES,
    LocationNotFoundError,
    WeatherFetchError,
    WeatherService,
)

GEOCODING_URL = "https://geocoding.test/v1/search"
FORECAST_URL = "https://forecast.test/v1/forecast"

BRISTOL = {
    "results": [
        {
            "id": 2654675,
            "name": "Bristol",
            "latitude": 51.45523,
            "longitude": -2.59665,
            "country": "United Kingdom",
        }
    ]
}


def make_service(handler):
    provider = ProviderConfig(geocoding_url=GEOCODING_URL, forecast_url=FORECAST_URL)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WeatherService(provider, client=client)


def run(service, method, *args):
    async def _call():
        async with service:
            return await getattr(service, method)(*args)

    return asyncio.run(_call())


class TestResolveLocation:
    def test_first_result_is_used(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=BRISTOL)

        location = run(make_service(handler), "resolve_location", "Bristol")

        assert location == Location(
            name="Bristol", country="United Kingdom", latitude=51.45523, longitude=-2.59665
        )
        params = requests[0].url.params
        assert params["name"] == "Bristol"
        assert params["count"] == "1"
        assert params["language"] == "en"
        assert params["format"] == "json"

    @pytest.mark.parametrize("body", [{}, {"results": []}, {"generationtime_ms": 0.5}])
    def test_no_results_is_not_found(self, body):
        service = make_service(lambda request: httpx.Response(200, json=body))
        with pytest.raises(LocationNotFoundError, match="Location not found"):
            run(service, "resolve_location", "Nowhereville")

    def test_error_status_is_fetch_error(self):
        service = make_service(lambda request: httpx.Response(500))
        with pytest.raises(WeatherFetchError, match="Failed to find location"):
            run(service, "resolve_location", "Bristol")

    def test_transport_error_is_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(WeatherFetchError, match="Failed to find location"):
            run(make_service(handler), "resolve_location", "Bristol")


class TestGetSnapshot:
    location = Location(name="Bristol", country="United Kingdom", latitude=51.45, longitude=-2.58)

    def test_snapshot_is_parsed(self, payload):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=payload)

        snapshot = run(make_service(handler), "get_snapshot", self.location)

        assert snapshot.current.temperature_2m == 15.0
        assert snapshot.current.time.hour == 14
        assert len(snapshot.hourly.precipitation) == 72
        assert snapshot.daily.temperature_2m_min[0] == 10.0
        assert snapshot.daily.time[0] == date(2026, 10, 19)
        assert snapshot.hourly.time[14] == datetime(2026, 10, 19, 14, 0)
        assert snapshot.timezone == "Europe/London"

        params = requests[0].url.params
        assert params["latitude"] == "51.45"
        assert params["longitude"] == "-2.58"
        assert params["current"] == ",".join(CURRENT_VARIABLES)
        assert "soil_moisture_0_to_1cm" in params["hourly"]
        assert params["timezone"] == "auto"
        assert params["forecast_days"] == "3"

    def test_null_soil_moisture_is_accepted(self, payload):
        payload["hourly"]["soil_moisture_0_to_1cm"] = [None] * 72
        service = make_service(lambda request: httpx.Response(200, json=payload))

        snapshot = run(service, "get_snapshot", self.location)
        assert snapshot.hourly.soil_moisture_0_to_1cm[14] is None

    def test_error_status_is_fetch_error(self):
        service = make_service(lambda request: httpx.Response(400, json={"error": True}))
        with pytest.raises(WeatherFetchError, match="Failed to fetch weather data"):
            run(service, "get_snapshot", self.location)

    def test_malformed_payload_is_fetch_error(self, payload):
        del payload["current"]
        service = make_service(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(WeatherFetchError):
            run(service, "get_snapshot", self.location)


class TestCheckLocation:
    def test_pipeline_resolves_fetches_and_evaluates(self, payload):
        def handler(request):
            if request.url.host == "geocoding.test":
                return httpx.Response(200, json=BRISTOL)
            return httpx.Response(200, json=payload)

        location, snapshot, assessment = run(make_service(handler), "check_location", "Bristol")

        assert location.name == "Bristol"
        assert snapshot.current.temperature_2m == 15.0
        assert assessment.can_mow is True

    def test_weather_not_fetched_when_location_missing(self):
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            return httpx.Response(200, json={})

        with pytest.raises(LocationNotFoundError):
            run(make_service(handler), "check_location", "Nowhereville")
        assert hosts == ["geocoding.test"]
