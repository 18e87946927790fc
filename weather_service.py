import logging
from typing import Optional, Tuple

import httpx

from models import Location, MowingAssessment, ProviderConfig, WeatherSnapshot
from mowing_rules import evaluate

logger = logging.getLogger(__name__)

CURRENT_VARIABLES = [
    "temperature_2m",
    "relative_humidity_2m",
    "precipitation",
    "rain",
    "weather_code",
    "wind_speed_10m",
    "wind_gusts_10m",
]
HOURLY_VARIABLES = [
    "temperature_2m",
    "precipitation",
    "weather_code",
    "soil_moisture_0_to_1cm",
]
DAILY_VARIABLES = [
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "precipitation_hours",
]


class WeatherServiceError(Exception):
    """Base error for location and weather lookups."""


class LocationNotFoundError(WeatherServiceError):
    pass


class WeatherFetchError(WeatherServiceError):
    pass


class WeatherService:
    def __init__(
        self,
        provider: Optional[ProviderConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.provider = provider or ProviderConfig()
        self.client = client or httpx.AsyncClient(timeout=self.provider.timeout_seconds)

    async def __aenter__(self) -> "WeatherService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def resolve_location(self, name: str) -> Location:
        """
        Resolve a town, city or postcode to coordinates.

        Uses the first result of the geocoding search.
        """
        params = {"name": name, "count": 1, "language": "en", "format": "json"}
        logger.info(f"Resolving location '{name}'")

        try:
            response = await self.client.get(self.provider.geocoding_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Geocoding request for '{name}' failed: {e}")
            raise WeatherFetchError("Failed to find location") from e

        results = data.get("results") or []
        if not results:
            raise LocationNotFoundError(
                "Location not found. Please try a different location."
            )

        result = results[0]
        location = Location(
            name=result["name"],
            country=result.get("country"),
            latitude=result["latitude"],
            longitude=result["longitude"],
        )
        logger.info(
            f"Resolved '{name}' to {location.name}, {location.country} "
            f"({location.latitude}, {location.longitude})"
        )
        return location

    async def get_snapshot(self, location: Location) -> WeatherSnapshot:
        """
        Fetch current conditions, hourly series and daily aggregates.

        The provider is asked for local time (timezone=auto), so hourly
        index 0 is local midnight of today at the location.
        """
        params = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "current": ",".join(CURRENT_VARIABLES),
            "hourly": ",".join(HOURLY_VARIABLES),
            "daily": ",".join(DAILY_VARIABLES),
            "timezone": "auto",
            "forecast_days": self.provider.forecast_days,
        }
        logger.info(f"Fetching weather data for {location.name}")

        try:
            response = await self.client.get(self.provider.forecast_url, params=params)
            response.raise_for_status()
            snapshot = WeatherSnapshot.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            logger.error(f"Weather request for {location.name} failed: {e}")
            raise WeatherFetchError("Failed to fetch weather data") from e

        return snapshot

    async def check_location(
        self, name: str
    ) -> Tuple[Location, WeatherSnapshot, MowingAssessment]:
        """Resolve, fetch and evaluate a single location."""
        location = await self.resolve_location(name)
        snapshot = await self.get_snapshot(location)
        assessment = evaluate(snapshot)
        logger.info(
            f"Mowing check for {location.name}: can_mow={assessment.can_mow} "
            f"({len(assessment.reasons)} reasons)"
        )
        return location, snapshot, assessment
