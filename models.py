from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]


class ProviderConfig(BaseModel):
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_seconds: float = 10.0
    forecast_days: int = 3


class Config(BaseModel):
    server: ServerConfig = ServerConfig()
    providers: ProviderConfig = ProviderConfig()


class Location(BaseModel):
    name: str
    country: Optional[str] = None
    latitude: float
    longitude: float


class CurrentConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: Optional[datetime] = None  # Local time of the location
    temperature_2m: float  # °C
    relative_humidity_2m: float  # %
    wind_speed_10m: float  # km/h
    wind_gusts_10m: Optional[float] = None  # km/h
    precipitation: float = 0.0  # mm
    rain: float = 0.0  # mm
    weather_code: Optional[int] = None

    @property
    def effective_gusts(self) -> float:
        """Gust speed, falling back to the mean wind speed when not reported."""
        return self.wind_gusts_10m or self.wind_speed_10m


class HourlySeries(BaseModel):
    """Parallel hourly arrays; index 0 is local midnight of today."""

    model_config = ConfigDict(frozen=True)

    time: List[datetime] = []
    precipitation: List[Optional[float]] = []
    soil_moisture_0_to_1cm: List[Optional[float]] = []
    temperature_2m: List[Optional[float]] = []
    weather_code: List[Optional[int]] = []


class DailySeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: List[date] = []
    temperature_2m_max: List[float]
    temperature_2m_min: List[float]
    precipitation_sum: List[Optional[float]] = []
    precipitation_hours: List[Optional[float]] = []


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    timezone: Optional[str] = None
    current: CurrentConditions
    hourly: HourlySeries
    daily: DailySeries


class ReasonType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class Reason(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    type: ReasonType


class MowingAssessment(BaseModel):
    can_mow: bool
    recommendation: str
    detail_text: str
    reasons: List[Reason]


class MowingCheckRequest(BaseModel):
    location: Optional[str] = None


class WeatherSummary(BaseModel):
    temperature: float
    humidity: float
    wind_speed: float
    precipitation: float
    conditions: List[Reason]


class MowingCheckResponse(BaseModel):
    success: bool = True
    can_mow: bool
    location: Location
    recommendation: str
    details: str
    weather: WeatherSummary
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
