"""
Mowing condition rules.

Turns a WeatherSnapshot into a MowingAssessment. Each rule looks at the
snapshot (and the current local hour) and returns at most one Reason; any
negative reason blocks mowing. Rules run in the order of RULES and their
reasons are kept in that order.
"""

from datetime import datetime
from functools import reduce
from typing import Callable, Optional, Tuple

from models import MowingAssessment, Reason, ReasonType, WeatherSnapshot

MIN_TEMPERATURE = 7.0
MAX_TEMPERATURE = 28.0
RECENT_RAIN_HOURS = 6
HEAVY_RECENT_RAIN_MM = 5.0
LIGHT_RECENT_RAIN_MM = 1.0
SOIL_WATERLOGGED = 0.4
SOIL_DRY = 0.1
STRONG_WIND_KMH = 30.0
STRONG_GUST_KMH = 40.0
MODERATE_WIND_KMH = 20.0
FROST_TEMPERATURE = 2.0
COLD_SPELL_DAYS = 3
COLD_SPELL_MAX_TEMPERATURE = 10.0
VERY_HIGH_HUMIDITY = 90.0
HIGH_HUMIDITY = 75.0

RECOMMEND_YES = "YES, You Can Mow!"
DETAIL_YES = "Weather conditions are suitable for mowing your lawn."
RECOMMEND_NO = "NO, Wait to Mow"
DETAIL_NO = "Current conditions are not ideal for mowing. Check the analysis for details."

Rule = Callable[[WeatherSnapshot, int], Optional[Reason]]


def _num(value: float) -> str:
    # 15.0 -> "15", 15.3 -> "15.3"
    return f"{value:g}"


def _positive(text: str) -> Reason:
    return Reason(text=text, type=ReasonType.POSITIVE)


def _negative(text: str) -> Reason:
    return Reason(text=text, type=ReasonType.NEGATIVE)


def recent_rain(snapshot: WeatherSnapshot, current_hour: int) -> float:
    """Sum of hourly precipitation over the hours before current_hour."""
    series = snapshot.hourly.precipitation
    start = max(0, current_hour - RECENT_RAIN_HOURS)
    window = series[start:current_hour]
    return sum(value for value in window if value)


def soil_moisture_at(snapshot: WeatherSnapshot, current_hour: int) -> Optional[float]:
    series = snapshot.hourly.soil_moisture_0_to_1cm
    if 0 <= current_hour < len(series):
        return series[current_hour]
    return None


def check_temperature(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    temp = snapshot.current.temperature_2m
    if temp < MIN_TEMPERATURE:
        return _negative(
            f"Temperature too cold ({_num(temp)}°C). "
            "Grass below 7°C is dormant and shouldn't be mowed."
        )
    if temp > MAX_TEMPERATURE:
        return _negative(
            f"Temperature too hot ({_num(temp)}°C). "
            "Mowing in extreme heat stresses the grass."
        )
    return _positive(f"Temperature is suitable ({_num(temp)}°C).")


def check_current_rain(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    current = snapshot.current
    if current.precipitation > 0 or current.rain > 0:
        return _negative(
            f"Currently raining ({_num(current.precipitation)}mm). "
            "Wait for rain to stop and grass to dry."
        )
    return _positive("Not currently raining.")


def check_recent_rain(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    total = recent_rain(snapshot, current_hour)
    if total > HEAVY_RECENT_RAIN_MM:
        return _negative(
            f"Significant recent rain ({total:.1f}mm in last 6 hours). "
            "Grass likely still wet."
        )
    if total > LIGHT_RECENT_RAIN_MM:
        return _negative(
            f"Some recent rain ({total:.1f}mm in last 6 hours). Check if grass is dry."
        )
    return None


def check_soil_moisture(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    moisture = soil_moisture_at(snapshot, current_hour)
    if not moisture:
        return None
    if moisture > SOIL_WATERLOGGED:
        return _negative(
            f"Soil is waterlogged (moisture: {moisture * 100:.0f}%). "
            "Wait for ground to dry."
        )
    if moisture < SOIL_DRY:
        return _negative(
            f"Soil very dry (moisture: {moisture * 100:.0f}%). "
            "Possible drought conditions."
        )
    return None


def check_wind(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    speed = snapshot.current.wind_speed_10m
    gusts = snapshot.current.effective_gusts
    if speed > STRONG_WIND_KMH or gusts > STRONG_GUST_KMH:
        return _negative(
            f"Strong winds ({_num(speed)} km/h, gusts {_num(gusts)} km/h). "
            "Unsafe and ineffective mowing."
        )
    if speed > MODERATE_WIND_KMH:
        return _negative(
            f"Moderate winds ({_num(speed)} km/h). Mowing possible but not ideal."
        )
    return _positive(f"Wind conditions acceptable ({_num(speed)} km/h).")


def check_frost(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    min_temp = snapshot.daily.temperature_2m_min[0]
    if min_temp <= FROST_TEMPERATURE:
        return _negative(
            f"Frost risk (min temp {_num(min_temp)}°C today). "
            "Wait for warmer conditions."
        )
    return None


def check_cold_spell(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    highs = snapshot.daily.temperature_2m_max[:COLD_SPELL_DAYS]
    cold_spell = all(high < COLD_SPELL_MAX_TEMPERATURE for high in highs)
    if cold_spell and snapshot.current.temperature_2m < COLD_SPELL_MAX_TEMPERATURE:
        return _negative(
            "Winter cold spell detected. Grass is dormant and should not be mowed."
        )
    return None


def check_humidity(snapshot: WeatherSnapshot, current_hour: int) -> Optional[Reason]:
    humidity = snapshot.current.relative_humidity_2m
    if humidity > VERY_HIGH_HUMIDITY:
        return _negative(
            f"Very high humidity ({_num(humidity)}%). "
            "Grass likely wet from dew or moisture."
        )
    if humidity > HIGH_HUMIDITY:
        # Cautionary but non-blocking
        return _positive(
            f"High humidity ({_num(humidity)}%). Check if grass is dry before mowing."
        )
    return None


RULES: Tuple[Rule, ...] = (
    check_temperature,
    check_current_rain,
    check_recent_rain,
    check_soil_moisture,
    check_wind,
    check_frost,
    check_cold_spell,
    check_humidity,
)


def resolve_current_hour(snapshot: WeatherSnapshot, current_hour: Optional[int] = None) -> int:
    """
    Hour of day used to index the hourly arrays.

    Prefers an explicit value, then the observation time reported with the
    snapshot (local to the location), then the local clock.
    """
    if current_hour is not None:
        return current_hour
    if snapshot.current.time is not None:
        return snapshot.current.time.hour
    return datetime.now().hour


def evaluate(snapshot: WeatherSnapshot, current_hour: Optional[int] = None) -> MowingAssessment:
    """Apply every rule in order and derive the overall recommendation."""
    hour = resolve_current_hour(snapshot, current_hour)

    def apply(state, rule):
        can_mow, reasons = state
        reason = rule(snapshot, hour)
        if reason is None:
            return state
        blocks = reason.type == ReasonType.NEGATIVE
        return can_mow and not blocks, reasons + (reason,)

    can_mow, reasons = reduce(apply, RULES, (True, ()))

    return MowingAssessment(
        can_mow=can_mow,
        recommendation=RECOMMEND_YES if can_mow else RECOMMEND_NO,
        detail_text=DETAIL_YES if can_mow else DETAIL_NO,
        reasons=list(reasons),
    )
