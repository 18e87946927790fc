"""
cli.py: Check from the terminal whether the lawn can be mowed at a location.

Runs the same pipeline as the HTTP API (geocode, fetch weather, evaluate)
and prints the recommendation with the reasons behind it.

Usage:
    mow-check "Bristol" [--json] [--config config.toml]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from config_loader import ConfigError, load_config
from models import Location, MowingAssessment, ReasonType, WeatherSnapshot
from weather_service import WeatherService, WeatherServiceError

logger = logging.getLogger(__name__)

MARKERS = {ReasonType.POSITIVE: "+", ReasonType.NEGATIVE: "-"}


def render_text(
    location: Location, snapshot: WeatherSnapshot, assessment: MowingAssessment
) -> str:
    current = snapshot.current
    place = location.name if not location.country else f"{location.name}, {location.country}"
    lines = [
        place,
        "",
        assessment.recommendation,
        assessment.detail_text,
        "",
        f"Temperature: {current.temperature_2m:g}°C   "
        f"Humidity: {current.relative_humidity_2m:g}%   "
        f"Wind: {current.wind_speed_10m:g} km/h   "
        f"Precipitation: {current.precipitation:g}mm",
        "",
    ]
    lines.extend(f"  {MARKERS[reason.type]} {reason.text}" for reason in assessment.reasons)
    return "\n".join(lines)


def render_json(
    location: Location, snapshot: WeatherSnapshot, assessment: MowingAssessment
) -> str:
    payload = {
        "can_mow": assessment.can_mow,
        "location": location.model_dump(),
        "recommendation": assessment.recommendation,
        "details": assessment.detail_text,
        "reasons": [reason.model_dump(mode="json") for reason in assessment.reasons],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


async def _check(location_name: str, config_path: Optional[str]):
    config = load_config(config_path)
    async with WeatherService(config.providers) as service:
        return await service.check_location(location_name)


def run_check(location_name: str, config_path: Optional[str] = None):
    """Resolve, fetch and evaluate a location, returning (location, snapshot, assessment)."""
    return asyncio.run(_check(location_name, config_path))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check if it's a good time to mow the lawn")
    parser.add_argument("location", help="Town, city, or postcode")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--config", type=str, default=None, help="Path to config.toml")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    location_name = args.location.strip()
    if not location_name:
        print("Please enter a location", file=sys.stderr)
        return 2

    try:
        location, snapshot, assessment = run_check(location_name, args.config)
    except (WeatherServiceError, ConfigError) as e:
        logger.debug("Mowing check failed", exc_info=True)
        print(str(e), file=sys.stderr)
        return 1

    render = render_json if args.json else render_text
    print(render(location, snapshot, assessment))
    return 0


if __name__ == "__main__":
    sys.exit(main())
