import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from config_loader import load_config
from models import (
    ErrorResponse,
    MowingCheckRequest,
    MowingCheckResponse,
    WeatherSummary,
)
from weather_service import LocationNotFoundError, WeatherFetchError, WeatherService

# Configure logging with Docker-friendly format
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(),  # Console output for Docker logs
        (
            logging.FileHandler("/app/logs/mowing_api.log")
            if os.path.exists("/app/logs")
            else logging.NullHandler()
        ),
    ],
)
logger = logging.getLogger(__name__)

INVALID_LOCATION_MESSAGE = (
    'Please provide a "location" field in the request body (town, city, or postcode)'
)
METHOD_NOT_ALLOWED_MESSAGE = 'Please use POST method with a JSON payload containing "location"'

# Global variables
config = load_config()
weather_service: Optional[WeatherService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    global weather_service

    logger.info("Starting mowing check API")
    logger.info(f"Geocoding provider: {config.providers.geocoding_url}")
    logger.info(f"Forecast provider: {config.providers.forecast_url}")
    weather_service = WeatherService(config.providers)

    yield

    logger.info("Shutting down mowing check API")
    await weather_service.close()


app = FastAPI(
    title="Mowing Check API",
    description="Tells you whether current weather allows mowing the lawn at a location",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.post("/api/check-mowing", response_model=MowingCheckResponse)
async def check_mowing(request: MowingCheckRequest):
    """
    Check whether the lawn can be mowed at a location.

    Expects a JSON body with a "location" field (town, city, or postcode).
    """
    location_name = (request.location or "").strip()
    if not location_name:
        return error_response(400, "Invalid request", INVALID_LOCATION_MESSAGE)

    location, snapshot, assessment = await weather_service.check_location(location_name)
    current = snapshot.current

    return MowingCheckResponse(
        can_mow=assessment.can_mow,
        location=location,
        recommendation=assessment.recommendation,
        details=assessment.detail_text,
        weather=WeatherSummary(
            temperature=current.temperature_2m,
            humidity=current.relative_humidity_2m,
            wind_speed=current.wind_speed_10m,
            precipitation=current.precipitation,
            conditions=assessment.reasons,
        ),
    )


@app.options("/api/check-mowing")
async def check_mowing_options():
    """Answer plain OPTIONS requests; CORS preflights are handled by the middleware."""
    return Response(status_code=200)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "providers": {
            "geocoding": config.providers.geocoding_url,
            "forecast": config.providers.forecast_url,
        },
    }


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return error_response(405, "Method not allowed", METHOD_NOT_ALLOWED_MESSAGE)
    return error_response(exc.status_code, "Request failed", str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed request bodies with the same message as a missing location."""
    logger.warning(f"Invalid request body: {exc.errors()}")
    return error_response(400, "Invalid request", INVALID_LOCATION_MESSAGE)


@app.exception_handler(LocationNotFoundError)
async def location_not_found_handler(request: Request, exc: LocationNotFoundError):
    return error_response(404, "Location not found", str(exc))


@app.exception_handler(WeatherFetchError)
async def weather_fetch_handler(request: Request, exc: WeatherFetchError):
    logger.error(f"Upstream failure: {exc}")
    return error_response(502, "Upstream error", str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    return error_response(
        500, "Server error", str(exc) or "Failed to process mowing check"
    )


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", config.server.host)
    port = int(os.getenv("PORT", config.server.port))

    logger.info(f"Starting server on {host}:{port}")

    uvicorn.run(app, host=host, port=port, log_level=log_level.lower(), access_log=True)
