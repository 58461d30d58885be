"""Fire Risk Endpoints"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from fireguard.core.engine import RiskEngine
from fireguard.core.features import MAX_DAY_OF_YEAR, calendar_day, season
from fireguard.core.grid import DEFAULT_GRID_SIZE, GridRiskAggregator
from fireguard.config import settings
from fireguard.models.fires import FireDetection
from fireguard.schemas.common import BoundingBox, CANADA_BBOX, DEFAULT_GRID_BBOX
from fireguard.schemas.risk import (
    CurrentWeather,
    CustomWeatherRiskResponse,
    EnhancedFeatures,
    GridRiskResponse,
    InputWeather,
    LocationRiskResponse,
    RiskHealthResponse,
)
from fireguard.services.nasa_firms import NASAFIRMSService
from fireguard.services.open_meteo import OpenMeteoService
from fireguard.utils.logger import get_logger
from fireguard.utils.exceptions import DataValidationError, ModelNotReadyError, OutOfRegionError

router = APIRouter()
logger = get_logger(__name__)


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_engine(request: Request) -> RiskEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ModelNotReadyError()
    return engine


def get_weather_service(request: Request) -> OpenMeteoService:
    return request.app.state.weather_service


def get_firms_service(request: Request) -> NASAFIRMSService:
    return request.app.state.firms_service


def today_day_of_year() -> int:
    return calendar_day(date.today())


def require_region(latitude: float, longitude: float):
    if not CANADA_BBOX.contains(latitude, longitude):
        raise OutOfRegionError(latitude, longitude, bbox=CANADA_BBOX.to_dict())


# ============================================================================
# ROUTES
# ============================================================================

@router.get("/location", response_model=LocationRiskResponse)
async def get_location_risk(
    latitude: float = Query(..., alias="lat"),
    longitude: float = Query(..., alias="lon"),
    engine: RiskEngine = Depends(get_engine),
    weather_service: OpenMeteoService = Depends(get_weather_service),
):
    """Fire risk at a point using current weather."""
    require_region(latitude, longitude)

    weather = await weather_service.fetch_current(latitude, longitude)
    sample, prediction = engine.prediction_service.assess(
        latitude, longitude, weather, today_day_of_year()
    )

    logger.info(
        "Location risk assessed",
        latitude=latitude,
        longitude=longitude,
        probability=round(prediction.probability, 4),
        risk_level=prediction.tier.value,
    )
    return LocationRiskResponse.build(latitude, longitude, weather, sample, prediction)


@router.get("/grid", response_model=GridRiskResponse)
async def get_grid_risk(
    lat_min: float = Query(DEFAULT_GRID_BBOX.min_lat, alias="latMin"),
    lat_max: float = Query(DEFAULT_GRID_BBOX.max_lat, alias="latMax"),
    lon_min: float = Query(DEFAULT_GRID_BBOX.min_lon, alias="lonMin"),
    lon_max: float = Query(DEFAULT_GRID_BBOX.max_lon, alias="lonMax"),
    grid_size: int = Query(DEFAULT_GRID_SIZE, alias="gridSize"),
    engine: RiskEngine = Depends(get_engine),
    weather_service: OpenMeteoService = Depends(get_weather_service),
):
    """Fire risk over an evenly spaced lattice."""
    try:
        bbox = BoundingBox(min_lat=lat_min, min_lon=lon_min, max_lat=lat_max, max_lon=lon_max)
    except ValidationError as e:
        raise DataValidationError(
            "Invalid bounding box",
            field="bbox",
            details={"errors": [err["msg"] for err in e.errors()]},
            status_code=400,
        ) from e

    aggregator = GridRiskAggregator(
        engine.prediction_service,
        weather_service,
        delay_seconds=settings.GRID_REQUEST_DELAY_SECONDS,
    )
    result = await aggregator.aggregate(bbox, grid_size, today_day_of_year())
    return GridRiskResponse.from_result(result)


@router.get("/active-fires", response_model=List[FireDetection])
async def get_active_fires(
    firms_service: NASAFIRMSService = Depends(get_firms_service),
):
    """Current-day satellite detections inside the region."""
    return await firms_service.fetch_active()


@router.get("/test", response_model=CustomWeatherRiskResponse)
async def get_custom_weather_risk(
    latitude: float = Query(..., alias="lat"),
    longitude: float = Query(..., alias="lon"),
    temperature: float = Query(...),
    wind_speed: float = Query(..., alias="windSpeed"),
    humidity: float = Query(...),
    precipitation: float = Query(...),
    day_of_year: Optional[int] = Query(None, alias="dayOfYear", ge=1, le=366),
    engine: RiskEngine = Depends(get_engine),
):
    """Fire risk for caller-supplied weather (what-if scenarios)."""
    require_region(latitude, longitude)

    if day_of_year is None:
        day_of_year = today_day_of_year()
    day_of_year = min(day_of_year, MAX_DAY_OF_YEAR)

    weather = CurrentWeather(
        temperature_2m=temperature,
        relative_humidity_2m=humidity,
        wind_speed_10m=wind_speed,
        precipitation=precipitation,
    )
    sample, prediction = engine.prediction_service.assess(latitude, longitude, weather, day_of_year)

    return CustomWeatherRiskResponse(
        latitude=latitude,
        longitude=longitude,
        risk_level=prediction.tier.value,
        probability=prediction.probability,
        input_weather=InputWeather(
            temperature=temperature,
            wind_speed=wind_speed,
            humidity=humidity,
            precipitation=precipitation,
        ),
        enhanced_features=EnhancedFeatures.from_sample(sample),
        interpretation=prediction.tier.interpretation,
    )


@router.get("/health", response_model=RiskHealthResponse)
async def risk_health(request: Request):
    """Model readiness."""
    return RiskHealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        model_loaded=getattr(request.app.state, "engine", None) is not None,
        season=season(today_day_of_year()),
    )
