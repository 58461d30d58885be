"""
FireGuard - Risk Schemas
fireguard/schemas/risk.py

Pydantic schemas for the weather collaborator and the /risk responses.
Response fields serialize in camelCase to match the web client.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fireguard.core.features import season
from fireguard.models.risk import GridRiskResult, RiskPrediction, RiskSample


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


# ============================================================================
# WEATHER
# ============================================================================

class CurrentWeather(BaseModel):
    """Current conditions as returned by Open-Meteo's `current` block."""
    temperature_2m: float = Field(..., description="Air temperature at 2 m (°C)")
    relative_humidity_2m: float = Field(..., description="Relative humidity at 2 m (%)")
    wind_speed_10m: float = Field(..., description="Wind speed at 10 m (km/h)")
    precipitation: float = Field(..., description="Precipitation (mm)")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "temperature_2m": 24.3,
                "relative_humidity_2m": 31.0,
                "wind_speed_10m": 14.2,
                "precipitation": 0.0,
            }
        },
    )


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class EnhancedFeatures(CamelModel):
    day_of_year: int
    ndvi: float
    drought_index: float
    elevation: float
    historical_fire_density: float
    season: str

    @classmethod
    def from_sample(cls, sample: RiskSample) -> "EnhancedFeatures":
        return cls(
            day_of_year=sample.day_of_year,
            ndvi=sample.ndvi,
            drought_index=sample.drought_index,
            elevation=sample.elevation,
            historical_fire_density=sample.historical_fire_density,
            season=season(sample.day_of_year),
        )


class LocationRiskResponse(CamelModel):
    """GET /risk/location"""
    latitude: float
    longitude: float
    risk_level: str
    probability: float
    weather: CurrentWeather
    enhanced_features: EnhancedFeatures

    @classmethod
    def build(
        cls,
        latitude: float,
        longitude: float,
        weather: CurrentWeather,
        sample: RiskSample,
        prediction: RiskPrediction,
    ) -> "LocationRiskResponse":
        return cls(
            latitude=latitude,
            longitude=longitude,
            risk_level=prediction.tier.value,
            probability=prediction.probability,
            weather=weather,
            enhanced_features=EnhancedFeatures.from_sample(sample),
        )


class GridPointResponse(CamelModel):
    latitude: float
    longitude: float
    probability: float
    risk_level: str


class GridRiskResponse(CamelModel):
    """GET /risk/grid"""
    grid_size: int
    point_count: int
    season: str
    day_of_year: int
    points: List[GridPointResponse]

    @classmethod
    def from_result(cls, result: GridRiskResult) -> "GridRiskResponse":
        return cls(
            grid_size=result.grid_size,
            point_count=result.point_count,
            season=result.season,
            day_of_year=result.day_of_year,
            points=[
                GridPointResponse(
                    latitude=p.latitude,
                    longitude=p.longitude,
                    probability=p.prediction.probability,
                    risk_level=p.prediction.tier.value,
                )
                for p in result.points
            ],
        )


class InputWeather(CamelModel):
    temperature: float
    wind_speed: float
    humidity: float
    precipitation: float


class CustomWeatherRiskResponse(CamelModel):
    """GET /risk/test"""
    latitude: float
    longitude: float
    risk_level: str
    probability: float
    input_weather: InputWeather
    enhanced_features: EnhancedFeatures
    interpretation: str


class RiskHealthResponse(CamelModel):
    """GET /risk/health"""
    status: str
    timestamp: datetime
    model_loaded: bool
    season: str
