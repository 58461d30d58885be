"""
FireGuard Configuration Settings
Centralized settings management using Pydantic with environment variable support.
"""
from typing import Optional, List
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the repository root before the settings are read
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Settings(BaseSettings):
    """FireGuard Application Settings"""

    # Application
    APP_NAME: str = "FireGuard Risk API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    LOG_DIR: Optional[str] = Field(default=None, description="Log file directory (default: <repo>/logs)")

    # API
    API_PREFIX: str = "/api"
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # External APIs
    NASA_FIRMS_API_KEY: Optional[str] = Field(
        default=None,
        description="NASA FIRMS MAP_KEY for active fire data"
    )
    NASA_FIRMS_BASE_URL: str = Field(
        default="https://firms.modaps.eosdis.nasa.gov/api/area/csv",
        description="NASA FIRMS area API base URL"
    )
    NASA_FIRMS_SATELLITE: str = Field(
        default="VIIRS_SNPP_NRT",
        description="FIRMS source used for active fires"
    )

    OPEN_METEO_BASE_URL: str = Field(
        default="https://api.open-meteo.com/v1",
        description="Open-Meteo forecast API"
    )
    WEATHER_CACHE_TTL: int = Field(
        default=600,
        description="Seconds a current-weather response is reused"
    )
    WEATHER_CACHE_MAX_ENTRIES: int = Field(
        default=2048,
        description="Upper bound on cached weather responses"
    )

    # Model lifecycle
    CORPUS_PATH: str = Field(
        default="Data/firms.csv",
        description="Historical FIRMS detections used for training"
    )
    MODEL_PATH: str = Field(
        default="Data/fire_risk_model.joblib",
        description="Persisted classifier artifact"
    )
    RANDOM_SEED: int = Field(
        default=42,
        description="Seed for negative sampling, shuffling and the train/test split"
    )
    FORCE_RETRAIN: bool = Field(
        default=False,
        description="Ignore an existing artifact and retrain at startup"
    )
    HOTSPOT_INDEX_ON_LOAD: bool = Field(
        default=False,
        description="Build the hotspot index from the corpus even when the classifier is loaded"
    )

    # Grid aggregation
    GRID_REQUEST_DELAY_SECONDS: float = Field(
        default=0.05,
        description="Pause between consecutive weather calls during grid aggregation"
    )

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            if v.startswith('['):
                import json
                return json.loads(v)
            return [origin.strip() for origin in v.split(",")]
        return v

    @validator("GRID_REQUEST_DELAY_SECONDS")
    def validate_delay(cls, v):
        """Pacing delay cannot be negative."""
        if v < 0:
            raise ValueError("GRID_REQUEST_DELAY_SECONDS must be >= 0")
        return v

    @validator("ENVIRONMENT")
    def validate_environment(cls, v):
        if v not in ("development", "production"):
            raise ValueError("ENVIRONMENT must be 'development' or 'production'")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
