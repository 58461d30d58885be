"""
Open-Meteo service for current weather conditions.

API Documentation: https://open-meteo.com/en/docs
"""

from pydantic import ValidationError

from fireguard.config import settings
from fireguard.schemas.risk import CurrentWeather
from fireguard.services.base import BaseService
from fireguard.utils.logger import get_logger
from fireguard.utils.exceptions import DataValidationError, FireGuardError, OpenMeteoAPIError

logger = get_logger(__name__)


class OpenMeteoService(BaseService):
    """
    Open-Meteo forecast API client.

    Provides the four surface variables the risk model consumes:
    temperature, relative humidity, wind speed and precipitation.

    Features:
    - Free API (no key required)
    - Responses cached briefly so repeated grid cells do not refetch
    """

    CURRENT_VARIABLES = [
        "temperature_2m",
        "relative_humidity_2m",
        "wind_speed_10m",
        "precipitation",
    ]

    def __init__(
        self,
        base_url: str = None,
        cache_ttl_seconds: int = None,
        cache_max_entries: int = None,
    ):
        super().__init__(
            base_url=base_url or settings.OPEN_METEO_BASE_URL,
            timeout=15,
            max_retries=2,
            rate_limit_per_second=20.0,
            cache_ttl_seconds=settings.WEATHER_CACHE_TTL if cache_ttl_seconds is None else cache_ttl_seconds,
            cache_max_entries=(
                settings.WEATHER_CACHE_MAX_ENTRIES if cache_max_entries is None else cache_max_entries
            ),
        )

    def _validate_coordinates(self, latitude: float, longitude: float):
        """Validate latitude and longitude."""
        if not (-90 <= latitude <= 90):
            raise DataValidationError(
                f"Latitude must be between -90 and 90 (got {latitude})",
                field="latitude",
            )

        if not (-180 <= longitude <= 180):
            raise DataValidationError(
                f"Longitude must be between -180 and 180 (got {longitude})",
                field="longitude",
            )

    async def fetch_current(self, latitude: float, longitude: float) -> CurrentWeather:
        """
        Get current weather for a location.

        Args:
            latitude: Location latitude (-90 to 90)
            longitude: Location longitude (-180 to 180)

        Returns:
            CurrentWeather with temperature_2m, relative_humidity_2m,
            wind_speed_10m and precipitation

        Raises:
            DataValidationError: Invalid coordinates
            OpenMeteoAPIError: Network failure, error status or malformed payload
        """
        self._validate_coordinates(latitude, longitude)

        params = {
            "latitude": round(latitude, 4),
            "longitude": round(longitude, 4),
            "current": ",".join(self.CURRENT_VARIABLES),
        }

        try:
            payload = await self.get("forecast", params=params)
        except OpenMeteoAPIError:
            raise
        except FireGuardError as e:
            raise OpenMeteoAPIError(
                f"Failed to fetch weather: {e.message}",
                details={"location": f"{latitude},{longitude}", **e.details},
            ) from e

        if not isinstance(payload, dict) or not isinstance(payload.get("current"), dict):
            raise OpenMeteoAPIError(
                "No current weather returned from Open-Meteo",
                details={"location": f"{latitude},{longitude}"},
            )

        try:
            weather = CurrentWeather.model_validate(payload["current"])
        except ValidationError as e:
            raise OpenMeteoAPIError(
                f"Malformed weather payload: {e.error_count()} invalid field(s)",
                details={"location": f"{latitude},{longitude}"},
            ) from e

        logger.debug(
            "Retrieved current weather",
            location=f"{latitude},{longitude}",
            temperature=weather.temperature_2m,
            humidity=weather.relative_humidity_2m,
        )
        return weather
