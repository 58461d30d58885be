"""
Grid risk aggregation.

Samples an evenly spaced lattice over a bounding box, fetches live weather
for every point and scores it. Weather calls are sequential and paced so a
single grid request never bursts the upstream API.
"""

import asyncio
from datetime import date
from typing import Optional, Protocol

from fireguard.core.features import MAX_DAY_OF_YEAR, calendar_day, season
from fireguard.core.prediction import PredictionService
from fireguard.models.risk import GridPoint, GridRiskResult
from fireguard.schemas.common import BoundingBox, DEFAULT_GRID_BBOX
from fireguard.schemas.risk import CurrentWeather
from fireguard.utils.logger import get_logger
from fireguard.utils.exceptions import InvalidGridSizeError

logger = get_logger(__name__)

MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 50
DEFAULT_GRID_SIZE = 20


class WeatherSource(Protocol):
    async def fetch_current(self, latitude: float, longitude: float) -> CurrentWeather:
        ...


class GridRiskAggregator:
    """Risk over a (grid_size + 1) x (grid_size + 1) lattice."""

    def __init__(
        self,
        prediction_service: PredictionService,
        weather_service: WeatherSource,
        delay_seconds: float = 0.05,
    ):
        self.prediction_service = prediction_service
        self.weather_service = weather_service
        self.delay_seconds = delay_seconds

    async def aggregate(
        self,
        bbox: BoundingBox = DEFAULT_GRID_BBOX,
        grid_size: int = DEFAULT_GRID_SIZE,
        day_of_year: Optional[int] = None,
    ) -> GridRiskResult:
        """
        Score every lattice point inside ``bbox``.

        Both bbox edges are included. Points whose weather fetch fails are
        logged and left out of the result.

        Raises:
            InvalidGridSizeError: grid_size outside [5, 50]
        """
        if not MIN_GRID_SIZE <= grid_size <= MAX_GRID_SIZE:
            raise InvalidGridSizeError(grid_size, MIN_GRID_SIZE, MAX_GRID_SIZE)

        if day_of_year is None:
            day_of_year = calendar_day(date.today())
        day_of_year = min(day_of_year, MAX_DAY_OF_YEAR)

        lat_step = (bbox.max_lat - bbox.min_lat) / grid_size
        lon_step = (bbox.max_lon - bbox.min_lon) / grid_size

        result = GridRiskResult(
            grid_size=grid_size,
            season=season(day_of_year),
            day_of_year=day_of_year,
        )

        logger.info(
            "Starting grid aggregation",
            grid_size=grid_size,
            points=(grid_size + 1) ** 2,
            bbox=bbox.to_string(),
        )

        for i in range(grid_size + 1):
            latitude = bbox.min_lat + i * lat_step
            for j in range(grid_size + 1):
                longitude = bbox.min_lon + j * lon_step
                point = await self._score_point(latitude, longitude, day_of_year)
                if point is None:
                    result.failed_points += 1
                else:
                    result.points.append(point)

        logger.info(
            "Grid aggregation complete",
            points=result.point_count,
            failed=result.failed_points,
        )
        return result

    async def _score_point(
        self,
        latitude: float,
        longitude: float,
        day_of_year: int,
    ) -> Optional[GridPoint]:
        try:
            weather = await self.weather_service.fetch_current(latitude, longitude)
        except Exception as e:
            logger.warning(
                "Grid point skipped",
                latitude=round(latitude, 4),
                longitude=round(longitude, 4),
                error=str(e),
            )
            return None
        finally:
            if self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

        _, prediction = self.prediction_service.assess(latitude, longitude, weather, day_of_year)
        return GridPoint(latitude=latitude, longitude=longitude, prediction=prediction)
