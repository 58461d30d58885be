"""
NASA FIRMS (Fire Information for Resource Management System) service.
Fetches active fire data from VIIRS and MODIS satellites.
"""

from typing import List, Optional
import csv
from io import StringIO

from fireguard.config import settings
from fireguard.models.fires import FireDetection
from fireguard.schemas.common import BoundingBox, CANADA_BBOX
from fireguard.services.base import BaseService
from fireguard.utils.logger import get_logger
from fireguard.utils.exceptions import FireGuardError, NASAFIRMSAPIError

logger = get_logger(__name__)


class NASAFIRMSService(BaseService):
    """NASA FIRMS API client for active fire detection data."""

    VALID_SATELLITES = ["VIIRS_SNPP_NRT", "VIIRS_NOAA20_NRT", "VIIRS_NOAA21_NRT", "MODIS_NRT"]
    MAX_DAYS = 10

    def __init__(
        self,
        api_key: Optional[str] = None,
        satellite: Optional[str] = None,
        bbox: BoundingBox = CANADA_BBOX,
        base_url: Optional[str] = None,
    ):
        super().__init__(
            base_url=base_url or settings.NASA_FIRMS_BASE_URL,
            timeout=30,
            max_retries=3,
            rate_limit_per_second=1.0,
            cache_ttl_seconds=900,
        )
        self.api_key = api_key
        self.satellite = satellite or settings.NASA_FIRMS_SATELLITE
        self.bbox = bbox

        if self.satellite not in self.VALID_SATELLITES:
            raise ValueError(
                f"Invalid satellite. Choose from: {', '.join(self.VALID_SATELLITES)}"
            )

    def parse_csv(self, csv_text: str) -> List[FireDetection]:
        """
        Parse NASA FIRMS CSV response into FireDetection objects,
        keeping only detections inside the service bounding box.

        CSV columns (VIIRS):
        - latitude, longitude: Fire location
        - bright_ti4, bright_ti5: Brightness temperatures (Kelvin)
        - scan, track: Pixel size (km)
        - acq_date, acq_time: Acquisition date and time (YYYY-MM-DD, HHMM)
        - satellite, instrument, confidence, version
        - frp: Fire Radiative Power (MW)
        - daynight: Day (D) or Night (N)
        """
        fires = []
        skipped = 0
        reader = csv.DictReader(StringIO(csv_text))

        for row in reader:
            try:
                fire = FireDetection.from_nasa_csv_row(row)
            except (KeyError, ValueError) as e:
                skipped += 1
                logger.debug(f"Failed to parse fire detection row: {str(e)}", row=row)
                continue

            if self.bbox.contains(fire.latitude, fire.longitude):
                fires.append(fire)

        if skipped:
            logger.warning("Skipped unparseable FIRMS rows", skipped=skipped)
        return fires

    async def _fetch_csv(self, days: int) -> str:
        if days < 1 or days > self.MAX_DAYS:
            raise ValueError(f"Days must be between 1 and {self.MAX_DAYS}")

        endpoint = f"{self.api_key}/{self.satellite}/{self.bbox.to_string()}/{days}"
        data = await self.get(endpoint)
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        if not isinstance(data, str):
            raise NASAFIRMSAPIError("Unexpected response type from NASA FIRMS")
        return data

    async def fetch_active(self, days: int = 1) -> List[FireDetection]:
        """
        Retrieve current fire detections inside the bounding box.

        Returns an empty list when no API key is configured or the upstream
        call fails; failures are logged.
        """
        if not self.api_key:
            logger.warning("NASA FIRMS API key not configured")
            return []

        logger.info(
            "Fetching active fires from NASA FIRMS",
            bbox=self.bbox.to_string(),
            days=days,
            satellite=self.satellite,
        )

        try:
            csv_data = await self._fetch_csv(days)

            if not csv_data.strip():
                logger.info("No fires detected in region")
                return []

            if not csv_data.lstrip().startswith("latitude"):
                raise NASAFIRMSAPIError(
                    f"Unexpected response format: {csv_data[:100]}",
                )

            fires = self.parse_csv(csv_data)

        except FireGuardError as e:
            logger.error("Error fetching active fires from NASA FIRMS", error=str(e))
            return []

        logger.info(
            f"Retrieved {len(fires)} active fires",
            count=len(fires),
            satellite=self.satellite,
        )
        return fires
