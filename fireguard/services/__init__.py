"""
External API services for data retrieval.

Services:
- BaseService: Abstract base with retry logic, rate limiting, caching
- NASAFIRMSService: Active fire detection data (VIIRS/MODIS)
- OpenMeteoService: Current weather conditions

Usage:
    from fireguard.services import OpenMeteoService

    async with OpenMeteoService() as weather:
        current = await weather.fetch_current(56.7267, -111.3790)
"""

from fireguard.services.base import BaseService
from fireguard.services.nasa_firms import NASAFIRMSService
from fireguard.services.open_meteo import OpenMeteoService

__all__ = ["BaseService", "NASAFIRMSService", "OpenMeteoService"]
