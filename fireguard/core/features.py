"""
FireGuard Feature Synthesis
Deterministic stand-ins for vegetation, drought, terrain and season signals.

Every function here is pure: the same inputs always give the same output,
so training samples and live requests see identical feature definitions.
"""

import math
from datetime import date
from typing import Tuple

from fireguard.models.risk import RiskSample

NDVI_BOUNDS = (0.1, 0.9)
DROUGHT_BOUNDS = (0.0, 1.0)

# Dec 31 of a leap year folds onto 365.
MAX_DAY_OF_YEAR = 365

# (name, (lon_min, lon_max), (lat_min, lat_max), meters); bounds are exclusive,
# evaluated top to bottom. None leaves that axis unconstrained.
ELEVATION_REGIONS: Tuple[tuple, ...] = (
    ("rocky_mountains", (-120.0, -110.0), (49.0, 55.0), 1500.0),
    ("prairies", (-110.0, -95.0), (49.0, 55.0), 600.0),
    ("canadian_shield", (-95.0, -75.0), (45.0, 55.0), 300.0),
    ("bc_mountains", (None, -120.0), None, 800.0),
)
DEFAULT_ELEVATION = 200.0

# (first day, first day of the next season, name)
SEASONS: Tuple[tuple, ...] = (
    (80, 172, "Spring"),
    (172, 266, "Summer"),
    (266, 355, "Fall"),
)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def ndvi(latitude: float, longitude: float, day_of_year: int) -> float:
    """
    Approximate NDVI (vegetation density / fuel load).

    Peaks in summer, thins out northwards, and is boosted on both coasts.
    """
    seasonal = 0.6 + 0.2 * math.sin((day_of_year - 100) * math.pi / 180)
    latitude_factor = 1.0 - (latitude - 41.0) / 50.0 * 0.3
    coastal = 1.1 if longitude < -120 or longitude > -70 else 1.0
    return clamp(seasonal * latitude_factor * coastal, *NDVI_BOUNDS)


def drought_index(day_of_year: int, precipitation: float, temperature: float) -> float:
    """Simplified drought severity in [0, 1]; higher means drier."""
    seasonal = 0.7 if 120 < day_of_year < 270 else 0.3

    if precipitation < 2:
        precip_effect = 0.8
    elif precipitation < 5:
        precip_effect = 0.5
    else:
        precip_effect = 0.2

    if temperature > 25:
        temp_effect = 0.8
    elif temperature > 15:
        temp_effect = 0.5
    else:
        temp_effect = 0.2

    return clamp((seasonal + precip_effect + temp_effect) / 3.0, *DROUGHT_BOUNDS)


def _within(value: float, bounds) -> bool:
    if bounds is None:
        return True
    lower, upper = bounds
    if lower is not None and not value > lower:
        return False
    if upper is not None and not value < upper:
        return False
    return True


def elevation(latitude: float, longitude: float) -> float:
    """Coarse elevation band in meters from fixed regional bounding boxes."""
    for _name, lon_bounds, lat_bounds, meters in ELEVATION_REGIONS:
        if _within(longitude, lon_bounds) and _within(latitude, lat_bounds):
            return meters
    return DEFAULT_ELEVATION


def calendar_day(on: date) -> int:
    return min(on.timetuple().tm_yday, MAX_DAY_OF_YEAR)


def season(day_of_year: int) -> str:
    for start, end, name in SEASONS:
        if start <= day_of_year < end:
            return name
    return "Winter"


def synthesize(
    latitude: float,
    longitude: float,
    day_of_year: int,
    temperature: float,
    wind_speed: float,
    humidity: float,
    precipitation: float,
    historical_fire_density: float,
    label=None,
) -> RiskSample:
    """Complete a weather observation into a full RiskSample."""
    day_of_year = min(int(day_of_year), MAX_DAY_OF_YEAR)
    return RiskSample(
        latitude=latitude,
        longitude=longitude,
        temperature=temperature,
        wind_speed=wind_speed,
        humidity=humidity,
        precipitation=precipitation,
        day_of_year=day_of_year,
        ndvi=ndvi(latitude, longitude, day_of_year),
        drought_index=drought_index(day_of_year, precipitation, temperature),
        elevation=elevation(latitude, longitude),
        historical_fire_density=historical_fire_density,
        label=label,
    )
