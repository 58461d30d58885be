"""
Training set assembly.

Positive samples come from historical detections with weather drawn around
the detection's season; negative samples are random points in the region
with cooler, wetter weather. All randomness flows through the generator the
caller passes in, so a fixed seed reproduces the exact sample sequence.
"""

from typing import Iterable, List

import numpy as np

from fireguard.core import features
from fireguard.core.features import clamp
from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.models.fires import FireDetection
from fireguard.models.risk import RiskSample
from fireguard.schemas.common import BoundingBox, CANADA_BBOX
from fireguard.utils.logger import get_logger

logger = get_logger(__name__)

# Negatives read the hotspot index at half weight.
NEGATIVE_DENSITY_WEIGHT = 0.5

# Used when the corpus has no usable detections so training can still run.
FALLBACK_SAMPLES = (
    # High risk summer scenarios
    RiskSample(latitude=50.0, longitude=-100.0, temperature=35.0, wind_speed=25.0, humidity=15.0,
               precipitation=0.0, day_of_year=200, ndvi=0.7, drought_index=0.8,
               elevation=500.0, historical_fire_density=0.8, label=True),
    RiskSample(latitude=52.0, longitude=-110.0, temperature=32.0, wind_speed=20.0, humidity=20.0,
               precipitation=0.0, day_of_year=210, ndvi=0.65, drought_index=0.75,
               elevation=600.0, historical_fire_density=0.7, label=True),
    # Low risk winter scenarios
    RiskSample(latitude=50.0, longitude=-100.0, temperature=-15.0, wind_speed=10.0, humidity=70.0,
               precipitation=5.0, day_of_year=30, ndvi=0.3, drought_index=0.1,
               elevation=500.0, historical_fire_density=0.8, label=False),
    RiskSample(latitude=52.0, longitude=-110.0, temperature=-20.0, wind_speed=5.0, humidity=80.0,
               precipitation=8.0, day_of_year=350, ndvi=0.2, drought_index=0.05,
               elevation=600.0, historical_fire_density=0.7, label=False),
)


class TrainingSetBuilder:
    """Turns raw detections into a shuffled, labeled, balanced sample list."""

    def __init__(
        self,
        index: HotspotDensityIndex,
        rng: np.random.Generator,
        bbox: BoundingBox = CANADA_BBOX,
    ):
        self.index = index
        self.rng = rng
        self.bbox = bbox

    def build(self, detections: Iterable[FireDetection]) -> List[RiskSample]:
        usable = [
            fire for fire in detections
            if self.bbox.contains(fire.latitude, fire.longitude)
        ]

        if not usable:
            logger.warning("No usable detections, training on fallback samples",
                           samples=len(FALLBACK_SAMPLES))
            return list(FALLBACK_SAMPLES)

        positives = [self._positive(fire) for fire in usable]
        negatives = [self._negative() for _ in range(len(positives))]

        samples = positives + negatives
        order = self.rng.permutation(len(samples))
        shuffled = [samples[i] for i in order]

        logger.info(
            "Training set assembled",
            fire_samples=len(positives),
            no_fire_samples=len(negatives),
        )
        return shuffled

    def _positive(self, fire: FireDetection) -> RiskSample:
        uniform = self.rng.uniform
        day_of_year = fire.day_of_year

        base_temp = 15 + (day_of_year - 180) / 15.0
        temperature = clamp(base_temp + uniform(-10, 20), -20, 45)
        wind_speed = clamp(5 + uniform(0, 25), 0, 50)
        humidity = clamp(60 - (temperature - 15) * 2 + uniform(-20, 10), 10, 95)
        if 150 < day_of_year < 250:
            precipitation = uniform(0, 3)
        else:
            precipitation = uniform(0, 10)

        return features.synthesize(
            latitude=fire.latitude,
            longitude=fire.longitude,
            day_of_year=day_of_year,
            temperature=temperature,
            wind_speed=wind_speed,
            humidity=humidity,
            precipitation=precipitation,
            historical_fire_density=self.index.lookup(fire.latitude, fire.longitude),
            label=True,
        )

    def _negative(self) -> RiskSample:
        uniform = self.rng.uniform
        latitude = uniform(self.bbox.min_lat, self.bbox.max_lat)
        longitude = uniform(self.bbox.min_lon, self.bbox.max_lon)
        day_of_year = int(self.rng.integers(1, 366))

        base_temp = 5 + (day_of_year - 180) / 20.0
        temperature = clamp(base_temp + uniform(-15, 10), -30, 35)
        wind_speed = uniform(0, 20)
        humidity = clamp(60 + uniform(0, 30), 40, 100)
        precipitation = uniform(0, 15)

        density = self.index.lookup(latitude, longitude) * NEGATIVE_DENSITY_WEIGHT
        return features.synthesize(
            latitude=latitude,
            longitude=longitude,
            day_of_year=day_of_year,
            temperature=temperature,
            wind_speed=wind_speed,
            humidity=humidity,
            precipitation=precipitation,
            historical_fire_density=density,
            label=False,
        )
