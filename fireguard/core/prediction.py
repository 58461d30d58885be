"""
FireGuard Prediction Service
Single-point inference and risk tiering.
"""

from typing import Tuple

from fireguard.core import features
from fireguard.core.hotspots import HotspotDensityIndex
from fireguard.ml.classifier import RiskClassifier
from fireguard.models.risk import RiskPrediction, RiskSample, RiskTier
from fireguard.schemas.risk import CurrentWeather

# Ordered (exclusive lower bound, tier); first match wins, else LOW.
TIER_THRESHOLDS: Tuple[Tuple[float, RiskTier], ...] = (
    (0.7, RiskTier.HIGH),
    (0.4, RiskTier.MEDIUM),
)


def classify(probability: float) -> RiskTier:
    """Map a probability to its tier. Boundary values fall into the lower tier."""
    for threshold, tier in TIER_THRESHOLDS:
        if probability > threshold:
            return tier
    return RiskTier.LOW


class PredictionService:
    """Combines the shared classifier and hotspot index to score a point."""

    def __init__(self, classifier: RiskClassifier, index: HotspotDensityIndex):
        self.classifier = classifier
        self.index = index

    def build_sample(
        self,
        latitude: float,
        longitude: float,
        weather: CurrentWeather,
        day_of_year: int,
    ) -> RiskSample:
        return features.synthesize(
            latitude=latitude,
            longitude=longitude,
            day_of_year=day_of_year,
            temperature=weather.temperature_2m,
            wind_speed=weather.wind_speed_10m,
            humidity=weather.relative_humidity_2m,
            precipitation=weather.precipitation,
            historical_fire_density=self.index.lookup(latitude, longitude),
        )

    def predict(self, sample: RiskSample) -> RiskPrediction:
        probability = self.classifier.predict(sample)
        return RiskPrediction(probability=probability, tier=classify(probability))

    def assess(
        self,
        latitude: float,
        longitude: float,
        weather: CurrentWeather,
        day_of_year: int,
    ) -> Tuple[RiskSample, RiskPrediction]:
        sample = self.build_sample(latitude, longitude, weather, day_of_year)
        return sample, self.predict(sample)
