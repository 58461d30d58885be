"""Risk model value types shared by the core components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

# Column order of the classifier's feature vector. Persisted with the artifact.
FEATURE_NAMES = (
    "latitude",
    "longitude",
    "temperature",
    "wind_speed",
    "humidity",
    "precipitation",
    "day_of_year",
    "ndvi",
    "drought_index",
    "elevation",
    "historical_fire_density",
)


@dataclass(frozen=True)
class RiskSample:
    """One feature row: live or synthetic weather plus the synthesized features."""

    latitude: float
    longitude: float
    temperature: float
    wind_speed: float
    humidity: float
    precipitation: float
    day_of_year: int
    ndvi: float
    drought_index: float
    elevation: float
    historical_fire_density: float
    label: Optional[bool] = None

    def to_vector(self) -> List[float]:
        return [float(getattr(self, name)) for name in FEATURE_NAMES]


class RiskTier(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def interpretation(self) -> str:
        return _INTERPRETATIONS[self]


_INTERPRETATIONS = {
    RiskTier.HIGH: "HIGH RISK: Dangerous fire conditions. Immediate attention needed.",
    RiskTier.MEDIUM: "MEDIUM RISK: Elevated fire danger. Monitor closely.",
    RiskTier.LOW: "LOW RISK: Conditions not favorable for fires.",
}


@dataclass(frozen=True)
class RiskPrediction:
    probability: float
    tier: RiskTier


@dataclass(frozen=True)
class GridPoint:
    latitude: float
    longitude: float
    prediction: RiskPrediction


@dataclass
class GridRiskResult:
    """Outcome of one grid aggregation; ``points`` may be short when cells failed."""

    grid_size: int
    season: str
    day_of_year: int
    points: List[GridPoint] = field(default_factory=list)
    failed_points: int = 0

    @property
    def point_count(self) -> int:
        return len(self.points)
