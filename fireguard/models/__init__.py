"""Domain value types."""

from fireguard.models.fires import FireDetection
from fireguard.models.risk import (
    FEATURE_NAMES,
    GridPoint,
    GridRiskResult,
    RiskPrediction,
    RiskSample,
    RiskTier,
)

__all__ = [
    "FireDetection",
    "FEATURE_NAMES",
    "GridPoint",
    "GridRiskResult",
    "RiskPrediction",
    "RiskSample",
    "RiskTier",
]
