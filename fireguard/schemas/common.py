"""
FireGuard - Common Pydantic Schemas
fireguard/schemas/common.py

Shared schemas used across the risk endpoints and the core components.
"""

from __future__ import annotations  # Enable forward references
from pydantic import BaseModel, Field, field_validator, ConfigDict

# ============================================================================
# GEOGRAPHIC SCHEMAS
# ============================================================================

class BoundingBox(BaseModel):
    """Geographic bounding box for spatial queries."""
    min_lat: float = Field(..., ge=-90, le=90, description="Minimum latitude (South)")
    min_lon: float = Field(..., ge=-180, le=180, description="Minimum longitude (West)")
    max_lat: float = Field(..., ge=-90, le=90, description="Maximum latitude (North)")
    max_lon: float = Field(..., ge=-180, le=180, description="Maximum longitude (East)")

    @field_validator('max_lat')
    @classmethod
    def lat_max_greater_than_min(cls, v, info):
        if 'min_lat' in info.data and v <= info.data['min_lat']:
            raise ValueError('max_lat must be greater than min_lat')
        return v

    @field_validator('max_lon')
    @classmethod
    def lon_max_greater_than_min(cls, v, info):
        if 'min_lon' in info.data and v <= info.data['min_lon']:
            raise ValueError('max_lon must be greater than min_lon')
        return v

    def contains(self, latitude: float, longitude: float) -> bool:
        """Inclusive point-in-box test."""
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lon <= longitude <= self.max_lon
        )

    def to_string(self) -> str:
        """Convert to NASA FIRMS format: west,south,east,north (lon,lat,lon,lat)"""
        return f"{self.min_lon},{self.min_lat},{self.max_lon},{self.max_lat}"

    def to_dict(self) -> dict:
        return self.model_dump()

    model_config = ConfigDict(frozen=True, json_schema_extra={"example": {"min_lat": 41.0, "min_lon": -141.0, "max_lat": 83.0, "max_lon": -52.0}})


# Region accepted for predictions and used to filter detections.
CANADA_BBOX = BoundingBox(min_lat=41.0, min_lon=-141.0, max_lat=83.0, max_lon=-52.0)

# Area sampled by the grid endpoint when the caller gives no bounds.
DEFAULT_GRID_BBOX = BoundingBox(min_lat=42.0, min_lon=-140.0, max_lat=70.0, max_lon=-53.0)
