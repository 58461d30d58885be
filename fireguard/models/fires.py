"""NASA FIRMS Fire Detection Record"""

import math
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class FireDetection(BaseModel):
    """Single VIIRS/MODIS fire detection. Immutable once parsed."""

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    bright_ti4: float = Field(0.0, description="Brightness temperature I-4 (Kelvin)")
    scan: float = Field(0.0, description="Along-scan pixel size (km)")
    track: float = Field(0.0, description="Along-track pixel size (km)")
    acq_date: date = Field(..., description="Acquisition date (UTC)")
    acq_time: str = Field("", description="Acquisition time (HHMM)")
    satellite: str = Field("", description="Satellite identifier")
    instrument: str = Field("", description="Instrument name")
    confidence: str = Field("", description="Confidence level")
    version: str = Field("", description="Collection version")
    bright_ti5: float = Field(0.0, description="Brightness temperature I-5 (Kelvin)")
    frp: float = Field(0.0, description="Fire Radiative Power (MW)")
    daynight: str = Field("", description="'D' (day) or 'N' (night)")

    model_config = ConfigDict(frozen=True)

    @property
    def day_of_year(self) -> int:
        """Day of year clamped to [1, 365] (Dec 31 of leap years folds onto 365)."""
        return min(self.acq_date.timetuple().tm_yday, 365)

    @classmethod
    def from_nasa_csv_row(cls, row: Dict[str, Any], default_date: Optional[date] = None) -> "FireDetection":
        """
        Create FireDetection from a NASA FIRMS CSV row.

        Accepts both VIIRS (bright_ti4/bright_ti5) and MODIS (brightness/bright_t31)
        column names. Unparseable dates fall back to ``default_date``.

        Raises:
            KeyError: latitude/longitude columns missing
            ValueError: coordinates not numeric, or no usable date
        """
        def _float(key: str, *fallbacks: str) -> float:
            for name in (key, *fallbacks):
                value = row.get(name)
                if value not in (None, ""):
                    try:
                        number = float(value)
                    except (TypeError, ValueError):
                        return 0.0
                    return 0.0 if math.isnan(number) else number
            return 0.0

        acq_date = _parse_date(row.get("acq_date"))
        if acq_date is None:
            if default_date is None:
                raise ValueError(f"Invalid acq_date: {row.get('acq_date')!r}")
            acq_date = default_date

        return cls(
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            bright_ti4=_float("bright_ti4", "brightness"),
            scan=_float("scan"),
            track=_float("track"),
            acq_date=acq_date,
            acq_time=str(row.get("acq_time") or "").strip(),
            satellite=str(row.get("satellite") or "").strip(),
            instrument=str(row.get("instrument") or "").strip(),
            confidence=str(row.get("confidence") or "").strip(),
            version=str(row.get("version") or "").strip(),
            bright_ti5=_float("bright_ti5", "bright_t31"),
            frp=_float("frp"),
            daynight=str(row.get("daynight") or "").strip(),
        )


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None
