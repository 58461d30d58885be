"""
FireGuard Hotspot Density Index
Historical fire-detection frequency on a fixed 0.5 degree grid.
"""

import math
from collections import Counter
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from fireguard.models.fires import FireDetection
from fireguard.schemas.common import BoundingBox, CANADA_BBOX
from fireguard.utils.logger import get_logger

logger = get_logger(__name__)

CELLS_PER_DEGREE = 2  # 0.5 degree resolution

CellKey = Tuple[int, int]


def cell_key(latitude: float, longitude: float) -> CellKey:
    """Grid cell containing a point. Shared by ingestion and lookup."""
    return (
        math.floor(latitude * CELLS_PER_DEGREE),
        math.floor(longitude * CELLS_PER_DEGREE),
    )


class HotspotDensityIndex:
    """
    Read-only mapping of grid cell -> normalized detection density.

    Built once through ``from_detections`` (count, then divide by the maximum)
    and never mutated afterwards, so it can be shared across requests
    without locking.
    """

    __slots__ = ("_cells", "_detection_count")

    def __init__(self, cells: Mapping[CellKey, float], detection_count: int = 0):
        self._cells = MappingProxyType(dict(cells))
        self._detection_count = detection_count

    @classmethod
    def empty(cls) -> "HotspotDensityIndex":
        return cls({}, 0)

    @classmethod
    def from_detections(
        cls,
        detections: Iterable[FireDetection],
        bbox: BoundingBox = CANADA_BBOX,
    ) -> "HotspotDensityIndex":
        counts: Counter = Counter()
        used = 0
        for fire in detections:
            if not bbox.contains(fire.latitude, fire.longitude):
                continue
            counts[cell_key(fire.latitude, fire.longitude)] += 1
            used += 1

        if not counts:
            logger.warning("No detections inside bounding box; hotspot index is empty")
            return cls.empty()

        peak = max(counts.values())
        cells = {key: count / peak for key, count in counts.items()}

        logger.info(
            "Hotspot index built",
            detections=used,
            cells=len(cells),
            peak_count=peak,
        )
        return cls(cells, used)

    def lookup(self, latitude: float, longitude: float) -> float:
        """Normalized density of the cell containing the point, 0.0 if unseen."""
        return self._cells.get(cell_key(latitude, longitude), 0.0)

    def max_cell(self) -> Optional[CellKey]:
        if not self._cells:
            return None
        return max(self._cells, key=self._cells.get)

    @property
    def detection_count(self) -> int:
        return self._detection_count

    @property
    def cells(self) -> Mapping[CellKey, float]:
        return self._cells

    def __len__(self) -> int:
        return len(self._cells)
