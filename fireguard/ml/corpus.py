"""
Historical FIRMS corpus loader.

Reads an archive CSV downloaded from NASA FIRMS (VIIRS or MODIS layout)
into FireDetection records for hotspot indexing and training.
"""

from datetime import date
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from fireguard.models.fires import FireDetection
from fireguard.utils.exceptions import CorpusError
from fireguard.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("latitude", "longitude", "frp")
NUMERIC_COLUMNS = ("latitude", "longitude", "frp", "bright_ti4", "brightness",
                   "scan", "track", "bright_ti5", "bright_t31")


def load_corpus(
    path: Union[str, Path],
    reference_date: Optional[date] = None,
) -> List[FireDetection]:
    """
    Load detections from a FIRMS CSV.

    Args:
        path: CSV file location
        reference_date: Date used for rows whose acq_date cannot be parsed
            (defaults to today)

    Returns:
        List of FireDetection; empty when the file does not exist

    Raises:
        CorpusError: File exists but is unreadable or lacks required columns
    """
    csv_path = Path(path)
    reference_date = reference_date or date.today()

    if not csv_path.exists():
        logger.warning("Training corpus not found", path=str(csv_path))
        return []

    try:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise CorpusError(f"Failed to read corpus: {e}", path=str(csv_path)) from e

    df.columns = [c.strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CorpusError(
            f"Corpus missing required columns: {missing}",
            path=str(csv_path),
            details={"columns": list(df.columns)},
        )

    total = len(df)
    for column in NUMERIC_COLUMNS:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors="coerce")
    df = df.dropna(subset=list(REQUIRED_COLUMNS)).copy()

    if "acq_date" in df.columns:
        parsed_dates = pd.to_datetime(df["acq_date"], format="%Y-%m-%d", errors="coerce")
    else:
        parsed_dates = pd.Series(pd.NaT, index=df.index)
    defaulted = int(parsed_dates.isna().sum())
    df["acq_date"] = [
        ts.date() if not pd.isna(ts) else reference_date for ts in parsed_dates
    ]

    detections = [
        FireDetection.from_nasa_csv_row(row)
        for row in df.to_dict(orient="records")
    ]

    logger.info(
        "Loaded training corpus",
        path=str(csv_path),
        rows=total,
        detections=len(detections),
        dropped=total - len(detections),
        defaulted_dates=defaulted,
    )
    return detections
