"""
Traffic Stop Loader
===================

Turns a raw export of traffic-stop records into labeled examples.

Cleaning pipeline (applied in this order):

    load_stops          → read the CSV, keep only the recognised columns
    parse_stop_datetime → month, day and hour from the date/time columns
    collapse_outcome    → Citation = 1, Warning = 0, everything else dropped
    extract_speeds      → travelling speed and posted limit from the description
    filter_speeds       → drop implausible differentials and non-positive limits

Only speeding stops carry two numbers in their description, so the speed
extraction step also restricts the table to those stops.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from config import (
    STOP_COLUMNS, STOP_DATE_FORMAT, STOP_TIME_FORMAT,
    FEATURE_NAMES, LABEL_NAME, CITATION, WARNING,
    MAX_SPEED_DIFFERENTIAL, MIN_POSTED_LIMIT,
)
from data.example import Example

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")

OUTCOME_LABELS = {
    "citation": CITATION,
    "warning": WARNING,
}


class StopDataError(ValueError):
    """Raised when a stop table is missing columns or empty after cleaning."""


# =============================================================================
# LOADING
# =============================================================================

def load_stops(csv_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a stop export and keep the columns the pipeline understands.

    Args:
        csv_path: Path to the raw CSV export

    Returns:
        DataFrame with columns date, time, description, violation_type

    Raises:
        FileNotFoundError: If the file does not exist
        StopDataError: If a recognised column is missing
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Stop data not found: {csv_path}")

    raw = pd.read_csv(csv_path, low_memory=False, dtype=str)
    logger.info(f"Loaded {len(raw):,} stop records from {csv_path}")

    return select_stop_columns(raw)


def select_stop_columns(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename recognised source columns and drop the rest."""
    missing = [src for src in STOP_COLUMNS.values() if src not in raw.columns]
    if missing:
        raise StopDataError(f"Stop data is missing columns: {missing}")

    rename_map = {src: name for name, src in STOP_COLUMNS.items()}
    return raw[list(rename_map)].rename(columns=rename_map)


# =============================================================================
# CLEANING STEPS
# =============================================================================

def parse_stop_datetime(stops: pd.DataFrame) -> pd.DataFrame:
    """Derive month, day and hour; rows with unparseable values are dropped."""
    out = stops.copy()
    dates = pd.to_datetime(out["date"], format=STOP_DATE_FORMAT, errors="coerce")
    times = pd.to_datetime(out["time"], format=STOP_TIME_FORMAT, errors="coerce")

    out["month"] = dates.dt.month
    out["day"] = dates.dt.day
    out["hour"] = times.dt.hour

    valid = out[["month", "day", "hour"]].notna().all(axis=1)
    _log_dropped("unparseable date or time", valid)
    return out[valid]


def collapse_outcome(stops: pd.DataFrame) -> pd.DataFrame:
    """Map the violation type onto the binary label, dropping other outcomes."""
    out = stops.copy()
    normalised = out["violation_type"].astype(str).str.strip().str.lower()
    out[LABEL_NAME] = normalised.map(OUTCOME_LABELS)

    valid = out[LABEL_NAME].notna()
    _log_dropped("outcome other than citation/warning", valid)
    out = out[valid].copy()
    out[LABEL_NAME] = out[LABEL_NAME].astype(int)
    return out


def extract_speed_pair(description: Optional[str]) -> Tuple[float, float]:
    """
    Pull the travelling speed and posted limit out of a description.

    Exactly two distinct numeric tokens must be present; the larger one is
    the travelling speed and the smaller one the posted limit.

    Returns:
        (speed, limit), or (nan, nan) if the description does not qualify
    """
    if not isinstance(description, str):
        return np.nan, np.nan

    values = {float(tok) for tok in NUMBER_PATTERN.findall(description)}
    if len(values) != 2:
        return np.nan, np.nan

    limit, speed = sorted(values)
    return speed, limit


def extract_speeds(stops: pd.DataFrame) -> pd.DataFrame:
    """Add speed, posted_limit and speed_differential columns."""
    out = stops.copy()
    pairs = [extract_speed_pair(text) for text in out["description"]]
    out["speed"] = [p[0] for p in pairs]
    out["posted_limit"] = [p[1] for p in pairs]
    out["speed_differential"] = out["speed"] - out["posted_limit"]

    valid = out["speed_differential"].notna()
    _log_dropped("description without two distinct numbers", valid)
    return out[valid]


def filter_speeds(stops: pd.DataFrame) -> pd.DataFrame:
    """Drop rows with implausible differentials or non-positive limits."""
    valid = (
        (stops["speed_differential"] < MAX_SPEED_DIFFERENTIAL)
        & (stops["posted_limit"] > MIN_POSTED_LIMIT)
    )
    _log_dropped("implausible speed values", valid)
    return stops[valid]


def clean_stops(stops: pd.DataFrame) -> pd.DataFrame:
    """
    Run the full cleaning pipeline.

    Returns:
        DataFrame with the feature columns and the label column only

    Raises:
        StopDataError: If no rows survive cleaning
    """
    cleaned = stops
    for step in (parse_stop_datetime, collapse_outcome, extract_speeds, filter_speeds):
        cleaned = step(cleaned)

    if cleaned.empty:
        raise StopDataError("No stop records left after cleaning")

    cleaned = cleaned[list(FEATURE_NAMES) + [LABEL_NAME]].astype(
        {name: float for name in FEATURE_NAMES}
    )
    logger.info(f"Cleaned stop table: {len(cleaned):,} rows "
                f"({int(cleaned[LABEL_NAME].sum()):,} citations)")
    return cleaned.reset_index(drop=True)


# =============================================================================
# EXAMPLES
# =============================================================================

def build_examples(cleaned: pd.DataFrame) -> List[Example]:
    """Convert a cleaned stop table into immutable examples."""
    features = cleaned[list(FEATURE_NAMES)].to_numpy(dtype=float)
    labels = cleaned[LABEL_NAME].to_numpy(dtype=int)
    return [Example(features=tuple(row), label=int(label))
            for row, label in zip(features, labels)]


def load_examples(csv_path: Union[str, Path]) -> List[Example]:
    """Load, clean and convert a stop export in one call."""
    return build_examples(clean_stops(load_stops(csv_path)))


def _log_dropped(reason: str, keep_mask: pd.Series) -> None:
    n_dropped = int((~keep_mask).sum())
    if n_dropped:
        logger.warning(f"Dropped {n_dropped:,} rows: {reason}")
