"""
Happiness Dashboard - Data Loading & Cleaning
=============================================

This module is the single entry point for all data ingestion.  It reads the
country CSV files once at startup, validates their structure, coerces every
metric to a float and bundles the result in an immutable ``Dataset``.

Data Flow
---------
1. CSV file  -->  pd.read_csv (header row required)
2. Normalise header spelling ('COUNTRY' / 'country' -> 'Country', 'Year' -> 'YEAR')
3. Validate that every REQUIRED column is present
4. Coerce YEAR to int (rows without a parseable year are dropped: they cannot
   be keyed) and every metric column to float (malformed cells -> NaN)
5. Parse POPULATION strings with '.' thousands separators
6. Tag each row with its SERIES ('Best' | 'Worst' | 'Ukraine')

Failure isolation
-----------------
``load_dataset`` loads each file independently.  A file that is missing or
unreadable is logged, recorded in ``Dataset.errors`` and replaced by an empty
frame so the charts fed by the other files keep working.

Aggregate tables
----------------
``average-*.csv`` carry one row per statistic.  The statistic label lives in
the first, unnamed column (``MEDIAN``, ``MIN``, ``MAX``) and the remaining
columns use the raw metric names.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from . import config
from .config import (
    COL_YEAR, COL_COUNTRY, COL_RANKING, COL_POPULATION, COL_SERIES,
    RAW_METRICS, NORMALIZED_METRICS, SERIES_BEST, SERIES_WORST, SERIES_UKRAINE,
    SERIES_ORDER, MISSING_LABEL,
)
from .utils import coerce_numeric, parse_population
from ..models.data_models import YearRange, Observation

logger = logging.getLogger(__name__)

# Minimum set of columns a country CSV must provide.
REQUIRED_COLS = [COL_YEAR, COL_COUNTRY]

# Header spellings seen in the source files, mapped to the canonical name.
HEADER_ALIASES = {
    'COUNTRY': COL_COUNTRY,
    'country': COL_COUNTRY,
    'Year': COL_YEAR,
    'year': COL_YEAR,
    'Ranking': COL_RANKING,
    'Population': COL_POPULATION,
}

NUMERIC_COLS = [COL_RANKING] + RAW_METRICS + NORMALIZED_METRICS

SERIES_FILES = {
    SERIES_BEST: config.BEST_FILE,
    SERIES_WORST: config.WORST_FILE,
    SERIES_UKRAINE: config.UKRAINE_FILE,
}

AVERAGE_FILES = {
    SERIES_BEST: config.AVERAGE_BEST_FILE,
    SERIES_WORST: config.AVERAGE_WORST_FILE,
    SERIES_UKRAINE: config.AVERAGE_UKRAINE_FILE,
}


class DataLoadError(ValueError):
    """A CSV could not be read or lacks a required column."""


def get_data_dir(override: Optional[Union[str, Path]] = None) -> Path:
    """Return the directory holding the CSV inputs."""
    if override:
        return Path(override)
    return Path(config.DATA_DIR)


def _normalise_headers(df: pd.DataFrame) -> pd.DataFrame:
    renamed = {}
    for col in df.columns:
        stripped = str(col).strip()
        renamed[col] = HEADER_ALIASES.get(stripped, stripped)
    return df.rename(columns=renamed)


def empty_series_frame() -> pd.DataFrame:
    """An empty frame with the canonical columns, used as a load fallback."""
    columns = [COL_YEAR, COL_COUNTRY, COL_SERIES, COL_RANKING, COL_POPULATION] + RAW_METRICS + NORMALIZED_METRICS
    df = pd.DataFrame({col: pd.Series(dtype=float) for col in columns})
    df[COL_YEAR] = df[COL_YEAR].astype(int)
    df[COL_COUNTRY] = df[COL_COUNTRY].astype(object)
    df[COL_SERIES] = df[COL_SERIES].astype(object)
    return df


def clean_series_frame(df: pd.DataFrame, series: str) -> pd.DataFrame:
    """Validate and coerce one raw country frame.

    Args:
        df: Frame as read from CSV.
        series: Series label stored in the SERIES column.

    Returns:
        A new frame sorted by YEAR with numeric metrics.

    Raises:
        DataLoadError: if a required column is missing.
    """
    df = _normalise_headers(df)

    missing = [c for c in REQUIRED_COLS if c not in df.columns]
    if missing:
        raise DataLoadError(f"Missing required columns: {missing}")

    df = df.copy()
    df[COL_YEAR] = coerce_numeric(df[COL_YEAR])
    dropped = int(df[COL_YEAR].isna().sum())
    if dropped:
        logger.warning(f"[Loader] {series}: dropped {dropped} row(s) without a valid {COL_YEAR}")
    df = df[df[COL_YEAR].notna()].copy()
    df[COL_YEAR] = df[COL_YEAR].round().astype(int)

    df[COL_COUNTRY] = (
        df[COL_COUNTRY].where(df[COL_COUNTRY].notna(), MISSING_LABEL)
        .astype(str).str.strip()
        .replace({'': MISSING_LABEL})
    )

    for col in NUMERIC_COLS:
        if col in df.columns:
            df[col] = coerce_numeric(df[col])

    if COL_POPULATION in df.columns:
        df[COL_POPULATION] = df[COL_POPULATION].apply(parse_population).astype(float)

    df[COL_SERIES] = series
    return df.sort_values(COL_YEAR, kind='stable').reset_index(drop=True)


def load_series_csv(path: Union[str, Path], series: str) -> pd.DataFrame:
    """Read and clean one country CSV.

    Raises:
        DataLoadError: if the file cannot be read or fails validation.
    """
    path = Path(path)
    try:
        raw = pd.read_csv(path)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Cannot read {path.name}: {e}")
    try:
        df = clean_series_frame(raw, series)
    except DataLoadError as e:
        raise DataLoadError(f"{path.name}: {e}")
    logger.info(f"[Loader] {series}: {len(df)} rows from {path.name}")
    return df


def load_average_csv(path: Union[str, Path]) -> pd.DataFrame:
    """Read an aggregate table, indexed by upper-cased statistic label.

    Raises:
        DataLoadError: if the file cannot be read.
    """
    path = Path(path)
    try:
        raw = pd.read_csv(path)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Cannot read {path.name}: {e}")
    if raw.columns.empty:
        raise DataLoadError(f"{path.name}: no columns")

    raw = _normalise_headers(raw)
    label_col = raw.columns[0]
    labels = raw[label_col].fillna('').astype(str).str.strip().str.upper()
    df = raw.drop(columns=[label_col])
    for col in df.columns:
        df[col] = coerce_numeric(df[col])
    df.index = labels
    df.index.name = 'STAT'
    return df


def filter_by_range(df: pd.DataFrame, year_range: YearRange) -> pd.DataFrame:
    """Rows with YEAR inside the inclusive range, as a new frame."""
    if df.empty:
        return df.copy()
    mask = (df[COL_YEAR] >= year_range.min) & (df[COL_YEAR] <= year_range.max)
    return df.loc[mask].copy()


# ============================================================================
# DATASET
# ============================================================================

@dataclass(frozen=True)
class Dataset:
    """Read-only bundle of every loaded table.

    Accessors always return copies so no chart can mutate shared data.

    Attributes:
        frames: Series label -> cleaned country frame.
        averages: Series label -> aggregate table (MEDIAN / MIN / MAX rows).
        errors: File name -> load error message for files that failed.
    """
    frames: Dict[str, pd.DataFrame] = field(default_factory=dict)
    averages: Dict[str, pd.DataFrame] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def series(self, name: str) -> pd.DataFrame:
        frame = self.frames.get(name)
        if frame is None:
            return empty_series_frame()
        return frame.copy()

    def average(self, name: str) -> pd.DataFrame:
        frame = self.averages.get(name)
        if frame is None:
            return pd.DataFrame()
        return frame.copy()

    def combined(self, series: Optional[List[str]] = None) -> pd.DataFrame:
        """All requested series stacked in SERIES_ORDER."""
        names = series or SERIES_ORDER
        frames = [self.frames[n] for n in names if n in self.frames and not self.frames[n].empty]
        if not frames:
            return empty_series_frame()
        return pd.concat(frames, ignore_index=True)

    def filter(self, year_range: YearRange, series: Optional[List[str]] = None) -> pd.DataFrame:
        return filter_by_range(self.combined(series), year_range)

    def years(self) -> List[int]:
        combined = self.combined()
        return sorted(int(y) for y in combined[COL_YEAR].unique())

    def year_bounds(self) -> Optional[YearRange]:
        """Span of the loaded years, None when nothing loaded."""
        years = self.years()
        if not years:
            return None
        return YearRange(years[0], years[-1])

    def observations(self, series: Optional[List[str]] = None) -> List[Observation]:
        combined = self.combined(series)
        return [Observation.from_row(row) for _, row in combined.iterrows()]

    @property
    def is_empty(self) -> bool:
        return all(f.empty for f in self.frames.values())


def load_dataset(data_dir: Optional[Union[str, Path]] = None) -> Dataset:
    """Load every country and aggregate CSV found in ``data_dir``.

    Files are loaded independently: a failure is logged and recorded in
    ``Dataset.errors`` and the affected series falls back to an empty frame.
    """
    base = get_data_dir(data_dir)
    frames: Dict[str, pd.DataFrame] = {}
    averages: Dict[str, pd.DataFrame] = {}
    errors: Dict[str, str] = {}

    for series, filename in SERIES_FILES.items():
        try:
            frames[series] = load_series_csv(base / filename, series)
        except DataLoadError as e:
            logger.error(f"[Loader] {e}")
            errors[filename] = str(e)
            frames[series] = empty_series_frame()

    for series, filename in AVERAGE_FILES.items():
        try:
            averages[series] = load_average_csv(base / filename)
        except DataLoadError as e:
            logger.error(f"[Loader] {e}")
            errors[filename] = str(e)

    if errors:
        logger.warning(f"[Loader] {len(errors)} file(s) failed to load from {base}")
    return Dataset(frames=frames, averages=averages, errors=errors)


def dataset_from_frames(frames: Dict[str, pd.DataFrame],
                        averages: Optional[Dict[str, pd.DataFrame]] = None) -> Dataset:
    """Build a Dataset from in-memory raw frames (same cleaning as the CSV path)."""
    cleaned = {name: clean_series_frame(df, name) for name, df in frames.items()}
    return Dataset(frames=cleaned, averages=dict(averages or {}))
