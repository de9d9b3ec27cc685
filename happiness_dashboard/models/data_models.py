"""
Data models for the happiness dashboard.

This module defines the **schema layer** shared by the loader, the selection
broadcaster, the density estimator and the charts.

Role in the dashboard
---------------------
The charts operate on ``pandas.DataFrame`` views for speed and convenience,
but the values that cross component boundaries are typed:

1. **YearRange** -- the canonical inclusive ``(min, max)`` year selection
   published by the ``SelectionBroadcaster``.  It is frozen so every
   subscriber observes the same immutable value for one change.

2. **Observation** -- one row of the dataset (country x year) with explicit
   numeric coercion.  Missing or malformed metric values are ``NaN``, never
   strings.

3. **DensityCurve** -- the ordered ``(x, density)`` samples of one metric,
   produced by ``analysis.density`` and consumed by the ridgeline chart.

Normalisation conventions
-------------------------
- Years are integers.  Floats are rounded half away from zero the way the
  slider rounds handle positions.
- Metric values are floats; ``NaN`` marks a gap.
- The country of a missing cross-referenced row is ``"N/A"``.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any

import numpy as np
import pandas as pd

from ..core.config import (
    COL_YEAR, COL_COUNTRY, COL_RANKING, COL_POPULATION, COL_SERIES,
    RAW_METRICS, NORMALIZED_METRICS, MISSING_LABEL,
)


def round_year(value) -> int:
    """Round a year-like value to an int, half away from zero.

    Raises:
        ValueError: if the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a year: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Not a year: {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"Not a year: {value!r}")
    return int(math.floor(abs(number) + 0.5) * (1 if number >= 0 else -1))


# ============================================================================
# YEAR RANGE
# ============================================================================

@dataclass(frozen=True)
class YearRange:
    """Inclusive year selection shared by every chart.

    Attributes:
        min: First selected year.
        max: Last selected year (``min <= max``).
    """
    min: int
    max: int

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"YearRange min {self.min} > max {self.max}")

    def __contains__(self, year) -> bool:
        return self.min <= year <= self.max

    @property
    def span(self) -> int:
        """Number of years covered."""
        return self.max - self.min + 1

    def years(self) -> List[int]:
        return list(range(self.min, self.max + 1))

    def as_tuple(self) -> Tuple[int, int]:
        return (self.min, self.max)

    def to_dict(self) -> Dict[str, int]:
        return {'min': self.min, 'max': self.max}

    def label(self) -> str:
        """Dropdown-style label: '2019' or '2015-2024'."""
        if self.min == self.max:
            return str(self.min)
        return f"{self.min}-{self.max}"


# ============================================================================
# OBSERVATION
# ============================================================================

@dataclass
class Observation:
    """One (country, year) record of the happiness dataset.

    ``metrics`` holds both raw and normalized columns keyed by their CSV
    column name; absent columns are simply not present, malformed values are
    ``NaN``.
    """
    country: str
    year: int
    series: str
    metrics: Dict[str, float] = field(default_factory=dict)
    ranking: float = float('nan')
    population: float = float('nan')

    def value(self, column: str) -> float:
        """Metric value, ``NaN`` when the column is missing."""
        return self.metrics.get(column, float('nan'))

    @classmethod
    def from_row(cls, row: pd.Series, series: Optional[str] = None) -> 'Observation':
        """Build an Observation from one row of a loaded frame."""
        country = row.get(COL_COUNTRY)
        if country is None or (isinstance(country, float) and math.isnan(country)):
            country = MISSING_LABEL
        metrics = {}
        for col in RAW_METRICS + NORMALIZED_METRICS:
            if col in row.index:
                metrics[col] = _as_float(row[col])
        return cls(
            country=str(country),
            year=int(row[COL_YEAR]),
            series=series or str(row.get(COL_SERIES, '')),
            metrics=metrics,
            ranking=_as_float(row.get(COL_RANKING, np.nan)),
            population=_as_float(row.get(COL_POPULATION, np.nan)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            COL_COUNTRY: self.country,
            COL_YEAR: self.year,
            COL_SERIES: self.series,
            COL_RANKING: self.ranking,
            COL_POPULATION: self.population,
        }
        data.update(self.metrics)
        return data


def _as_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float('nan')


# ============================================================================
# DENSITY CURVE
# ============================================================================

@dataclass(frozen=True)
class DensityCurve:
    """Smoothed density of one metric over a fixed evaluation grid.

    Attributes:
        key: Column the samples were taken from.
        points: Ordered ``(x, density)`` pairs, one per grid point.
        mean: Mean of the finite samples (``NaN`` for an empty sample).
        sample_size: Number of finite samples that contributed.
    """
    key: str
    points: Tuple[Tuple[float, float], ...]
    mean: float = float('nan')
    sample_size: int = 0

    @property
    def xs(self) -> List[float]:
        return [p[0] for p in self.points]

    @property
    def ys(self) -> List[float]:
        return [p[1] for p in self.points]

    def peak(self) -> Tuple[float, float]:
        """Grid point with the highest density (first one on ties)."""
        if not self.points:
            return (float('nan'), 0.0)
        return max(self.points, key=lambda p: p[1])
