"""
Aggregate summaries: median comparison, population estimates, range digest.

The average tables carry one row per statistic (MEDIAN / MIN / MAX).  The
median comparison charts normalise each series' median with that series' own
MIN and MAX rows so the three series share a 0-1 axis.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..core.config import (
    METRICS, HAPPINESS, SERIES_BEST, SERIES_WORST, SERIES_UKRAINE, SERIES_ORDER,
    COL_YEAR, COL_POPULATION, MISSING_LABEL,
)
from ..core.data_loader import Dataset, filter_by_range
from ..models.data_models import YearRange
from .density import ridgeline_densities

logger = logging.getLogger(__name__)

SERIES_TITLES = {
    SERIES_BEST: 'Best Country',
    SERIES_WORST: 'Worst Country',
    SERIES_UKRAINE: 'Ukraine',
}


def format_score(value, digits: int = 2) -> str:
    """'6.12' for a finite number, 'N/A' otherwise."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return MISSING_LABEL
    if not math.isfinite(number):
        return MISSING_LABEL
    return f"{number:.{digits}f}"


def stat_value(table: pd.DataFrame, stat: str, column: str) -> float:
    """Value of ``column`` in the ``stat`` row, NaN when either is absent."""
    if table is None or table.empty or stat not in table.index or column not in table.columns:
        return float('nan')
    value = table.loc[stat, column]
    if isinstance(value, pd.Series):
        value = value.iloc[0]
    try:
        return float(value)
    except (TypeError, ValueError):
        return float('nan')


def normalize_value(value, lo, hi) -> float:
    """Min-max normalise; missing inputs default to value 0, min 0, max 1."""
    val = 0.0 if _missing(value) else float(value)
    lo = 0.0 if _missing(lo) else float(lo)
    hi = 1.0 if _missing(hi) or float(hi) == 0 else float(hi)
    if hi == lo:
        return 0.0
    return (val - lo) / (hi - lo)


def _missing(value) -> bool:
    try:
        return value is None or math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def median_summary(dataset: Dataset, column: str = HAPPINESS) -> List[Dict]:
    """Median of ``column`` for each series: ``[{'series', 'title', 'value', 'text'}]``."""
    items = []
    for series in SERIES_ORDER:
        value = stat_value(dataset.average(series), 'MEDIAN', column)
        items.append({
            'series': series,
            'title': SERIES_TITLES[series],
            'value': value,
            'text': f"Happiness Score: {format_score(value)}",
        })
    return items


def normalized_medians(dataset: Dataset) -> pd.DataFrame:
    """Per metric: raw and normalised median of each series.

    Columns: ``param`` (short label), ``metric`` (raw column), then
    ``best``/``worst``/``ukraine`` and their ``*_norm`` counterparts.
    """
    rows = []
    for metric in METRICS:
        row = {'param': metric['label'], 'metric': metric['raw']}
        for series in SERIES_ORDER:
            table = dataset.average(series)
            median = stat_value(table, 'MEDIAN', metric['raw'])
            key = series.lower()
            row[key] = 0.0 if _missing(median) else median
            row[f'{key}_norm'] = normalize_value(
                median,
                stat_value(table, 'MIN', metric['raw']),
                stat_value(table, 'MAX', metric['raw']),
            )
        rows.append(row)
    return pd.DataFrame(rows)


def population_estimates(ukraine: pd.DataFrame, years: Sequence[int]) -> Dict[str, Optional[float]]:
    """Average number of citizens 'perceiving' each normalised metric.

    For every selected year with a known population, ``norm * population``
    is computed per metric and averaged across years.

    Returns:
        Metric label -> estimate, or None when no year contributes.
    """
    selected = set(int(y) for y in years)
    records = ukraine[ukraine[COL_YEAR].isin(selected)] if not ukraine.empty else ukraine
    if COL_POPULATION in records.columns:
        records = records[records[COL_POPULATION].notna()]
    else:
        records = records.iloc[0:0]

    estimates = {}
    for metric in METRICS:
        if records.empty or metric['norm'] not in records.columns:
            estimates[metric['label']] = None
            continue
        products = (records[metric['norm']] * records[COL_POPULATION]).dropna()
        estimates[metric['label']] = float(products.mean()) if not products.empty else None
    return estimates


def population_text(label: str, estimate: Optional[float]) -> str:
    if estimate is None:
        return "No data."
    return f"approximately {estimate:,.0f} Ukrainian citizens perceived {label}"


def describe_range(dataset: Dataset, year_range: YearRange) -> Dict:
    """Digest of one selection, used by the CLI summary mode.

    Returns:
        dict with ``range``, per-series ``rows`` and ``mean_happiness``, the
        ridgeline ``peaks`` (metric label -> (x, density)), ``medians`` and
        ``ukraine``, the Ukraine Observations of the selected years.
    """
    rows, means = {}, {}
    for series in SERIES_ORDER:
        frame = filter_by_range(dataset.series(series), year_range)
        rows[series] = int(len(frame))
        values = frame[HAPPINESS].dropna() if HAPPINESS in frame.columns else pd.Series(dtype=float)
        means[series] = float(values.mean()) if not values.empty else float('nan')

    ukraine = filter_by_range(dataset.series(SERIES_UKRAINE), year_range)
    curves = ridgeline_densities(ukraine)
    peaks = {}
    for metric in METRICS:
        curve = curves[metric['norm']]
        peaks[metric['label']] = curve.peak() if curve.sample_size else None

    return {
        'range': year_range,
        'rows': rows,
        'mean_happiness': means,
        'peaks': peaks,
        'medians': median_summary(dataset),
        'ukraine': [obs for obs in dataset.observations([SERIES_UKRAINE]) if obs.year in year_range],
    }
