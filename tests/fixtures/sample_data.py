"""
Sample data fixtures for testing

This module provides small happiness tables shaped like the real CSV inputs:
best and worst ranked countries for 2015-2024 and Ukraine for 2017-2024 (so a
2015-2016 selection has no Ukraine rows), plus the MEDIAN / MIN / MAX tables.
"""

import tempfile
from pathlib import Path

import pandas as pd

from happiness_dashboard.core.config import (
    RAW_METRICS, NORMALIZED_SUFFIX, BEST_FILE, WORST_FILE, UKRAINE_FILE,
    AVERAGE_BEST_FILE, AVERAGE_WORST_FILE, AVERAGE_UKRAINE_FILE,
    SERIES_BEST, SERIES_WORST, SERIES_UKRAINE,
)
from happiness_dashboard.core.data_loader import dataset_from_frames

YEARS = list(range(2015, 2025))
UKRAINE_YEARS = list(range(2017, 2025))

# Column order of RAW_METRICS: happiness, GDP, social support, healthy life,
# freedom, generosity, corruption.
UKRAINE_ROWS = [
    # year, ranking, metrics..., population
    (2017, 132, [4.096, 0.894, 1.394, 0.575, 0.122, 0.270, 0.023], '44.831.135'),
    (2018, 138, [4.103, 0.793, 1.413, 0.609, 0.163, 0.187, 0.011], '44.622.516'),
    (2019, 133, [4.332, 0.820, 1.390, 0.739, 0.178, 0.187, 0.010], '44.386.203'),
    (2020, 123, [4.561, 0.873, 1.418, 0.616, 0.251, 'n/a', 0.027], '44.132.049'),
    (2021, 110, [4.875, 0.910, 1.440, 0.640, 0.300, 0.200, 0.030], '43.822.901'),
    (2022, 98, [5.084, 0.940, 1.460, 0.660, 0.350, 0.210, 0.040], '41.048.766'),
    (2023, 92, [5.071, 1.020, 1.480, 0.680, 0.400, 0.220, 0.050], '37.732.836'),
    (2024, 105, [4.873, 1.050, 1.500, 0.700, 0.420, 0.230, 0.060], '37.860.221'),
]

BEST_ROWS = [
    (2015, 'Switzerland', 7.587), (2016, 'Denmark', 7.526), (2017, 'Norway', 7.537),
    (2018, 'Finland', 7.632), (2019, 'Finland', 7.769), (2020, 'Finland', 7.809),
    (2021, 'Finland', 7.842), (2022, 'Finland', 7.821), (2023, 'Finland', 7.804),
    (2024, 'Finland', 7.741),
]

WORST_ROWS = [
    (2015, 'Togo', 2.839), (2016, 'Burundi', 2.905), (2017, 'Central African Republic', 2.693),
    (2018, 'Burundi', 2.905), (2019, 'South Sudan', 2.853), (2020, 'Afghanistan', 2.567),
    (2021, 'Afghanistan', 2.523), (2022, 'Afghanistan', 2.404), (2023, 'Afghanistan', 1.859),
    (2024, 'Afghanistan', 1.721),
]


def _with_normalized(df: pd.DataFrame) -> pd.DataFrame:
    """Add min-max normalized columns computed over the whole frame."""
    for col in RAW_METRICS:
        values = pd.to_numeric(df[col], errors='coerce')
        lo, hi = values.min(), values.max()
        df[col + NORMALIZED_SUFFIX] = (values - lo) / (hi - lo)
    return df


def create_ukraine_frame():
    """Raw Ukraine rows as read from CSV (population strings, one 'n/a')."""
    records = []
    for year, ranking, metrics, population in UKRAINE_ROWS:
        record = {'YEAR': year, 'Country': 'Ukraine', 'RANKING': ranking, 'POPULATION': population}
        record.update(dict(zip(RAW_METRICS, metrics)))
        records.append(record)
    return _with_normalized(pd.DataFrame(records))


def _ranked_frame(rows, country_header='Country'):
    records = []
    for rank_offset, (year, country, score) in enumerate(rows):
        record = {'YEAR': year, country_header: country, 'RANKING': 1 + rank_offset % 3}
        # Secondary metrics derived from the score keep the bubble chart populated.
        record.update({
            'HAPPINESS SCORE': score,
            'GDP PER CAPITA (Billions)': round(score / 5.0, 3),
            'SOCIAL SUPPORT': round(score / 6.0, 3),
            'HEALTHY LIFE EXPECTANCY': round(score / 8.0, 3),
            'FREEDOM TO MAKE LIFE CHOICES': round(score / 12.0, 3),
            'GENEROSITY': round(score / 30.0, 3),
            'PERCEPTION OF CORRUPTION': round(score / 20.0, 3),
        })
        records.append(record)
    return pd.DataFrame(records)


def create_best_frame():
    return _ranked_frame(BEST_ROWS)


def create_worst_frame():
    """Worst rows use the upper-case 'COUNTRY' header seen in the source file."""
    return _ranked_frame(WORST_ROWS, country_header='COUNTRY')


def create_series_frames():
    return {
        SERIES_BEST: create_best_frame(),
        SERIES_WORST: create_worst_frame(),
        SERIES_UKRAINE: create_ukraine_frame(),
    }


def _stats_table(frame):
    numeric = frame[RAW_METRICS].apply(pd.to_numeric, errors='coerce')
    table = pd.DataFrame({
        'MEDIAN': numeric.median(),
        'MIN': numeric.min(),
        'MAX': numeric.max(),
    }).T
    table.index.name = 'STAT'
    return table


def create_average_frames():
    """Aggregate tables indexed by MEDIAN / MIN / MAX."""
    return {
        SERIES_BEST: _stats_table(create_best_frame()),
        SERIES_WORST: _stats_table(create_worst_frame()),
        SERIES_UKRAINE: _stats_table(create_ukraine_frame()),
    }


def create_sample_dataset(with_averages=True):
    averages = create_average_frames() if with_averages else None
    return dataset_from_frames(create_series_frames(), averages)


def write_sample_csvs(directory):
    """Write all six input files into ``directory``; returns it as a Path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    create_best_frame().to_csv(directory / BEST_FILE, index=False)
    create_worst_frame().to_csv(directory / WORST_FILE, index=False)
    create_ukraine_frame().to_csv(directory / UKRAINE_FILE, index=False)

    averages = create_average_frames()
    for series, filename in ((SERIES_BEST, AVERAGE_BEST_FILE),
                             (SERIES_WORST, AVERAGE_WORST_FILE),
                             (SERIES_UKRAINE, AVERAGE_UKRAINE_FILE)):
        # Statistic labels go in a leading unnamed column.
        averages[series].to_csv(directory / filename, index=True, index_label='')
    return directory


def create_temp_data_dir():
    """Fresh temp directory holding the sample CSVs (caller removes it)."""
    return write_sample_csvs(tempfile.mkdtemp())
