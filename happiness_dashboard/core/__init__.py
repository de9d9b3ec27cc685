"""
Core module for the happiness dashboard.

Contains configuration, data loading and base utilities.
"""

from happiness_dashboard.core.config import *
from happiness_dashboard.core.utils import (
    to_title_case,
    split_label,
    coerce_numeric,
    parse_population,
    nice_ticks,
    finite_values,
)
from happiness_dashboard.core.data_loader import (
    Dataset,
    DataLoadError,
    load_dataset,
    load_series_csv,
    load_average_csv,
    filter_by_range,
    dataset_from_frames,
    get_data_dir,
)

__all__ = [
    # Utils
    'to_title_case',
    'split_label',
    'coerce_numeric',
    'parse_population',
    'nice_ticks',
    'finite_values',
    # Data loading
    'Dataset',
    'DataLoadError',
    'load_dataset',
    'load_series_csv',
    'load_average_csv',
    'filter_by_range',
    'dataset_from_frames',
    'get_data_dir',
]
