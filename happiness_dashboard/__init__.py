"""
Happiness Dashboard - synchronized charts over the World Happiness index.

This package provides:
- CSV loading and cleaning for Ukraine and the best/worst ranked countries
- A selection broadcaster that keeps every chart on one clamped year range
- Epanechnikov kernel density estimation for the ridgeline plot
- Range-filtered Plotly charts and the Streamlit dashboard hosting them
"""

__version__ = "1.0.0"
__author__ = "Happiness Dashboard Team"

# Core imports
from .core.config import *
from .core.data_loader import Dataset, DataLoadError, load_dataset, filter_by_range

# Models
from .models import YearRange, Observation, DensityCurve, round_year

# Selection
from .selection import (
    SelectionBroadcaster,
    Playback,
    PlaybackState,
    clamp_range,
    LinearScale,
)

# Analysis
from .analysis import (
    estimate,
    ridgeline_densities,
    median_summary,
    normalized_medians,
    population_estimates,
    describe_range,
)

# Visualization
from .visualization import ChartState, RangeChart, build_charts, attach_all

__all__ = [
    # Core
    'Dataset',
    'DataLoadError',
    'load_dataset',
    'filter_by_range',

    # Models
    'YearRange',
    'Observation',
    'DensityCurve',
    'round_year',

    # Selection
    'SelectionBroadcaster',
    'Playback',
    'PlaybackState',
    'clamp_range',
    'LinearScale',

    # Analysis
    'estimate',
    'ridgeline_densities',
    'median_summary',
    'normalized_medians',
    'population_estimates',
    'describe_range',

    # Visualization
    'ChartState',
    'RangeChart',
    'build_charts',
    'attach_all',
]
