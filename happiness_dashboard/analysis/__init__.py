"""
Numerical analysis: density estimation and aggregate summaries.
"""

from .density import (
    estimate,
    epanechnikov_kernel,
    evaluation_grid,
    density_curve,
    ridgeline_densities,
)
from .summary import (
    median_summary,
    normalized_medians,
    normalize_value,
    population_estimates,
    population_text,
    describe_range,
    format_score,
)

__all__ = [
    'estimate',
    'epanechnikov_kernel',
    'evaluation_grid',
    'density_curve',
    'ridgeline_densities',
    'median_summary',
    'normalized_medians',
    'normalize_value',
    'population_estimates',
    'population_text',
    'describe_range',
    'format_score',
]
