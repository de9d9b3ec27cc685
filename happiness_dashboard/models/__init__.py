"""
Data models for the happiness dashboard.
"""

from .data_models import YearRange, Observation, DensityCurve, round_year

__all__ = [
    'YearRange',
    'Observation',
    'DensityCurve',
    'round_year',
]
