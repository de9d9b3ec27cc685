"""
Kernel density estimation for the ridgeline plot.

For every grid point ``x`` the density is the mean, over all samples ``s``,
of the scaled Epanechnikov kernel evaluated at ``v = x - s``::

    k(v) = 0.75 * (1 - (v / h)^2) / h    if |v / h| <= 1
         = 0                              otherwise

with ``h`` the bandwidth.  The estimator is pure and order-independent.
NaN samples are dropped first; an empty sample yields a density of 0.0 at
every grid point.  A non-positive or non-finite bandwidth is rejected with
``ValueError``.
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..core.config import KDE_BANDWIDTH, KDE_GRID_TICKS, KDE_DOMAIN, NORMALIZED_METRICS
from ..core.utils import nice_ticks, finite_values
from ..models.data_models import DensityCurve

logger = logging.getLogger(__name__)


def _check_bandwidth(bandwidth) -> float:
    try:
        h = float(bandwidth)
    except (TypeError, ValueError):
        raise ValueError(f"Bandwidth must be a number, got {bandwidth!r}")
    if not math.isfinite(h) or h <= 0:
        raise ValueError(f"Bandwidth must be > 0, got {bandwidth!r}")
    return h


def epanechnikov_kernel(bandwidth: float) -> Callable[[float], float]:
    """Scalar scaled Epanechnikov kernel ``k(v)`` for bandwidth ``h``."""
    h = _check_bandwidth(bandwidth)

    def kernel(v: float) -> float:
        u = v / h
        return 0.75 * (1 - u * u) / h if abs(u) <= 1 else 0.0

    return kernel


def _kernel_matrix(grid: np.ndarray, samples: np.ndarray, h: float) -> np.ndarray:
    """Kernel weights, one row per grid point and one column per sample."""
    u = (grid[:, None] - samples[None, :]) / h
    return np.where(np.abs(u) <= 1, 0.75 * (1 - u * u) / h, 0.0)


def estimate(samples: Sequence[float], grid: Sequence[float],
             bandwidth: float) -> List[Tuple[float, float]]:
    """Density of ``samples`` at every point of ``grid``.

    Args:
        samples: Observed values; NaN / None entries are ignored.
        grid: Evaluation points, returned in the same order.
        bandwidth: Kernel half-width ``h`` (> 0).

    Returns:
        ``[(x, density), ...]`` with one pair per grid point.

    Raises:
        ValueError: if ``bandwidth`` is not a positive finite number.
    """
    h = _check_bandwidth(bandwidth)
    xs = np.asarray(list(grid), dtype=float)
    values = finite_values(samples)
    if values.size == 0:
        return [(float(x), 0.0) for x in xs]
    densities = _kernel_matrix(xs, values, h).mean(axis=1)
    return [(float(x), float(y)) for x, y in zip(xs, densities)]


def evaluation_grid(domain: Tuple[float, float] = KDE_DOMAIN,
                    ticks: int = KDE_GRID_TICKS) -> List[float]:
    """Nice ticks over ``domain``: 101 points at step 0.01 for the defaults."""
    return nice_ticks(domain[0], domain[1], ticks)


def density_curve(key: str, samples: Sequence[float], grid: Sequence[float],
                  bandwidth: float = KDE_BANDWIDTH) -> DensityCurve:
    """``estimate`` wrapped in a DensityCurve with the sample mean attached."""
    values = finite_values(samples)
    points = estimate(values, grid, bandwidth)
    mean = float(values.mean()) if values.size else float('nan')
    return DensityCurve(key=key, points=tuple(points), mean=mean, sample_size=int(values.size))


def ridgeline_densities(df: pd.DataFrame, columns: Optional[Sequence[str]] = None,
                        bandwidth: float = KDE_BANDWIDTH,
                        grid: Optional[Sequence[float]] = None) -> Dict[str, DensityCurve]:
    """One density curve per column of ``df`` (missing columns give empty curves)."""
    columns = list(columns or NORMALIZED_METRICS)
    grid = list(grid) if grid is not None else evaluation_grid()
    curves = {}
    for col in columns:
        samples = df[col] if col in df.columns else []
        curves[col] = density_curve(col, samples, grid, bandwidth)
    logger.debug(f"[Density] {len(curves)} curve(s) over {len(grid)} grid points, h={bandwidth}")
    return curves
