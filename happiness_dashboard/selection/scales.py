"""
Coordinate scales shared by the charts and the brush handler.

The bubble chart maps metric values to marker sizes with a ``LinearScale``.
A brush gesture given in pixels is mapped back to years with
``LinearScale.invert`` before it reaches the ``SelectionBroadcaster``;
Plotly box selections already arrive in years.
"""

import logging
from typing import Tuple

logger = logging.getLogger(__name__)


class LinearScale:
    """Affine map from a continuous domain to a continuous range.

    Args:
        domain: ``(d0, d1)`` data extent.
        range_: ``(r0, r1)`` output extent (pixels).
        clamp: When True, outputs are clamped to the range and inverted
            values to the domain.
    """

    def __init__(self, domain: Tuple[float, float] = (0.0, 1.0),
                 range_: Tuple[float, float] = (0.0, 1.0), clamp: bool = False):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))
        self.clamp = clamp

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            # Degenerate domain: everything maps to the middle of the range.
            return (r0 + r1) / 2.0
        t = (float(value) - d0) / (d1 - d0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return (d0 + d1) / 2.0
        t = (float(pixel) - r0) / (r1 - r0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return d0 + t * (d1 - d0)

    def __repr__(self):
        return f"LinearScale(domain={self.domain}, range={self.range})"
