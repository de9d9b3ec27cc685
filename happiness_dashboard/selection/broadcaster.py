"""
Selection Broadcaster -- one authoritative YearRange for every chart.

Architecture
------------
Every input control (the dual-handle range slider, a brush gesture on the
area or line chart, the year-bucket dropdown, the reset and play buttons)
converges on ``SelectionBroadcaster.set_range``.  The broadcaster clamps the
candidate to the dataset's hard bounds, stores it and publishes the resulting
``YearRange`` once to every subscriber.  Charts never talk to each other;
they only subscribe.

Clamping policy
---------------
    1. ``min`` and ``max`` are rounded to whole years.
    2. Each is clamped independently to ``[bounds.min, bounds.max]``.
    3. If ``min > max`` after clamping, the two are swapped.

Failure semantics
-----------------
Malformed input (None, non-numeric, NaN, missing keys) is rejected locally:
the previous range is kept and nothing is published.  A subscriber that
raises is logged and skipped; the remaining subscribers are still notified.
"""

import logging
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from ..core.config import DATASET_MIN_YEAR, DATASET_MAX_YEAR, DEFAULT_RANGE
from ..models.data_models import YearRange, round_year
from .scales import LinearScale

logger = logging.getLogger(__name__)

Subscriber = Callable[[YearRange], None]
RangeLike = Union[YearRange, Mapping, Sequence]


def _candidate_bounds(candidate: RangeLike) -> Tuple[object, object]:
    """Extract raw (min, max) from a YearRange, mapping or 2-sequence."""
    if isinstance(candidate, YearRange):
        return candidate.min, candidate.max
    if isinstance(candidate, Mapping):
        return candidate['min'], candidate['max']
    if isinstance(candidate, (str, bytes)):
        raise ValueError(f"Not a year range: {candidate!r}")
    lo, hi = candidate
    return lo, hi


def clamp_range(candidate: RangeLike, bounds: YearRange) -> YearRange:
    """Apply the clamping policy to ``candidate``.

    Raises:
        ValueError / KeyError / TypeError: for malformed input.
    """
    raw_min, raw_max = _candidate_bounds(candidate)
    lo = min(max(round_year(raw_min), bounds.min), bounds.max)
    hi = min(max(round_year(raw_max), bounds.min), bounds.max)
    if lo > hi:
        lo, hi = hi, lo
    return YearRange(lo, hi)


def parse_bucket(label: str) -> Tuple[int, int]:
    """Parse a dropdown bucket label: '2019', '2015-2024' or '2024-2015'.

    Raises:
        ValueError: if the label is not one or two years.
    """
    if label is None:
        raise ValueError("Empty year bucket")
    text = str(label).strip()
    if not text:
        raise ValueError("Empty year bucket")
    if '-' in text:
        parts = [p.strip() for p in text.split('-')]
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Malformed year bucket: {label!r}")
        a, b = round_year(parts[0]), round_year(parts[1])
        return (min(a, b), max(a, b))
    year = round_year(text)
    return (year, year)


class SelectionBroadcaster:
    """Owns the current YearRange and notifies subscribed charts on change.

    Args:
        bounds: Hard bounds every published range is clamped to.  Defaults
            to the configured dataset span.
        initial: Starting range (clamped); defaults to the full bounds.
    """

    def __init__(self, bounds: Optional[YearRange] = None, initial: Optional[RangeLike] = None):
        self.bounds = bounds or YearRange(DATASET_MIN_YEAR, DATASET_MAX_YEAR)
        self._default = clamp_range(DEFAULT_RANGE, self.bounds)
        self._current = clamp_range(initial, self.bounds) if initial is not None else self._default
        self._subscribers: Dict[int, Subscriber] = {}
        self._next_token = 0
        self.publish_count = 0

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, handler: Subscriber) -> Callable[[], None]:
        """Register ``handler``; returns a callable that deregisters it."""
        if not callable(handler):
            raise TypeError("Subscriber must be callable")
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = handler

        def unsubscribe():
            self._subscribers.pop(token, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_current_range(self) -> YearRange:
        return self._current

    @property
    def default_range(self) -> YearRange:
        return self._default

    # ------------------------------------------------------------------
    # Writes (every trigger source ends in set_range)
    # ------------------------------------------------------------------

    def set_range(self, candidate: RangeLike) -> Optional[YearRange]:
        """Clamp, store and publish ``candidate``.

        Returns:
            The published YearRange, or None when the input was rejected.
        """
        try:
            new_range = clamp_range(candidate, self.bounds)
        except (ValueError, KeyError, TypeError) as e:
            logger.debug(f"[Selection] Rejected range {candidate!r}: {e}")
            return None
        self._current = new_range
        self._publish(new_range)
        return new_range

    def reset(self) -> YearRange:
        """Restore the default span and publish it."""
        return self.set_range(self._default)

    def set_from_bucket(self, label: str) -> Optional[YearRange]:
        """Apply a dropdown bucket label ('2019' or '2015-2024')."""
        try:
            candidate = parse_bucket(label)
        except ValueError as e:
            logger.debug(f"[Selection] Rejected bucket {label!r}: {e}")
            return None
        return self.set_range(candidate)

    def set_from_brush(self, extent: Optional[Sequence[float]],
                       scale: Optional[LinearScale] = None) -> Optional[YearRange]:
        """Apply a brush extent.

        Args:
            extent: ``(x0, x1)`` brush edges.  Pixels when ``scale`` is
                given, otherwise already in years.  None means the brush was
                cleared, which publishes nothing.
            scale: Active x scale of the brushed chart, used to invert pixels.

        Returns:
            The published range, or None for a cleared, malformed or
            degenerate (zero-width) brush.
        """
        if extent is None:
            return None
        try:
            x0, x1 = extent
            if scale is not None:
                x0, x1 = scale.invert(x0), scale.invert(x1)
            y0, y1 = round_year(x0), round_year(x1)
        except (ValueError, TypeError, OverflowError) as e:
            logger.debug(f"[Selection] Rejected brush {extent!r}: {e}")
            return None
        if y0 == y1:
            logger.debug(f"[Selection] Degenerate brush at {y0}, ignored")
            return None
        return self.set_range((y0, y1))

    def nudge_to_pip(self, year) -> Optional[YearRange]:
        """Move the slider handle closest to a clicked pip.

        Ties move the upper handle.
        """
        try:
            target = round_year(year)
        except ValueError as e:
            logger.debug(f"[Selection] Rejected pip {year!r}: {e}")
            return None
        current = self._current
        if abs(current.min - target) < abs(current.max - target):
            return self.set_range((target, current.max))
        return self.set_range((current.min, target))

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    def _publish(self, year_range: YearRange):
        self.publish_count += 1
        logger.debug(f"[Selection] Publishing {year_range.label()} to {len(self._subscribers)} subscriber(s)")
        # Snapshot: handlers may unsubscribe while being notified.
        for token, handler in list(self._subscribers.items()):
            try:
                handler(year_range)
            except Exception:
                logger.exception(f"[Selection] Subscriber {token} failed for {year_range.label()}")
