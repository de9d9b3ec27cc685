"""
Utility functions for label formatting, numeric coercion and tick generation.
"""

import math
import logging
import re

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# Thresholds of the 1-2-5 tick ladder (sqrt(50), sqrt(10), sqrt(2)).
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def to_title_case(text):
    """Title-case a column name: 'GDP PER CAPITA' -> 'Gdp Per Capita'"""
    if text is None:
        return ""
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), str(text).lower())


def split_label(text):
    """Split a long label into at most two lines of roughly equal word count"""
    words = str(text).split(" ")
    if len(words) <= 2:
        return [str(text)]
    mid = math.ceil(len(words) / 2)
    return [" ".join(words[:mid]), " ".join(words[mid:])]


def coerce_numeric(series: pd.Series) -> pd.Series:
    """Coerce a column to float; anything unparseable becomes NaN."""
    if series.dtype == object:
        series = series.astype(str).str.replace('\xa0', '', regex=False).str.strip()
    return pd.to_numeric(series, errors='coerce').astype(float)


def parse_population(value):
    """Parse a population string with '.' thousands separators ('43.531.422')."""
    if value is None or isinstance(value, bool):
        return np.nan
    if isinstance(value, (int, float, np.number)):
        # Parsed by pandas: no separators to strip.
        try:
            number = float(value)
        except OverflowError:
            return np.nan
        return number if math.isfinite(number) else np.nan
    digits = str(value).replace('.', '').replace(',', '').strip()
    try:
        return int(digits)
    except ValueError:
        return np.nan


def tick_increment(start, stop, count):
    """Return the 1-2-5 step between ticks.

    A positive value is the step itself; a negative value ``-k`` means the
    step is ``1 / k``, which keeps fractional ticks exact.
    """
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / (10 ** power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return factor * (10 ** power)
    return -(10 ** -power) / factor


def nice_ticks(start, stop, count):
    """Return roughly ``count`` evenly spaced, human-friendly values in [start, stop].

    Both ends are inclusive when they fall on the tick ladder, so
    ``nice_ticks(0, 1, 80)`` yields the 101 values 0.00, 0.01, ..., 1.00.
    """
    if count <= 0 or start == stop:
        return [float(start)] if count > 0 else []
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    inc = tick_increment(start, stop, count)
    if inc == 0 or not math.isfinite(inc):
        return []
    if inc > 0:
        r0, r1 = math.ceil(start / inc), math.floor(stop / inc)
        ticks = [(r0 + i) * inc for i in range(int(r1 - r0) + 1)]
    else:
        inc = -inc
        r0, r1 = math.ceil(start * inc), math.floor(stop * inc)
        ticks = [(r0 + i) / inc for i in range(int(r1 - r0) + 1)]
    if reverse:
        ticks.reverse()
    return [float(t) for t in ticks]


def finite_values(values):
    """Drop NaN / None / inf entries and return a float ndarray."""
    arr = pd.to_numeric(pd.Series(list(values), dtype=object), errors='coerce').to_numpy(dtype=float)
    return arr[np.isfinite(arr)]
