"""
Hierarchy and matrix charts: the Ukraine heatmap, the sunburst and the
circle packing.
"""

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from ..core.config import (
    COL_YEAR, COL_COUNTRY, COL_SERIES, HAPPINESS, HEATMAP_PARAMETERS,
    SERIES_UKRAINE, SERIES_ORDER, PACK_VALUE_FACTOR,
)
from ..core.utils import to_title_case, split_label
from .base import RangeChart, column
from .styles import series_color, NEUTRAL_COLOR, HEATMAP_SCALE, FILL_OPACITY

logger = logging.getLogger(__name__)

Circle = Tuple[float, float, float]


# ============================================================================
# HEATMAP
# ============================================================================

def row_normalize(values: pd.Series, lo: float, hi: float) -> pd.Series:
    """Scale a heatmap row to [0, 1]; a constant row maps to 0.5."""
    if not (np.isfinite(lo) and np.isfinite(hi)) or hi == lo:
        return values.where(values.isna(), 0.5)
    return (values - lo) / (hi - lo)


class HeatmapChart(RangeChart):
    """Ukraine's ranking and raw metrics, one column per year.

    Colors are row-normalized with each parameter's min and max over the
    full dataset, not the selection, so a cell keeps its color when the
    range changes.
    """

    title = 'Ukraine: Indicators by Year'
    series = (SERIES_UKRAINE,)
    height = 420

    def __init__(self, dataset):
        super().__init__(dataset)
        self.row_stats = {}
        for param in HEATMAP_PARAMETERS:
            values = column(self._data, param)
            self.row_stats[param] = (float(values.min()), float(values.max()))

    def draw(self, fig, view, year_range):
        view = view.sort_values(COL_YEAR, kind='stable')
        years = [int(y) for y in view[COL_YEAR]]
        labels = ['<br>'.join(split_label(to_title_case(p))) for p in HEATMAP_PARAMETERS]

        z, text = [], []
        for param in HEATMAP_PARAMETERS:
            raw = column(view, param)
            lo, hi = self.row_stats[param]
            z.append([None if pd.isna(v) else float(v) for v in row_normalize(raw, lo, hi)])
            text.append(['' if pd.isna(v) else f'{v:g}' for v in raw])
            self.mark(SERIES_UKRAINE, int(raw.notna().sum()))

        fig.add_trace(go.Heatmap(
            x=[str(y) for y in years],
            y=labels,
            z=z,
            text=text,
            colorscale=HEATMAP_SCALE,
            zmin=0, zmax=1,
            xgap=2, ygap=2,
            showscale=False,
            hovertemplate='%{y}<br>%{x}: <b>%{text}</b><extra></extra>',
        ))
        fig.update_xaxes(type='category', side='bottom')
        fig.update_yaxes(autorange='reversed')
        return tuple(years), tuple(HEATMAP_PARAMETERS)


# ============================================================================
# SUNBURST
# ============================================================================

class SunburstChart(RangeChart):
    """Happiness -> series -> year -> country, leaves sized by score."""

    title = 'Happiness by Series and Year'
    series = tuple(SERIES_ORDER)
    height = 600
    root = 'Happiness'

    def draw(self, fig, view, year_range):
        ids, labels, parents, values, colors = [self.root], [self.root], [''], [0.0], [NEUTRAL_COLOR]
        scores = column(view, HAPPINESS)

        for series in SERIES_ORDER:
            rows = view[(view[COL_SERIES] == series) & scores.notna()]
            if rows.empty:
                continue
            ids.append(series)
            labels.append(series)
            parents.append(self.root)
            values.append(0.0)
            colors.append(series_color(series))

            for year in sorted(int(y) for y in rows[COL_YEAR].unique()):
                year_id = f'{series}/{year}'
                ids.append(year_id)
                labels.append(str(year))
                parents.append(series)
                values.append(0.0)
                colors.append(series_color(series))

                for _, row in rows[rows[COL_YEAR] == year].iterrows():
                    ids.append(f'{year_id}/{row[COL_COUNTRY]}')
                    labels.append(row[COL_COUNTRY])
                    parents.append(year_id)
                    values.append(float(row[HAPPINESS]))
                    colors.append(series_color(series))
                    self.mark(series)

        fig.add_trace(go.Sunburst(
            ids=ids, labels=labels, parents=parents, values=values,
            branchvalues='remainder',
            marker=dict(colors=colors, line=dict(color='#0f172a', width=1)),
            hovertemplate='<b>%{label}</b><br>Score: %{value:.2f}<extra></extra>',
        ))
        return None, None


# ============================================================================
# CIRCLE PACKING
# ============================================================================

def _tangent_points(a: Circle, b: Circle, r: float) -> List[Tuple[float, float]]:
    """Centers of a circle of radius ``r`` touching both ``a`` and ``b``."""
    (ax, ay, ar), (bx, by, br) = a, b
    da, db = ar + r, br + r
    dx, dy = bx - ax, by - ay
    d = math.hypot(dx, dy)
    if d == 0 or d > da + db or d < abs(da - db):
        return []
    along = (da * da - db * db + d * d) / (2 * d)
    h = math.sqrt(max(da * da - along * along, 0.0))
    mx, my = ax + along * dx / d, ay + along * dy / d
    return [(mx + h * dy / d, my - h * dx / d), (mx - h * dy / d, my + h * dx / d)]


def pack_siblings(radii: Sequence[float]) -> List[Circle]:
    """Place circles without overlap, each as close to the origin as possible.

    Circles are placed in the given order, each tangent to two already
    placed ones.  Returns ``(x, y, r)`` in input order.
    """
    placed: List[Circle] = []
    for r in radii:
        r = float(r)
        if not placed:
            placed.append((0.0, 0.0, r))
            continue
        if len(placed) == 1:
            x0, y0, r0 = placed[0]
            placed.append((x0 + r0 + r, y0, r))
            continue

        best = None
        for i in range(len(placed)):
            for j in range(i + 1, len(placed)):
                for x, y in _tangent_points(placed[i], placed[j], r):
                    if all(math.hypot(x - px, y - py) >= pr + r - 1e-9 for px, py, pr in placed):
                        dist = math.hypot(x, y)
                        if best is None or dist < best[0]:
                            best = (dist, x, y)
        if best is None:
            right = max(px + pr for px, _, pr in placed)
            best = (0.0, right + r, 0.0)
        placed.append((best[1], best[2], r))
    return placed


def enclosing_circle(circles: Sequence[Circle]) -> Circle:
    """Circle around all ``circles``, centered on their bounding box."""
    if not circles:
        return (0.0, 0.0, 0.0)
    cx = (min(x - r for x, _, r in circles) + max(x + r for x, _, r in circles)) / 2
    cy = (min(y - r for _, y, r in circles) + max(y + r for _, y, r in circles)) / 2
    radius = max(math.hypot(x - cx, y - cy) + r for x, y, r in circles)
    return (cx, cy, radius)


class CirclePackingChart(RangeChart):
    """One group per series holding a circle per country-year.

    Circle area is proportional to ``PACK_VALUE_FACTOR * score``; groups are
    packed next to each other and drawn as outlined circles.
    """

    title = 'Happiness Circle Packing'
    series = tuple(SERIES_ORDER)
    height = 560
    group_padding = 1.0

    def layout(self, view: pd.DataFrame):
        """``[(series, group_circle, [(circle, row), ...]), ...]`` in absolute coordinates."""
        scores = column(view, HAPPINESS)
        groups = []
        for series in SERIES_ORDER:
            rows = view[(view[COL_SERIES] == series) & (scores > 0)]
            if rows.empty:
                continue
            rows = rows.assign(_value=column(rows, HAPPINESS) * PACK_VALUE_FACTOR)
            rows = rows.sort_values('_value', ascending=False, kind='stable')
            leaves = pack_siblings([math.sqrt(v) for v in rows['_value']])
            enclosure = enclosing_circle(leaves)
            groups.append((series, enclosure, list(zip(leaves, [r for _, r in rows.iterrows()]))))

        outer = pack_siblings([g[1][2] + self.group_padding for g in groups])
        placed = []
        for (series, (ex, ey, er), leaves), (gx, gy, _) in zip(groups, outer):
            dx, dy = gx - ex, gy - ey
            moved = [((x + dx, y + dy, r), row) for (x, y, r), row in leaves]
            placed.append((series, (gx, gy, er), moved))
        return placed

    def has_data(self, view):
        return bool((column(view, HAPPINESS) > 0).any())

    def draw(self, fig, view, year_range):
        placed = self.layout(view)
        xs, ys = [], []

        for series, (gx, gy, gr), leaves in placed:
            color = series_color(series)
            fig.add_shape(type='circle', x0=gx - gr, y0=gy - gr, x1=gx + gr, y1=gy + gr,
                          line=dict(color=color, width=2), fillcolor='rgba(0,0,0,0)')
            xs.extend([gx - gr, gx + gr])
            ys.extend([gy - gr, gy + gr])

            hover_x, hover_y, hover_text = [], [], []
            for (x, y, r), row in leaves:
                fig.add_shape(type='circle', x0=x - r, y0=y - r, x1=x + r, y1=y + r,
                              line=dict(color='#0f172a', width=1),
                              fillcolor=color, opacity=FILL_OPACITY)
                hover_x.append(x)
                hover_y.append(y)
                hover_text.append(f"<b>{row[COL_COUNTRY]} ({int(row[COL_YEAR])})</b>"
                                  f"<br>Score: {row[HAPPINESS]:.2f}")
            self.mark(series, len(leaves))

            fig.add_trace(go.Scatter(
                x=hover_x, y=hover_y, mode='markers', name=series,
                marker=dict(size=2, color=color, opacity=0),
                text=hover_text, hovertemplate='%{text}<extra></extra>',
            ))

        x_domain = (min(xs), max(xs))
        y_domain = (min(ys), max(ys))
        fig.update_xaxes(range=list(x_domain), visible=False)
        fig.update_yaxes(range=list(y_domain), visible=False, scaleanchor='x', scaleratio=1)
        return x_domain, y_domain
