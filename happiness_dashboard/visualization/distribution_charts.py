"""
Distribution and median charts.

``RidgelineChart`` draws one kernel density ridge per normalized metric over
the selected Ukraine rows.  The two median charts are static: they read the
aggregate tables, which carry no year, so they ignore the selected range.
"""

import logging

import pandas as pd
import plotly.graph_objects as go

from ..core.config import (
    METRICS, NORMALIZED_METRICS, SERIES_ORDER, SERIES_UKRAINE,
    KDE_BANDWIDTH, KDE_DOMAIN, KDE_Y_MAX,
)
from ..analysis.density import ridgeline_densities, evaluation_grid
from ..analysis.summary import normalized_medians
from .base import RangeChart
from .styles import series_color, viridis, FILL_OPACITY

logger = logging.getLogger(__name__)


# ============================================================================
# RIDGELINE
# ============================================================================

class RidgelineChart(RangeChart):
    """Density ridges of Ukraine's normalized metrics.

    Each ridge sits on its own baseline; densities share one scale so ridges
    compare.  The scale is ``[0, KDE_Y_MAX]``, stretched to the tallest drawn
    peak when a narrow range (one or two years) peaks higher, so no ridge
    rises above the plot.  The fill color is the metric mean on the Viridis
    scale.
    """

    title = 'Ukraine: Distribution of Normalized Indicators'
    series = (SERIES_UKRAINE,)
    height = 520
    # Ridge height in baseline units; > 1 lets neighbours overlap.
    overlap = 1.5

    def __init__(self, dataset, bandwidth: float = KDE_BANDWIDTH):
        super().__init__(dataset)
        self.bandwidth = bandwidth
        self.grid = evaluation_grid()
        self.curves = {}
        self.density_scale = KDE_Y_MAX

    def draw(self, fig, view, year_range):
        self.curves = ridgeline_densities(view, NORMALIZED_METRICS, self.bandwidth, self.grid)
        self.density_scale = max([KDE_Y_MAX] + [max(c.ys) for c in self.curves.values() if c.sample_size])
        baselines = []

        # Top metric drawn last so lower ridges never cover it.
        for i, metric in reversed(list(enumerate(METRICS))):
            curve = self.curves[metric['norm']]
            base = float(len(METRICS) - 1 - i)
            baselines.append((base, metric['label']))
            if not curve.sample_size:
                continue
            heights = [base + y / self.density_scale * self.overlap for y in curve.ys]
            fig.add_trace(go.Scatter(
                x=curve.xs + curve.xs[::-1],
                y=heights + [base] * len(curve.xs),
                fill='toself',
                fillcolor=viridis(curve.mean),
                opacity=FILL_OPACITY + 0.2,
                line=dict(color='#0f172a', width=1),
                name=metric['label'],
                hovertemplate=(f"<b>{metric['label']}</b><br>mean {curve.mean:.2f}"
                               f" over {curve.sample_size} year(s)<extra></extra>"),
                showlegend=False,
            ))
            self.mark(SERIES_UKRAINE)

        baselines.sort()
        top = len(METRICS) - 1 + self.overlap
        fig.update_xaxes(range=list(KDE_DOMAIN), title_text='Normalized value')
        fig.update_yaxes(range=[0, top],
                         tickvals=[b for b, _ in baselines],
                         ticktext=[label for _, label in baselines])
        return tuple(KDE_DOMAIN), (0.0, top)


# ============================================================================
# MEDIAN COMPARISON
# ============================================================================

class MedianChart(RangeChart):
    """Base for the charts fed by the MEDIAN / MIN / MAX tables."""

    series = tuple(SERIES_ORDER)
    range_filtered = False

    def view(self, year_range):
        if all(self.dataset.average(s).empty for s in SERIES_ORDER):
            return pd.DataFrame()
        return normalized_medians(self.dataset)


class MedianComparisonChart(MedianChart):
    """Normalized median of every metric, one line per series."""

    title = 'Median Indicators: Best vs Worst vs Ukraine'
    height = 420

    def draw(self, fig, view, year_range):
        for series in SERIES_ORDER:
            key = series.lower()
            fig.add_trace(go.Scatter(
                x=list(view['param']),
                y=list(view[f'{key}_norm']),
                customdata=list(view[key]),
                mode='lines+markers',
                name=series,
                line=dict(color=series_color(series), width=3),
                marker=dict(size=9),
                hovertemplate=(f'<b>{series}</b><br>%{{x}}: %{{customdata:.3f}}'
                               '<br>normalized %{y:.2f}<extra></extra>'),
            ))
            self.mark(series, len(view))

        fig.update_yaxes(range=[0, 1], title_text='Normalized median')
        return tuple(view['param']), (0.0, 1.0)


class CircularBarChart(MedianChart):
    """The normalized medians as grouped polar bars."""

    title = 'Median Indicators (Circular)'
    height = 520

    def draw(self, fig, view, year_range):
        for series in SERIES_ORDER:
            key = series.lower()
            fig.add_trace(go.Barpolar(
                r=list(view[f'{key}_norm']),
                theta=list(view['param']),
                name=series,
                marker=dict(color=series_color(series), line=dict(color='#0f172a', width=1)),
                opacity=0.85,
                customdata=list(view[key]),
                hovertemplate=f'<b>{series}</b><br>%{{theta}}: %{{customdata:.3f}}<extra></extra>',
            ))
            self.mark(series, len(view))

        fig.update_layout(
            barmode='group',
            polar=dict(
                bgcolor='rgba(0,0,0,0)',
                hole=0.2,
                radialaxis=dict(range=[0, 1], gridcolor='#1e293b', showticklabels=False),
                angularaxis=dict(gridcolor='#1e293b', tickfont=dict(color='#E0E0E0')),
            ),
        )
        return tuple(view['param']), (0.0, 1.0)
