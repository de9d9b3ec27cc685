"""
Trend charts over Ukraine's years: the radar overview, the radar small
multiples, the area chart and the multi-metric line chart.

The area and line charts are ``BrushableChart``s: a box selection on them is
handed to the broadcaster as a year extent and comes back as a new range,
so the x axis zooms to the brushed years.  Resetting the broadcaster
restores the full extent.
"""

import logging
import math

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ..core.config import (
    COL_YEAR, METRICS, NORMALIZED_METRICS, HAPPINESS_NORM,
    SERIES_UKRAINE, YEAR_DESCRIPTIONS,
)
from ..core.data_loader import Dataset
from .base import RangeChart, BrushableChart, column, as_plot_values
from .styles import year_color, metric_color, series_color, FILL_OPACITY

logger = logging.getLogger(__name__)

# Opacity of a line whose parameter is toggled off.
INACTIVE_OPACITY = 0.2

_POLAR_STYLE = dict(
    bgcolor='rgba(0,0,0,0)',
    radialaxis=dict(range=[0, 1], gridcolor='#1e293b', tickfont=dict(color='#94a3b8')),
    angularaxis=dict(gridcolor='#1e293b', tickfont=dict(color='#E0E0E0')),
)


def _closed(values: list) -> list:
    """Repeat the first value so a polar trace closes its polygon."""
    return values + values[:1]


def _year_extent(view) -> tuple:
    years = view[COL_YEAR]
    return (int(years.min()), int(years.max()))


# ============================================================================
# RADAR
# ============================================================================

class RadarChart(RangeChart):
    """One polygon per selected year over the seven normalized metrics."""

    title = 'Ukraine: Indicator Profile by Year'
    series = (SERIES_UKRAINE,)
    height = 500

    def draw(self, fig, view, year_range):
        labels = [m['label'] for m in METRICS]
        view = view.sort_values(COL_YEAR, kind='stable')
        for _, row in view.iterrows():
            year = int(row[COL_YEAR])
            values = [row.get(m['norm'], np.nan) for m in METRICS]
            if not np.isfinite(np.asarray(values, dtype=float)).any():
                continue
            fig.add_trace(go.Scatterpolar(
                r=_closed(as_plot_values(values)),
                theta=_closed(labels),
                fill='toself',
                opacity=FILL_OPACITY,
                line=dict(color=year_color(year), width=2),
                name=str(year),
            ))
            self.mark(SERIES_UKRAINE)

        fig.update_layout(polar=_POLAR_STYLE)
        return tuple(labels), (0.0, 1.0)


class RadarSmallMultiples(RangeChart):
    """One small polar chart per metric, with a spoke for every selected year."""

    title = 'Ukraine: Each Indicator Across Years'
    series = (SERIES_UKRAINE,)
    height = 560
    cols = 4

    @property
    def rows(self) -> int:
        return math.ceil(len(METRICS) / self.cols)

    def new_figure(self):
        return make_subplots(
            rows=self.rows, cols=self.cols,
            specs=[[{'type': 'polar'}] * self.cols for _ in range(self.rows)],
            subplot_titles=[m['label'] for m in METRICS],
        )

    def draw(self, fig, view, year_range):
        view = view.sort_values(COL_YEAR, kind='stable')
        years = [str(int(y)) for y in view[COL_YEAR]]

        for i, metric in enumerate(METRICS):
            values = column(view, metric['norm'])
            if values.notna().any():
                fig.add_trace(go.Scatterpolar(
                    r=_closed(as_plot_values(values)),
                    theta=_closed(years),
                    fill='toself',
                    opacity=FILL_OPACITY,
                    line=dict(color=series_color(SERIES_UKRAINE), width=2),
                    name=metric['label'],
                    showlegend=False,
                ), row=i // self.cols + 1, col=i % self.cols + 1)
                self.mark(SERIES_UKRAINE)

        for i in range(len(METRICS)):
            key = 'polar' if i == 0 else f'polar{i + 1}'
            fig.update_layout({key: _POLAR_STYLE})
        return tuple(int(y) for y in years), (0.0, 1.0)


# ============================================================================
# AREA CHART
# ============================================================================

class AreaChart(BrushableChart):
    """Ukraine's normalized happiness over the selected years.

    Hovering a year shows its narrative from ``YEAR_DESCRIPTIONS``.
    """

    title = 'Ukraine: Normalized Happiness Over Time'
    series = (SERIES_UKRAINE,)
    height = 380

    def draw(self, fig, view, year_range):
        view = view.sort_values(COL_YEAR, kind='stable')
        years = [int(y) for y in view[COL_YEAR]]
        values = column(view, HAPPINESS_NORM)

        fig.add_trace(go.Scatter(
            x=years,
            y=as_plot_values(values),
            mode='lines+markers',
            fill='tozeroy',
            line=dict(color=series_color(SERIES_UKRAINE), width=3),
            marker=dict(size=7),
            customdata=[YEAR_DESCRIPTIONS.get(y, '') for y in years],
            hovertemplate=('<b>%{x}</b><br>Happiness (norm): %{y:.2f}'
                           '<br><br>%{customdata}<extra></extra>'),
            name=SERIES_UKRAINE,
        ))
        self.mark(SERIES_UKRAINE, int(values.notna().sum()))

        x_domain = _year_extent(view)
        fig.update_xaxes(range=list(x_domain), tickvals=years, tickformat='d', title_text='Year')
        fig.update_yaxes(range=[0, 1], title_text='Happiness (normalized)')
        fig.update_layout(dragmode='select', selectdirection='h', showlegend=False)
        return x_domain, (0.0, 1.0)


# ============================================================================
# LINE CHART
# ============================================================================

class LineChart(BrushableChart):
    """All seven normalized metrics over the selected years.

    Parameters can be toggled off, which fades their line instead of
    removing it.  Hovering a point shows the metric's original value.
    """

    title = 'Ukraine: Indicators Over Time'
    series = (SERIES_UKRAINE,)
    height = 440

    def __init__(self, dataset: Dataset):
        super().__init__(dataset)
        self.active = {m: True for m in NORMALIZED_METRICS}

    def toggle_parameter(self, metric: str) -> bool:
        """Flip a parameter on or off; returns its new state."""
        if metric not in self.active:
            raise ValueError(f"Unknown parameter: {metric!r}")
        self.active[metric] = not self.active[metric]
        return self.active[metric]

    def set_active(self, metrics):
        """Activate exactly ``metrics`` (e.g. from a multiselect)."""
        chosen = set(metrics)
        self.active = {m: m in chosen for m in NORMALIZED_METRICS}

    def draw(self, fig, view, year_range):
        view = view.sort_values(COL_YEAR, kind='stable')
        years = [int(y) for y in view[COL_YEAR]]

        for metric in METRICS:
            values = column(view, metric['norm'])
            if values.isna().all():
                continue
            raw = column(view, metric['raw'])
            fig.add_trace(go.Scatter(
                x=years,
                y=as_plot_values(values),
                mode='lines+markers',
                name=metric['label'],
                opacity=1.0 if self.active[metric['norm']] else INACTIVE_OPACITY,
                line=dict(color=metric_color(metric['norm']), width=2),
                marker=dict(size=8),
                customdata=as_plot_values(raw),
                hovertemplate=(f"<b>{metric['raw']}</b><br>%{{x}}: original value "
                               "<b>%{customdata}</b><extra></extra>"),
            ))
            self.mark(SERIES_UKRAINE)

        x_domain = _year_extent(view)
        fig.update_xaxes(range=list(x_domain), tickformat='d', dtick=1, title_text='Year')
        fig.update_yaxes(range=[0, 1], showticklabels=False)
        fig.update_layout(dragmode='select', selectdirection='h',
                          legend=dict(orientation='h', y=-0.2))
        return x_domain, (0.0, 1.0)
