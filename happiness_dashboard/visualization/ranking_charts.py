"""
Ranking charts: the yearly score bars, the bubble scatter and the dot plot.

Each class is a ``RangeChart``: construct it once with the loaded
``Dataset`` and call ``render(year_range)`` (or ``attach(broadcaster)``)
to get a Plotly figure for the selected years.
"""

import logging

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from ..core.config import (
    COL_YEAR, COL_COUNTRY, COL_SERIES, HAPPINESS, RAW_METRICS, METRIC_LABELS,
    SERIES_BEST, SERIES_ORDER, MISSING_LABEL,
    RANKING_BAR_MAX, BUBBLE_DEFAULTS, BUBBLE_SIZE_RANGE, BUBBLE_DOMAIN_PADDING,
)
from ..core.data_loader import Dataset
from ..selection.scales import LinearScale
from .base import RangeChart, column, finite_extent, as_plot_values
from .styles import series_color

logger = logging.getLogger(__name__)


# ============================================================================
# RANKING BARS
# ============================================================================

class RankingBarChart(RangeChart):
    """One bar per year with the country's happiness score.

    Used for the best-ranked country of each year and for Ukraine.  The
    y axis is fixed to ``[0, RANKING_BAR_MAX]`` so both charts compare.
    """

    height = 360

    def __init__(self, dataset: Dataset, series: str = SERIES_BEST):
        self.series = (series,)
        self.title = ('Best Ranked Country per Year' if series == SERIES_BEST
                      else f'{series}: Happiness Score per Year')
        super().__init__(dataset)

    def draw(self, fig, view, year_range):
        series = self.series[0]
        view = view.sort_values(COL_YEAR, kind='stable')
        years = [int(y) for y in view[COL_YEAR]]
        scores = column(view, HAPPINESS)

        fig.add_trace(go.Bar(
            x=[str(y) for y in years],
            y=as_plot_values(scores),
            text=list(view[COL_COUNTRY]),
            textposition='outside',
            marker=dict(color=series_color(series)),
            hovertemplate='<b>%{text}</b><br>%{x}: %{y:.2f}<extra></extra>',
            name=series,
        ))
        self.mark(series, int(scores.notna().sum()))

        fig.update_xaxes(type='category', title_text='Year')
        fig.update_yaxes(range=[0, RANKING_BAR_MAX], title_text='Happiness Score')
        fig.update_layout(showlegend=False)
        return tuple(years), (0.0, RANKING_BAR_MAX)


# ============================================================================
# BUBBLE CHART
# ============================================================================

class BubbleChart(RangeChart):
    """Scatter of every country-year: x, y and bubble size are metrics.

    The three metrics must differ.  Axis domains are ``[0, 1.1 * max]`` over
    the filtered rows; bubble diameters map ``[min, max]`` of the size
    metric onto ``BUBBLE_SIZE_RANGE``.
    """

    title = 'Happiness Indicators: Best, Worst and Ukraine'
    series = tuple(SERIES_ORDER)
    height = 480

    def __init__(self, dataset: Dataset, x: str = BUBBLE_DEFAULTS['x'],
                 y: str = BUBBLE_DEFAULTS['y'], size: str = BUBBLE_DEFAULTS['size']):
        super().__init__(dataset)
        self.set_metrics(x, y, size)

    def set_metrics(self, x: str, y: str, size: str):
        """Choose the plotted metrics.

        Raises:
            ValueError: if a metric is unknown or two of them coincide.
        """
        unknown = [m for m in (x, y, size) if m not in RAW_METRICS]
        if unknown:
            raise ValueError(f"Unknown metric(s): {unknown}")
        if len({x, y, size}) < 3:
            raise ValueError(f"Bubble metrics must be distinct, got x={x!r}, y={y!r}, size={size!r}")
        self.x, self.y, self.size = x, y, size

    def _domain(self, values) -> tuple:
        extent = finite_extent(values)
        top = extent[1] * BUBBLE_DOMAIN_PADDING if extent else 1.0
        return (0.0, top)

    def draw(self, fig, view, year_range):
        xs, ys, zs = column(view, self.x), column(view, self.y), column(view, self.size)
        x_domain, y_domain = self._domain(xs), self._domain(ys)

        z_extent = finite_extent(zs) or (0.0, 1.0)
        radius = LinearScale(z_extent, BUBBLE_SIZE_RANGE)

        for series in self.series:
            mask = (view[COL_SERIES] == series) & xs.notna() & ys.notna() & zs.notna()
            rows = view[mask]
            if rows.empty:
                continue
            fig.add_trace(go.Scatter(
                x=xs[mask], y=ys[mask],
                mode='markers',
                name=series,
                marker=dict(
                    size=[radius(v) for v in zs[mask]],
                    color=series_color(series),
                    opacity=0.75,
                    line=dict(color='#0f172a', width=1),
                ),
                customdata=np.stack([rows[COL_COUNTRY], rows[COL_YEAR], zs[mask]], axis=-1),
                hovertemplate=(
                    '<b>%{customdata[0]}</b> (%{customdata[1]})<br>'
                    f'{METRIC_LABELS[self.x]}: %{{x:.2f}}<br>'
                    f'{METRIC_LABELS[self.y]}: %{{y:.2f}}<br>'
                    f'{METRIC_LABELS[self.size]}: %{{customdata[2]:.2f}}<extra></extra>'
                ),
            ))
            self.mark(series, len(rows))

        fig.update_xaxes(range=list(x_domain), title_text=METRIC_LABELS[self.x])
        fig.update_yaxes(range=list(y_domain), title_text=METRIC_LABELS[self.y])
        return x_domain, y_domain


# ============================================================================
# DOT PLOT
# ============================================================================

class DotPlot(RangeChart):
    """One column per year with the best, worst and Ukraine values.

    Columns follow the years of the best-ranked series.  A worst or Ukraine
    row missing for a year is shown as a gap labelled ``N/A``.  Points of a
    column are joined by a thin connector when at least two are present.
    """

    title = 'Best vs Worst vs Ukraine'
    series = tuple(SERIES_ORDER)

    def __init__(self, dataset: Dataset, metric: str = HAPPINESS, descending: bool = False):
        super().__init__(dataset)
        if metric not in RAW_METRICS:
            raise ValueError(f"Unknown metric: {metric!r}")
        self.metric = metric
        self.descending = descending

    def merged(self, view: pd.DataFrame) -> pd.DataFrame:
        """Long frame with one row per (year, series); missing rows are NaN / N/A."""
        best = view[view[COL_SERIES] == SERIES_BEST]
        years = sorted(int(y) for y in best[COL_YEAR].unique())
        rows = []
        for year in years:
            for series in SERIES_ORDER:
                match = view[(view[COL_YEAR] == year) & (view[COL_SERIES] == series)]
                if match.empty:
                    rows.append({COL_YEAR: year, COL_SERIES: series,
                                 COL_COUNTRY: MISSING_LABEL, 'value': np.nan})
                else:
                    first = match.iloc[0]
                    rows.append({COL_YEAR: year, COL_SERIES: series,
                                 COL_COUNTRY: first[COL_COUNTRY],
                                 'value': column(match, self.metric).iloc[0]})
        return pd.DataFrame(rows, columns=[COL_YEAR, COL_SERIES, COL_COUNTRY, 'value'])

    def has_data(self, view):
        return bool((view[COL_SERIES] == SERIES_BEST).any())

    def draw(self, fig, view, year_range):
        merged = self.merged(view)
        years = sorted(merged[COL_YEAR].unique())

        # Connectors first so the dots sit on top.
        for year in years:
            values = merged[(merged[COL_YEAR] == year)]['value'].dropna()
            if len(values) >= 2:
                fig.add_trace(go.Scatter(
                    x=[str(year)] * 2, y=[values.min(), values.max()],
                    mode='lines', line=dict(color='#bbbbbb', width=1),
                    hoverinfo='skip', showlegend=False,
                ))

        for series in SERIES_ORDER:
            rows = merged[merged[COL_SERIES] == series]
            fig.add_trace(go.Scatter(
                x=[str(y) for y in rows[COL_YEAR]],
                y=as_plot_values(rows['value']),
                mode='markers',
                name=series,
                marker=dict(size=10, color=series_color(series)),
                text=list(rows[COL_COUNTRY]),
                hovertemplate=f'<b>%{{text}}</b><br>{METRIC_LABELS[self.metric]}: %{{y}}<extra></extra>',
            ))
            self.mark(series, int(rows['value'].notna().sum()))

        extent = finite_extent(merged['value'])
        y_domain = (extent[1], extent[0]) if (extent and self.descending) else extent
        fig.update_xaxes(type='category', title_text='Year')
        fig.update_yaxes(title_text=METRIC_LABELS[self.metric],
                         autorange='reversed' if self.descending else True)
        return tuple(int(y) for y in years), y_domain
