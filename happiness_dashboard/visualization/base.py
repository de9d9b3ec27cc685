"""
Range-filtered chart base class.

Every chart owns a private copy of the rows it draws.  ``render(year_range)``
filters that copy to the inclusive range, recomputes its axis domains over
the filtered subset and builds a fresh Plotly figure, so a render never
depends on the previous one: rendering the same range twice yields the same
figure and the same ``ChartState``.  A range with no matching rows yields an
empty figure carrying a "no data" annotation.

Subclasses implement ``draw(fig, view, year_range)``, add their traces to
``fig``, call ``mark(series, n)`` for every group of ``n`` marks they draw and
return ``(x_domain, y_domain)``.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from ..core.config import SERIES_UKRAINE
from ..core.data_loader import Dataset, filter_by_range
from ..models.data_models import YearRange
from ..selection.broadcaster import SelectionBroadcaster
from .styles import get_plotly_theme, AXIS_STYLE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartState:
    """What a chart drew for its last render."""
    range: Optional[YearRange]
    row_count: int
    x_domain: Optional[Tuple] = None
    y_domain: Optional[Tuple] = None
    shape_count: int = 0
    series_shapes: Dict[str, int] = field(default_factory=dict)


def column(df: pd.DataFrame, name: str) -> pd.Series:
    """``df[name]`` as floats, or all-NaN when the column is absent."""
    if name in df.columns:
        return pd.to_numeric(df[name], errors='coerce')
    return pd.Series(np.nan, index=df.index, dtype=float)


def finite_extent(values) -> Optional[Tuple[float, float]]:
    arr = np.asarray(values, dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return (float(arr.min()), float(arr.max()))


def as_plot_values(values) -> list:
    """Floats with NaN replaced by None so Plotly draws a gap."""
    return [None if v is None or not np.isfinite(v) else float(v) for v in np.asarray(values, dtype=float)]


class RangeChart:
    """Base class of every dashboard chart.

    Attributes:
        title: Figure title.
        series: Series whose rows the chart copies from the dataset.
        range_filtered: False for static charts fed by the aggregate tables.
        height: Figure height in pixels.
    """

    title = ''
    series: Sequence[str] = (SERIES_UKRAINE,)
    range_filtered = True
    height = 400

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self._data = dataset.combined(list(self.series))
        self.state: Optional[ChartState] = None
        self.figure: Optional[go.Figure] = None
        self._marks: Counter = Counter()
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Range-filter contract
    # ------------------------------------------------------------------

    def view(self, year_range: YearRange) -> pd.DataFrame:
        """Rows of the private copy inside ``year_range``."""
        if not self.range_filtered:
            return self._data.copy()
        return filter_by_range(self._data, year_range)

    def has_data(self, view: pd.DataFrame) -> bool:
        return not view.empty

    def render(self, year_range: YearRange) -> go.Figure:
        view = self.view(year_range)
        self._marks = Counter()

        if self.has_data(view):
            fig = self.new_figure()
            x_domain, y_domain = self.draw(fig, view, year_range)
        else:
            fig = go.Figure()
            x_domain = y_domain = None
            self.draw_empty(fig, year_range)

        self.apply_theme(fig)
        self.state = ChartState(
            range=year_range,
            row_count=int(len(view)),
            x_domain=x_domain,
            y_domain=y_domain,
            shape_count=sum(self._marks.values()),
            series_shapes={s: self._marks.get(s, 0) for s in self.series},
        )
        self.figure = fig
        logger.debug(f"[Chart] {type(self).__name__} {year_range.label() if year_range else '-'}: "
                     f"{self.state.row_count} row(s), {self.state.shape_count} mark(s)")
        return fig

    def new_figure(self) -> go.Figure:
        return go.Figure()

    def draw(self, fig: go.Figure, view: pd.DataFrame, year_range: YearRange):
        raise NotImplementedError

    def draw_empty(self, fig: go.Figure, year_range: YearRange):
        label = year_range.label() if year_range else ''
        fig.add_annotation(
            text=f"No data for {label}" if label else "No data",
            xref='paper', yref='paper', x=0.5, y=0.5,
            showarrow=False, font=dict(size=14, color='#94a3b8'),
        )
        fig.update_xaxes(visible=False)
        fig.update_yaxes(visible=False)

    def mark(self, series: str, count: int = 1):
        """Record ``count`` marks drawn for ``series``."""
        self._marks[series] += int(count)

    def apply_theme(self, fig: go.Figure) -> go.Figure:
        fig.update_layout(**get_plotly_theme())
        fig.update_layout(title=self.title, height=self.height)
        fig.update_xaxes(**AXIS_STYLE)
        fig.update_yaxes(**AXIS_STYLE)
        return fig

    # ------------------------------------------------------------------
    # Broadcaster wiring
    # ------------------------------------------------------------------

    def attach(self, broadcaster: SelectionBroadcaster) -> Callable[[], None]:
        """Subscribe ``render`` and draw the current range immediately."""
        self.detach()
        self._unsubscribe = broadcaster.subscribe(self.render)
        self.render(broadcaster.get_current_range())
        return self._unsubscribe

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


class BrushableChart(RangeChart):
    """A chart over years whose box selections drive the broadcaster.

    The page draws these with box selection enabled and hands the selected x
    extent, already in years, to ``SelectionBroadcaster.set_from_brush``.
    """
