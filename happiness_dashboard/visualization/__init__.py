"""
Plotly charts that follow the range-filter contract.

``build_charts`` creates one instance of every dashboard chart for a loaded
dataset; ``attach_all`` subscribes them to a broadcaster.
"""

from typing import Dict

from ..core.config import SERIES_BEST, SERIES_UKRAINE
from .base import ChartState, RangeChart, BrushableChart
from .ranking_charts import RankingBarChart, BubbleChart, DotPlot
from .hierarchy_charts import (
    HeatmapChart, SunburstChart, CirclePackingChart, pack_siblings, enclosing_circle,
)
from .trend_charts import RadarChart, RadarSmallMultiples, AreaChart, LineChart
from .distribution_charts import RidgelineChart, MedianComparisonChart, CircularBarChart


def build_charts(dataset) -> Dict[str, RangeChart]:
    """One of every chart, keyed by a stable name."""
    return {
        'best_bars': RankingBarChart(dataset, SERIES_BEST),
        'ukraine_bars': RankingBarChart(dataset, SERIES_UKRAINE),
        'bubble': BubbleChart(dataset),
        'dotplot': DotPlot(dataset),
        'heatmap': HeatmapChart(dataset),
        'sunburst': SunburstChart(dataset),
        'packing': CirclePackingChart(dataset),
        'radar': RadarChart(dataset),
        'radar_multiples': RadarSmallMultiples(dataset),
        'area': AreaChart(dataset),
        'line': LineChart(dataset),
        'ridgeline': RidgelineChart(dataset),
        'median_line': MedianComparisonChart(dataset),
        'circular_bar': CircularBarChart(dataset),
    }


def attach_all(charts: Dict[str, RangeChart], broadcaster):
    """Subscribe every chart; returns the unsubscribe callables by name."""
    return {name: chart.attach(broadcaster) for name, chart in charts.items()}


__all__ = [
    'ChartState', 'RangeChart', 'BrushableChart',
    'RankingBarChart', 'BubbleChart', 'DotPlot',
    'HeatmapChart', 'SunburstChart', 'CirclePackingChart',
    'pack_siblings', 'enclosing_circle',
    'RadarChart', 'RadarSmallMultiples', 'AreaChart', 'LineChart',
    'RidgelineChart', 'MedianComparisonChart', 'CircularBarChart',
    'build_charts', 'attach_all',
]
