"""
Happiness Dashboard - Styles & Theme Configuration
==================================================

Every color and Plotly layout default used by the chart modules lives here;
chart code never hard-codes a hex value.

Color conventions
-----------------
1. **Series colors**: one identity per series, shared by every chart that
   compares them (bubble, dot plot, sunburst, circle packing, median lines).

       Best     #69b3a2   teal
       Worst    #d95f5f   red
       Ukraine  #FFD700   gold

2. **Year colors**: one hue per dataset year (radar polygons, small
   multiples).

3. **Metric colors**: one hue per indicator for the multi-line chart.

4. **Sequential**: Viridis colors ridgeline fills by metric mean; Blues
   colors the Ukraine heatmap by row-normalized value.

Module contents
---------------
- ``get_plotly_theme()`` / ``AXIS_STYLE`` -- Plotly chart theming
- ``series_color()`` / ``year_color()`` / ``metric_color()`` -- palette lookups
- ``viridis()`` -- sample the sequential scale at ``t`` in [0, 1]
- ``inject_css()`` -- injects the dashboard stylesheet into Streamlit
"""

import math

import streamlit as st
from plotly.colors import qualitative, sample_colorscale

from ..core.config import (
    SERIES_BEST, SERIES_WORST, SERIES_UKRAINE,
    RAW_METRICS, NORMALIZED_METRICS,
)

# ============================================================================
# PALETTES
# ============================================================================

SERIES_COLORS = {
    SERIES_BEST: '#69b3a2',
    SERIES_WORST: '#d95f5f',
    SERIES_UKRAINE: '#FFD700',
}

# Fallback for labels outside the three series (e.g. the sunburst root).
NEUTRAL_COLOR = '#94a3b8'

# One color per dataset year, stable across charts.
YEAR_COLORS = {
    2015: '#3498db',
    2016: '#9b59b6',
    2017: '#00bcd4',
    2018: '#e91e63',
    2019: '#34495e',
    2020: '#ff6b6b',
    2021: '#4ecdc4',
    2022: '#a29bfe',
    2023: '#fd79a8',
    2024: '#0984e3',
}

_METRIC_PALETTE = qualitative.Plotly
METRIC_COLORS = {}
for _i, (_raw, _norm) in enumerate(zip(RAW_METRICS, NORMALIZED_METRICS)):
    METRIC_COLORS[_raw] = METRIC_COLORS[_norm] = _METRIC_PALETTE[_i % len(_METRIC_PALETTE)]

SEQUENTIAL_SCALE = 'Viridis'
HEATMAP_SCALE = 'Blues'

# Fill opacity of ridges, areas and packed circles.
FILL_OPACITY = 0.6


def series_color(series: str) -> str:
    return SERIES_COLORS.get(series, NEUTRAL_COLOR)


def year_color(year) -> str:
    return YEAR_COLORS.get(int(year), NEUTRAL_COLOR)


def metric_color(metric: str) -> str:
    return METRIC_COLORS.get(metric, NEUTRAL_COLOR)


def viridis(t) -> str:
    """Color of the sequential scale at ``t``; NaN maps to the neutral gray."""
    if t is None or (isinstance(t, float) and math.isnan(t)):
        return NEUTRAL_COLOR
    return sample_colorscale(SEQUENTIAL_SCALE, [min(max(float(t), 0.0), 1.0)])[0]


# ============================================================================
# PLOTLY THEME
# ============================================================================

def get_plotly_theme() -> dict:
    """Return a base Plotly layout configuration for the dark dashboard theme.

    Unpack into ``fig.update_layout(**get_plotly_theme())``.
    """
    return dict(
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        font=dict(family='Inter', color='#E0E0E0'),
        margin=dict(l=40, r=40, t=50, b=40),
    )


# Subtle grid lines that blend with the dark theme.
AXIS_STYLE = dict(
    gridcolor='#1e293b',
    zerolinecolor='#1e293b',
)


# ============================================================================
# CSS INJECTION
# ============================================================================

def inject_css():
    """Inject the dashboard stylesheet; call once at the top of the page."""
    st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');

    .stApp { font-family: 'Inter', sans-serif; }
    .stPlotlyChart { min-height: 360px !important; }

    .main-header {
        font-size: 2.2rem;
        font-weight: 700;
        background: linear-gradient(135deg, #FFD700 0%, #69b3a2 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        margin-bottom: 0.25rem;
    }

    .range-badge {
        display: inline-block;
        padding: 4px 12px;
        border-radius: 999px;
        background: rgba(255, 215, 0, 0.12);
        border: 1px solid rgba(255, 215, 0, 0.4);
        color: #FFD700;
        font-weight: 600;
        font-size: 0.85rem;
    }

    .median-card {
        background: linear-gradient(145deg, #0f172a 0%, #1e293b 100%);
        border-radius: 12px;
        padding: 16px 20px;
        border-left: 4px solid var(--series-color, #94a3b8);
    }
    .median-card .title {
        font-size: 0.8rem;
        text-transform: uppercase;
        letter-spacing: 0.08em;
        color: #94a3b8;
    }
    .median-card .value {
        font-size: 1.6rem;
        font-weight: 700;
        color: #E0E0E0;
    }

    .population-text {
        color: #cbd5e1;
        font-size: 0.95rem;
        line-height: 1.6;
    }

    #MainMenu { visibility: hidden; }
    footer { visibility: hidden; }
</style>
""", unsafe_allow_html=True)


def median_card_html(title: str, text: str, series: str) -> str:
    """One median summary card as an HTML snippet for ``st.markdown()``."""
    return (
        f'<div class="median-card" style="--series-color: {series_color(series)}">'
        f'<div class="title">{title}</div>'
        f'<div class="value">{text}</div>'
        f'</div>'
    )
