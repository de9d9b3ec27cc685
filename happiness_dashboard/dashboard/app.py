"""
Happiness Dashboard - Main Page
===============================

Streamlit page hosting every chart.  Streamlit re-runs this script on each
interaction, so the long-lived objects are kept in ``st.session_state``:

* ``broadcaster`` -- the single ``SelectionBroadcaster`` holding the year range
* ``charts``      -- one instance of every chart, attached to the broadcaster
* ``brushes``     -- last box selection applied per chart, so a selection that
                     survives a rerun is not applied twice

Layout (top to bottom):
    1. Header with the selected range
    2. Median summary cards (static)
    3. Ranking bars, bubble chart, dot plot
    4. Area chart and line chart (brushable; play sweeps the line chart)
    5. Heatmap, radar overview and small multiples
    6. Sunburst and circle packing
    7. Ridgeline plot and population estimates
    8. Median comparison line and circular bar (static)

Usage:
    streamlit run dashboard.py
"""

import logging

import streamlit as st

from ..core.config import (
    RAW_METRICS, NORMALIZED_METRICS, METRIC_LABELS, BUBBLE_DEFAULTS, HAPPINESS,
    PLAYBACK_INTERVAL_MS, PLAYBACK_WINDOW_YEARS, SERIES_UKRAINE,
)
from ..core.data_loader import Dataset, load_dataset, get_data_dir
from ..analysis.summary import median_summary, population_estimates, population_text
from ..selection import SelectionBroadcaster, Playback
from ..visualization import BrushableChart, build_charts, attach_all
from ..visualization.styles import inject_css, median_card_html
from . import play_control
from .sidebar import render_sidebar

logger = logging.getLogger(__name__)


@st.cache_data
def load_cached_dataset(data_dir: str) -> Dataset:
    """Load the CSVs once per data directory."""
    return load_dataset(data_dir)


def init_state(dataset: Dataset):
    """Create the broadcaster and charts on the first run of a session."""
    if 'broadcaster' in st.session_state:
        return
    broadcaster = SelectionBroadcaster()
    charts = build_charts(dataset)
    attach_all(charts, broadcaster)
    st.session_state['broadcaster'] = broadcaster
    st.session_state['charts'] = charts
    st.session_state['brushes'] = {}
    logger.info(f"[App] Session initialised with {len(charts)} chart(s)")


def show_chart(name: str):
    """Draw a chart's current figure; brushable charts feed box selections back."""
    chart = st.session_state['charts'][name]
    if not isinstance(chart, BrushableChart):
        st.plotly_chart(chart.figure, use_container_width=True, key=f'chart_{name}')
        return

    event = st.plotly_chart(chart.figure, use_container_width=True, key=f'chart_{name}',
                            on_select='rerun', selection_mode='box')
    boxes = (event or {}).get('selection', {}).get('box', [])
    if not boxes:
        st.session_state['brushes'].pop(name, None)
        return
    extent = tuple(boxes[0].get('x', ()))
    if st.session_state['brushes'].get(name) == extent:
        return
    st.session_state['brushes'][name] = extent
    if st.session_state['broadcaster'].set_from_brush(extent) is not None:
        st.rerun()


def render_median_cards(dataset: Dataset):
    cols = st.columns(3)
    for col, item in zip(cols, median_summary(dataset)):
        with col:
            st.markdown(median_card_html(item['title'], item['text'], item['series']),
                        unsafe_allow_html=True)


def render_bubble_controls():
    chart = st.session_state['charts']['bubble']
    c1, c2, c3 = st.columns(3)
    x = c1.selectbox("X axis", RAW_METRICS, index=RAW_METRICS.index(BUBBLE_DEFAULTS['x']),
                     format_func=METRIC_LABELS.get, key='bubble_x')
    y = c2.selectbox("Y axis", RAW_METRICS, index=RAW_METRICS.index(BUBBLE_DEFAULTS['y']),
                     format_func=METRIC_LABELS.get, key='bubble_y')
    size = c3.selectbox("Bubble size", RAW_METRICS, index=RAW_METRICS.index(BUBBLE_DEFAULTS['size']),
                        format_func=METRIC_LABELS.get, key='bubble_size')
    if (x, y, size) == (chart.x, chart.y, chart.size):
        return
    try:
        chart.set_metrics(x, y, size)
    except ValueError:
        st.warning("Pick three different metrics for the bubble chart.")
        return
    chart.render(st.session_state['broadcaster'].get_current_range())


def render_dotplot_controls():
    chart = st.session_state['charts']['dotplot']
    c1, c2 = st.columns([3, 1])
    metric = c1.selectbox("Dot plot metric", RAW_METRICS, index=RAW_METRICS.index(HAPPINESS),
                          format_func=lambda m: METRIC_LABELS[m], key='dot_metric')
    descending = c2.toggle("Descending", key='dot_desc')
    if (metric, descending) != (chart.metric, chart.descending):
        chart.metric, chart.descending = metric, descending
        chart.render(st.session_state['broadcaster'].get_current_range())


def render_line_controls():
    chart = st.session_state['charts']['line']
    active = st.multiselect(
        "Parameters", NORMALIZED_METRICS,
        default=[m for m, on in chart.active.items() if on],
        format_func=lambda m: METRIC_LABELS[m], key='line_params',
    )
    if set(active) != {m for m, on in chart.active.items() if on}:
        chart.set_active(active)
        chart.render(st.session_state['broadcaster'].get_current_range())


def play(dataset: Dataset, area_slot, line_slot):
    """Sweep a window across the years, redrawing the trend charts per frame.

    Pressing Pause interrupts the script; the playback's scoped cleanup still
    resets the range and the button callback clears the playing flag.
    """
    charts = st.session_state['charts']
    playback = Playback(st.session_state['broadcaster'], dataset.years(),
                        window=PLAYBACK_WINDOW_YEARS, interval_ms=PLAYBACK_INTERVAL_MS)
    play_control.begin(st.session_state, playback)

    def on_frame(frame):
        area_slot.plotly_chart(charts['area'].figure, use_container_width=True,
                               key=f'play_area_{frame.label()}')
        line_slot.plotly_chart(charts['line'].figure, use_container_width=True,
                               key=f'play_line_{frame.label()}')

    playback.run(on_frame=on_frame)
    play_control.finish(st.session_state)
    st.rerun()


def render_population(dataset: Dataset, year_range):
    st.markdown("#### Population estimates")
    ukraine = dataset.series(SERIES_UKRAINE)
    estimates = population_estimates(ukraine, year_range.years())
    lines = [f"<b>{label}</b>: {population_text(label, value)}" for label, value in estimates.items()]
    st.markdown('<div class="population-text">' + '<br>'.join(lines) + '</div>',
                unsafe_allow_html=True)


def main():
    st.set_page_config(
        page_title="Happiness Dashboard | Ukraine vs the World",
        page_icon="🌻",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    inject_css()

    data_dir = str(get_data_dir())
    dataset = load_cached_dataset(data_dir)
    for filename, message in dataset.errors.items():
        st.warning(f"{filename}: {message}")
    if dataset.is_empty:
        st.error(f"No happiness data found in {data_dir}.")
        st.stop()

    init_state(dataset)
    year_range = render_sidebar()

    st.markdown('<div class="main-header">World Happiness: Ukraine vs the World</div>',
                unsafe_allow_html=True)
    st.caption(f"Selected years: {year_range.label()}")

    render_median_cards(dataset)

    c1, c2 = st.columns(2)
    with c1:
        show_chart('best_bars')
    with c2:
        show_chart('ukraine_bars')

    render_bubble_controls()
    show_chart('bubble')
    render_dotplot_controls()
    show_chart('dotplot')

    st.markdown("#### Trends")
    st.button(play_control.button_label(st.session_state), key='play',
              on_click=play_control.on_play_clicked, args=(st.session_state,))
    area_slot, line_slot = st.empty(), st.empty()
    if play_control.is_playing(st.session_state):
        play(dataset, area_slot, line_slot)
    with area_slot.container():
        show_chart('area')
    render_line_controls()
    with line_slot.container():
        show_chart('line')

    show_chart('heatmap')
    c1, c2 = st.columns(2)
    with c1:
        show_chart('radar')
    with c2:
        show_chart('radar_multiples')

    c1, c2 = st.columns(2)
    with c1:
        show_chart('sunburst')
    with c2:
        show_chart('packing')

    c1, c2 = st.columns([2, 1])
    with c1:
        show_chart('ridgeline')
    with c2:
        render_population(dataset, year_range)

    c1, c2 = st.columns(2)
    with c1:
        show_chart('median_line')
    with c2:
        show_chart('circular_bar')
