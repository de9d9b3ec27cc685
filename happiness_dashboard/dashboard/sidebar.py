"""
Happiness Dashboard - Sidebar Controls
======================================

Every selection widget lives in the sidebar and writes through the shared
``SelectionBroadcaster`` in ``st.session_state['broadcaster']``; no widget
keeps a year range of its own.

Widgets
-------
- **Year range slider** (2013-2026).  Values outside the dataset span are
  clamped before broadcast and the slider snaps back to the clamped range.
- **Reset** restores the full 2015-2024 span.
- **Year bucket** dropdown ("2015-2024", single years) for quick jumps.
- **Move nearest handle** picks a year and moves whichever slider handle is
  closer to it.

Streamlit only allows a widget's state to be written before the widget is
drawn or inside its own callback, so the slider value is re-synchronised
from the broadcaster at the top of every run and the callbacks write the
clamped result back.
A callback also cancels a running Play sweep so the sweep does not restart
over the range the user picked.
"""

import logging

import streamlit as st

from . import play_control
from ..core.config import (
    SLIDER_MIN_YEAR, SLIDER_MAX_YEAR, DATASET_MIN_YEAR, DATASET_MAX_YEAR,
)

logger = logging.getLogger(__name__)

SLIDER_KEY = 'year_slider'
BUCKET_KEY = 'year_bucket'
PIP_KEY = 'pip_year'

ALL_YEARS_BUCKET = f"{DATASET_MIN_YEAR}-{DATASET_MAX_YEAR}"


def bucket_options():
    return [ALL_YEARS_BUCKET] + [str(y) for y in range(DATASET_MIN_YEAR, DATASET_MAX_YEAR + 1)]


def _broadcaster():
    return st.session_state['broadcaster']


def _sync_slider():
    st.session_state[SLIDER_KEY] = _broadcaster().get_current_range().as_tuple()


def _on_slider_change():
    play_control.cancel(st.session_state)
    _broadcaster().set_range(st.session_state[SLIDER_KEY])
    _sync_slider()


def _on_reset():
    play_control.cancel(st.session_state)
    _broadcaster().reset()
    st.session_state[BUCKET_KEY] = ALL_YEARS_BUCKET
    _sync_slider()


def _on_bucket_change():
    play_control.cancel(st.session_state)
    _broadcaster().set_from_bucket(st.session_state[BUCKET_KEY])
    _sync_slider()


def _on_pip_change():
    play_control.cancel(st.session_state)
    year = st.session_state[PIP_KEY]
    if year is not None:
        _broadcaster().nudge_to_pip(year)
        _sync_slider()
    st.session_state[PIP_KEY] = None


def render_sidebar():
    """Draw the selection widgets and return the current YearRange."""
    _sync_slider()

    with st.sidebar:
        st.markdown("### Year Selection")
        st.slider(
            "Years",
            min_value=SLIDER_MIN_YEAR,
            max_value=SLIDER_MAX_YEAR,
            step=1,
            key=SLIDER_KEY,
            on_change=_on_slider_change,
        )
        st.button("Reset range", on_click=_on_reset, use_container_width=True)

        st.selectbox(
            "Year bucket",
            bucket_options(),
            key=BUCKET_KEY,
            on_change=_on_bucket_change,
        )
        st.selectbox(
            "Move nearest handle to",
            [None] + list(range(DATASET_MIN_YEAR, DATASET_MAX_YEAR + 1)),
            format_func=lambda y: "-" if y is None else str(y),
            key=PIP_KEY,
            on_change=_on_pip_change,
        )

        current = _broadcaster().get_current_range()
        st.markdown(f'<span class="range-badge">{current.label()}</span>', unsafe_allow_html=True)

    return current
