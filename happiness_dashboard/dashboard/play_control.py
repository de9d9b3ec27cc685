"""
Play/Pause state for the trend charts.

A sweep blocks the script, and any click while it runs makes Streamlit
interrupt and rerun it.  The user's intent therefore lives in session state
(``PLAYING_KEY``) rather than in the button's return value: the button
callback flips it, the page only sweeps while it is set, and the page clears
it once a sweep completes.  The running ``Playback`` is stored under
``PLAYBACK_KEY`` so a pause can stop it.

The helpers take the session-state mapping as an argument so they work on a
plain dict as well as ``st.session_state``.
"""

import logging

logger = logging.getLogger(__name__)

PLAYING_KEY = 'playing'
PLAYBACK_KEY = 'playback'

PLAY_LABEL = "▶ Play"
PAUSE_LABEL = "⏸ Pause"


def is_playing(state) -> bool:
    return bool(state.get(PLAYING_KEY, False))


def button_label(state) -> str:
    return PAUSE_LABEL if is_playing(state) else PLAY_LABEL


def cancel(state):
    """Clear the playing flag and stop the stored sweep, if any."""
    state[PLAYING_KEY] = False
    playback = state.get(PLAYBACK_KEY)
    if playback is not None:
        playback.stop()


def on_play_clicked(state):
    """Button callback: Play requests a sweep, Pause cancels the running one."""
    if is_playing(state):
        cancel(state)
        logger.info("[Play] Paused")
    else:
        state[PLAYING_KEY] = True
        logger.info("[Play] Requested")
    return is_playing(state)


def begin(state, playback):
    """Register the sweep about to run."""
    state[PLAYBACK_KEY] = playback


def finish(state):
    """The sweep ran to its last frame: back to Play."""
    state[PLAYING_KEY] = False
    state[PLAYBACK_KEY] = None
