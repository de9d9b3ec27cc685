"""
Auto-play sweep across the dataset years.

``Playback`` moves a fixed-width window (two years by default) across the
years one frame at a time, publishing each frame through the
``SelectionBroadcaster`` exactly like a user drag would.

Lifecycle
---------
    IDLE --start()/toggle()--> PLAYING --step() past last frame--> IDLE
                                  |
                                  +--stop()/toggle()--> IDLE

Leaving PLAYING always runs the same cleanup, whether the sweep completed,
was cancelled by a repeated click, or was interrupted by the host (a
Streamlit rerun raises inside ``run``): the frame index is rewound and the
broadcaster is reset to its default span.
"""

import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Callable, List, Optional, Sequence

from ..core.config import PLAYBACK_INTERVAL_MS, PLAYBACK_WINDOW_YEARS
from ..models.data_models import YearRange
from .broadcaster import SelectionBroadcaster

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    """Whether a sweep is in progress."""
    IDLE = "idle"
    PLAYING = "playing"


def sweep_frames(years: Sequence[int], window: int = PLAYBACK_WINDOW_YEARS) -> List[YearRange]:
    """One frame per distinct year: ``[year, min(year + window, last)]``."""
    ordered = sorted(set(int(y) for y in years))
    if not ordered:
        return []
    last = ordered[-1]
    return [YearRange(y, min(y + window, last)) for y in ordered]


class Playback:
    """Cancelable sweep of a year window, driven frame by frame.

    Args:
        broadcaster: Where frames are published.
        years: Years to sweep (duplicates and order are ignored).
        window: Width of the window in years.
        interval_ms: Delay between frames in ``run``.
        sleep: Injected sleep function (``time.sleep`` by default).
    """

    def __init__(self, broadcaster: SelectionBroadcaster, years: Sequence[int],
                 window: int = PLAYBACK_WINDOW_YEARS,
                 interval_ms: int = PLAYBACK_INTERVAL_MS,
                 sleep: Callable[[float], None] = time.sleep):
        self.broadcaster = broadcaster
        self.frames = sweep_frames(years, window)
        self.interval_ms = interval_ms
        self._sleep = sleep
        self.state = PlaybackState.IDLE
        self._index = 0

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def position(self) -> int:
        """Index of the next frame to publish."""
        return self._index

    def start(self) -> bool:
        """Enter PLAYING from the first frame; False when there is nothing to play."""
        if self.is_playing:
            return True
        if not self.frames:
            logger.info("[Playback] No years to sweep")
            return False
        self._index = 0
        self.state = PlaybackState.PLAYING
        logger.info(f"[Playback] Sweeping {len(self.frames)} frame(s)")
        return True

    def step(self) -> Optional[YearRange]:
        """Publish the next frame.

        After the last frame the sweep stops (and resets the selection).

        Returns:
            The frame published, or None when not playing.
        """
        if not self.is_playing:
            return None
        frame = self.frames[self._index]
        self.broadcaster.set_range(frame)
        self._index += 1
        if self._index >= len(self.frames):
            self.stop()
        return frame

    def stop(self):
        """Cleanup: back to IDLE, rewind and restore the default span."""
        if not self.is_playing:
            return
        self.state = PlaybackState.IDLE
        self._index = 0
        self.broadcaster.reset()
        logger.info("[Playback] Stopped")

    def toggle(self) -> bool:
        """Play/pause button handler; returns whether a sweep is now running."""
        if self.is_playing:
            self.stop()
        else:
            self.start()
        return self.is_playing

    @contextmanager
    def running(self):
        """Scope a sweep: cleanup runs on completion, cancel or exception."""
        self.start()
        try:
            yield self
        finally:
            self.stop()

    def run(self, on_frame: Optional[Callable[[YearRange], None]] = None):
        """Blocking sweep with ``interval_ms`` between frames."""
        with self.running():
            while self.is_playing:
                frame = self.step()
                if frame is None:
                    break
                if on_frame is not None:
                    on_frame(frame)
                if self.is_playing:
                    self._sleep(self.interval_ms / 1000.0)
