"""
Year-range selection: scales, broadcaster and auto-play.
"""

from .scales import LinearScale
from .broadcaster import SelectionBroadcaster, clamp_range, parse_bucket
from .playback import Playback, PlaybackState, sweep_frames

__all__ = [
    'LinearScale',
    'SelectionBroadcaster',
    'clamp_range',
    'parse_bucket',
    'Playback',
    'PlaybackState',
    'sweep_frames',
]
