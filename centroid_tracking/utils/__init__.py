"""Utility helpers (small, dependency-light).

- track_logger: CSV logging of the tracker registry, one row per object per frame.
"""

from .track_logger import TrackLogger, default_track_log_path

__all__ = [
    "TrackLogger",
    "default_track_log_path",
]
