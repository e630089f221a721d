from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence, Tuple
import numpy as np


@dataclass(frozen=True)
class Detection:
    """Single-frame observation handed to trackers (geometry only, no pixels)."""
    centroid: Tuple[float, float]
    box_xyxy: Optional[np.ndarray] = None  # float (x1,y1,x2,y2)
    score: float = 1.0


@dataclass(frozen=True)
class TrackedObject:
    """Tracker output for one identity, as of the end of an update call."""
    object_id: int
    centroid: Tuple[float, float]
    box_xyxy: Optional[np.ndarray]
    disappeared: int  # consecutive unmatched frames

    @property
    def is_visible(self) -> bool:
        return self.disappeared == 0


class IdentityTracker(Protocol):
    """Interface shared by the tracking backends."""
    def update(self, detections: Sequence[Detection]) -> Dict[int, TrackedObject]:
        ...

    def reset(self) -> None:
        ...
