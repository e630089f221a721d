from __future__ import annotations

from typing import Dict, Sequence
from .base import Detection, TrackedObject


class NoopTracker:
    """Tracker that never assigns identities (tracking disabled)."""
    def update(self, detections: Sequence[Detection]) -> Dict[int, TrackedObject]:
        return {}

    def reset(self) -> None:
        pass
