from .base import Detection, IdentityTracker, TrackedObject
from .centroid_tracker import CentroidConfig, CentroidTracker
from .noop_tracker import NoopTracker

__all__ = [
    "CentroidConfig",
    "CentroidTracker",
    "Detection",
    "IdentityTracker",
    "NoopTracker",
    "TrackedObject",
]
