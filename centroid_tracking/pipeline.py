from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from .detection.pose import detections_from_poses, pose_from_dict
from .detection.types import detection_from_dict
from .tracking.base import Detection, IdentityTracker, TrackedObject
from .tracking.centroid_tracker import CentroidConfig, CentroidTracker
from .tracking.noop_tracker import NoopTracker


@dataclass(frozen=True)
class FrameResult:
    detections: List[Detection]
    objects: Dict[int, TrackedObject]
    visible: Dict[int, TrackedObject]


def build_tracker(track_cfg: Dict[str, Any], pose_cfg: Dict[str, Any] | None = None) -> IdentityTracker | None:
    if not bool(track_cfg.get("enabled", True)):
        return None

    backend = str(track_cfg.get("backend", "centroid")).lower()
    if backend == "noop":
        return NoopTracker()

    if backend == "centroid":
        cfg = CentroidConfig(
            max_disappeared=int(track_cfg.get("max_disappeared", 180)),
            use_all_keypoints=bool((pose_cfg or {}).get("use_all_keypoints", True)),
        )
        return CentroidTracker(cfg)

    raise ValueError(f"Unknown tracking backend: {backend}")


def detections_from_frame(frame: Mapping[str, Any], pose_cfg: Dict[str, Any]) -> List[Detection]:
    """Frame record -> detections, from either `poses` or `detections`."""
    if frame.get("poses") is not None:
        poses = [pose_from_dict(p) for p in frame["poses"]]
        return detections_from_poses(
            poses,
            use_all_keypoints=bool(pose_cfg.get("use_all_keypoints", True)),
            min_pose_confidence=pose_cfg.get("min_pose_confidence", None),
        )
    if frame.get("detections") is not None:
        return [detection_from_dict(d) for d in frame["detections"]]
    raise ValueError("frame needs 'poses' or 'detections'")


def visible_objects(objects: Mapping[int, TrackedObject], render_grace: int = 0) -> Dict[int, TrackedObject]:
    """Objects worth drawing: unmatched for at most `render_grace` frames."""
    return {oid: o for oid, o in objects.items() if o.disappeared <= int(render_grace)}


def process_frame(
    frame: Mapping[str, Any],
    pose_cfg: Dict[str, Any],
    tracker: IdentityTracker | None,
    render_grace: int = 0,
) -> FrameResult:
    detections = detections_from_frame(frame, pose_cfg)

    objects: Dict[int, TrackedObject] = {}
    if tracker is not None:
        objects = tracker.update(detections)

    return FrameResult(
        detections=detections,
        objects=objects,
        visible=visible_objects(objects, render_grace),
    )
