"""Reduce pose-estimator output to tracker detections.

A pose is a list of keypoints plus an overall score and bounding box, in the
JSON shape emitted by PoseNet-style estimators:

    {"pose": {"score": 0.9,
              "keypoints": [{"part": "nose", "score": 0.99,
                             "position": {"x": 10.0, "y": 20.0}}, ...]},
     "boundingBox": {"minX": 0, "minY": 0, "maxX": 40, "maxY": 90}}
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..tracking.base import Detection
from .types import as_box_xyxy, box_from_points, xyxy_center

# nose, leftEye, rightEye, leftEar, rightEar
FACE_KEYPOINTS: Tuple[int, ...] = (0, 1, 2, 3, 4)


@dataclass(frozen=True)
class Keypoint:
    part: str
    x: float
    y: float
    score: float = 1.0


@dataclass(frozen=True)
class Pose:
    keypoints: Tuple[Keypoint, ...]
    score: float
    box_xyxy: np.ndarray  # float (minX,minY,maxX,maxY)


def _keypoint_from_dict(d: Mapping[str, Any], idx: int) -> Keypoint:
    if not isinstance(d, Mapping):
        raise ValueError(f"keypoint {idx} must be a mapping")
    pos = d.get("position", d)
    try:
        x, y = float(pos["x"]), float(pos["y"])
    except KeyError as e:
        raise ValueError(f"keypoint {idx} is missing {e.args[0]!r}") from e
    return Keypoint(part=str(d.get("part", idx)), x=x, y=y, score=float(d.get("score", 1.0)))


def pose_from_dict(d: Mapping[str, Any]) -> Pose:
    if not isinstance(d, Mapping):
        raise ValueError(f"pose must be a mapping: got {type(d).__name__}")
    body = d.get("pose", d)
    if not isinstance(body, Mapping):
        raise ValueError(f"pose body must be a mapping: got {type(body).__name__}")
    raw_kps = body.get("keypoints")
    if not raw_kps:
        raise ValueError("pose has no 'keypoints'")
    keypoints = tuple(_keypoint_from_dict(kp, i) for i, kp in enumerate(raw_kps))

    if d.get("boundingBox") is not None:
        box = as_box_xyxy(d["boundingBox"])
    else:
        box = box_from_points([k.x for k in keypoints], [k.y for k in keypoints])

    return Pose(keypoints=keypoints, score=float(body.get("score", 1.0)), box_xyxy=box)


def pose_box(pose: Pose, use_all_keypoints: bool = True) -> np.ndarray:
    """Full pose bbox, or the box spanning the face landmarks only."""
    if use_all_keypoints:
        return np.asarray(pose.box_xyxy, dtype=float).copy()
    if len(pose.keypoints) < len(FACE_KEYPOINTS):
        raise ValueError(
            f"face box needs {len(FACE_KEYPOINTS)} keypoints: got {len(pose.keypoints)}"
        )
    face = [pose.keypoints[i] for i in FACE_KEYPOINTS]
    return box_from_points([k.x for k in face], [k.y for k in face])


def detection_from_pose(pose: Pose, use_all_keypoints: bool = True) -> Detection:
    box = pose_box(pose, use_all_keypoints)
    return Detection(centroid=xyxy_center(box), box_xyxy=box, score=float(pose.score))


def detections_from_poses(
    poses: Sequence[Pose],
    use_all_keypoints: bool = True,
    min_pose_confidence: Optional[float] = None,
) -> List[Detection]:
    detections: List[Detection] = []
    for p in poses:
        if min_pose_confidence is not None and p.score < float(min_pose_confidence):
            continue
        detections.append(detection_from_pose(p, use_all_keypoints))
    return detections
