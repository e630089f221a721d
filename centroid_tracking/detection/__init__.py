from .pose import (
    FACE_KEYPOINTS,
    Keypoint,
    Pose,
    detection_from_pose,
    detections_from_poses,
    pose_box,
    pose_from_dict,
)
from .types import box_from_points, detection_from_dict, xyxy_center

__all__ = [
    "FACE_KEYPOINTS",
    "Keypoint",
    "Pose",
    "box_from_points",
    "detection_from_dict",
    "detection_from_pose",
    "detections_from_poses",
    "pose_box",
    "pose_from_dict",
    "xyxy_center",
]
