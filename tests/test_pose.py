import numpy as np
import pytest

from centroid_tracking.detection import (
    Keypoint,
    Pose,
    box_from_points,
    detection_from_dict,
    detection_from_pose,
    detections_from_poses,
    pose_from_dict,
    xyxy_center,
)

PARTS = ["nose", "leftEye", "rightEye", "leftEar", "rightEar", "leftShoulder", "rightShoulder"]


def pose_dict(points, score=0.9, bbox=None):
    d = {
        "pose": {
            "score": score,
            "keypoints": [
                {"part": part, "score": 0.8, "position": {"x": x, "y": y}}
                for part, (x, y) in zip(PARTS, points)
            ],
        }
    }
    if bbox is not None:
        d["boundingBox"] = {"minX": bbox[0], "minY": bbox[1], "maxX": bbox[2], "maxY": bbox[3]}
    return d


FACE = [(50, 20), (45, 15), (55, 15), (40, 18), (60, 18)]
BODY = FACE + [(30, 60), (70, 60)]


def test_pose_from_dict_reads_keypoints_and_box():
    pose = pose_from_dict(pose_dict(BODY, score=0.7, bbox=(10, 5, 90, 200)))
    assert len(pose.keypoints) == 7
    assert pose.keypoints[0] == Keypoint(part="nose", x=50.0, y=20.0, score=0.8)
    assert pose.score == 0.7
    assert np.array_equal(pose.box_xyxy, [10.0, 5.0, 90.0, 200.0])


def test_pose_without_bounding_box_spans_keypoints():
    pose = pose_from_dict(pose_dict(BODY))
    assert np.array_equal(pose.box_xyxy, [30.0, 15.0, 70.0, 60.0])


def test_full_pose_detection_uses_bounding_box():
    pose = pose_from_dict(pose_dict(BODY, bbox=(10, 0, 90, 100)))
    d = detection_from_pose(pose, use_all_keypoints=True)
    assert d.centroid == (50.0, 50.0)
    assert np.array_equal(d.box_xyxy, [10.0, 0.0, 90.0, 100.0])
    assert d.score == 0.9


def test_face_detection_uses_five_landmarks():
    pose = pose_from_dict(pose_dict(BODY, bbox=(10, 0, 90, 100)))
    d = detection_from_pose(pose, use_all_keypoints=False)
    assert np.array_equal(d.box_xyxy, [40.0, 15.0, 60.0, 20.0])
    assert d.centroid == (50.0, 17.5)


def test_face_detection_needs_landmarks():
    pose = Pose(keypoints=(Keypoint("nose", 1.0, 1.0),), score=1.0, box_xyxy=np.zeros(4))
    with pytest.raises(ValueError):
        detection_from_pose(pose, use_all_keypoints=False)


def test_low_confidence_poses_are_dropped_in_order():
    poses = [
        pose_from_dict(pose_dict(BODY, score=0.9, bbox=(0, 0, 10, 10))),
        pose_from_dict(pose_dict(BODY, score=0.3, bbox=(100, 100, 110, 110))),
        pose_from_dict(pose_dict(BODY, score=0.625, bbox=(200, 200, 210, 210))),
    ]
    dets = detections_from_poses(poses, min_pose_confidence=0.625)
    assert [d.centroid for d in dets] == [(5.0, 5.0), (205.0, 205.0)]

    assert len(detections_from_poses(poses)) == 3


def test_pose_without_keypoints_is_rejected():
    with pytest.raises(ValueError):
        pose_from_dict({"pose": {"score": 1.0, "keypoints": []}})
    with pytest.raises(ValueError):
        pose_from_dict({"pose": {"keypoints": [{"part": "nose", "position": {"x": 1}}]}})


def test_detection_from_dict_variants():
    d = detection_from_dict({"centroid": [3, 4]})
    assert d.centroid == (3.0, 4.0)
    assert d.box_xyxy is None
    assert d.score == 1.0

    d = detection_from_dict({"bbox": [0, 0, 10, 20], "score": 0.5})
    assert d.centroid == (5.0, 10.0)
    assert np.array_equal(d.box_xyxy, [0.0, 0.0, 10.0, 20.0])
    assert d.score == 0.5

    d = detection_from_dict({"centroid": [1, 1], "bbox": {"minX": 0, "minY": 0, "maxX": 4, "maxY": 4}})
    assert d.centroid == (1.0, 1.0)
    assert np.array_equal(d.box_xyxy, [0.0, 0.0, 4.0, 4.0])


def test_detection_from_dict_rejects_bad_geometry():
    with pytest.raises(ValueError):
        detection_from_dict({})
    with pytest.raises(ValueError):
        detection_from_dict({"centroid": [1, 2, 3]})
    with pytest.raises(ValueError):
        detection_from_dict({"bbox": [1, 2]})


def test_box_helpers():
    box = box_from_points([3, 1, 2], [5, 9, 7])
    assert np.array_equal(box, [1.0, 5.0, 3.0, 9.0])
    assert xyxy_center(box) == (2.0, 7.0)
    with pytest.raises(ValueError):
        box_from_points([], [])


def test_pose_with_non_mapping_body_is_rejected():
    with pytest.raises(ValueError):
        pose_from_dict({"pose": [1, 2]})
    with pytest.raises(ValueError):
        pose_from_dict([1, 2])
