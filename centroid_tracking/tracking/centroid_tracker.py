from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .base import Detection, TrackedObject


@dataclass
class CentroidConfig:
    """Config for the centroid identity tracker.

    This backend is designed for cases where:
      - detections arrive once per frame as centroids (plus an optional bbox),
      - objects move only a little between consecutive frames,
      - detections can drop out for a while (occlusion, low pose score)
        and the identity should survive the gap.

    Key idea:
      - match objects to detections by centroid distance, greedily taking the
        closest remaining pair first,
      - keep unmatched objects alive for `max_disappeared` frames before
        retiring their identifier for good.
    """

    # Lifecycle
    max_disappeared: int = 180            # allowed consecutive missed frames before deregistering

    # Upstream reduction (read by the pose -> detection step, not by the tracker)
    use_all_keypoints: bool = True        # full pose bbox vs. face landmarks only

    def __post_init__(self) -> None:
        if int(self.max_disappeared) < 0:
            raise ValueError(f"max_disappeared must be >= 0: got {self.max_disappeared!r}")


class _ObjectState:
    __slots__ = ("id", "centroid", "box", "disappeared")

    def __init__(self, oid: int, centroid: Tuple[float, float], box_xyxy: Optional[np.ndarray]) -> None:
        self.id = oid
        self.centroid = (float(centroid[0]), float(centroid[1]))
        self.box = None if box_xyxy is None else np.asarray(box_xyxy, dtype=float).copy()
        self.disappeared = 0

    def observe(self, det: Detection) -> None:
        self.centroid = (float(det.centroid[0]), float(det.centroid[1]))
        self.box = None if det.box_xyxy is None else np.asarray(det.box_xyxy, dtype=float).copy()
        self.disappeared = 0

    def snapshot(self) -> TrackedObject:
        return TrackedObject(
            object_id=self.id,
            centroid=self.centroid,
            box_xyxy=None if self.box is None else self.box.copy(),
            disappeared=int(self.disappeared),
        )


def _distance_matrix(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Pairwise Euclidean distances between (N,2) and (M,2) point sets."""
    return np.linalg.norm(a[:, None, :] - b[None, :, :], axis=2)


def _greedy_assignment(dist: np.ndarray) -> List[Tuple[int, int]]:
    """Return list of (object_idx, det_idx) assignments.

    Repeatedly takes the smallest remaining distance; ties resolve to the
    first entry in row-major order (np.argmin semantics).
    """
    n_obj, n_det = dist.shape
    pairs: List[Tuple[int, int]] = []
    if n_obj == 0 or n_det == 0:
        return pairs

    cost = dist.astype(float).copy()
    for _ in range(min(n_obj, n_det)):
        r, c = np.unravel_index(np.argmin(cost, axis=None), cost.shape)
        if not np.isfinite(cost[r, c]):
            break
        pairs.append((int(r), int(c)))
        cost[r, :] = np.inf
        cost[:, c] = np.inf
    return pairs


class CentroidTracker:
    """Greedy nearest-centroid identity tracker.

    Interface:
      update(detections) -> Dict[int, TrackedObject]
      reset()
    """

    FIRST_ID = 1

    def __init__(self, cfg: CentroidConfig):
        self._cfg = cfg
        self._objects: Dict[int, _ObjectState] = {}
        self._next_id = self.FIRST_ID

    @property
    def max_disappeared(self) -> int:
        return int(self._cfg.max_disappeared)

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def objects(self) -> Dict[int, TrackedObject]:
        return {oid: st.snapshot() for oid, st in self._objects.items()}

    def __len__(self) -> int:
        return len(self._objects)

    def register(self, centroid: Tuple[float, float], box_xyxy: Optional[np.ndarray] = None) -> int:
        oid = self._next_id
        self._next_id += 1
        self._objects[oid] = _ObjectState(oid, centroid, box_xyxy)
        return oid

    def deregister(self, object_id: int) -> None:
        del self._objects[object_id]

    def reset(self) -> None:
        self._objects.clear()
        self._next_id = self.FIRST_ID

    def _mark_missed(self, object_id: int) -> None:
        st = self._objects[object_id]
        st.disappeared += 1
        if st.disappeared > self.max_disappeared:
            self.deregister(object_id)

    def update(self, detections: Sequence[Detection]) -> Dict[int, TrackedObject]:
        detections = list(detections)

        if len(detections) == 0:
            for oid in list(self._objects.keys()):
                self._mark_missed(oid)
            return self.objects

        if len(self._objects) == 0:
            for det in detections:
                self.register(det.centroid, det.box_xyxy)
            return self.objects

        object_ids = list(self._objects.keys())
        obj_centers = np.array([self._objects[oid].centroid for oid in object_ids], dtype=float).reshape(-1, 2)
        det_centers = np.array([d.centroid for d in detections], dtype=float).reshape(-1, 2)

        matches = _greedy_assignment(_distance_matrix(obj_centers, det_centers))
        matched_obj = {i for i, _ in matches}
        matched_det = {j for _, j in matches}

        # Update matched objects
        for i, j in matches:
            self._objects[object_ids[i]].observe(detections[j])

        # Age unmatched objects (more objects than detections)
        for i, oid in enumerate(object_ids):
            if i not in matched_obj:
                self._mark_missed(oid)

        # Create new objects from unmatched detections
        for j, det in enumerate(detections):
            if j in matched_det:
                continue
            self.register(det.centroid, det.box_xyxy)

        return self.objects
