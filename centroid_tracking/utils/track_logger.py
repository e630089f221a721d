from __future__ import annotations

import csv
import math
import os
import time
from typing import Any, Dict, List, Mapping, Tuple

from ..tracking.base import TrackedObject


def default_track_log_path(prefix_dir: str = "logs", basename_prefix: str = "track_log") -> str:
    """Return default CSV log path like `logs/track_log_YYYYmmdd_HHMMSS.csv`."""
    ts = time.strftime("%Y%m%d_%H%M%S")
    return os.path.join(prefix_dir, f"{basename_prefix}_{ts}.csv")


class TrackLogger:
    """Buffered CSV log of the tracker registry, one row per object per frame.

    What it logs:
    - object id, centroid (x,y), bbox (x1,y1,x2,y2) if available
    - disappearance count, so grace-period frames can be told apart
    - dx, dy of the centroid since the previous row of the same id
    - counts of detections/objects to help sanity-check

    Notes:
    - It buffers rows and flushes every `flush_every` frames.
    - A frame with no tracked objects still gets one row with an empty id.
    """

    HEADER = [
        "frame_idx",
        "n_detections",
        "n_objects",
        "object_id",
        "x",
        "y",
        "x1",
        "y1",
        "x2",
        "y2",
        "disappeared",
        "dx",
        "dy",
    ]

    def __init__(self, path: str, flush_every: int = 60) -> None:
        self.path = path
        self.flush_every = max(1, int(flush_every))
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        self._fp = open(path, "w", newline="", encoding="utf-8")
        self._wr = csv.writer(self._fp)
        self._wr.writerow(self.HEADER)

        self._buf: List[List[Any]] = []
        self._frames_since_flush = 0
        self._prev_xy: Dict[int, Tuple[float, float]] = {}
        self._seen_ids: set = set()
        self._frames = 0
        self._steps = 0
        self._sum_step = 0.0

    def log(
        self,
        *,
        frame_idx: int,
        n_detections: int,
        objects: Mapping[int, TrackedObject],
    ) -> None:
        self._frames += 1
        if not objects:
            self._buf.append([int(frame_idx), int(n_detections), 0] + [None] * (len(self.HEADER) - 3))

        for oid, obj in objects.items():
            x, y = float(obj.centroid[0]), float(obj.centroid[1])
            if obj.box_xyxy is None:
                x1 = y1 = x2 = y2 = None
            else:
                x1, y1, x2, y2 = (float(v) for v in obj.box_xyxy)

            dx = dy = None
            prev = self._prev_xy.get(oid)
            if prev is not None and obj.is_visible:
                dx = x - prev[0]
                dy = y - prev[1]
                self._sum_step += math.hypot(dx, dy)
                self._steps += 1
            self._prev_xy[oid] = (x, y)
            self._seen_ids.add(oid)

            self._buf.append(
                [
                    int(frame_idx),
                    int(n_detections),
                    len(objects),
                    int(oid),
                    x,
                    y,
                    x1,
                    y1,
                    x2,
                    y2,
                    int(obj.disappeared),
                    dx,
                    dy,
                ]
            )

        # ids that left the registry no longer need a previous position
        for oid in [k for k in self._prev_xy if k not in objects]:
            del self._prev_xy[oid]

        self._frames_since_flush += 1
        if self._frames_since_flush >= self.flush_every:
            self.flush()

    def flush(self) -> None:
        self._frames_since_flush = 0
        if not self._buf:
            return
        self._wr.writerows(self._buf)
        self._buf.clear()
        self._fp.flush()

    def close(self) -> None:
        try:
            self.flush()
        finally:
            self._fp.close()

    def summary_text(self) -> str:
        if self._frames <= 0:
            return "(no frames logged)"
        text = f"frames={self._frames}, ids={len(self._seen_ids)}"
        if self._steps > 0:
            text += f", mean_step={self._sum_step / float(self._steps):.2f}px"
        return text
