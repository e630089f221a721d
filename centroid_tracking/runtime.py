from __future__ import annotations

import sys
from typing import Any, Dict

from .pipeline import FrameResult
from .utils.track_logger import TrackLogger, default_track_log_path


def create_track_logger(logging_cfg: Dict[str, Any]) -> TrackLogger | None:
    if not logging_cfg.get("enabled", False):
        return None

    log_path = logging_cfg.get("path") or default_track_log_path()
    flush_every = int(logging_cfg.get("flush_every", 60))
    track_logger = TrackLogger(str(log_path), flush_every=flush_every)
    print(f"[INFO] track log enabled: {track_logger.path}", file=sys.stderr)
    return track_logger


def log_track_sample(
    track_logger: TrackLogger | None,
    frame_idx: int,
    result: FrameResult,
) -> None:
    if track_logger is None:
        return

    track_logger.log(
        frame_idx=frame_idx,
        n_detections=len(result.detections),
        objects=result.objects,
    )


def result_to_payload(frame_idx: int, result: FrameResult) -> Dict[str, Any]:
    objects = []
    for oid, obj in result.objects.items():
        bbox = None
        if obj.box_xyxy is not None:
            bbox = [float(v) for v in obj.box_xyxy]
        objects.append(
            {
                "id": int(oid),
                "x": float(obj.centroid[0]),
                "y": float(obj.centroid[1]),
                "bbox": bbox,
                "disappeared": int(obj.disappeared),
                "visible": oid in result.visible,
            }
        )
    return {"frame": int(frame_idx), "objects": objects}


def close_track_logger(track_logger: TrackLogger | None) -> None:
    if track_logger is None:
        return
    try:
        track_logger.close()
        print(
            f"[INFO] track log saved: {track_logger.path} ({track_logger.summary_text()})",
            file=sys.stderr,
        )
    except OSError as e:
        print(f"[WARN] track logger close failed: {e}", file=sys.stderr)
