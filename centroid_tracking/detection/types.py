from __future__ import annotations

from typing import Any, Iterable, Mapping, Tuple
import numpy as np

from ..tracking.base import Detection


def xyxy_center(box_xyxy: np.ndarray) -> Tuple[float, float]:
    x1, y1, x2, y2 = np.asarray(box_xyxy, dtype=float).tolist()
    return (x1 + x2) / 2.0, (y1 + y2) / 2.0


def box_from_points(xs: Iterable[float], ys: Iterable[float]) -> np.ndarray:
    """Axis-aligned box [x1,y1,x2,y2] spanning the given points."""
    xs = [float(x) for x in xs]
    ys = [float(y) for y in ys]
    if not xs or not ys:
        raise ValueError("box_from_points needs at least one point")
    return np.array([min(xs), min(ys), max(xs), max(ys)], dtype=float)


def as_box_xyxy(value: Any) -> np.ndarray:
    if isinstance(value, Mapping):
        try:
            value = [value["minX"], value["minY"], value["maxX"], value["maxY"]]
        except KeyError as e:
            raise ValueError(f"bbox mapping is missing {e.args[0]!r}") from e
    box = np.asarray(value, dtype=float).reshape(-1)
    if box.shape != (4,):
        raise ValueError(f"bbox must have 4 values (x1,y1,x2,y2): got {value!r}")
    return box


def detection_from_dict(d: Mapping[str, Any]) -> Detection:
    """Parse `{"centroid": [x, y], "bbox": [x1, y1, x2, y2], "score": s}`.

    `bbox` and `score` are optional. Without `centroid` the bbox centre is used.
    """
    if not isinstance(d, Mapping):
        raise ValueError(f"detection must be a mapping: got {type(d).__name__}")
    box = as_box_xyxy(d["bbox"]) if d.get("bbox") is not None else None

    if d.get("centroid") is not None:
        c = np.asarray(d["centroid"], dtype=float).reshape(-1)
        if c.shape != (2,):
            raise ValueError(f"centroid must have 2 values (x,y): got {d['centroid']!r}")
        centroid = (float(c[0]), float(c[1]))
    elif box is not None:
        centroid = xyxy_center(box)
    else:
        raise ValueError("detection needs a 'centroid' or a 'bbox'")

    return Detection(centroid=centroid, box_xyxy=box, score=float(d.get("score", 1.0)))
