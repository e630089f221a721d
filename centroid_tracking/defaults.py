from __future__ import annotations

from typing import Any, Dict


DEFAULTS: Dict[str, Any] = {
    "tracking": {
        "enabled": True,
        "backend": "centroid",  # centroid | noop
        "max_disappeared": 180,
        "render_grace": 0,  # objects with disappeared <= render_grace count as visible
    },
    "pose": {
        "use_all_keypoints": True,
        "min_pose_confidence": 0.625,
    },
    "output": {
        "path": None,  # None -> stdout
    },
    "logging": {
        "enabled": False,
        "path": None,
        "flush_every": 60,
    },
}
