from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, IO, List, Optional

import yaml

from .config import build_effective_config, load_config
from .defaults import DEFAULTS
from .pipeline import build_tracker, process_frame
from .runtime import (
    close_track_logger,
    create_track_logger,
    log_track_sample,
    result_to_payload,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="centroid-tracking",
        description="Assign persistent ids to per-frame detections read as JSON lines.",
    )
    ap.add_argument("input", help="JSON-lines file, one frame per line ('-' for stdin)")
    ap.add_argument("-o", "--output", default=None, help="where to write per-frame JSON lines (default: stdout)")
    ap.add_argument("--config", default=None, help="config file (YAML/JSON)")
    ap.add_argument("--max-disappeared", default=None, type=int, help="missed frames before an id is retired")
    ap.add_argument("--face-keypoints", action="store_true", help="use face landmarks instead of the full pose bbox")
    ap.add_argument("--min-pose-confidence", default=None, type=float, help="drop poses scoring below this")
    ap.add_argument("--render-grace", default=None, type=int, help="missed frames an object still counts as visible")
    ap.add_argument("--no-track", action="store_true", help="disable tracking (detections are parsed only)")
    ap.add_argument("-l", "--log", action="store_true", help="record the tracker registry to CSV")
    ap.add_argument("--log-path", default=None, help="CSV path (default: logs/track_log_YYYYmmdd_HHMMSS.csv)")
    ap.add_argument("--log-flush-every", default=None, type=int, help="flush the CSV every N frames (default 60)")
    return ap.parse_args(argv)


def _apply_cli_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> None:
    if args.max_disappeared is not None:
        cfg["tracking"]["max_disappeared"] = int(args.max_disappeared)
    if args.render_grace is not None:
        cfg["tracking"]["render_grace"] = int(args.render_grace)
    if args.no_track:
        cfg["tracking"]["enabled"] = False

    if args.face_keypoints:
        cfg["pose"]["use_all_keypoints"] = False
    if args.min_pose_confidence is not None:
        cfg["pose"]["min_pose_confidence"] = float(args.min_pose_confidence)

    if args.output is not None:
        cfg["output"]["path"] = str(args.output)

    cfg["logging"]["enabled"] = bool(args.log or cfg["logging"].get("enabled", False))
    if args.log_path is not None:
        cfg["logging"]["path"] = str(args.log_path)
    if args.log_flush_every is not None:
        cfg["logging"]["flush_every"] = int(args.log_flush_every)

    if int(cfg["tracking"]["max_disappeared"]) < 0:
        raise ValueError(f"tracking.max_disappeared must be >= 0: got {cfg['tracking']['max_disappeared']!r}")
    if int(cfg["tracking"]["render_grace"]) < 0:
        raise ValueError(f"tracking.render_grace must be >= 0: got {cfg['tracking']['render_grace']!r}")


def _open_input(path: str) -> IO[str]:
    if path == "-":
        return sys.stdin
    return open(path, "r", encoding="utf-8")


def _open_output(path: Optional[str]) -> IO[str]:
    if path is None or path == "-":
        return sys.stdout
    return open(path, "w", encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        override = load_config(args.config)
        cfg = build_effective_config(DEFAULTS, override)
        _apply_cli_overrides(cfg, args)
        tracker = build_tracker(cfg["tracking"], cfg["pose"])
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    if tracker is None:
        print("[INFO] tracking disabled", file=sys.stderr)

    render_grace = int(cfg["tracking"]["render_grace"])
    src = None
    dst = None
    track_logger = None
    try:
        try:
            src = _open_input(args.input)
            dst = _open_output(cfg["output"]["path"])
            track_logger = create_track_logger(cfg["logging"])
        except OSError as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            return 2

        last_idx = 0
        for line_no, line in enumerate(src, start=1):
            line = line.strip()
            if not line:
                continue

            try:
                record = json.loads(line)
                if not isinstance(record, dict):
                    raise ValueError("frame record must be a JSON object")
                if record.get("reset"):
                    if tracker is not None:
                        tracker.reset()
                    print(f"[INFO] tracker reset at line {line_no}", file=sys.stderr)
                    continue
                idx = int(record.get("frame", last_idx + 1))
                result = process_frame(record, cfg["pose"], tracker, render_grace=render_grace)
            except (ValueError, TypeError) as e:
                print(f"[WARN] skipping line {line_no}: {e}", file=sys.stderr)
                continue

            last_idx = idx
            log_track_sample(track_logger, idx, result)
            dst.write(json.dumps(result_to_payload(idx, result)) + "\n")

    finally:
        close_track_logger(track_logger)
        if src is not None and src is not sys.stdin:
            src.close()
        if dst is not None and dst is not sys.stdout:
            dst.close()

    return 0
