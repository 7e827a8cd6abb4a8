"""
Replay Entry Point for the Drowsiness Monitor

Feeds recorded detector output through the classifiers and alert logic,
one frame per line. Each line is a JSON list of face records, or an object
with a "faces" list:

    [{"track_id": 1, "left_eye_open": 0.9, "right_eye_open": 0.85, "yaw": 3.0}]

Run with: python -m drowsiness_monitor.main frames.jsonl [--silent]
"""

import argparse
import json
import logging
import sys

from drowsiness_monitor.alert_coordinator import AlertCommand, AlertCoordinator
from drowsiness_monitor.alerter import LogAlerter, SoundAlerter
from drowsiness_monitor.config import AGGREGATION_POLICY, STALE_FRAMES
from drowsiness_monitor.frame_processor import FrameProcessor
from drowsiness_monitor.identity_registry import IdentityRegistry
from drowsiness_monitor.observation import FaceObservation

logger = logging.getLogger(__name__)


def parse_frame(line):
    """
    Parse one JSON line into a list of FaceObservation.

    Raises:
        ValueError: If the line is not valid JSON or has the wrong shape
    """
    data = json.loads(line)
    if isinstance(data, dict):
        data = data.get("faces", [])
    if not isinstance(data, list):
        raise ValueError("frame must be a list of faces or an object with 'faces'")
    return [FaceObservation.from_dict(face) for face in data]


def replay(lines, processor, out=None):
    """
    Run every frame through the processor.

    Args:
        lines: Iterable of JSON lines
        processor: FrameProcessor
        out: Stream receiving one line per alert command (stdout by default)

    Returns:
        Dict with frame, start, stop and skipped counts
    """
    out = out if out is not None else sys.stdout
    summary = {"frames": 0, "starts": 0, "stops": 0, "skipped": 0}

    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            faces = parse_frame(line)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Skipping line %d: %s", line_no, e)
            summary["skipped"] += 1
            continue

        result = processor.process_frame(faces)
        summary["frames"] += 1

        if result.command is AlertCommand.NONE:
            continue
        if result.command is AlertCommand.START:
            summary["starts"] += 1
        else:
            summary["stops"] += 1
        drowsy = sorted(k for k, v in result.verdicts.items() if v)
        print(
            f"frame {result.frame_index}: {result.command.value.upper()} "
            f"(drowsy ids: {drowsy})",
            file=out,
        )

    return summary


def build_parser():
    parser = argparse.ArgumentParser(
        description="Replay recorded face observations through the drowsiness monitor"
    )
    parser.add_argument("frames", help="JSON-lines file, one frame per line ('-' for stdin)")
    parser.add_argument("--silent", action="store_true", help="Log alerts instead of playing sound")
    parser.add_argument("--policy", choices=["any", "all"], default=AGGREGATION_POLICY,
                        help="Alert when any / all tracked faces are drowsy")
    parser.add_argument("--stale-frames", type=int, default=STALE_FRAMES,
                        help="Frames before an unseen face is forgotten")
    parser.add_argument("--single-face", action="store_true",
                        help="Only classify the first face of each frame")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    """Replay entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    actuator = LogAlerter() if args.silent else SoundAlerter()
    processor = FrameProcessor(
        actuator,
        registry=IdentityRegistry(stale_frames=args.stale_frames),
        coordinator=AlertCoordinator(policy=args.policy),
        single_face=args.single_face,
    )

    stream = sys.stdin if args.frames == "-" else open(args.frames, encoding="utf-8")
    try:
        with processor:
            summary = replay(stream, processor)
    finally:
        if stream is not sys.stdin:
            stream.close()

    print(
        f"Processed {summary['frames']} frames | "
        f"Alerts started: {summary['starts']} | stopped: {summary['stops']} | "
        f"skipped lines: {summary['skipped']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
