"""
Driver Drowsiness Monitor

Turns per-frame face observations from an external detector into
per-face drowsiness verdicts and a single debounced audio alert:
- Observation types and clamping
- Sliding-window drowsiness classifier with hysteresis
- Identity registry with staleness eviction
- Alert coordinator (Idle/Playing state machine)
- Audio alerter
- Frame processor gluing it all together
"""

from drowsiness_monitor.alert_coordinator import (
    AlertCommand,
    AlertCoordinator,
    AlertState,
)
from drowsiness_monitor.drowsiness_classifier import DrowsinessClassifier
from drowsiness_monitor.frame_processor import FrameProcessor, FrameResult
from drowsiness_monitor.identity_registry import IdentityRegistry
from drowsiness_monitor.observation import FaceObservation, HeadPose

__version__ = "1.0.0"

__all__ = [
    "AlertCommand",
    "AlertCoordinator",
    "AlertState",
    "DrowsinessClassifier",
    "FaceObservation",
    "FrameProcessor",
    "FrameResult",
    "HeadPose",
    "IdentityRegistry",
]
