"""Shared fixtures for drowsiness monitor tests."""

import pytest

from drowsiness_monitor.drowsiness_classifier import DrowsinessClassifier
from drowsiness_monitor.observation import FaceObservation, HeadPose


class RecordingActuator:
    """Actuator double that records every command it receives."""

    def __init__(self):
        self.calls = []
        self.released = 0

    def start_alert(self):
        self.calls.append("start")

    def stop_alert(self):
        self.calls.append("stop")

    def release(self):
        self.released += 1


@pytest.fixture
def actuator():
    return RecordingActuator()


@pytest.fixture
def make_face():
    """Factory: make_face(track_id, prob) with both eyes at ``prob``."""

    def _make(track_id=1, prob=0.9, right=None, pose=None, timestamp=None):
        return FaceObservation(
            track_id=track_id,
            left_eye_open=prob,
            right_eye_open=prob if right is None else right,
            head_pose=HeadPose(*pose) if pose is not None else None,
            timestamp=timestamp,
        )

    return _make


@pytest.fixture
def small_classifier():
    """Factory for a classifier with a short window and explicit thresholds."""

    def _make(**overrides):
        params = dict(
            closed_threshold=0.4,
            window_size=10,
            window_seconds=None,
            drowsy_ratio=0.7,
            recover_ratio=0.4,
            min_valid_samples=5,
            combine="min",
            max_yaw=40.0,
            max_pitch=30.0,
            max_roll=45.0,
        )
        params.update(overrides)
        return DrowsinessClassifier(**params)

    return _make
