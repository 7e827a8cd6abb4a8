"""
Observation Types Module
Per-frame, per-face signals delivered by the external face detector
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np


def clamp_probability(value):
    """
    Clamp a detector probability into [0, 1].

    Args:
        value: Raw probability or None when the detector could not compute it

    Returns:
        Clamped float, or None for unknown / NaN values
    """
    if value is None:
        return None
    value = float(value)
    if np.isnan(value):
        return None
    return float(np.clip(value, 0.0, 1.0))


@dataclass(frozen=True)
class HeadPose:
    """Head Euler angles in degrees (yaw = Y, pitch = X, roll = Z)."""

    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0

    def is_off_axis(self, max_yaw, max_pitch, max_roll):
        """True when any angle exceeds its limit (eye estimates unreliable)."""
        return (
            abs(self.yaw) > max_yaw
            or abs(self.pitch) > max_pitch
            or abs(self.roll) > max_roll
        )


@dataclass(frozen=True)
class FaceObservation:
    """One tracked face in one frame.

    Attributes:
        track_id: Detector tracking ID, None if no stable track was assigned.
        left_eye_open: Left eye open probability [0, 1] or None (unknown).
        right_eye_open: Right eye open probability [0, 1] or None (unknown).
        head_pose: Optional head Euler angles.
        timestamp: Capture time in seconds.
        frame_index: Source frame number.
    """

    track_id: Optional[int] = None
    left_eye_open: Optional[float] = None
    right_eye_open: Optional[float] = None
    head_pose: Optional[HeadPose] = None
    timestamp: Optional[float] = None
    frame_index: Optional[int] = None

    @property
    def eye_probabilities(self):
        """Clamped (left, right) probabilities; unknown stays None."""
        return (
            clamp_probability(self.left_eye_open),
            clamp_probability(self.right_eye_open),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FaceObservation":
        """Build an observation from a flat detector record.

        Head pose is attached when any of ``yaw``/``pitch``/``roll`` is present.
        """
        head_pose = None
        if any(data.get(k) is not None for k in ("yaw", "pitch", "roll")):
            head_pose = HeadPose(
                yaw=float(data.get("yaw") or 0.0),
                pitch=float(data.get("pitch") or 0.0),
                roll=float(data.get("roll") or 0.0),
            )

        track_id = data.get("track_id")
        timestamp = data.get("timestamp")
        frame_index = data.get("frame_index")
        left = data.get("left_eye_open")
        right = data.get("right_eye_open")
        return cls(
            track_id=int(track_id) if track_id is not None else None,
            left_eye_open=float(left) if left is not None else None,
            right_eye_open=float(right) if right is not None else None,
            head_pose=head_pose,
            timestamp=float(timestamp) if timestamp is not None else None,
            frame_index=int(frame_index) if frame_index is not None else None,
        )
