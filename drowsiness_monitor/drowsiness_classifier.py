"""
Drowsiness Classifier Module
Turns a noisy per-frame eye-openness stream for one face into a stable verdict
"""

import logging
from collections import deque

import numpy as np

from drowsiness_monitor.config import (
    DROWSY_RATIO,
    EYE_CLOSED_PROBABILITY,
    EYE_COMBINE_MODE,
    MAX_PITCH_DEGREES,
    MAX_ROLL_DEGREES,
    MAX_YAW_DEGREES,
    MIN_VALID_SAMPLES,
    RECOVER_RATIO,
    WINDOW_FRAMES,
    WINDOW_SECONDS,
)

logger = logging.getLogger(__name__)

COMBINE_MODES = ("min", "mean")


class DrowsinessClassifier:
    """
    Sliding-window eye closure classifier with a hysteresis band.

    Each usable frame is reduced to a single closed/open sample. The verdict
    turns drowsy once the closed fraction of the window reaches
    ``drowsy_ratio`` and turns back only when it falls below
    ``recover_ratio``. Frames with unknown eye probabilities or an
    off-axis head pose carry no evidence and are left out of the window.
    """

    def __init__(
        self,
        closed_threshold=EYE_CLOSED_PROBABILITY,
        window_size=WINDOW_FRAMES,
        window_seconds=WINDOW_SECONDS,
        drowsy_ratio=DROWSY_RATIO,
        recover_ratio=RECOVER_RATIO,
        min_valid_samples=MIN_VALID_SAMPLES,
        combine=EYE_COMBINE_MODE,
        max_yaw=MAX_YAW_DEGREES,
        max_pitch=MAX_PITCH_DEGREES,
        max_roll=MAX_ROLL_DEGREES,
    ):
        """
        Initialize classifier.

        Args:
            closed_threshold: Eye-open probability below which a frame counts as closed
            window_size: Maximum number of valid samples kept
            window_seconds: Optional time window; older samples are dropped
            drowsy_ratio: Closed fraction needed to enter the drowsy verdict
            recover_ratio: Closed fraction below which the drowsy verdict clears
            min_valid_samples: Samples required before any drowsy verdict
            combine: How left/right probabilities are merged ("min" or "mean")
            max_yaw: Yaw limit in degrees for a usable frame
            max_pitch: Pitch limit in degrees for a usable frame
            max_roll: Roll limit in degrees for a usable frame
        """
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        if window_seconds is not None and window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {window_seconds}")
        if not 0.0 <= recover_ratio <= drowsy_ratio <= 1.0:
            raise ValueError(
                "expected 0 <= recover_ratio <= drowsy_ratio <= 1, "
                f"got recover_ratio={recover_ratio}, drowsy_ratio={drowsy_ratio}"
            )
        if combine not in COMBINE_MODES:
            raise ValueError(f"combine must be one of {COMBINE_MODES}, got {combine!r}")

        self.closed_threshold = closed_threshold
        self.window_size = window_size
        self.window_seconds = window_seconds
        self.drowsy_ratio = drowsy_ratio
        self.recover_ratio = recover_ratio
        self.min_valid_samples = max(1, min(min_valid_samples, window_size))
        self.combine = combine
        self.max_yaw = max_yaw
        self.max_pitch = max_pitch
        self.max_roll = max_roll

        self._closed = deque(maxlen=window_size)      # True if closed, False if open
        self._timestamps = deque(maxlen=window_size)  # Timestamp for each sample (may be None)
        self._observed = 0
        self.is_drowsy = False
        self.last_transition = None

    @property
    def valid_samples(self):
        """Number of samples currently in the window."""
        return len(self._closed)

    @property
    def closed_ratio(self):
        """Fraction of closed samples in the window (0.0 when empty)."""
        if not self._closed:
            return 0.0
        return sum(self._closed) / len(self._closed)

    def eyes_closed(self, observation):
        """
        Reduce one observation to a closed/open sample.

        Returns:
            True (closed), False (open) or None when the frame carries no evidence
        """
        pose = observation.head_pose
        if pose is not None and pose.is_off_axis(self.max_yaw, self.max_pitch, self.max_roll):
            return None

        known = [p for p in observation.eye_probabilities if p is not None]
        if not known:
            return None

        if self.combine == "mean":
            openness = float(np.mean(known))
        else:
            openness = float(np.min(known))
        return openness < self.closed_threshold

    def observe(self, observation):
        """
        Update the window with a new observation and return the verdict.

        Args:
            observation: FaceObservation for this classifier's identity

        Returns:
            True if the face is currently judged drowsy
        """
        self._observed += 1
        sample = self.eyes_closed(observation)

        if sample is not None:
            self._closed.append(sample)
            self._timestamps.append(observation.timestamp)

        # Frames without evidence still advance the time window
        self._prune(observation.timestamp)
        self._update_verdict(observation)
        return self.is_drowsy

    def _prune(self, now):
        """Drop samples older than the time window, if one is configured."""
        if self.window_seconds is None or now is None:
            return
        while self._timestamps and self._timestamps[0] is not None and (
            now - self._timestamps[0]
        ) > self.window_seconds:
            self._timestamps.popleft()
            self._closed.popleft()

    def _update_verdict(self, observation):
        if self.valid_samples < self.min_valid_samples:
            drowsy = False
        elif self.is_drowsy:
            drowsy = self.closed_ratio >= self.recover_ratio
        else:
            drowsy = self.closed_ratio >= self.drowsy_ratio

        if drowsy != self.is_drowsy:
            self.is_drowsy = drowsy
            self.last_transition = self._position(observation)
            logger.info(
                "Verdict -> %s (closed ratio %.2f over %d samples, track %s)",
                "DROWSY" if drowsy else "AWAKE",
                self.closed_ratio,
                self.valid_samples,
                observation.track_id,
            )

    def _position(self, observation):
        """Timestamp, frame index or observation count, whichever is known."""
        if observation.timestamp is not None:
            return observation.timestamp
        if observation.frame_index is not None:
            return observation.frame_index
        return self._observed

    def reset(self):
        """Forget all samples and return to the not-drowsy verdict."""
        self._closed.clear()
        self._timestamps.clear()
        self._observed = 0
        self.is_drowsy = False
        self.last_transition = None
