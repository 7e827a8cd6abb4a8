"""
Frame Processor Module
Per-frame glue: observations -> classifiers -> alert coordinator -> actuator
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List

from drowsiness_monitor.alert_coordinator import AlertCommand, AlertCoordinator
from drowsiness_monitor.identity_registry import IdentityRegistry

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Outcome of one processed frame.

    Attributes:
        frame_index: Internal frame counter (1-based).
        verdicts: Verdict per identity observed in this frame, for display.
        command: Command dispatched to the actuator.
        evicted: Identities dropped as stale during this frame.
    """

    frame_index: int
    verdicts: Dict[int, bool] = field(default_factory=dict)
    command: AlertCommand = AlertCommand.NONE
    evicted: List[int] = field(default_factory=list)


class FrameProcessor:
    """
    Drives the classifiers and the alert for a processing session.

    A single lock covers a full frame (every observe() plus the coordinator
    update) so the aggregate verdict is a consistent snapshot even when
    frames are delivered from detector callback threads.
    """

    def __init__(self, actuator, registry=None, coordinator=None, single_face=False):
        """
        Initialize processor.

        Args:
            actuator: Object with start_alert() / stop_alert() (and optionally release())
            registry: IdentityRegistry (default one is created if omitted)
            coordinator: AlertCoordinator (default one is created if omitted)
            single_face: Only classify the first identified face of each frame
        """
        self.actuator = actuator
        self.registry = registry if registry is not None else IdentityRegistry()
        self.coordinator = coordinator if coordinator is not None else AlertCoordinator()
        self.single_face = single_face

        self._lock = threading.Lock()
        self._frame = 0
        self._stopped = False

    @property
    def frame_count(self):
        return self._frame

    @property
    def stopped(self):
        return self._stopped

    def process_frame(self, faces):
        """
        Process all face observations of one frame.

        Args:
            faces: Iterable of FaceObservation

        Returns:
            FrameResult with per-face verdicts and the dispatched command

        Raises:
            RuntimeError: If the processor has been stopped
        """
        with self._lock:
            if self._stopped:
                raise RuntimeError("FrameProcessor has been stopped")

            self._frame += 1
            result = FrameResult(frame_index=self._frame)

            for face in faces:
                if face.track_id is None:
                    logger.debug("Dropping face without tracking id (frame %d)", self._frame)
                    continue

                _log_face(face)
                classifier = self.registry.get_or_create(face.track_id, self._frame)
                result.verdicts[face.track_id] = classifier.observe(face)

                if self.single_face:
                    break

            result.evicted = self.registry.evict_stale(self._frame)
            result.command = self.coordinator.update(self.registry.verdicts().values())
            self._dispatch(result.command)
            return result

    def _dispatch(self, command):
        if command is AlertCommand.START:
            self.actuator.start_alert()
        elif command is AlertCommand.STOP:
            self.actuator.stop_alert()

    def on_failure(self, exc):
        """Record a detector failure for this frame; state is left untouched."""
        logger.error("Face detection failed: %s", exc)

    def stop(self):
        """
        End the session: silence the alert if playing, then release all state.

        Safe to call more than once.
        """
        with self._lock:
            if self._stopped:
                return
            self._stopped = True

            self._dispatch(self.coordinator.reset())
            release = getattr(self.actuator, "release", None)
            if release is not None:
                release()
            self.registry.clear()
            logger.info("Processing stopped after %d frames", self._frame)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


def _log_face(face):
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("face tracking id: %s", face.track_id)
    logger.debug("face left eye open probability: %s", face.left_eye_open)
    logger.debug("face right eye open probability: %s", face.right_eye_open)
    if face.head_pose is not None:
        logger.debug(
            "face Euler angles: yaw=%.1f pitch=%.1f roll=%.1f",
            face.head_pose.yaw, face.head_pose.pitch, face.head_pose.roll,
        )
