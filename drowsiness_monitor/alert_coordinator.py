"""
Alert Coordinator Module
Reduces per-face verdicts to one debounced start/stop command for the alarm
"""

import logging
from enum import Enum

from drowsiness_monitor.config import AGGREGATION_POLICY

logger = logging.getLogger(__name__)

POLICIES = ("any", "all")


class AlertState(Enum):
    IDLE = "idle"
    PLAYING = "playing"


class AlertCommand(Enum):
    NONE = "none"
    START = "start"
    STOP = "stop"


def aggregate(verdicts, policy="any"):
    """
    Combine per-identity verdicts into one alert decision.

    Args:
        verdicts: Iterable of booleans, one per tracked identity
        policy: "any" (at least one drowsy) or "all" (every identity drowsy)

    Returns:
        True if the alert should be sounding
    """
    verdicts = list(verdicts)
    if policy == "any":
        return any(verdicts)
    if policy == "all":
        return bool(verdicts) and all(verdicts)
    raise ValueError(f"policy must be one of {POLICIES}, got {policy!r}")


def transition(state, drowsy):
    """
    Alert state machine step.

    Idle -> Playing emits START, Playing -> Idle emits STOP,
    every other combination is a self-loop with NONE.

    Returns:
        Tuple of (next_state, command)
    """
    if state is AlertState.IDLE and drowsy:
        return AlertState.PLAYING, AlertCommand.START
    if state is AlertState.PLAYING and not drowsy:
        return AlertState.IDLE, AlertCommand.STOP
    return state, AlertCommand.NONE


class AlertCoordinator:
    """
    Holds the single global alert state.

    Emits START at most once per Idle -> Playing transition and STOP at most
    once per Playing -> Idle transition, so the actuator is never told to do
    what it is already doing.
    """

    def __init__(self, policy=AGGREGATION_POLICY):
        if policy not in POLICIES:
            raise ValueError(f"policy must be one of {POLICIES}, got {policy!r}")
        self.policy = policy
        self.state = AlertState.IDLE

    @property
    def is_playing(self):
        return self.state is AlertState.PLAYING

    def update(self, verdicts):
        """
        Process this frame's verdicts.

        Args:
            verdicts: Iterable of booleans for all tracked identities

        Returns:
            AlertCommand to forward to the actuator
        """
        drowsy = aggregate(verdicts, self.policy)
        self.state, command = transition(self.state, drowsy)

        if command is AlertCommand.START:
            logger.info("[ALERT START] Drowsiness detected (policy=%s)", self.policy)
        elif command is AlertCommand.STOP:
            logger.info("[ALERT STOP] Drowsiness cleared")
        return command

    def reset(self):
        """
        Return to Idle.

        Returns:
            STOP if an alert was playing, NONE otherwise
        """
        self.state, command = transition(self.state, False)
        if command is AlertCommand.STOP:
            logger.info("[ALERT STOP] Coordinator reset while playing")
        return command
