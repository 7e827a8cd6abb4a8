"""
Audio Alerter Module
Plays a looping warning tone while the alert coordinator is in the Playing state
"""

import logging
from array import array

import pygame

from drowsiness_monitor.config import (
    ALERT_FREQUENCY_HZ,
    ALERT_SAMPLE_RATE,
    ALERT_SOUND_FILE,
    ALERT_TONE_SECONDS,
    ALERT_VOLUME,
)

logger = logging.getLogger(__name__)


def _tone_buffer(frequency_hz, duration_s, sample_rate, amp=12000):
    """
    Build a mono 16-bit square-ish wave.

    Args:
        frequency_hz: Tone frequency
        duration_s: Length of one tone period to loop
        sample_rate: Mixer sample rate
        amp: Peak amplitude

    Returns:
        Raw PCM bytes
    """
    n_samples = int(duration_s * sample_rate)
    buf = array("h")
    period = max(1, int(sample_rate / max(1, frequency_hz)))
    for i in range(n_samples):
        buf.append(amp if (i % period) < (period // 2) else -amp)
    return buf.tobytes()


class SoundAlerter:
    """
    Audio actuator backed by the pygame mixer.

    start_alert() loops the warning sound until stop_alert(). Device
    problems are logged and never raised; the caller does not retry.
    """

    def __init__(
        self,
        frequency_hz=ALERT_FREQUENCY_HZ,
        volume=ALERT_VOLUME,
        sample_rate=ALERT_SAMPLE_RATE,
        tone_seconds=ALERT_TONE_SECONDS,
        sound_file=ALERT_SOUND_FILE,
    ):
        """
        Initialize alerter. The mixer is opened lazily on the first alert.

        Args:
            frequency_hz: Warning tone frequency
            volume: Playback volume [0, 1]
            sample_rate: Mixer sample rate
            tone_seconds: Length of the looped tone segment
            sound_file: Optional sound file played instead of the tone
        """
        self.frequency_hz = frequency_hz
        self.volume = max(0.0, min(float(volume), 1.0))
        self.sample_rate = sample_rate
        self.tone_seconds = tone_seconds
        self.sound_file = sound_file

        self.audio_enabled = True
        self._sound = None
        self._channel = None

    @property
    def is_playing(self):
        return self._channel is not None

    def _load_sound(self):
        if self._sound is not None:
            return self._sound

        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=self.sample_rate, size=-16, channels=1)

        if self.sound_file:
            sound = pygame.mixer.Sound(self.sound_file)
        else:
            sound = pygame.mixer.Sound(
                buffer=_tone_buffer(self.frequency_hz, self.tone_seconds, self.sample_rate)
            )
        sound.set_volume(self.volume)
        self._sound = sound
        return sound

    def start_alert(self):
        """Start looping the warning sound."""
        if not self.audio_enabled or self._channel is not None:
            return
        try:
            sound = self._load_sound()
            self._channel = sound.play(loops=-1)
        except (pygame.error, FileNotFoundError) as e:
            self.audio_enabled = False
            logger.warning("Audio alerts disabled (%s)", e)
            return
        logger.debug("Warning sound started")

    def stop_alert(self):
        """Stop the currently playing warning sound, if any."""
        channel, self._channel = self._channel, None
        if channel is None:
            return
        try:
            channel.stop()
        except pygame.error as e:
            logger.warning("Failed to stop warning sound: %s", e)
            return
        logger.debug("Warning sound stopped")

    def release(self):
        """Stop playback and close the mixer. Safe to call more than once."""
        self.stop_alert()
        if self._sound is None:
            return
        self._sound = None
        try:
            pygame.mixer.quit()
        except pygame.error as e:
            logger.warning("Failed to close audio mixer: %s", e)


class LogAlerter:
    """Silent actuator that only logs commands (replay and calibration runs)."""

    def __init__(self):
        self.starts = 0
        self.stops = 0

    def start_alert(self):
        self.starts += 1
        logger.info("Alert sound would start")

    def stop_alert(self):
        self.stops += 1
        logger.info("Alert sound would stop")
