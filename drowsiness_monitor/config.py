"""
Configuration file for drowsiness classification thresholds and alert settings

Every constant can be overridden from the environment (or a .env file)
using the DROWSY_ prefix, e.g. DROWSY_WINDOW_FRAMES=20.
"""

import os

from dotenv import load_dotenv

load_dotenv()  # Load .env file if it exists

ENV_PREFIX = "DROWSY_"


def _env(name, default, cast):
    """
    Read an override for a constant from the environment.

    Args:
        name: Constant name without prefix
        default: Value used when the variable is unset or empty
        cast: Callable converting the raw string

    Returns:
        Converted value or default
    """
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from e


def _optional_float(raw):
    return None if raw.lower() == "none" else float(raw)


# Eye-open probability thresholds
# Detector probability below threshold => eye counted as closed for that frame
EYE_CLOSED_PROBABILITY = _env("EYE_CLOSED_PROBABILITY", 0.4, float)
EYE_COMBINE_MODE = _env("EYE_COMBINE_MODE", "min", str)   # "min" or "mean"

# Sliding window (PERCLOS-style closed-frame fraction)
WINDOW_FRAMES = _env("WINDOW_FRAMES", 15, int)            # ~0.5s at 30 FPS
WINDOW_SECONDS = _env("WINDOW_SECONDS", None, _optional_float)  # None => frame window only
MIN_VALID_SAMPLES = _env("MIN_VALID_SAMPLES", 8, int)     # fewer => not drowsy

# Hysteresis band
DROWSY_RATIO = _env("DROWSY_RATIO", 0.7, float)           # closed fraction >= 0.7 => drowsy
RECOVER_RATIO = _env("RECOVER_RATIO", 0.4, float)         # closed fraction < 0.4 => awake again

# Head pose limits (degrees); frames beyond these are excluded from the window
MAX_YAW_DEGREES = _env("MAX_YAW_DEGREES", 40.0, float)
MAX_PITCH_DEGREES = _env("MAX_PITCH_DEGREES", 30.0, float)
MAX_ROLL_DEGREES = _env("MAX_ROLL_DEGREES", 45.0, float)

# Identity registry
STALE_FRAMES = _env("STALE_FRAMES", 30, int)              # unseen for > N frames => evicted

# Alert policy: "any" (one drowsy face alerts) or "all"
AGGREGATION_POLICY = _env("AGGREGATION_POLICY", "any", str)

# Audio alert settings
ALERT_FREQUENCY_HZ = _env("ALERT_FREQUENCY_HZ", 1000, int)
ALERT_VOLUME = _env("ALERT_VOLUME", 1.0, float)
ALERT_SAMPLE_RATE = _env("ALERT_SAMPLE_RATE", 22050, int)
ALERT_TONE_SECONDS = _env("ALERT_TONE_SECONDS", 0.3, float)
ALERT_SOUND_FILE = _env("ALERT_SOUND_FILE", None, str)    # optional .wav/.ogg instead of tone
