"""Sleep score combination and per-sample sleep-stage classification.

The sleep score is a 60/40 weighted blend of the movement and heart-rate
scores.  The stage comes from a fixed decision table over the movement score
and the filtered heart rate; no transition history is kept between samples.
"""

from __future__ import annotations

import math
from enum import Enum

from sleepsense.analytics.motion import SCORE_MOVING, SCORE_STILL


class SleepStage(str, Enum):
    """Per-sample sleep stage label."""

    AWAKE = "Awake"
    LIGHT = "Light"
    DEEP = "Deep"
    REM = "REM"


MOVEMENT_WEIGHT = 0.6
HR_WEIGHT = 0.4

DEEP_HR_CEILING = 60.0  # bpm; still + HR below this -> deep


def combine_scores(movement: int, hr_score: int) -> int:
    """Weighted blend rounded half-up into an int in [0, 100]."""
    blended = movement * MOVEMENT_WEIGHT + hr_score * HR_WEIGHT
    score = math.floor(blended + 0.5)
    return max(0, min(100, score))


def classify_stage(movement: int, hr: float | None) -> SleepStage:
    """Pick a stage for one sample (first matching rule wins).

    Args:
        movement: Movement score from :func:`movement_score`.
        hr: Filtered heart rate in bpm, or None when there is no valid reading.
    """
    if movement <= SCORE_MOVING:
        return SleepStage.AWAKE
    if movement >= SCORE_STILL:
        if hr is None:
            # Still with no HR: Light, not the Deep that treating a missing
            # reading as 0 bpm would give
            return SleepStage.LIGHT
        if hr < DEEP_HR_CEILING:
            return SleepStage.DEEP
        return SleepStage.REM
    return SleepStage.LIGHT
