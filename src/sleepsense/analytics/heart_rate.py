"""Resting-quality score from a filtered heart rate (resting range 50-90 bpm)."""

from __future__ import annotations

SCORE_NO_DATA = 0
SCORE_OUT_OF_RANGE = 50  # strange, or very active
SCORE_ELEVATED = 70
SCORE_RESTING = 95

RESTING_LOW, RESTING_HIGH = 50.0, 90.0
PLAUSIBLE_LOW, PLAUSIBLE_HIGH = 40.0, 110.0


def heart_rate_score(hr: float | None) -> int:
    """Score a heart rate in bpm.

    ``None`` means no valid reading and scores 0.  The 40-50 bpm band is
    scored as resting.
    """
    if hr is None or hr <= 0:
        return SCORE_NO_DATA
    if hr < PLAUSIBLE_LOW or hr > PLAUSIBLE_HIGH:
        return SCORE_OUT_OF_RANGE
    if hr > RESTING_HIGH:
        return SCORE_ELEVATED
    # 40 <= hr < 50 falls here too: low but plausible, scored as resting
    return SCORE_RESTING
