"""Movement (stillness) scoring from a single accelerometer reading.

The score is a discretised stillness metric: the further the reading's
magnitude strays from gravity, the more the wearer is moving.
"""

from __future__ import annotations

from sleepsense.sample import AccelReading

# Deviation bands (m/s^2 beyond gravity)
SIGNIFICANT_MOVEMENT = 1.5
MILD_MOVEMENT = 0.5

SCORE_MOVING = 40
SCORE_RESTLESS = 70
SCORE_STILL = 95
SCORE_NO_ACCEL = 100  # no reading at all is treated as maximally still


def movement_score(accel: AccelReading | None) -> int:
    """Map an accelerometer reading onto {40, 70, 95, 100}.

    Returns 100 when *accel* is absent.
    """
    if accel is None:
        return SCORE_NO_ACCEL

    deviation = accel.deviation
    # NaN deviation (non-finite axes) counts as movement
    if not deviation <= SIGNIFICANT_MOVEMENT:
        return SCORE_MOVING
    if deviation > MILD_MOVEMENT:
        return SCORE_RESTLESS
    return SCORE_STILL
