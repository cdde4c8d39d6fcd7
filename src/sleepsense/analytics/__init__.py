"""Per-sample sleep analytics for wearable biometric/motion readings.

Modules:
    motion     -- Movement (stillness) score from accelerometer deviation
    filters    -- Motion-noise suppression and impossible-value rejection
    heart_rate -- Resting-quality heart-rate score
    sleep      -- Sleep score combination and stage classification
    pipeline   -- Validation, scoring and timestamp resolution for one sample
"""

from sleepsense.analytics.motion import movement_score
from sleepsense.analytics.filters import (
    filter_signals,
    suppress_motion_noise,
    reject_impossible,
    FilteredSignals,
)
from sleepsense.analytics.heart_rate import heart_rate_score
from sleepsense.analytics.sleep import combine_scores, classify_stage, SleepStage
from sleepsense.analytics.pipeline import validate_body, resolve_timestamp, score_sample

__all__ = [
    # motion
    "movement_score",
    # filters
    "filter_signals",
    "suppress_motion_noise",
    "reject_impossible",
    "FilteredSignals",
    # heart_rate
    "heart_rate_score",
    # sleep
    "combine_scores",
    "classify_stage",
    "SleepStage",
    # pipeline
    "validate_body",
    "resolve_timestamp",
    "score_sample",
]
