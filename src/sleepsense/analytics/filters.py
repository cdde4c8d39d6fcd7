"""Optical signal cleaning: motion-noise suppression and outlier rejection.

Wrist-worn PPG sensors produce garbage heart-rate and SpO2 values while the
arm is being shaken.  Two passes run in order:

  1. Noise suppression -- gross motion (deviation > 3.0 m/s^2) discards
     both optical readings.
  2. Impossible-value rejection -- readings outside absolute physiological
     bounds are discarded.

Discarded values become ``None``; nothing is ever clamped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sleepsense.sample import AccelReading, SensorSample

logger = logging.getLogger(__name__)

# Stricter than movement scoring: only gross motion invalidates optical sensors.
NOISE_DEVIATION = 3.0

HR_MIN, HR_MAX = 30.0, 200.0  # bpm
SPO2_MIN, SPO2_MAX = 50.0, 100.0  # percent


@dataclass(frozen=True)
class FilteredSignals:
    """Optical readings after cleaning."""

    heart_rate: float | None
    spo2: float | None
    motion_suppressed: bool = False


def suppress_motion_noise(
    accel: AccelReading | None,
    heart_rate: float | None,
    spo2: float | None,
) -> tuple[float | None, float | None, bool]:
    """Drop both optical readings when *accel* shows gross motion.

    Returns ``(heart_rate, spo2, suppressed)``.  Skipped when *accel* is None.
    """
    if accel is None:
        return heart_rate, spo2, False

    deviation = accel.deviation
    if not deviation <= NOISE_DEVIATION:
        logger.info(
            "High movement detected, discarding optical readings (deviation=%.2f)",
            deviation,
        )
        return None, None, True
    return heart_rate, spo2, False


def _within(value: float | None, lo: float, hi: float) -> float | None:
    # NaN fails every comparison, so test for membership rather than exclusion
    if value is None or not lo <= value <= hi:
        return None
    return value


def reject_impossible(
    heart_rate: float | None,
    spo2: float | None,
) -> tuple[float | None, float | None]:
    """Null out heart rate outside [30, 200] and SpO2 outside [50, 100]."""
    return _within(heart_rate, HR_MIN, HR_MAX), _within(spo2, SPO2_MIN, SPO2_MAX)


def filter_signals(sample: SensorSample) -> FilteredSignals:
    """Run both cleaning passes over a sample's optical readings."""
    hr, spo2, suppressed = suppress_motion_noise(
        sample.accel, sample.heart_rate, sample.spo2
    )
    hr, spo2 = reject_impossible(hr, spo2)
    return FilteredSignals(heart_rate=hr, spo2=spo2, motion_suppressed=suppressed)
