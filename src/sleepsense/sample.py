"""Input samples and enriched output records.

A :class:`SensorSample` is parsed from one request body.  The pipeline never
mutates it; scoring produces a fresh :class:`EnrichedRecord` that is handed
to the record store.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sleepsense.errors import InvalidInput

# Standard gravity baseline (m/s^2).  A still sensor reads roughly this magnitude.
GRAVITY = 9.8

KNOWN_FIELDS = ("accel", "heart_rate", "spo2", "temperature", "custom_timestamp")


@dataclass(frozen=True)
class AccelReading:
    """A single 3-axis accelerometer reading."""

    x: float  # m/s^2
    y: float  # m/s^2
    z: float  # m/s^2

    @property
    def magnitude(self) -> float:
        # hypot saturates to inf instead of raising on huge axes
        return math.hypot(self.x, self.y, self.z)

    @property
    def deviation(self) -> float:
        """Motion energy beyond gravity alone; 0 means perfectly still."""
        return abs(self.magnitude - GRAVITY)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    def __repr__(self) -> str:
        return f"Accel(x={self.x:.3f}, y={self.y:.3f}, z={self.z:.3f}, dev={self.deviation:.3f})"


def _is_number(value: Any) -> bool:
    """True for finite JSON numbers (NaN, Infinity and bools are not numbers here)."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def _optional_number(body: dict[str, Any], key: str) -> float | None:
    value = body.get(key)
    if value is None:
        return None
    if not _is_number(value):
        raise InvalidInput(f"{key} must be a finite number, got {value!r}")
    return value


def _parse_accel(value: Any) -> AccelReading | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise InvalidInput(f"accel must be an object with x, y, z, got {value!r}")
    axes = []
    for axis in ("x", "y", "z"):
        v = value.get(axis)
        if not _is_number(v):
            raise InvalidInput(f"accel.{axis} must be a finite number, got {v!r}")
        axes.append(float(v))
    return AccelReading(*axes)


@dataclass(frozen=True)
class SensorSample:
    """One periodic reading from the wearable."""

    accel: AccelReading | None = None
    heart_rate: float | None = None  # bpm
    spo2: float | None = None  # percent
    temperature: float | None = None  # passed through
    custom_timestamp: str | None = None  # ISO-8601, overrides ingestion time
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> "SensorSample":
        """Build a sample from a parsed JSON body.

        JSON ``null`` is treated as absent.  Unknown top-level fields are kept
        in :attr:`extra` and stored unchanged.

        Raises:
            InvalidInput: a known field is present with the wrong type.
        """
        custom = body.get("custom_timestamp")
        if custom is not None and not isinstance(custom, str):
            raise InvalidInput(f"custom_timestamp must be a string, got {custom!r}")

        return cls(
            accel=_parse_accel(body.get("accel")),
            heart_rate=_optional_number(body, "heart_rate"),
            spo2=_optional_number(body, "spo2"),
            temperature=_optional_number(body, "temperature"),
            custom_timestamp=custom or None,
            extra={k: v for k, v in body.items() if k not in KNOWN_FIELDS},
        )


@dataclass(frozen=True)
class EnrichedRecord:
    """A filtered sample plus its sleep score, stage and effective timestamp."""

    sleep_score: int
    sleep_stage: str
    server_timestamp: datetime
    accel: AccelReading | None = None
    heart_rate: float | None = None
    spo2: float | None = None
    temperature: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """The stored document shape (JSON-friendly)."""
        doc: dict[str, Any] = dict(self.extra)
        doc.update({
            "accel": self.accel.to_dict() if self.accel is not None else None,
            "heart_rate": self.heart_rate,
            "spo2": self.spo2,
            "temperature": self.temperature,
            "sleep_score": self.sleep_score,
            "sleep_stage": self.sleep_stage,
            "server_timestamp": self.server_timestamp.isoformat(),
        })
        return doc

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"EnrichedRecord({self.server_timestamp.isoformat()}: "
            f"score={self.sleep_score}, stage={self.sleep_stage}, "
            f"hr={self.heart_rate}, spo2={self.spo2})"
        )
