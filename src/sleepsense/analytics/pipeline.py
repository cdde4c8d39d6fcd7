"""Per-sample scoring pipeline.

Takes one parsed request body (or an already-built :class:`SensorSample`)
through validation, motion analysis, signal filtering, heart-rate scoring,
score combination and stage classification, and returns a new
:class:`EnrichedRecord` with its effective timestamp.  Nothing is shared
between calls, so the pipeline can run concurrently without locking.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sleepsense.errors import InvalidInput, InvalidTimestamp
from sleepsense.sample import EnrichedRecord, SensorSample
from sleepsense.analytics.motion import movement_score
from sleepsense.analytics.filters import filter_signals
from sleepsense.analytics.heart_rate import heart_rate_score
from sleepsense.analytics.sleep import classify_stage, combine_scores


def validate_body(body: Any) -> dict[str, Any]:
    """Reject absent, non-object or empty bodies.

    Raises:
        InvalidInput: the body carries no fields.
    """
    if body is None or not isinstance(body, dict) or len(body) == 0:
        raise InvalidInput("No JSON data provided")
    return body


def resolve_timestamp(custom: str | None, now: datetime | None = None) -> datetime:
    """Return the effective timestamp for a record.

    A supplied *custom* ISO-8601 string wins (a trailing ``Z`` is accepted,
    naive values are taken as UTC).  Otherwise *now*, or the current UTC time.

    Raises:
        InvalidTimestamp: *custom* is not a valid ISO-8601 date.
    """
    if custom is None:
        return now if now is not None else datetime.now(timezone.utc)

    text = custom.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidTimestamp(f"Invalid custom_timestamp: {custom!r}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def score_sample(
    body: dict[str, Any] | SensorSample | None,
    now: datetime | None = None,
) -> EnrichedRecord:
    """Score one sample.

    Args:
        body: Parsed JSON request body, or a prebuilt SensorSample.
        now: Ingestion time used when no ``custom_timestamp`` is given.

    Returns:
        A new EnrichedRecord; the input is left untouched.

    Raises:
        InvalidInput: empty or malformed body.
        InvalidTimestamp: unparseable ``custom_timestamp``.
    """
    if isinstance(body, SensorSample):
        sample = body
    else:
        sample = SensorSample.from_dict(validate_body(body))

    # Resolve first so a bad timestamp is rejected before any scoring output exists
    timestamp = resolve_timestamp(sample.custom_timestamp, now)

    movement = movement_score(sample.accel)
    signals = filter_signals(sample)
    hr_score = heart_rate_score(signals.heart_rate)

    return EnrichedRecord(
        sleep_score=combine_scores(movement, hr_score),
        sleep_stage=classify_stage(movement, signals.heart_rate).value,
        server_timestamp=timestamp,
        accel=sample.accel,
        heart_rate=signals.heart_rate,
        spo2=signals.spo2,
        temperature=sample.temperature,
        extra=dict(sample.extra),
    )
