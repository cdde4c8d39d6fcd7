"""Synthetic sample generation and a bounded-concurrency pusher.

Used to fill a record store with a plausible night of sleep, or to smoke-test
a running ingress with a single dummy sample.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

import httpx
import numpy as np

logger = logging.getLogger(__name__)

FRIDAY = 4  # datetime.weekday()
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 6

# "Good sleep" ranges
HR_RANGE = (50, 70)  # bpm, inclusive
SPO2_RANGE = (97, 100)  # percent, inclusive
TEMP_BASE, TEMP_SPREAD = 36.5, 0.2
ACCEL_NOISE = 0.05  # m/s^2, +/- around (0, 0, 9.8)


def previous_friday_night(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return ``(start, end)`` for last Friday 22:00 to Saturday 06:00.

    If Friday 22:00 of the current week is still in the future, the night one
    week earlier is used.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    days_back = (now.weekday() - FRIDAY) % 7
    start = (now - timedelta(days=days_back)).replace(
        hour=NIGHT_START_HOUR, minute=0, second=0, microsecond=0
    )
    if start > now:
        start -= timedelta(days=7)

    end = (start + timedelta(days=1)).replace(hour=NIGHT_END_HOUR)
    return start, end


def _iso_utc(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_night(
    start: datetime,
    end: datetime,
    seed: int | None = None,
) -> list[dict[str, Any]]:
    """Generate one still, resting sample per minute from *start* to *end* inclusive.

    Args:
        start: First sample time (naive values are taken as UTC).
        end: Last possible sample time.
        seed: Seed for numpy's random generator, for reproducible nights.

    Returns:
        List of sample bodies ready to POST, each with a ``custom_timestamp``.
    """
    if end < start:
        return []

    n = int((end - start).total_seconds() // 60) + 1
    rng = np.random.default_rng(seed)

    hrs = rng.integers(HR_RANGE[0], HR_RANGE[1] + 1, size=n)
    spo2s = rng.integers(SPO2_RANGE[0], SPO2_RANGE[1] + 1, size=n)
    temps = TEMP_BASE + rng.random(n) * TEMP_SPREAD
    # shape (n, 3): uniform noise on every axis, gravity on z
    accel = rng.uniform(-ACCEL_NOISE, ACCEL_NOISE, size=(n, 3))
    accel[:, 2] += 9.8

    samples: list[dict[str, Any]] = []
    for i in range(n):
        samples.append({
            "custom_timestamp": _iso_utc(start + timedelta(minutes=i)),
            "heart_rate": int(hrs[i]),
            "spo2": int(spo2s[i]),
            "temperature": round(float(temps[i]), 2),
            "accel": {
                "x": round(float(accel[i, 0]), 4),
                "y": round(float(accel[i, 1]), 4),
                "z": round(float(accel[i, 2]), 4),
            },
        })
    return samples


def dummy_sample() -> dict[str, Any]:
    """A single resting sample for smoke-testing an ingress."""
    return {
        "heart_rate": 75,
        "spo2": 98,
        "temperature": 36.5,
        "accel": {"x": 0.1, "y": 0.2, "z": 9.8},
    }


# ---------------------------------------------------------------------------
# Pusher
# ---------------------------------------------------------------------------


@dataclass
class PushReport:
    """Outcome of a push run."""

    sent: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.sent + self.failed

    def __repr__(self) -> str:
        return f"PushReport(sent={self.sent}, failed={self.failed})"


async def push_samples(
    samples: Sequence[dict[str, Any]],
    url: str,
    api_key: str,
    concurrency: int = 4,
    client: httpx.AsyncClient | None = None,
    timeout: float = 10.0,
) -> PushReport:
    """POST every sample to the ingress using a fixed pool of workers.

    Samples go into an asyncio queue drained by *concurrency* workers, so at
    most that many requests are in flight.  A failed request is logged and
    counted; the remaining samples are still sent.

    Args:
        samples: Sample bodies to send.
        url: Ingress endpoint, e.g. ``http://host:8000/storeIoTData``.
        api_key: Value for the ``x-api-key`` header.
        concurrency: Number of workers.
        client: Optional pre-built client (the caller keeps ownership).
        timeout: Per-request timeout when a client is created here.
    """
    queue: asyncio.Queue[tuple[int, dict[str, Any]]] = asyncio.Queue()
    for item in enumerate(samples):
        queue.put_nowait(item)

    report = PushReport()
    headers = {"x-api-key": api_key}
    owns_client = client is None
    http = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def worker() -> None:
        while True:
            try:
                index, sample = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                response = await http.post(url, json=sample, headers=headers)
                response.raise_for_status()
            except httpx.HTTPError as e:
                report.failed += 1
                logger.warning("Sample %d not stored: %s", index, e)
            else:
                report.sent += 1
                logger.debug("Sample %d stored: %s", index, response.text)
            finally:
                queue.task_done()

    try:
        await asyncio.gather(*(worker() for _ in range(max(1, concurrency))))
    finally:
        if owns_client:
            await http.aclose()

    logger.info("Push complete: %d sent, %d failed", report.sent, report.failed)
    return report
