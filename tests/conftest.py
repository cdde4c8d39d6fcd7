"""Shared fixtures and helpers for the sleepsense test suite."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from sleepsense.config import Settings
from sleepsense.sample import AccelReading
from sleepsense.server import create_app
from sleepsense.store import MemoryRecordStore

API_KEY = "test-secret"
FIXED_NOW = datetime(2026, 2, 13, 23, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Sample-building helpers
# ---------------------------------------------------------------------------


def make_body(
    accel: tuple[float, float, float] | None = (0.0, 0.0, 9.8),
    **fields: Any,
) -> dict[str, Any]:
    """Build a request body; ``accel=None`` leaves the accelerometer out."""
    body: dict[str, Any] = {}
    if accel is not None:
        x, y, z = accel
        body["accel"] = {"x": x, "y": y, "z": z}
    body.update(fields)
    return body


def accel_with_deviation(deviation: float) -> AccelReading:
    """A z-axis-only reading whose magnitude is 9.8 + deviation."""
    return AccelReading(0.0, 0.0, 9.8 + deviation)


def write_jsonl(path: Path, entries: list[Any]) -> Path:
    """Write a list of objects as JSONL to the given path."""
    with open(path, "w") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")
    return path


# ---------------------------------------------------------------------------
# Ingress fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(api_key=API_KEY, store_path=str(tmp_path / "records.jsonl"))


@pytest.fixture
def memory_store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def client(settings: Settings, memory_store: MemoryRecordStore) -> TestClient:
    return TestClient(create_app(settings, memory_store))


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-api-key": API_KEY}
