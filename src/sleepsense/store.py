"""Record stores: where enriched records are appended.

The JSON-lines store writes one document per line so a store file can be
inspected with ``jq`` or tailed while the service runs.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Iterator, Protocol

from sleepsense.errors import StorageFailure
from sleepsense.sample import EnrichedRecord

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Anything that can persist an EnrichedRecord and hand back its id."""

    def append(self, record: EnrichedRecord) -> str: ...


def _new_id() -> str:
    return uuid.uuid4().hex


class JsonlRecordStore:
    """Append-only JSON-lines file store."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, record: EnrichedRecord) -> str:
        """Append *record* and return its generated id.

        Raises:
            StorageFailure: the file could not be written.
        """
        record_id = _new_id()
        # the generated id always wins over a body field named "id"
        line = json.dumps({**record.to_dict(), "id": record_id})
        try:
            with self._lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "a") as f:
                    f.write(line + "\n")
        except OSError as e:
            raise StorageFailure(f"Could not write to {self.path}: {e}") from e
        logger.debug("Appended record %s to %s", record_id, self.path)
        return record_id

    def read_all(self) -> Iterator[dict[str, Any]]:
        """Yield every stored document in write order."""
        if not self.path.exists():
            return
        with open(self.path) as f:
            for line in f:
                line = line.strip()
                if line:
                    yield json.loads(line)

    def __repr__(self) -> str:
        return f"JsonlRecordStore({str(self.path)!r})"


class MemoryRecordStore:
    """In-memory store for tests and dry runs."""

    def __init__(self) -> None:
        self.records: dict[str, EnrichedRecord] = {}
        self._lock = threading.Lock()

    def append(self, record: EnrichedRecord) -> str:
        record_id = _new_id()
        with self._lock:
            self.records[record_id] = record
        return record_id

    def __len__(self) -> int:
        return len(self.records)
