"""Append-only JSONL audit trail for label decisions.

Every classification, processed response, reclassification and rejected
override can be written as one newline-delimited JSON record.  Each
record carries a UTC ISO-8601 timestamp, a session identifier, the event
name and the label it concerns.

Writes are serialised with a ``threading.Lock`` so one log can be shared
by the worker threads of a batch classification.

Example
-------
>>> from pathlib import Path
>>> audit = ClassificationAuditLog(Path("/tmp/labels-audit.jsonl"))
>>> audit.record_classified("doc-1", restricted, confidence=0.95, source="crm")
>>> audit.query({"event": "classified"})[0]["label_id"]
'restricted'
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from grounding_labels.labels.models import Label

logger = logging.getLogger(__name__)

EVENT_CLASSIFIED = "classified"
EVENT_RESPONSE_PROCESSED = "response_processed"
EVENT_RECLASSIFIED = "reclassified"
EVENT_OVERRIDE_REJECTED = "override_rejected"


class ClassificationAuditLog:
    """Append-only JSONL audit log of labelling decisions.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` audit file.  Parent directories are created
        on first write.
    session_id:
        Identifier stamped on every record.  A random UUID is generated if
        not supplied.
    """

    def __init__(self, log_path: Path, session_id: str | None = None) -> None:
        self._log_path = Path(log_path)
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def record(self, event: str, label: Label | None = None, **fields: object) -> None:
        """Append an ``event`` record, optionally tagged with ``label``."""
        entry: dict[str, object] = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            "event": event,
        }
        if label is not None:
            entry["label_id"] = label.id
            entry["label_name"] = label.name
            entry["priority"] = label.priority.value
        entry.update(fields)
        self._write(entry)

    def record_classified(
        self,
        data_id: str,
        label: Label,
        confidence: float | None = None,
        source: str | None = None,
    ) -> None:
        self.record(
            EVENT_CLASSIFIED,
            label,
            data_id=data_id,
            confidence=confidence,
            source=source,
        )

    def record_response_processed(self, label: Label, encrypted: bool) -> None:
        self.record(EVENT_RESPONSE_PROCESSED, label, encrypted=encrypted)

    def record_reclassified(self, data_id: str, previous: Label | None, label: Label) -> None:
        self.record(
            EVENT_RECLASSIFIED,
            label,
            data_id=data_id,
            previous_label_id=previous.id if previous is not None else None,
        )

    def record_override_rejected(self, data_id: str, existing: Label, proposed: Label) -> None:
        self.record(
            EVENT_OVERRIDE_REJECTED,
            existing,
            data_id=data_id,
            proposed_label_id=proposed.id,
            proposed_priority=proposed.priority.value,
        )

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return all records in write order; empty when the file is absent."""
        return list(self._iter_records())

    def query(self, filters: dict[str, object]) -> list[dict[str, object]]:
        """Return records whose top-level fields equal every value in ``filters``."""
        return [
            record
            for record in self._iter_records()
            if all(record.get(key) == value for key, value in filters.items())
        ]

    def count(self) -> int:
        return sum(1 for _ in self._iter_records())

    def last_n(self, n: int) -> list[dict[str, object]]:
        if n <= 0:
            return []
        records = list(self._iter_records())
        return records[-n:]

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def session_id(self) -> str:
        return self._session_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, record: dict[str, object]) -> None:
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=str) + "\n")

    def _iter_records(self) -> Iterator[dict[str, object]]:
        if not self._log_path.exists():
            return
        with self._lock:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for line_number, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed audit record at %s:%d", self._log_path, line_number)
