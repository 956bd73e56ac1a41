"""Label stores.

:class:`LabelStore` is the collaborator interface the classification core
reads labels through.  Two implementations are provided:

- :class:`InMemoryLabelStore` — dict-backed, optionally seeded with the
  five standard labels.
- :class:`JsonLabelStore` — the in-memory store persisted to a JSON array
  of camelCase label records after every write.

Writes are serialised with a single ``threading.Lock`` per store.

Example
-------
>>> store = InMemoryLabelStore(seed_defaults=True)
>>> store.get_by_name("restricted").id
'restricted'
>>> [label.id for label in store.get_by_priority(PriorityTier.CONFIDENTIAL)]
['confidential']
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from pydantic import ValidationError

from grounding_labels.errors import LabelError
from grounding_labels.labels.defaults import default_labels
from grounding_labels.labels.models import Label, utcnow
from grounding_labels.labels.priority import PriorityTier

logger = logging.getLogger(__name__)


@runtime_checkable
class LabelStore(Protocol):
    """Storage interface consumed by the resolver, merger and validator."""

    def get_by_id(self, label_id: str) -> Label | None: ...

    def get_by_name(self, name: str) -> Label | None: ...

    def get_by_priority(self, tier: PriorityTier) -> list[Label]: ...

    def get_all(self) -> list[Label]: ...

    def create(self, label: Label) -> Label: ...

    def update(self, label: Label) -> Label: ...

    def delete(self, label_id: str) -> bool: ...


class InMemoryLabelStore:
    """Thread-safe dict-backed label store.

    Parameters
    ----------
    labels:
        Initial labels, inserted as-is (timestamps preserved).
    seed_defaults:
        When ``True`` the five standard labels are inserted first.
    """

    def __init__(
        self,
        labels: Iterable[Label] | None = None,
        seed_defaults: bool = False,
    ) -> None:
        self._labels: dict[str, Label] = {}
        self._lock = threading.Lock()
        initial = list(default_labels()) if seed_defaults else []
        initial.extend(labels or [])
        for label in initial:
            self._insert(label)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, label_id: str) -> Label | None:
        if not label_id or not label_id.strip():
            return None
        with self._lock:
            return self._labels.get(label_id)

    def get_by_name(self, name: str) -> Label | None:
        """Case-insensitive lookup by name."""
        if not name or not name.strip():
            return None
        wanted = name.casefold()
        with self._lock:
            for label in self._labels.values():
                if label.name.casefold() == wanted:
                    return label
        return None

    def get_by_priority(self, tier: PriorityTier) -> list[Label]:
        with self._lock:
            return [label for label in self._labels.values() if label.priority == tier]

    def get_all(self) -> list[Label]:
        with self._lock:
            return list(self._labels.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._labels)

    def __contains__(self, label_id: object) -> bool:
        with self._lock:
            return label_id in self._labels

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, label: Label) -> Label:
        """Insert a new label, stamping both timestamps.

        Raises
        ------
        LabelError
            ``DUPLICATE_LABEL`` when the id or (case-insensitive) name is
            already taken.
        """
        now = utcnow()
        created = label.model_copy(update={"created_at": now, "updated_at": now})
        with self._lock:
            self._check_unique(created)
            snapshot = dict(self._labels)
            self._labels[created.id] = created
            self._commit(snapshot)
        logger.info("Created label '%s' (%s)", created.id, created.priority.value)
        return created

    def update(self, label: Label) -> Label:
        """Replace an existing label, preserving ``created_at``.

        Raises
        ------
        LabelError
            ``LABEL_NOT_FOUND`` when no label has ``label.id``;
            ``DUPLICATE_LABEL`` when the new name clashes with another label.
        """
        with self._lock:
            existing = self._labels.get(label.id)
            if existing is None:
                raise LabelError.not_found(label.id)
            self._check_unique(label, ignore_id=label.id)
            updated = label.model_copy(
                update={"created_at": existing.created_at, "updated_at": utcnow()}
            )
            snapshot = dict(self._labels)
            self._labels[updated.id] = updated
            self._commit(snapshot)
        logger.info("Updated label '%s'", updated.id)
        return updated

    def delete(self, label_id: str) -> bool:
        """Hard-delete a label.  Returns ``False`` when it did not exist."""
        if not label_id or not label_id.strip():
            return False
        with self._lock:
            snapshot = dict(self._labels)
            if self._labels.pop(label_id, None) is None:
                return False
            self._commit(snapshot)
        logger.info("Deleted label '%s'", label_id)
        return True

    # ------------------------------------------------------------------
    # Bulk import / export
    # ------------------------------------------------------------------

    def import_labels(self, path: Path, overwrite: bool = False) -> int:
        """Import label records from a JSON file.

        Existing labels are updated when ``overwrite`` is set, otherwise a
        clash raises ``DUPLICATE_LABEL``.  The import is all-or-nothing: any
        clash, including one between records of the same file, leaves the
        store unchanged.  Returns the number imported.
        """
        labels = read_label_file(path)
        now = utcnow()
        with self._lock:
            snapshot = dict(self._labels)
            try:
                for label in labels:
                    existing = self._labels.get(label.id)
                    if overwrite and existing is not None:
                        self._check_unique(label, ignore_id=label.id)
                        stamps = {"created_at": existing.created_at, "updated_at": now}
                    else:
                        self._check_unique(label)
                        stamps = {"created_at": now, "updated_at": now}
                    self._labels[label.id] = label.model_copy(update=stamps)
            except LabelError:
                self._labels = snapshot
                raise
            self._commit(snapshot)
        logger.info("Imported %d labels from %s", len(labels), path)
        return len(labels)

    def export_labels(self, path: Path) -> int:
        """Write every label to ``path`` as a JSON array.  Returns the count."""
        labels = self.get_all()
        write_label_file(path, labels)
        return len(labels)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _insert(self, label: Label) -> None:
        self._check_unique(label)
        self._labels[label.id] = label

    def _check_unique(self, label: Label, ignore_id: str | None = None) -> None:
        if ignore_id is None and label.id in self._labels:
            raise LabelError.duplicate(label.id, "id", label.id)
        wanted = label.name.casefold()
        for other in self._labels.values():
            if other.id != ignore_id and other.name.casefold() == wanted:
                raise LabelError.duplicate(label.id, "name", label.name)

    def _commit(self, snapshot: dict[str, Label]) -> None:
        """Persist the current state, restoring ``snapshot`` if that fails."""
        try:
            self._persist()
        except LabelError:
            self._labels = snapshot
            raise

    def _persist(self) -> None:
        """Hook called under the lock after every successful write."""


class JsonLabelStore(InMemoryLabelStore):
    """Label store persisted to a JSON file.

    The file holds a JSON array of label records.  It is created (as
    ``[]``, or with the standard labels when ``seed_defaults`` is set) when
    missing.

    Parameters
    ----------
    path:
        Location of the JSON file.
    seed_defaults:
        Seed a newly created file with the five standard labels.
    """

    def __init__(self, path: Path, seed_defaults: bool = False) -> None:
        self._path = Path(path)
        if self._path.exists():
            labels = read_label_file(self._path)
            super().__init__(labels)
            logger.info("Loaded %d labels from %s", len(labels), self._path)
        else:
            super().__init__(seed_defaults=seed_defaults)
            with self._lock:
                self._persist()

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> int:
        """Re-read the backing file, discarding in-memory state."""
        labels = read_label_file(self._path)
        with self._lock:
            self._labels = {}
            for label in labels:
                self._insert(label)
        return len(labels)

    def _persist(self) -> None:
        write_label_file(self._path, list(self._labels.values()))


# ---------------------------------------------------------------------------
# File format helpers
# ---------------------------------------------------------------------------


def read_label_file(path: Path) -> list[Label]:
    """Parse a JSON label file.

    Accepts either a top-level array of records or an object with a
    ``labels`` array.  An empty file yields no labels.

    Raises
    ------
    LabelError
        ``STORAGE_FAILURE`` when the file cannot be read or parsed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise LabelError.storage_failure(f"Failed to read labels from {path}: {exc}") from exc

    if not text.strip():
        return []

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LabelError.storage_failure(f"Malformed label file {path}: {exc}") from exc

    records = raw.get("labels", []) if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        raise LabelError.storage_failure(f"Label file {path} must contain an array of labels")

    try:
        return [Label.model_validate(record) for record in records]
    except ValidationError as exc:
        raise LabelError.storage_failure(f"Invalid label record in {path}: {exc}") from exc


def write_label_file(path: Path, labels: Iterable[Label]) -> None:
    """Write labels to ``path`` as an indented JSON array."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump([label.to_record() for label in labels], fh, indent=2)
    except OSError as exc:
        raise LabelError.storage_failure(f"Failed to save labels to {path}: {exc}") from exc
