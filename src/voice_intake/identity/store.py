"""
Visit Stores

Append-only storage for patient visit records, queried by normalized phone.
"""

import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Iterator, Protocol

from filelock import FileLock

from voice_intake.errors import IdentityConflictError
from voice_intake.identity.phone import is_matchable, normalize_phone
from voice_intake.intake.intake_types import PatientVisitRecord

logger = logging.getLogger(__name__)


class KeyedLock:
    """One mutex per key, created on first use."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, key: str | None) -> Iterator[None]:
        """Serialize callers that share a key. Empty keys never contend."""
        if not key:
            yield
            return

        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield


class VisitStore(Protocol):
    """Logical read/write contract the identity reconciler relies on."""

    def identity_lock(self, normalized: str | None) -> ContextManager[None]: ...

    def find_all(self) -> list[PatientVisitRecord]: ...

    def get(self, record_id: int) -> PatientVisitRecord | None: ...

    def save(
        self, record: PatientVisitRecord, require_new_identity: bool = False
    ) -> PatientVisitRecord: ...

    def exists_by_normalized_phone(self, normalized: str | None) -> bool: ...

    def count_by_normalized_phone(self, normalized: str | None) -> int: ...

    def latest_per_identity(self) -> list[PatientVisitRecord]: ...


class InMemoryVisitStore:
    """List-backed visit store.

    Ids start at 1 and increase by one per save, so "latest" is "highest id".
    """

    def __init__(self, records: list[PatientVisitRecord] | None = None):
        self._lock = threading.RLock()
        self._identity_locks = KeyedLock()
        self._records: list[PatientVisitRecord] = []
        self._next_id = 1
        for record in records or []:
            self._append(record)

    def __len__(self) -> int:
        with self._locked():
            return len(self._records)

    @contextmanager
    def identity_lock(self, normalized: str | None) -> Iterator[None]:
        """
        Hold the identity check-then-insert for one normalized phone.

        Every reconciler sharing this store takes the same lock, so a
        lookup and the save that depends on it cannot interleave with
        another intake for the same phone.
        """
        with self._identity_locks.hold(normalized):
            yield

    def find_all(self) -> list[PatientVisitRecord]:
        """All records in insertion order."""
        with self._locked():
            return list(self._records)

    def get(self, record_id: int) -> PatientVisitRecord | None:
        """Record with the given id, or None."""
        with self._locked():
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    def save(
        self, record: PatientVisitRecord, require_new_identity: bool = False
    ) -> PatientVisitRecord:
        """
        Append a record and return it with its assigned id.

        Args:
            record: Unsaved record (its id, if any, is ignored)
            require_new_identity: Reject a new-patient record whose phone is
                already on file with IdentityConflictError
        """
        with self._locked():
            normalized = normalize_phone(record.phone_number)
            if (
                require_new_identity
                and record.is_new_patient
                and self._count(normalized) > 0
            ):
                raise IdentityConflictError(normalized)

            saved = self._append(record.with_id(self._next_id))
            self._persist()
            return saved

    def exists_by_normalized_phone(self, normalized: str | None) -> bool:
        """Whether any record carries this normalized phone."""
        return self.count_by_normalized_phone(normalized) > 0

    def count_by_normalized_phone(self, normalized: str | None) -> int:
        """Number of records carrying this normalized phone."""
        with self._locked():
            return self._count(normalized)

    def latest_per_identity(self) -> list[PatientVisitRecord]:
        """Highest-id record per normalized phone, newest first.

        Records without a usable phone each stand alone.
        """
        latest: dict[object, PatientVisitRecord] = {}
        with self._locked():
            for record in self._records:
                normalized = normalize_phone(record.phone_number)
                key = normalized if is_matchable(normalized) else ("id", record.id)
                current = latest.get(key)
                if current is None or record.id > current.id:
                    latest[key] = record

        return sorted(latest.values(), key=lambda r: r.id, reverse=True)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def _count(self, normalized: str | None) -> int:
        if not is_matchable(normalized):
            return 0
        return sum(
            1
            for r in self._records
            if normalize_phone(r.phone_number) == normalized
        )

    def _append(self, record: PatientVisitRecord) -> PatientVisitRecord:
        if record.id is None:
            record = record.with_id(self._next_id)
        self._records.append(record)
        self._next_id = max(self._next_id, record.id + 1)
        return record

    def _persist(self) -> None:
        """Hook for durable subclasses."""


class JsonFileVisitStore(InMemoryVisitStore):
    """
    Visit store persisted as a JSON list of record dicts.

    Several stores (or processes) may share one file. Every operation holds
    an exclusive lock on ``<path>.lock`` and re-reads the file first, and
    writes go through a temp file swapped in with ``os.replace``, so ids stay
    unique and no save overwrites another.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(str(self.path) + ".lock")
        super().__init__()

    @contextmanager
    def identity_lock(self, normalized: str | None) -> Iterator[None]:
        """Per-phone lock in this process, plus the file lock across processes."""
        with super().identity_lock(normalized), self._file_lock:
            yield

    @contextmanager
    def _locked(self) -> Iterator[None]:
        # File lock first: identity_lock() already holds it when it reads.
        with self._file_lock, self._lock:
            self._reload()
            yield

    def _reload(self) -> None:
        self._records = []
        self._next_id = 1
        if not self.path.exists():
            return

        with open(self.path) as f:
            data = json.load(f)
        for item in data:
            self._append(PatientVisitRecord.from_dict(item))
        logger.debug("Loaded %d visit records from %s", len(self._records), self.path)

    def _persist(self) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w") as f:
            json.dump([r.to_dict() for r in self._records], f, indent=2)
        os.replace(tmp, self.path)
