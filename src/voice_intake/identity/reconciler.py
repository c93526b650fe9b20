"""
Identity Reconciler

Decides new vs. returning status for incoming visits and answers visit-count
queries. Two records belong to the same identity iff their digits-only phone
numbers are equal.

Note on the two "new patient" values:
- PatientVisitRecord.is_new_patient is a snapshot taken when the record was
  stored. It never changes afterwards.
- VisitStats.is_first_time_new is recomputed live from the current visit
  count. It turns False for the original record once a second visit with the
  same phone exists, while that record's is_new_patient stays True.
These are intentionally different and must not be merged.
"""

import logging
from dataclasses import replace
from typing import Iterable

from voice_intake.errors import IdentityConflictError, PatientNotFoundError
from voice_intake.identity.phone import is_matchable, normalize_phone
from voice_intake.identity.store import VisitStore
from voice_intake.intake.intake_types import (
    CandidateRecord,
    PatientVisitRecord,
    VisitStats,
    apply_defaults,
)

logger = logging.getLogger(__name__)


def _same_name(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


def is_voice_duplicate(candidate: CandidateRecord, existing: PatientVisitRecord) -> bool:
    """
    Duplicate rule for voice intake.

    Phone must match, and then either the first or the last name must match
    (case-insensitive). A shared household phone with a matching last name
    counts as seen before.
    """
    phone = normalize_phone(candidate.phone_number)
    if not is_matchable(phone) or phone != normalize_phone(existing.phone_number):
        return False
    return _same_name(candidate.first_name, existing.first_name) or _same_name(
        candidate.last_name, existing.last_name
    )


class IdentityReconciler:
    """Phone-keyed deduplication over a visit store."""

    def __init__(self, store: VisitStore):
        """Initialize reconciler.

        Args:
            store: Visit store to read from and append to
        """
        self.store = store

    def record_visit(self, candidate: CandidateRecord) -> PatientVisitRecord:
        """Store a visit, keyed purely on phone. The phone is stored digits-only."""
        candidate = apply_defaults(candidate)
        normalized = normalize_phone(candidate.phone_number)

        with self.store.identity_lock(normalized):
            exists = self.store.exists_by_normalized_phone(normalized)
            record = PatientVisitRecord.from_candidate(
                candidate, normalized or None, is_new_patient=not exists
            )
            try:
                saved = self.store.save(record, require_new_identity=True)
            except IdentityConflictError:
                logger.warning(
                    "Phone %s was registered concurrently; storing as returning visit",
                    normalized,
                )
                saved = self.store.save(replace(record, is_new_patient=False))

        logger.info(
            "Recorded visit %s (%s patient)",
            saved.id,
            "new" if saved.is_new_patient else "returning",
        )
        return saved

    def record_voice_visit(
        self,
        candidate: CandidateRecord,
        existing: Iterable[PatientVisitRecord] | None = None,
    ) -> PatientVisitRecord:
        """
        Store a voice-sourced visit using the phone-and-name duplicate rule.

        Args:
            candidate: Extracted candidate (defaults are applied here)
            existing: Records to compare against; the whole store if omitted

        The phone keeps the extractor's DDD-DDD-DDDD form.
        """
        candidate = apply_defaults(candidate)
        normalized = normalize_phone(candidate.phone_number)

        with self.store.identity_lock(normalized):
            records = self.store.find_all() if existing is None else list(existing)
            duplicate = any(is_voice_duplicate(candidate, r) for r in records)
            record = PatientVisitRecord.from_candidate(
                candidate, candidate.phone_number, is_new_patient=not duplicate
            )
            saved = self.store.save(record)

        logger.info(
            "Recorded voice visit %s (%s patient)",
            saved.id,
            "new" if saved.is_new_patient else "returning",
        )
        return saved

    def visit_stats(self, patient_id: int) -> VisitStats:
        """Live visit count for the identity behind a record."""
        record = self.store.get(patient_id)
        if record is None:
            raise PatientNotFoundError(patient_id)

        normalized = normalize_phone(record.phone_number)
        if is_matchable(normalized):
            visit_count = self.store.count_by_normalized_phone(normalized)
        else:
            visit_count = 1

        return VisitStats(visit_count=visit_count, is_first_time_new=visit_count == 1)

    def list_latest_per_identity(self) -> list[PatientVisitRecord]:
        """Latest record per identity, newest first."""
        return self.store.latest_per_identity()
