"""
Intake Data Types

Data models for extracted candidates and stored patient visits.
"""

from dataclasses import dataclass, replace
from typing import Any

UNKNOWN_NAME = "Unknown"
UNSPECIFIED_ADDRESS = "Unspecified"


@dataclass(frozen=True)
class CandidateRecord:
    """Patient fields pulled from a transcript, before reconciliation.

    Any field may be None when no rule matched; apply_defaults() fills them.
    """

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateRecord":
        """Create from dictionary."""
        return cls(
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            phone_number=data.get("phoneNumber"),
            address=data.get("address"),
        )


def apply_defaults(candidate: CandidateRecord) -> CandidateRecord:
    """Return a copy of the candidate with the fallback values filled in."""
    phone = candidate.phone_number
    if phone is not None and not phone.strip():
        phone = None

    return replace(
        candidate,
        first_name=candidate.first_name or UNKNOWN_NAME,
        last_name=candidate.last_name or UNKNOWN_NAME,
        phone_number=phone,
        address=candidate.address or UNSPECIFIED_ADDRESS,
    )


@dataclass(frozen=True)
class PatientVisitRecord:
    """One stored intake event. A person may have many of these."""

    first_name: str = UNKNOWN_NAME
    last_name: str = UNKNOWN_NAME
    phone_number: str | None = None
    address: str = UNSPECIFIED_ADDRESS
    # Snapshot taken at creation time. Never recomputed.
    is_new_patient: bool = False
    id: int | None = None

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateRecord,
        phone_number: str | None,
        is_new_patient: bool,
    ) -> "PatientVisitRecord":
        """Build an unsaved record from a defaulted candidate."""
        candidate = apply_defaults(candidate)
        return cls(
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            phone_number=phone_number,
            address=candidate.address,
            is_new_patient=is_new_patient,
        )

    def with_id(self, record_id: int) -> "PatientVisitRecord":
        """Copy of this record carrying a store-assigned id."""
        return replace(self, id=record_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "address": self.address,
            "newPatient": self.is_new_patient,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PatientVisitRecord":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            first_name=data.get("firstName") or UNKNOWN_NAME,
            last_name=data.get("lastName") or UNKNOWN_NAME,
            phone_number=data.get("phoneNumber"),
            address=data.get("address") or UNSPECIFIED_ADDRESS,
            is_new_patient=bool(data.get("newPatient", False)),
        )


@dataclass(frozen=True)
class VisitStats:
    """Live visit statistics for the identity behind one record."""

    visit_count: int
    is_first_time_new: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "visit_count": self.visit_count,
            "new_patient_first_time": self.is_first_time_new,
        }
