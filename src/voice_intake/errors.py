"""
Intake Errors

Exception types raised by the intake pipeline and identity engine.
"""


class IntakeError(Exception):
    """Base class for voice-intake errors."""


class PatientNotFoundError(IntakeError, LookupError):
    """No visit record exists for the requested id."""

    def __init__(self, patient_id: int):
        super().__init__(f"Patient record not found: {patient_id}")
        self.patient_id = patient_id


class TranscriptionError(IntakeError):
    """The speech-to-text service failed or returned no text."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IdentityConflictError(IntakeError):
    """A second "new patient" record was about to be stored for one phone."""

    def __init__(self, normalized_phone: str):
        super().__init__(
            f"Phone {normalized_phone} already has a new-patient record"
        )
        self.normalized_phone = normalized_phone
