"""
Pytest Configuration and Shared Fixtures

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest


# =============================================================================
# TRANSCRIPT FIXTURES
# =============================================================================


@pytest.fixture
def sample_transcript_text() -> str:
    """Typical spoken intake transcript."""
    return (
        "Hi, my name is John Smith. My phone number is (555) 123-4567, "
        "and I live at 12 Oak Street."
    )


@pytest.fixture
def sample_transcript_normalized() -> str:
    """Intake transcript already in normalized form."""
    return (
        "my name is john smith my phone number is 5551234567 "
        "my address is 12 oak street"
    )


# =============================================================================
# RECORD FIXTURES
# =============================================================================


@pytest.fixture
def john_smith():
    """Candidate for John Smith."""
    from voice_intake.intake.intake_types import CandidateRecord

    return CandidateRecord(
        first_name="John",
        last_name="Smith",
        phone_number="555-123-4567",
        address="12 Oak Street",
    )


@pytest.fixture
def jane_smith():
    """Candidate sharing John Smith's phone and last name."""
    from voice_intake.intake.intake_types import CandidateRecord

    return CandidateRecord(
        first_name="Jane",
        last_name="Smith",
        phone_number="5551234567",
        address="12 Oak Street",
    )


@pytest.fixture
def jane_doe():
    """Candidate sharing John Smith's phone but neither name."""
    from voice_intake.intake.intake_types import CandidateRecord

    return CandidateRecord(
        first_name="Jane",
        last_name="Doe",
        phone_number="(555) 123-4567",
        address="4 Elm Road",
    )


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def memory_store():
    """Empty in-memory visit store."""
    from voice_intake.identity.store import InMemoryVisitStore

    return InMemoryVisitStore()


@pytest.fixture
def reconciler(memory_store):
    """Identity reconciler over an empty in-memory store."""
    from voice_intake.identity.reconciler import IdentityReconciler

    return IdentityReconciler(memory_store)


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================


@pytest.fixture
def sample_config_dict() -> dict[str, Any]:
    """Sample pipeline configuration dictionary."""
    return {
        "name": "test-intake",
        "version": "1.0.0",
        "transcription": {
            "backend": "elevenlabs",
            "model_id": "scribe_v1",
            "timeout": 30.0,
        },
        "extraction": {
            "spoken_digits": True,
        },
        "store": {
            "backend": "json",
            "path": "visits.json",
        },
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, sample_config_dict: dict) -> Path:
    """Create a temporary config file."""
    import yaml

    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)
    return config_path


# =============================================================================
# MOCK FIXTURES
# =============================================================================


@pytest.fixture
def mock_transcriber(sample_transcript_text: str) -> MagicMock:
    """Mock speech-to-text client that returns the sample transcript."""
    from voice_intake.transcription.transcript_types import Transcript

    mock = MagicMock()
    mock.transcribe.return_value = Transcript(
        text=sample_transcript_text,
        language="en",
        confidence=0.97,
    )
    return mock
