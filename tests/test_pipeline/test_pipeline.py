"""
Tests for the intake pipeline.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from voice_intake.errors import PatientNotFoundError, TranscriptionError
from voice_intake.identity.store import InMemoryVisitStore, JsonFileVisitStore
from voice_intake.intake.intake_types import CandidateRecord
from voice_intake.pipeline.config import IntakeConfig, StoreConfig
from voice_intake.pipeline.pipeline import IntakePipeline, create_store
from voice_intake.transcription.speech_client import SpeechToTextClient


class TestCreateStore:
    """Tests for create_store()."""

    def test_memory(self):
        """Test the memory backend."""
        assert isinstance(create_store(StoreConfig()), InMemoryVisitStore)

    def test_json(self, tmp_path: Path):
        """Test the JSON backend."""
        store = create_store(StoreConfig(backend="json", path=str(tmp_path / "v.json")))

        assert isinstance(store, JsonFileVisitStore)

    def test_unknown(self):
        """Test unknown backends are rejected."""
        with pytest.raises(ValueError):
            create_store(StoreConfig(backend="postgres"))


class TestPipelineInit:
    """Tests for pipeline construction."""

    def test_lazy_components(self):
        """Test components are created on first use."""
        pipeline = IntakePipeline(IntakeConfig())

        assert pipeline._store is None
        assert isinstance(pipeline.store, InMemoryVisitStore)
        assert pipeline.reconciler.store is pipeline.store

    def test_from_config(self, temp_config_file: Path):
        """Test creating a pipeline from a YAML file."""
        pipeline = IntakePipeline.from_config(temp_config_file)

        assert pipeline.config.name == "test-intake"
        assert pipeline.extractor.spoken_digits is True

    def test_transcriber_from_config(self, monkeypatch):
        """Test the speech client picks up the configured key."""
        monkeypatch.delenv("ELEVEN_API_KEY", raising=False)
        pipeline = IntakePipeline(IntakeConfig(api_key="test-key"))

        assert isinstance(pipeline.transcriber, SpeechToTextClient)
        assert pipeline.transcriber.api_key == "test-key"

    def test_unknown_transcription_backend(self):
        """Test unknown transcription backends are rejected."""
        config = IntakeConfig(api_key="test-key")
        config.transcription.backend = "whisper"

        with pytest.raises(ValueError):
            IntakePipeline(config).transcriber


class TestPipelineIntake:
    """Tests for the intake operations."""

    @pytest.fixture
    def pipeline(self, mock_transcriber: MagicMock) -> IntakePipeline:
        return IntakePipeline(
            IntakeConfig(), store=InMemoryVisitStore(), transcriber=mock_transcriber
        )

    def test_submit_voice_transcript(self, pipeline: IntakePipeline, sample_transcript_text: str):
        """Test a transcript becomes a stored new-patient visit."""
        visit = pipeline.submit_voice_transcript(sample_transcript_text)

        assert visit.id == 1
        assert visit.first_name == "John"
        assert visit.last_name == "Smith"
        assert visit.phone_number == "555-123-4567"
        assert visit.address == "12 Oak Street"
        assert visit.is_new_patient is True

    def test_empty_transcript_stored_with_defaults(self, pipeline: IntakePipeline):
        """Test a transcript matching no rule is still recorded."""
        visit = pipeline.submit_voice_transcript("")

        assert visit.first_name == "Unknown"
        assert visit.address == "Unspecified"
        assert visit.phone_number is None

    def test_submit_manual_visit_dict(self, pipeline: IntakePipeline):
        """Test form submissions arrive as dictionaries."""
        visit = pipeline.submit_manual_visit(
            {
                "firstName": "Ann",
                "lastName": "Lee",
                "phoneNumber": "(555) 222-3333",
                "address": "1 Bay Road",
            }
        )

        assert visit.phone_number == "5552223333"
        assert visit.is_new_patient is True

    def test_manual_then_voice_is_returning(self, pipeline: IntakePipeline, sample_transcript_text: str):
        """Test a voice visit recognizes a manually entered patient."""
        pipeline.submit_manual_visit(
            CandidateRecord(first_name="John", last_name="Smith", phone_number="5551234567")
        )

        visit = pipeline.submit_voice_transcript(sample_transcript_text)

        assert visit.is_new_patient is False

    def test_submit_voice_audio(self, pipeline: IntakePipeline, mock_transcriber: MagicMock):
        """Test audio is transcribed and then recorded."""
        visit = pipeline.submit_voice_audio(b"audio", filename="intake.wav")

        mock_transcriber.transcribe.assert_called_once_with(b"audio", filename="intake.wav")
        assert visit.first_name == "John"

    def test_submit_voice_file(self, pipeline: IntakePipeline, mock_transcriber: MagicMock, tmp_path: Path):
        """Test audio files are read and sent by name."""
        audio_file = tmp_path / "intake.m4a"
        audio_file.write_bytes(b"m4a")

        pipeline.submit_voice_file(audio_file)

        mock_transcriber.transcribe.assert_called_once_with(b"m4a", filename="intake.m4a")

    def test_transcription_failure_stores_nothing(self, pipeline: IntakePipeline, mock_transcriber: MagicMock):
        """Test upstream failures propagate and leave the store untouched."""
        mock_transcriber.transcribe.side_effect = TranscriptionError("boom", status_code=502)

        with pytest.raises(TranscriptionError):
            pipeline.submit_voice_audio(b"audio")

        assert pipeline.list_all_visits() == []

    def test_parse_does_not_store(self, pipeline: IntakePipeline, sample_transcript_text: str):
        """Test parse() only extracts."""
        candidate = pipeline.parse(sample_transcript_text)

        assert candidate.first_name == "John"
        assert pipeline.list_all_visits() == []


class TestPipelineQueries:
    """Tests for listing and stats."""

    @pytest.fixture
    def pipeline(self) -> IntakePipeline:
        return IntakePipeline.in_memory()

    def test_list_unique_patients(self, pipeline: IntakePipeline):
        """Test one row per phone, newest first."""
        pipeline.submit_voice_transcript("my name is john smith my number is 5551234567")
        pipeline.submit_voice_transcript("my name is bob jones my number is 5559876543")
        pipeline.submit_voice_transcript("my name is john smith call me at 555 123 4567")

        unique = pipeline.list_unique_patients()

        assert [v.id for v in unique] == [3, 2]
        assert len(pipeline.list_all_visits()) == 3

    def test_get_stats(self, pipeline: IntakePipeline):
        """Test stats follow later visits under the same phone."""
        first = pipeline.submit_manual_visit(CandidateRecord(phone_number="5551234567"))
        assert pipeline.get_stats(first.id).to_dict() == {
            "visit_count": 1,
            "new_patient_first_time": True,
        }

        pipeline.submit_manual_visit(CandidateRecord(phone_number="555-123-4567"))

        stats = pipeline.get_stats(first.id)
        assert stats.visit_count == 2
        assert stats.is_first_time_new is False

    def test_get_stats_unknown(self, pipeline: IntakePipeline):
        """Test unknown ids raise PatientNotFoundError."""
        with pytest.raises(PatientNotFoundError):
            pipeline.get_stats(404)

    def test_json_store_survives_restart(self, tmp_path: Path):
        """Test a JSON-backed pipeline sees earlier visits after reopening."""
        config = IntakeConfig()
        config.store.backend = "json"
        config.store.path = str(tmp_path / "visits.json")

        IntakePipeline(config).submit_voice_transcript("my name is john smith my number is 5551234567")
        visit = IntakePipeline(config).submit_voice_transcript(
            "my name is john smith my number is 5551234567"
        )

        assert visit.id == 2
        assert visit.is_new_patient is False
