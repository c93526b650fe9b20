"""
Voice Intake Pipeline

End-to-end orchestration of transcription, field extraction and identity
reconciliation.
"""

import logging
from pathlib import Path
from typing import Any

from voice_intake.identity.reconciler import IdentityReconciler
from voice_intake.identity.store import InMemoryVisitStore, JsonFileVisitStore, VisitStore
from voice_intake.intake.field_extractor import FieldExtractor, parse_transcript
from voice_intake.intake.intake_types import CandidateRecord, PatientVisitRecord, VisitStats
from voice_intake.pipeline.config import IntakeConfig, StoreConfig, load_config
from voice_intake.transcription.speech_client import SpeechToTextClient, SpeechToTextConfig

logger = logging.getLogger(__name__)


def create_store(config: StoreConfig) -> VisitStore:
    """Build the visit store named by the configuration."""
    if config.backend == "memory":
        return InMemoryVisitStore()
    if config.backend == "json":
        return JsonFileVisitStore(config.path)
    raise ValueError(f"Unknown store backend: {config.backend}")


class IntakePipeline:
    """Voice and manual patient intake over a visit store."""

    def __init__(
        self,
        config: IntakeConfig,
        store: VisitStore | None = None,
        transcriber: SpeechToTextClient | None = None,
    ):
        """Initialize pipeline with configuration."""
        self.config = config

        # Initialize components (lazy)
        self._store = store
        self._transcriber = transcriber
        self._extractor: FieldExtractor | None = None
        self._reconciler: IdentityReconciler | None = None

    @classmethod
    def from_config(cls, config_path: str | Path) -> "IntakePipeline":
        """Create pipeline from config file."""
        config = load_config(config_path)
        return cls(config)

    @classmethod
    def in_memory(cls) -> "IntakePipeline":
        """Create pipeline backed by a fresh in-memory store."""
        return cls(IntakeConfig(), store=InMemoryVisitStore())

    @property
    def store(self) -> VisitStore:
        """Get or create the visit store."""
        if self._store is None:
            self._store = create_store(self.config.store)
        return self._store

    @property
    def reconciler(self) -> IdentityReconciler:
        """Get or create the identity reconciler."""
        if self._reconciler is None:
            self._reconciler = IdentityReconciler(self.store)
        return self._reconciler

    @property
    def extractor(self) -> FieldExtractor:
        """Get or create the field extractor."""
        if self._extractor is None:
            self._extractor = FieldExtractor(
                spoken_digits=self.config.extraction.spoken_digits
            )
        return self._extractor

    @property
    def transcriber(self) -> SpeechToTextClient:
        """Get or create the speech-to-text client."""
        if self._transcriber is None:
            trans = self.config.transcription
            if trans.backend != "elevenlabs":
                raise ValueError(f"Unknown transcription backend: {trans.backend}")
            self._transcriber = SpeechToTextClient(
                SpeechToTextConfig(
                    api_key=self.config.api_key,
                    api_url=trans.api_url,
                    model_id=trans.model_id,
                    timeout=trans.timeout,
                )
            )
        return self._transcriber

    def parse(self, transcript: str) -> CandidateRecord:
        """Extract a defaulted candidate without storing anything."""
        return parse_transcript(transcript, self.extractor)

    def submit_manual_visit(
        self, record: CandidateRecord | dict[str, Any]
    ) -> PatientVisitRecord:
        """Store a visit entered through the intake form."""
        if isinstance(record, dict):
            record = CandidateRecord.from_dict(record)
        return self.reconciler.record_visit(record)

    def submit_voice_transcript(self, transcript: str) -> PatientVisitRecord:
        """Parse transcript text and store it as a voice visit."""
        candidate = self.parse(transcript)
        return self.reconciler.record_voice_visit(candidate)

    def submit_voice_audio(
        self, audio: bytes, filename: str = "audio.wav"
    ) -> PatientVisitRecord:
        """Transcribe audio and store it as a voice visit.

        Raises TranscriptionError before anything is stored if the
        speech-to-text call fails.
        """
        transcript = self.transcriber.transcribe(audio, filename=filename)
        logger.info("Transcribed %s (%d words)", filename, transcript.word_count)
        return self.submit_voice_transcript(transcript.text)

    def submit_voice_file(self, filepath: str | Path) -> PatientVisitRecord:
        """Transcribe an audio file and store it as a voice visit."""
        path = Path(filepath)
        return self.submit_voice_audio(path.read_bytes(), filename=path.name)

    def list_unique_patients(self) -> list[PatientVisitRecord]:
        """Latest visit per phone identity, newest first."""
        return self.reconciler.list_latest_per_identity()

    def list_all_visits(self) -> list[PatientVisitRecord]:
        """Every stored visit in insertion order."""
        return self.store.find_all()

    def get_stats(self, patient_id: int) -> VisitStats:
        """Live visit stats for the identity behind a record."""
        return self.reconciler.visit_stats(patient_id)
