"""
Intake Module

Rule-based extraction of patient fields from intake transcripts.
"""

from voice_intake.intake.intake_types import (
    CandidateRecord,
    PatientVisitRecord,
    VisitStats,
    apply_defaults,
)
from voice_intake.intake.normalizer import normalize
from voice_intake.intake.field_extractor import FieldExtractor, extract, parse_transcript
from voice_intake.intake.spoken_digits import words_to_digits

__all__ = [
    "CandidateRecord",
    "PatientVisitRecord",
    "VisitStats",
    "apply_defaults",
    "normalize",
    "FieldExtractor",
    "extract",
    "parse_transcript",
    "words_to_digits",
]
