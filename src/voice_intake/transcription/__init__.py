"""
Transcription Module

Speech-to-text integration for intake recordings.
"""

from voice_intake.transcription.transcript_types import Transcript
from voice_intake.transcription.speech_client import SpeechToTextClient, SpeechToTextConfig

__all__ = [
    "Transcript",
    "SpeechToTextClient",
    "SpeechToTextConfig",
]
