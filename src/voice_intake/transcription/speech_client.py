"""
Speech-to-Text Client

ElevenLabs speech-to-text client for intake recordings.

The service is treated as a black box: audio bytes go in, transcript text
comes out. Any failure surfaces as TranscriptionError.
"""

from dataclasses import dataclass
import logging
import os
from pathlib import Path

import requests

from voice_intake.errors import TranscriptionError
from voice_intake.transcription.transcript_types import Transcript

logger = logging.getLogger(__name__)


@dataclass
class SpeechToTextConfig:
    """Configuration for the speech-to-text client."""

    api_key: str | None = None
    api_url: str = "https://api.elevenlabs.io/v1/speech-to-text"
    model_id: str = "scribe_v1"
    timeout: float = 120.0

    @classmethod
    def from_env(cls) -> "SpeechToTextConfig":
        """Create configuration from environment variables."""
        return cls(
            api_key=os.environ.get("ELEVEN_API_KEY"),
            api_url=os.environ.get(
                "ELEVEN_STT_URL", "https://api.elevenlabs.io/v1/speech-to-text"
            ),
            model_id=os.environ.get("ELEVEN_STT_MODEL", "scribe_v1"),
            timeout=float(os.environ.get("ELEVEN_STT_TIMEOUT", "120.0")),
        )


class SpeechToTextClient:
    """HTTP client for the speech-to-text service."""

    def __init__(self, config: SpeechToTextConfig | None = None):
        """Initialize client."""
        self.config = config or SpeechToTextConfig()

        # Get API key from config or environment
        self.api_key = self.config.api_key or os.environ.get("ELEVEN_API_KEY")

        if not self.api_key:
            raise ValueError(
                "Speech-to-text API key required. "
                "Set ELEVEN_API_KEY environment variable or pass api_key in config."
            )

    @property
    def _headers(self) -> dict[str, str]:
        """Request headers."""
        return {"xi-api-key": self.api_key}

    def health_check(self) -> bool:
        """Check if the API is reachable."""
        try:
            response = requests.get(
                self.config.api_url,
                headers=self._headers,
                timeout=10.0,
            )
            # 405: endpoint exists but only accepts POST
            return response.status_code in [200, 405]
        except requests.RequestException:
            return False

    def transcribe(self, audio: bytes, filename: str = "audio.wav") -> Transcript:
        """Transcribe audio bytes to text."""
        try:
            response = requests.post(
                self.config.api_url,
                headers=self._headers,
                files={"file": (filename, audio)},
                data={"model_id": self.config.model_id},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Speech-to-text request failed: %s", e)
            raise TranscriptionError(f"Speech recognition request failed: {e}") from e

        if response.status_code != 200:
            logger.warning("Speech-to-text API returned %s", response.status_code)
            raise TranscriptionError(
                f"Speech recognition failed: {response.status_code} - {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise TranscriptionError("Speech recognition returned invalid JSON") from e

        if not isinstance(result, dict) or not isinstance(result.get("text"), str):
            raise TranscriptionError("Speech recognition failed: no text in response")

        text = result["text"].strip()
        logger.debug("Recognized text: %r", text)

        return Transcript(
            text=text,
            language=result.get("language_code") or "en",
            confidence=result.get("language_probability", 1.0),
            metadata={"model": self.config.model_id, "filename": filename},
        )

    def transcribe_file(self, filepath: str | Path) -> Transcript:
        """Transcribe an audio file from disk."""
        path = Path(filepath)
        return self.transcribe(path.read_bytes(), filename=path.name)
