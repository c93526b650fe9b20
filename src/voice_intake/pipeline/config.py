"""
Pipeline Configuration

Configuration management for the voice intake pipeline.
"""

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class TranscriptionConfig:
    """Transcription configuration."""

    backend: str = "elevenlabs"
    api_url: str = "https://api.elevenlabs.io/v1/speech-to-text"
    model_id: str = "scribe_v1"
    timeout: float = 120.0


@dataclass
class ExtractionConfig:
    """Extraction configuration."""

    # Convert spelled-out digits when the numeric phone capture comes up short
    spoken_digits: bool = False


@dataclass
class StoreConfig:
    """Visit store configuration."""

    backend: str = "memory"  # memory, json
    path: str = "data/visits.json"


@dataclass
class IntakeConfig:
    """Complete pipeline configuration."""

    name: str = "voice-intake"
    version: str = "0.1.0"

    transcription: TranscriptionConfig = field(default_factory=TranscriptionConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    # API credentials (from environment if not set)
    api_key: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntakeConfig":
        """Create config from dictionary."""
        config = cls()

        if "name" in data:
            config.name = data["name"]
        if "version" in data:
            config.version = data["version"]
        if "api_key" in data:
            config.api_key = data["api_key"]

        # Transcription config
        if "transcription" in data:
            trans = data["transcription"]
            config.transcription = TranscriptionConfig(
                backend=trans.get("backend", "elevenlabs"),
                api_url=trans.get("api_url", "https://api.elevenlabs.io/v1/speech-to-text"),
                model_id=trans.get("model_id", "scribe_v1"),
                timeout=trans.get("timeout", 120.0),
            )

        # Extraction config
        if "extraction" in data:
            ext = data["extraction"]
            config.extraction = ExtractionConfig(
                spoken_digits=ext.get("spoken_digits", False),
            )

        # Store config
        if "store" in data:
            store = data["store"]
            config.store = StoreConfig(
                backend=store.get("backend", "memory"),
                path=store.get("path", "data/visits.json"),
            )

        return config

    @classmethod
    def from_env(cls) -> "IntakeConfig":
        """Create config from environment variables."""
        config = cls()
        config.api_key = os.environ.get("ELEVEN_API_KEY")
        config.store.backend = os.environ.get("VOICE_INTAKE_STORE", "memory")
        config.store.path = os.environ.get("VOICE_INTAKE_STORE_PATH", "data/visits.json")
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "transcription": {
                "backend": self.transcription.backend,
                "api_url": self.transcription.api_url,
                "model_id": self.transcription.model_id,
                "timeout": self.transcription.timeout,
            },
            "extraction": {
                "spoken_digits": self.extraction.spoken_digits,
            },
            "store": {
                "backend": self.store.backend,
                "path": self.store.path,
            },
        }


def load_config(config_path: str | Path) -> IntakeConfig:
    """Load configuration from YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return IntakeConfig.from_dict(data or {})
