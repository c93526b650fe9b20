"""
Transcript Data Types

Data model for speech-to-text results.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Transcript:
    """Complete transcription result."""

    text: str
    language: str = "en"
    confidence: float = 1.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def word_count(self) -> int:
        """Count of words in the transcript text."""
        if not self.text:
            return 0
        return len(self.text.split())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "text": self.text,
            "language": self.language,
            "confidence": self.confidence,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transcript":
        """Create from dictionary."""
        return cls(
            text=data["text"],
            language=data.get("language", "en"),
            confidence=data.get("confidence", 1.0),
            metadata=data.get("metadata", {}),
        )
