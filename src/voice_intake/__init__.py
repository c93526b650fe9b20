"""
Voice Intake

Spoken patient intake to structured, phone-deduplicated visit records.

Usage:
    from voice_intake import IntakePipeline

    pipeline = IntakePipeline.in_memory()
    visit = pipeline.submit_voice_transcript(
        "My name is John Smith, my phone number is 555-123-4567"
    )
    print(visit.to_dict())

Author: Cleansheet LLC
License: CC BY 4.0
"""

from voice_intake.pipeline.pipeline import IntakePipeline
from voice_intake.pipeline.config import IntakeConfig

__version__ = "0.1.0"
__author__ = "Cleansheet LLC"
__license__ = "CC BY 4.0"

__all__ = [
    "IntakePipeline",
    "IntakeConfig",
    "__version__",
]
