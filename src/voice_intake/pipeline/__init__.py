"""
Pipeline Module

End-to-end voice intake orchestration.
"""

from voice_intake.pipeline.pipeline import IntakePipeline, create_store
from voice_intake.pipeline.config import IntakeConfig, load_config

__all__ = [
    "IntakePipeline",
    "IntakeConfig",
    "create_store",
    "load_config",
]
