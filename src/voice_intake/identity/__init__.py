"""
Identity Module

Phone-keyed patient identity, visit storage and deduplication.
"""

from voice_intake.identity.phone import format_phone, normalize_phone
from voice_intake.identity.store import (
    InMemoryVisitStore,
    JsonFileVisitStore,
    KeyedLock,
    VisitStore,
)
from voice_intake.identity.reconciler import IdentityReconciler, is_voice_duplicate

__all__ = [
    "format_phone",
    "normalize_phone",
    "InMemoryVisitStore",
    "JsonFileVisitStore",
    "VisitStore",
    "IdentityReconciler",
    "KeyedLock",
    "is_voice_duplicate",
]
