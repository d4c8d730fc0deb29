from __future__ import annotations

from .dictionary import WordLookupService, create_lookup_service
from .storage import LocalStorage
from .transcription import TranscriptionResult, create_transcription_backend
from .translation import BatchTranslator, create_translator

__all__ = [
    "BatchTranslator",
    "LocalStorage",
    "TranscriptionResult",
    "WordLookupService",
    "create_lookup_service",
    "create_transcription_backend",
    "create_translator",
]
