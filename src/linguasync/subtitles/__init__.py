from __future__ import annotations

from .timestamps import decode, encode
from .vtt import (
    build_from_translation,
    cue_safe_text,
    extract_texts,
    looks_like_vtt,
    parse,
    segments_to_cues,
    serialize,
)

__all__ = [
    "decode",
    "encode",
    "parse",
    "serialize",
    "extract_texts",
    "build_from_translation",
    "cue_safe_text",
    "segments_to_cues",
    "looks_like_vtt",
]
