"""
WebVTT clock values <-> fractional seconds.

Decoding is lenient: anything that is not `HH:MM:SS.mmm` or `MM:SS.mmm`
decodes to 0.0 so a slightly broken subtitle file never aborts parsing.
"""

from __future__ import annotations

import math


def encode(seconds: float) -> str:
    # seconds -> "HH:MM:SS.mmm"
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    ms = total_ms % 1000
    total_seconds = total_ms // 1000
    s = total_seconds % 60
    total_minutes = total_seconds // 60
    m = total_minutes % 60
    h = total_minutes // 60
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def decode(text: str) -> float:
    parts = text.strip().split(":")
    try:
        if len(parts) == 3:
            hours, minutes, secs = parts
            value = float(hours) * 3600 + float(minutes) * 60 + float(secs)
        elif len(parts) == 2:
            minutes, secs = parts
            value = float(minutes) * 60 + float(secs)
        else:
            return 0.0
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value
