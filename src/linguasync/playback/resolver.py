"""
Active-cue lookup for a playback clock.

All functions assume cues sorted by start (non-decreasing). Results for
unsorted input are unspecified; callers sort at load time (see
PlaybackController.load_track).
"""

from __future__ import annotations

from typing import Sequence

from linguasync.domain.cues import Cue


def find_active(cues: Sequence[Cue], t: float) -> int | None:
    """
    Return the index of the cue whose [start, end] contains `t` (both ends
    inclusive), or None when `t` falls before the first cue or in a gap.
    """
    left = 0
    right = len(cues) - 1

    while left <= right:
        mid = (left + right) // 2
        cue = cues[mid]
        if cue.start <= t <= cue.end:
            return mid
        if t < cue.start:
            right = mid - 1
        else:
            left = mid + 1

    # the rightmost cue with start <= t was visited and did not contain t
    return None


def find_preceding(cues: Sequence[Cue], t: float) -> int | None:
    """Return the index of the rightmost cue with start <= t."""
    left = 0
    right = len(cues) - 1
    result: int | None = None
    while left <= right:
        mid = (left + right) // 2
        if cues[mid].start <= t:
            result = mid
            left = mid + 1
        else:
            right = mid - 1
    return result


def is_sorted(cues: Sequence[Cue]) -> bool:
    return all(a.start <= b.start for a, b in zip(cues, cues[1:]))
