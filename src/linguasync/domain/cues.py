from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


@dataclass(frozen=True)
class Cue:
    """A timed span of subtitle text. `index` is 1-based and positional."""

    index: int
    start: float
    end: float
    text: str

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"Cue index must be positive, got {self.index}")
        if self.start < 0:
            raise ValueError(f"Cue start must be non-negative, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"Cue end {self.end} precedes start {self.start}")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, t: float) -> bool:
        return self.start <= t <= self.end


class TrackRole(str, Enum):
    ORIGINAL = "original"
    TRANSLATED = "translated"


@dataclass(frozen=True)
class SubtitleTrack:
    role: TrackRole
    language: str
    cues: tuple[Cue, ...] = ()

    @classmethod
    def from_cues(cls, role: TrackRole, language: str, cues: Sequence[Cue]) -> "SubtitleTrack":
        return cls(role=role, language=language, cues=tuple(cues))

    def __len__(self) -> int:
        return len(self.cues)
