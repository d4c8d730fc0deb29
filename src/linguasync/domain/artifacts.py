from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from linguasync.domain.cues import TrackRole


@dataclass(frozen=True)
class TrackRecord:
    """A subtitle file produced by a job."""

    id: str
    role: TrackRole
    language: str | None
    path: Path
    cue_count: int
    text_sha256: str | None = None
    source: str | None = None


@dataclass
class Artifacts:
    original: Optional[TrackRecord] = None
    translated: Optional[TrackRecord] = None

    def result(self) -> Optional[TrackRecord]:
        return self.translated or self.original
