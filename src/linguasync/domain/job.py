from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from linguasync.config.settings import Settings
from linguasync.domain.artifacts import Artifacts, TrackRecord
from linguasync.domain.workspace import Workspace
from linguasync.utils.logging import get_logger
from linguasync.utils.timing import utc_now

log = get_logger(__name__)


class JobType(str, Enum):
    TRANSCRIBE = "transcribe"
    TRANSLATE = "translate"


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED})


@dataclass
class ProcessingJob:
    """
    One transcribe or translate request and its observable state.

    `progress` only moves forward; callers may report the same checkpoint
    twice without effect.
    """

    job_type: JobType
    settings: Settings
    workspace: Workspace
    source_path: Path
    source_language: str | None = None
    target_language: str | None = None
    status: JobStatus = JobStatus.QUEUED
    progress: float = 0.0
    error: str | None = None
    result_track_id: str | None = None
    result_path: Path | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    artifacts: Artifacts = field(default_factory=Artifacts)
    cli_overrides: dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.workspace.job_id

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def start(self) -> None:
        self.status = JobStatus.RUNNING
        self.advance(0.1)

    def advance(self, progress: float) -> None:
        value = min(1.0, max(0.0, progress))
        if value <= self.progress:
            return
        self.progress = value
        self.updated_at = utc_now()
        log.info("Job %s %s: %.0f%%", self.id, self.job_type.value, value * 100)

    def succeed(self, track: TrackRecord) -> None:
        self.result_track_id = track.id
        self.result_path = track.path
        self.status = JobStatus.SUCCEEDED
        self.error = None
        self.advance(1.0)
        log.info("Job %s succeeded: %s", self.id, track.path)

    def fail(self, error: BaseException | str) -> None:
        self.status = JobStatus.FAILED
        self.error = str(error)
        self.updated_at = utc_now()
        log.error("Job %s failed: %s", self.id, self.error)
