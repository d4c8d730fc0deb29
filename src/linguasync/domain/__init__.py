from __future__ import annotations

from .artifacts import Artifacts, TrackRecord
from .cues import Cue, SubtitleTrack, TrackRole
from .job import JobStatus, JobType, ProcessingJob
from .workspace import Workspace

__all__ = [
    "Artifacts",
    "Cue",
    "JobStatus",
    "JobType",
    "ProcessingJob",
    "SubtitleTrack",
    "TrackRecord",
    "TrackRole",
    "Workspace",
]
