from __future__ import annotations

from pathlib import Path

from linguasync.config.settings import Settings
from linguasync.domain.artifacts import TrackRecord
from linguasync.domain.cues import TrackRole
from linguasync.domain.job import JobStatus, JobType, ProcessingJob
from linguasync.domain.workspace import Workspace


def _job(tmp_path: Path) -> ProcessingJob:
    ws = Workspace.create(str(tmp_path / ".linguasync"), job_id="job1")
    return ProcessingJob(
        job_type=JobType.TRANSLATE,
        settings=Settings(),
        workspace=ws,
        source_path=tmp_path / "a.vtt",
    )


def test_progress_never_decreases(tmp_path: Path) -> None:
    job = _job(tmp_path)
    job.start()
    job.advance(0.5)
    job.advance(0.3)
    job.advance(1.7)

    assert job.status is JobStatus.RUNNING
    assert job.progress == 1.0


def test_succeed_records_result(tmp_path: Path) -> None:
    job = _job(tmp_path)
    track = TrackRecord(
        id="job1-translated",
        role=TrackRole.TRANSLATED,
        language="vi",
        path=tmp_path / "t.vtt",
        cue_count=2,
    )

    job.start()
    job.succeed(track)

    assert job.id == "job1"
    assert job.finished
    assert job.progress == 1.0
    assert job.result_track_id == "job1-translated"
    assert job.result_path == tmp_path / "t.vtt"


def test_fail_keeps_progress_and_error(tmp_path: Path) -> None:
    job = _job(tmp_path)
    job.start()
    job.advance(0.4)

    job.fail(RuntimeError("provider down"))

    assert job.status is JobStatus.FAILED
    assert job.finished
    assert job.progress == 0.4
    assert job.error == "provider down"
