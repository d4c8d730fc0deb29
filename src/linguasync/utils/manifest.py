from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from linguasync.domain.artifacts import TrackRecord
from linguasync.domain.job import ProcessingJob
from linguasync.utils.logging import get_logger
from linguasync.utils.timing import StepTiming

log = get_logger(__name__)

MANIFEST_NAME = "job.json"


def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat()


def _track_entry(track: TrackRecord | None) -> dict[str, Any] | None:
    if track is None:
        return None
    path = Path(track.path)
    entry: dict[str, Any] = {
        "id": track.id,
        "role": track.role.value,
        "language": track.language,
        "path": str(path),
        "size_bytes": path.stat().st_size if path.exists() else None,
        "cue_count": track.cue_count,
    }
    if track.text_sha256:
        entry["text_sha256"] = track.text_sha256
    if track.source:
        entry["source"] = track.source
    return entry


def _serialize_steps(steps: Iterable[StepTiming]) -> list[dict[str, Any]]:
    serialized = []
    for step in steps:
        serialized.append(
            {
                "name": step.name,
                "ok": step.ok,
                "started_at": _iso(step.started_at),
                "finished_at": _iso(step.finished_at),
                "duration_s": step.duration_s,
            }
        )
    return serialized


def write_job_manifest(
    *,
    job: ProcessingJob,
    steps: Iterable[StepTiming] = (),
    started_at: datetime | None = None,
    finished_at: datetime | None = None,
) -> Path:
    duration = None
    if started_at is not None and finished_at is not None:
        duration = (finished_at - started_at).total_seconds()

    payload: dict[str, Any] = {
        "job_id": job.id,
        "job_type": job.job_type.value,
        "status": job.status.value,
        "progress": job.progress,
        "error": job.error,
        "source_path": str(job.source_path),
        "source_language": job.source_language,
        "target_language": job.target_language,
        "result_track_id": job.result_track_id,
        "result_path": str(job.result_path) if job.result_path else None,
        "created_at": _iso(job.created_at),
        "updated_at": _iso(job.updated_at),
        "started_at": _iso(started_at),
        "finished_at": _iso(finished_at),
        "duration_seconds_total": duration,
        "settings_public": job.settings.to_public_dict(),
        "cli_overrides": job.cli_overrides,
        "steps": _serialize_steps(steps),
        "artifacts": {
            "original": _track_entry(job.artifacts.original),
            "translated": _track_entry(job.artifacts.translated),
        },
    }

    out = job.workspace.job_manifest
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return out


def load_job_manifest(path: Path) -> dict | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        log.warning("Ignoring unreadable manifest %s", path)
        return None


def list_job_dirs(workdir: Path) -> list[Path]:
    """Job directories that carry a manifest, newest first."""
    if not workdir.exists():
        return []
    candidates = [
        job_dir
        for job_dir in workdir.iterdir()
        if job_dir.is_dir() and (job_dir / MANIFEST_NAME).exists()
    ]
    candidates.sort(key=lambda p: (p / MANIFEST_NAME).stat().st_mtime, reverse=True)
    return candidates
