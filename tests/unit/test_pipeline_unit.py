from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from linguasync.config.settings import Settings
from linguasync.domain.cues import TrackRole
from linguasync.domain.job import JobStatus, JobType, ProcessingJob
from linguasync.domain.workspace import Workspace
from linguasync.exceptions import (
    LinguaSyncError,
    StorageError,
    TranscriptionError,
    TranslationCountMismatchError,
)
from linguasync.pipeline import NO_CUES_MESSAGE, Pipeline
from linguasync.services.transcription import TranscriptionResult
from linguasync.services.translation import BatchTranslator
from linguasync.subtitles.vtt import parse

ORIGINAL_VTT = (
    "WEBVTT\n\n"
    "1\n00:00:01.000 --> 00:00:02.000\nHello\n\n"
    "2\n00:00:03.000 --> 00:00:04.500\nHow are you?\n\n"
    "3\n00:00:05.000 --> 00:00:06.000\nBye\n"
)


# -----------------------
# Fake services (deterministic)
# -----------------------
@dataclass
class FakeTranscriber:
    segments: list[dict] = field(default_factory=list)
    language: str | None = "en"
    seen: list[tuple[Path, str | None]] = field(default_factory=list)

    def transcribe(self, *, media_path: Path, language: str | None) -> TranscriptionResult:
        self.seen.append((media_path, language))
        return TranscriptionResult(segments=self.segments, language=self.language)


@dataclass
class PrefixLLM:
    prefix: str = "VI:"
    drop_last: bool = False

    def generate(self, *, system: str, prompt: str, model: str, temperature: float) -> str:
        batch = json.loads(prompt)
        out = [f"{self.prefix}{t}" for t in batch]
        if self.drop_last:
            out = out[:-1]
        return json.dumps(out)


class ProgressLog:
    def __init__(self) -> None:
        self.events: list[tuple[JobStatus, float]] = []

    def __call__(self, job: ProcessingJob) -> None:
        self.events.append((job.status, job.progress))

    @property
    def progress(self) -> list[float]:
        return [p for _, p in self.events]


def _job(tmp_path: Path, job_type: JobType, source: Path, **kwargs) -> ProcessingJob:  # noqa: ANN003
    settings = Settings()
    settings.workdir = str(tmp_path / ".linguasync")
    ws = Workspace.create(settings.workdir, job_id=f"{job_type.value}1")
    return ProcessingJob(job_type=job_type, settings=settings, workspace=ws, source_path=source, **kwargs)


def _original(tmp_path: Path) -> Path:
    path = tmp_path / "original.vtt"
    path.write_text(ORIGINAL_VTT, encoding="utf-8")
    return path


def _manifest(job: ProcessingJob) -> dict:
    return json.loads(job.workspace.job_manifest.read_text(encoding="utf-8"))


# -----------------------
# Transcribe
# -----------------------
def test_transcribe_writes_original_track(tmp_path: Path) -> None:
    media = tmp_path / "talk.mp3"
    media.write_bytes(b"ID3")
    transcriber = FakeTranscriber(
        segments=[{"start": 0.0, "end": 1.5, "text": " Hello "}, {"start": 2.0, "end": 3.0, "text": "Bye"}],
        language="en",
    )
    progress = ProgressLog()
    job = _job(tmp_path, JobType.TRANSCRIBE, media, source_language="auto")

    Pipeline(transcriber=transcriber, listener=progress).transcribe(job)

    assert job.status is JobStatus.SUCCEEDED
    assert transcriber.seen == [(media.resolve(), "auto")]
    assert progress.progress == pytest.approx([0.1, 0.2, 0.7, 0.9, 1.0])
    assert job.result_path == job.workspace.original_vtt
    assert job.result_track_id == "transcribe1-original"
    cues = parse(job.result_path.read_text(encoding="utf-8"))
    assert [c.text for c in cues] == ["Hello", "Bye"]

    track = job.artifacts.original
    assert track is not None
    assert track.role is TrackRole.ORIGINAL
    assert track.language == "en"
    assert track.cue_count == 2

    manifest = _manifest(job)
    assert manifest["status"] == "succeeded"
    assert manifest["progress"] == 1.0
    assert [s["name"] for s in manifest["steps"]] == ["read_media", "transcribe", "persist_track"]


def test_transcribe_missing_media_fails_job(tmp_path: Path) -> None:
    job = _job(tmp_path, JobType.TRANSCRIBE, tmp_path / "missing.mp3")

    with pytest.raises(StorageError):
        Pipeline(transcriber=FakeTranscriber()).transcribe(job)

    assert job.status is JobStatus.FAILED
    assert "missing.mp3" in job.error
    assert _manifest(job)["status"] == "failed"


def test_transcribe_without_speech_fails(tmp_path: Path) -> None:
    media = tmp_path / "silence.wav"
    media.write_bytes(b"RIFF")
    job = _job(tmp_path, JobType.TRANSCRIBE, media)

    with pytest.raises(TranscriptionError):
        Pipeline(transcriber=FakeTranscriber(segments=[])).transcribe(job)

    assert job.status is JobStatus.FAILED
    assert not job.workspace.original_vtt.exists()


# -----------------------
# Translate
# -----------------------
def test_translate_keeps_timing_and_reports_progress(tmp_path: Path) -> None:
    progress = ProgressLog()
    translator = BatchTranslator(llm=PrefixLLM(), model="fake", batch_size=2)
    job = _job(tmp_path, JobType.TRANSLATE, _original(tmp_path), source_language="en", target_language="vi")

    Pipeline(translator=translator, listener=progress).translate(job)

    assert job.status is JobStatus.SUCCEEDED
    assert progress.progress == pytest.approx([0.1, 0.2, 0.5, 0.8, 0.85, 1.0])
    assert progress.progress == sorted(progress.progress)

    assert job.result_path == job.workspace.translated_vtt("vi")
    original = parse(ORIGINAL_VTT)
    translated = parse(job.result_path.read_text(encoding="utf-8"))
    assert [c.text for c in translated] == ["VI:Hello", "VI:How are you?", "VI:Bye"]
    assert [(c.start, c.end) for c in translated] == [(c.start, c.end) for c in original]

    track = job.artifacts.translated
    assert track is not None
    assert track.language == "vi"
    assert track.cue_count == 3
    assert track.source == "fake"


def test_translate_mismatch_leaves_no_translated_file(tmp_path: Path) -> None:
    progress = ProgressLog()
    translator = BatchTranslator(llm=PrefixLLM(drop_last=True), model="fake")
    job = _job(tmp_path, JobType.TRANSLATE, _original(tmp_path), target_language="vi")

    with pytest.raises(TranslationCountMismatchError):
        Pipeline(translator=translator, listener=progress).translate(job)

    assert job.status is JobStatus.FAILED
    assert job.error == "Translation count mismatch: expected 3, got 2"
    assert not job.workspace.translated_vtt("vi").exists()
    assert job.result_path is None
    assert progress.events[-1] == (JobStatus.FAILED, 0.2)
    assert _manifest(job)["error"] == job.error


def test_translate_empty_track_fails(tmp_path: Path) -> None:
    source = tmp_path / "empty.vtt"
    source.write_text("WEBVTT\n\n", encoding="utf-8")
    translator = BatchTranslator(llm=PrefixLLM(), model="fake")
    job = _job(tmp_path, JobType.TRANSLATE, source, target_language="vi")

    with pytest.raises(LinguaSyncError) as excinfo:
        Pipeline(translator=translator).translate(job)

    assert str(excinfo.value) == NO_CUES_MESSAGE
    assert job.status is JobStatus.FAILED


def test_wrong_job_type_rejected(tmp_path: Path) -> None:
    job = _job(tmp_path, JobType.TRANSCRIBE, tmp_path / "a.mp3")

    with pytest.raises(LinguaSyncError):
        Pipeline().translate(job)

    assert job.status is JobStatus.QUEUED
