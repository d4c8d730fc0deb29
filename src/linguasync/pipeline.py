"""
Job orchestration for LinguaSync.

Two jobs exist:

1) transcribe: media file -> original VTT track
2) translate: original VTT track -> translated VTT track (same timings)

Responsibilities:
- Coordinate service execution order
- Report monotonic progress at fixed checkpoints
- Persist the result track, then mark the job succeeded
- Record a failed status (with the error text) before re-raising

Does NOT:
- Implement vendor-specific logic (OpenAI, Groq, faster-whisper)
- Own filesystem paths (Workspace does)
- Persist a partial track when a step fails
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from linguasync.config.settings import Settings
from linguasync.domain.artifacts import Artifacts, TrackRecord
from linguasync.domain.cues import TrackRole
from linguasync.domain.job import JobType, ProcessingJob
from linguasync.domain.workspace import Workspace
from linguasync.exceptions import LinguaSyncError, StorageError, TranscriptionError
from linguasync.services.storage import LocalStorage, StorageBackend
from linguasync.services.transcription import TranscriptionBackend, create_transcription_backend
from linguasync.services.translation import BatchTranslator, create_translator
from linguasync.subtitles.vtt import build_from_translation, extract_texts, parse, serialize
from linguasync.utils.logging import get_logger
from linguasync.utils.manifest import write_job_manifest
from linguasync.utils.text import sha256_text
from linguasync.utils.timing import StepTimer, utc_now

log = get_logger(__name__)

JobListener = Callable[[ProcessingJob], None]

# Progress checkpoints
TRANSCRIBE_RUNNING = 0.1
TRANSCRIBE_MEDIA_READ = 0.2
TRANSCRIBE_DONE = 0.7
TRANSCRIBE_PERSISTED = 0.9

TRANSLATE_RUNNING = 0.1
TRANSLATE_TRACK_READ = 0.2
TRANSLATE_SPAN = 0.6
TRANSLATE_PERSISTED = 0.85

NO_CUES_MESSAGE = "No subtitle cues found in the original track"


def new_job(
    settings: Settings,
    job_type: JobType,
    source_path: str | Path,
    *,
    source_language: str | None = None,
    target_language: str | None = None,
    cli_overrides: dict[str, str] | None = None,
) -> ProcessingJob:
    workspace = Workspace.create(settings.workdir)
    return ProcessingJob(
        job_type=job_type,
        settings=settings,
        workspace=workspace,
        source_path=Path(source_path),
        source_language=source_language,
        target_language=target_language,
        cli_overrides=cli_overrides or {},
    )


class Pipeline:
    """
    Runs transcribe/translate jobs using composable services.

    Notes:
    - The transcription backend and translator are created per-run via
      factories when not injected, because they depend on credentials.
    - Every run owns its job record and retry counters; a Pipeline may run
      several jobs one after another.
    """

    def __init__(
        self,
        *,
        transcriber: TranscriptionBackend | None = None,
        translator: BatchTranslator | None = None,
        storage: StorageBackend | None = None,
        listener: Optional[JobListener] = None,
    ) -> None:
        self.transcriber = transcriber  # may be None -> created per-run
        self.translator = translator  # may be None -> created per-run
        self.storage = storage or LocalStorage()
        self.listener = listener

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------
    def transcribe(self, job: ProcessingJob) -> ProcessingJob:
        if job.job_type is not JobType.TRANSCRIBE:
            raise LinguaSyncError(f"Job {job.id} is a {job.job_type.value} job")
        return self._run(job, self._transcribe_steps)

    def translate(self, job: ProcessingJob) -> ProcessingJob:
        if job.job_type is not JobType.TRANSLATE:
            raise LinguaSyncError(f"Job {job.id} is a {job.job_type.value} job")
        if not job.target_language:
            raise LinguaSyncError(f"Job {job.id} has no target language")
        return self._run(job, self._translate_steps)

    def _run(self, job: ProcessingJob, steps: Callable[[ProcessingJob, StepTimer], TrackRecord]) -> ProcessingJob:
        timer = StepTimer(clock=utc_now)
        clock = timer.clock
        started_at = clock()
        job.artifacts = Artifacts()

        try:
            job.start()
            self._notify(job)
            track = steps(job, timer)
            job.succeed(track)
            self._notify(job)
            return job
        except Exception as exc:
            job.fail(exc)
            self._notify(job)
            raise
        finally:
            try:
                write_job_manifest(
                    job=job,
                    steps=timer.steps,
                    started_at=started_at,
                    finished_at=clock(),
                )
            except OSError as exc:
                log.warning("Could not write manifest for job %s: %s", job.id, exc)

    def _checkpoint(self, job: ProcessingJob, progress: float) -> None:
        job.advance(progress)
        self._notify(job)

    def _notify(self, job: ProcessingJob) -> None:
        if self.listener is not None:
            self.listener(job)

    # ------------------------------------------------------------------
    # Transcribe
    # ------------------------------------------------------------------
    def _transcribe_steps(self, job: ProcessingJob, timer: StepTimer) -> TrackRecord:
        with timer.step("read_media"):
            media_path = self.storage.locate(str(job.source_path))
            if not media_path.is_file():
                raise StorageError(f"Media file not found: {job.source_path}")
        self._checkpoint(job, TRANSCRIBE_MEDIA_READ)

        with timer.step("transcribe"):
            transcriber = self.transcriber or create_transcription_backend(job.settings)
            result = transcriber.transcribe(media_path=media_path, language=job.source_language)
            cues = result.to_cues()
            if not cues:
                raise TranscriptionError("Transcription produced no subtitle cues")
        self._checkpoint(job, TRANSCRIBE_DONE)

        language = result.language or job.source_language
        with timer.step("persist_track"):
            text = serialize(cues)
            path = self.storage.write_text(str(job.workspace.original_vtt), text)
            track = TrackRecord(
                id=f"{job.id}-original",
                role=TrackRole.ORIGINAL,
                language=language,
                path=path,
                cue_count=len(cues),
                text_sha256=sha256_text(text),
                source=job.settings.transcription_backend,
            )
            job.artifacts.original = track
        self._checkpoint(job, TRANSCRIBE_PERSISTED)
        log.info("Transcribed %d cues (language=%s)", len(cues), language)
        return track

    # ------------------------------------------------------------------
    # Translate
    # ------------------------------------------------------------------
    def _translate_steps(self, job: ProcessingJob, timer: StepTimer) -> TrackRecord:
        with timer.step("read_track"):
            original = parse(self.storage.read_text(str(job.source_path)))
            if not original:
                raise LinguaSyncError(NO_CUES_MESSAGE)
        self._checkpoint(job, TRANSLATE_TRACK_READ)

        with timer.step("translate"):
            translator = self.translator or create_translator(job.settings)
            texts = translator.translate(
                extract_texts(original),
                source_language=job.source_language,
                target_language=job.target_language,
                on_progress=lambda p: self._checkpoint(
                    job, TRANSLATE_TRACK_READ + TRANSLATE_SPAN * p
                ),
            )
            translated = build_from_translation(original, texts)

        with timer.step("persist_track"):
            text = serialize(translated)
            path = self.storage.write_text(
                str(job.workspace.translated_vtt(job.target_language)), text
            )
            track = TrackRecord(
                id=f"{job.id}-translated",
                role=TrackRole.TRANSLATED,
                language=job.target_language,
                path=path,
                cue_count=len(translated),
                text_sha256=sha256_text(text),
                source=translator.model,
            )
            job.artifacts.translated = track
        self._checkpoint(job, TRANSLATE_PERSISTED)
        log.info("Translated %d cues into %s", len(translated), job.target_language)
        return track
