"""
Transcription service for LinguaSync.

This module turns a media file into an ordered cue sequence by calling a
speech-to-text backend and mapping its timed segments onto cues.

Responsibilities:
- Hide the transcription vendor behind a protocol
- Pass the source-language hint through ("auto" means let the backend detect)
- Return segments plus the detected language

Does NOT:
- Write subtitle files or update jobs (the pipeline does)
- Split or merge segments; segment timing is kept as returned
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from linguasync.domain.cues import Cue
from linguasync.exceptions import ConfigurationError, DependencyMissingError, TranscriptionError
from linguasync.languages import is_auto
from linguasync.subtitles.vtt import segments_to_cues
from linguasync.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class TranscriptionResult:
    segments: list[dict[str, Any]] = field(default_factory=list)
    language: str | None = None

    def to_cues(self) -> list[Cue]:
        return segments_to_cues(self.segments)


class TranscriptionBackend(Protocol):
    def transcribe(self, *, media_path: Path, language: str | None) -> TranscriptionResult: ...


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # SDK objects expose attributes, raw payloads are dicts
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class OpenAITranscribeBackend:
    """
    OpenAI-compatible transcription (OpenAI Whisper, Groq Whisper, ...).

    Uses `response_format="verbose_json"` to obtain segment timestamps.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-large-v3-turbo",
        *,
        base_url: str | None = None,
        timeout: float = 300.0,
    ) -> None:
        from openai import OpenAI  # local import

        self._client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self._model = model

    def transcribe(self, *, media_path: Path, language: str | None) -> TranscriptionResult:
        options: dict[str, Any] = {
            "model": self._model,
            "response_format": "verbose_json",
        }
        if not is_auto(language):
            options["language"] = language

        with media_path.open("rb") as f:
            resp = self._client.audio.transcriptions.create(file=f, **options)

        segments = _field(resp, "segments") or []
        payload = [
            {
                "start": float(_field(seg, "start", 0.0) or 0.0),
                "end": float(_field(seg, "end", 0.0) or 0.0),
                "text": str(_field(seg, "text", "") or ""),
            }
            for seg in segments
        ]
        if not payload:
            text = _field(resp, "text")
            if text:
                raise TranscriptionError(
                    "Transcription returned text without segment timestamps; cannot build cues."
                )
        return TranscriptionResult(segments=payload, language=_field(resp, "language"))


class FasterWhisperBackend:
    """Local transcription with faster-whisper (CPU, int8)."""

    def __init__(self, model_size: str = "base", *, device: str = "cpu") -> None:
        try:
            from faster_whisper import WhisperModel  # type: ignore
        except ImportError as exc:
            raise DependencyMissingError(
                "faster-whisper not installed; install the 'asr' extra or use the openai backend."
            ) from exc
        self._model = WhisperModel(model_size, device=device, compute_type="int8")

    def transcribe(self, *, media_path: Path, language: str | None) -> TranscriptionResult:
        segments, info = self._model.transcribe(
            str(media_path),
            language=None if is_auto(language) else language,
        )
        payload = [{"start": seg.start, "end": seg.end, "text": seg.text} for seg in segments]
        return TranscriptionResult(segments=payload, language=getattr(info, "language", None))


# ---------------------------------------------------------------------
# Factory helper (used by Pipeline)
# ---------------------------------------------------------------------
def create_transcription_backend(settings) -> TranscriptionBackend:
    backend = settings.transcription_backend.strip().lower()
    if backend == "faster-whisper":
        log.info("Transcription backend: faster-whisper (local)")
        return FasterWhisperBackend()
    if backend != "openai":
        raise ConfigurationError(
            f"Unknown transcription backend '{settings.transcription_backend}'. Use openai or faster-whisper."
        )
    if not settings.api_key:
        raise ConfigurationError("Missing API key. Set LINGUASYNC_API_KEY.")
    log.info("Transcription backend: %s via %s", settings.transcription_model, settings.api_base_url)
    return OpenAITranscribeBackend(
        api_key=settings.api_key,
        model=settings.transcription_model,
        base_url=settings.api_base_url,
    )
