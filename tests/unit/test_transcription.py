from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from linguasync.config.settings import Settings
from linguasync.domain.cues import Cue
from linguasync.exceptions import ConfigurationError, DependencyMissingError, TranscriptionError
from linguasync.services import transcription
from linguasync.services.transcription import (
    FasterWhisperBackend,
    OpenAITranscribeBackend,
    TranscriptionResult,
    create_transcription_backend,
)


class _FakeTranscriptions:
    def __init__(self, response: object) -> None:
        self.response = response
        self.kwargs: dict = {}

    def create(self, **kwargs):  # noqa: ANN003, ANN201
        self.kwargs = kwargs
        return self.response


def _backend(response: object) -> tuple[OpenAITranscribeBackend, _FakeTranscriptions]:
    fake = _FakeTranscriptions(response)
    backend = OpenAITranscribeBackend.__new__(OpenAITranscribeBackend)
    backend._client = SimpleNamespace(audio=SimpleNamespace(transcriptions=fake))  # noqa: SLF001
    backend._model = "whisper-test"  # noqa: SLF001
    return backend, fake


def test_result_maps_segments_to_cues() -> None:
    result = TranscriptionResult(
        segments=[{"start": 0.0, "end": 1.5, "text": " Hi "}, {"start": 1.5, "end": 2.0, "text": ""}],
        language="en",
    )

    assert result.to_cues() == [Cue(index=1, start=0.0, end=1.5, text="Hi")]


def test_openai_backend_reads_segment_objects(tmp_path: Path) -> None:
    media = tmp_path / "clip.mp3"
    media.write_bytes(b"ID3")
    response = SimpleNamespace(
        language="english",
        text="Hello there. Bye.",
        segments=[
            SimpleNamespace(start=0.0, end=1.2, text=" Hello there."),
            SimpleNamespace(start=1.4, end=2.0, text=" Bye."),
        ],
    )
    backend, fake = _backend(response)

    result = backend.transcribe(media_path=media, language="auto")

    assert fake.kwargs["model"] == "whisper-test"
    assert fake.kwargs["response_format"] == "verbose_json"
    assert "language" not in fake.kwargs
    assert result.language == "english"
    assert [c.text for c in result.to_cues()] == ["Hello there.", "Bye."]


def test_openai_backend_passes_language_hint(tmp_path: Path) -> None:
    media = tmp_path / "clip.mp3"
    media.write_bytes(b"ID3")
    backend, fake = _backend({"segments": [{"start": 0, "end": 1, "text": "Hola"}], "language": "es"})

    result = backend.transcribe(media_path=media, language="es")

    assert fake.kwargs["language"] == "es"
    assert result.segments == [{"start": 0.0, "end": 1.0, "text": "Hola"}]


def test_openai_backend_rejects_text_without_segments(tmp_path: Path) -> None:
    media = tmp_path / "clip.mp3"
    media.write_bytes(b"ID3")
    backend, _ = _backend({"text": "no timing here"})

    with pytest.raises(TranscriptionError):
        backend.transcribe(media_path=media, language=None)


def test_faster_whisper_missing(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setitem(sys.modules, "faster_whisper", None)

    with pytest.raises(DependencyMissingError) as excinfo:
        FasterWhisperBackend()

    assert excinfo.value.exit_code == 3


def test_factory_requires_api_key_for_openai() -> None:
    settings = Settings()
    settings.transcription_backend = "openai"
    settings.api_key = None

    with pytest.raises(ConfigurationError):
        create_transcription_backend(settings)


def test_factory_rejects_unknown_backend() -> None:
    settings = Settings()
    settings.transcription_backend = "carrier-pigeon"

    with pytest.raises(ConfigurationError):
        create_transcription_backend(settings)


def test_factory_builds_local_backend(monkeypatch) -> None:  # noqa: ANN001
    built = []

    class FakeLocal:
        def __init__(self) -> None:
            built.append(True)

    monkeypatch.setattr(transcription, "FasterWhisperBackend", FakeLocal)
    settings = Settings()
    settings.transcription_backend = "faster-whisper"

    assert isinstance(create_transcription_backend(settings), FakeLocal)
    assert built == [True]
