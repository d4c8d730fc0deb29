from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from linguasync.cli.main import app
from linguasync.exceptions import (
    ConfigurationError,
    DependencyMissingError,
    TranslationCountMismatchError,
)


def test_cli_reports_config_error(monkeypatch, tmp_path: Path) -> None:
    import linguasync.cli.main as cli_main

    def fake_run_job(*_args, **_kwargs):  # noqa: ANN001
        raise ConfigurationError("bad config value")

    monkeypatch.setattr(cli_main, "_run_job", fake_run_job)

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(
        app,
        [
            "transcribe",
            "talk.mp3",
            "--workdir",
            str(tmp_path / ".linguasync"),
        ],
    )

    assert result.exit_code == 2
    assert "Configuration error: bad config value" in result.stderr


def test_cli_reports_dependency_error(monkeypatch) -> None:
    import linguasync.cli.main as cli_main

    def fake_run_doctor(_settings):  # noqa: ANN001
        raise DependencyMissingError("faster-whisper missing")

    monkeypatch.setattr(cli_main, "run_doctor", fake_run_doctor)

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["doctor"])

    assert result.exit_code == 3
    assert "Dependency error: faster-whisper missing" in result.stderr


def test_cli_reports_integrity_error(monkeypatch, tmp_path: Path) -> None:
    import linguasync.cli.main as cli_main

    def fake_run_job(*_args, **_kwargs):  # noqa: ANN001
        raise TranslationCountMismatchError(expected=20, actual=19)

    monkeypatch.setattr(cli_main, "_run_job", fake_run_job)

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["translate", "a.vtt", "--target", "vi"])

    assert result.exit_code == 4
    assert "Integrity error: Translation count mismatch: expected 20, got 19" in result.stderr


def test_cli_reports_missing_subtitle_file(tmp_path: Path) -> None:
    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["cues", str(tmp_path / "missing.vtt")])

    assert result.exit_code == 5
    assert result.stderr.startswith("Resource error: ")


def test_translate_without_api_key_is_config_error(tmp_path: Path) -> None:
    source = tmp_path / "a.vtt"
    source.write_text("WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi\n", encoding="utf-8")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(
        app,
        ["translate", str(source), "--target", "vi", "--workdir", str(tmp_path / "w")],
    )

    assert result.exit_code == 2
    assert "Missing API key" in result.stderr
