from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer

from linguasync.config.settings import Settings
from linguasync.domain.job import JobType, ProcessingJob
from linguasync.exceptions import LinguaSyncError
from linguasync.pipeline import Pipeline, new_job
from linguasync.playback.resolver import find_active, is_sorted
from linguasync.services.dictionary import create_lookup_service
from linguasync.services.storage import LocalStorage
from linguasync.subtitles.timestamps import encode
from linguasync.subtitles.vtt import parse
from linguasync.utils.doctor import run_doctor
from linguasync.utils.logging import configure_logging, get_logger
from linguasync.utils.manifest import MANIFEST_NAME, list_job_dirs, load_job_manifest

app = typer.Typer(add_completion=False)
log = get_logger(__name__)


@contextmanager
def _reported_errors() -> Iterator[None]:
    try:
        yield
    except LinguaSyncError as exc:
        typer.echo(f"{exc.label()}: {exc}", err=True)
        raise typer.Exit(code=exc.exit_code) from exc


def _settings(workdir: str | None = None, log_level: str | None = None) -> Settings:
    settings = Settings()
    if workdir is not None:
        settings.workdir = workdir
    # Configure logging after overrides so we use the final resolved level
    configure_logging(log_level or settings.log_level)
    return settings


def _resolve_workdir(workdir: str | None) -> Path:
    settings = Settings()
    return Path(workdir or settings.workdir).expanduser().resolve()


def _resolve_job_dir(workdir: Path, job_id: str) -> Path:
    if job_id == "latest":
        job_dirs = list_job_dirs(workdir)
        if not job_dirs:
            raise typer.BadParameter("No jobs found.")
        return job_dirs[0]
    return workdir / job_id


def _run_job(
    *,
    settings: Settings,
    job_type: JobType,
    source: str,
    source_language: str | None,
    target_language: str | None = None,
    cli_overrides: dict[str, str] | None = None,
) -> ProcessingJob:
    job = new_job(
        settings,
        job_type,
        source,
        source_language=source_language,
        target_language=target_language,
        cli_overrides=cli_overrides,
    )
    pipeline = Pipeline()
    if job_type is JobType.TRANSCRIBE:
        return pipeline.transcribe(job)
    return pipeline.translate(job)


def _load_cues(path: str):
    cues = parse(LocalStorage().read_text(path))
    if not is_sorted(cues):
        cues = sorted(cues, key=lambda c: c.start)
    return cues


def _report_done(job: ProcessingJob) -> None:
    typer.echo(f"✅ Done. job_id={job.id}")
    if job.result_path:
        typer.echo(f"📦 Output: {job.result_path}")


@app.command()
def config() -> None:
    """Print resolved config."""
    s = Settings()
    typer.echo(json.dumps(s.to_public_dict(), indent=2))


@app.command()
def doctor() -> None:
    """Run environment diagnostics."""
    settings = Settings()
    with _reported_errors():
        code = run_doctor(settings)
    raise typer.Exit(code=code)


@app.command()
def transcribe(
    media: str = typer.Argument(..., help="Media file to transcribe."),
    language: str = typer.Option(None, help="Source language code, or 'auto' (overrides config)."),
    workdir: str = typer.Option(None, help="Workdir for outputs (overrides config)."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Transcribe a media file into an original VTT track."""
    settings = _settings(workdir, log_level)
    overrides = {"language": language} if language is not None else {}
    with _reported_errors():
        job = _run_job(
            settings=settings,
            job_type=JobType.TRANSCRIBE,
            source=media,
            source_language=language or settings.source_language,
            cli_overrides=overrides,
        )
    _report_done(job)


@app.command()
def translate(
    vtt: str = typer.Argument(..., help="Original VTT track."),
    target: str = typer.Option(None, "--target", help="Target language code (overrides config)."),
    source: str = typer.Option(None, "--source", help="Source language code (overrides config)."),
    workdir: str = typer.Option(None, help="Workdir for outputs (overrides config)."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Translate an original VTT track, keeping its timings."""
    settings = _settings(workdir, log_level)
    overrides: dict[str, str] = {}
    if target is not None:
        overrides["target"] = target
    if source is not None:
        overrides["source"] = source
    with _reported_errors():
        job = _run_job(
            settings=settings,
            job_type=JobType.TRANSLATE,
            source=vtt,
            source_language=source or settings.source_language,
            target_language=target or settings.target_language,
            cli_overrides=overrides,
        )
    _report_done(job)


@app.command()
def cues(
    vtt: str = typer.Argument(..., help="VTT file to parse."),
    json_output: bool = typer.Option(False, "--json", help="Output cues as JSON."),
) -> None:
    """List the cues of a VTT file."""
    with _reported_errors():
        parsed = parse(LocalStorage().read_text(vtt))

    if json_output:
        payload = [
            {"index": c.index, "start": c.start, "end": c.end, "text": c.text}
            for c in parsed
        ]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    typer.echo("index\tstart\tend\ttext")
    for c in parsed:
        text = c.text.replace("\n", " / ")
        typer.echo(f"{c.index}\t{encode(c.start)}\t{encode(c.end)}\t{text}")


@app.command("cue-at")
def cue_at(
    vtt: str = typer.Argument(..., help="VTT file to search."),
    seconds: float = typer.Argument(..., help="Playback position in seconds."),
) -> None:
    """Show the cue active at a playback position."""
    with _reported_errors():
        loaded = _load_cues(vtt)
    index = find_active(loaded, seconds)
    if index is None:
        typer.echo(f"No active cue at {encode(seconds)}")
        return
    c = loaded[index]
    typer.echo(f"{c.index}\t{encode(c.start)} --> {encode(c.end)}\t{c.text}")


@app.command()
def jobs(
    workdir: str = typer.Option(None, help="Workdir for outputs (overrides config)."),
    limit: int = typer.Option(5, help="Limit number of jobs shown."),
    json_output: bool = typer.Option(False, "--json", help="Output jobs as JSON."),
) -> None:
    """List recent jobs."""
    root = _resolve_workdir(workdir)
    job_dirs = list_job_dirs(root)
    if limit is not None and limit > 0:
        job_dirs = job_dirs[:limit]

    rows = []
    for job_dir in job_dirs:
        manifest = load_job_manifest(job_dir / MANIFEST_NAME)
        if not manifest:
            continue
        rows.append(
            {
                "job_id": manifest.get("job_id", job_dir.name),
                "job_type": manifest.get("job_type"),
                "status": manifest.get("status"),
                "progress": manifest.get("progress"),
                "result_path": manifest.get("result_path"),
                "error": manifest.get("error"),
            }
        )

    if json_output:
        typer.echo(json.dumps(rows, indent=2))
        return

    typer.echo("job_id\tjob_type\tstatus\tprogress\tresult")
    for row in rows:
        progress = row["progress"]
        progress_str = f"{progress:.2f}" if isinstance(progress, (float, int)) else "n/a"
        result = row["result_path"] or row["error"] or "-"
        typer.echo(f"{row['job_id']}\t{row['job_type']}\t{row['status']}\t{progress_str}\t{result}")


@app.command()
def inspect(
    job_id: str = typer.Argument(..., help="Job id or 'latest'."),
    workdir: str = typer.Option(None, help="Workdir for outputs (overrides config)."),
) -> None:
    """Pretty-print job.json for a job."""
    root = _resolve_workdir(workdir)
    job_dir = _resolve_job_dir(root, job_id)

    manifest = load_job_manifest(job_dir / MANIFEST_NAME)
    if manifest is None:
        raise typer.BadParameter(f"job.json not found for job_id '{job_dir.name}'.")
    typer.echo(json.dumps(manifest, indent=2))


@app.command()
def lookup(word: str = typer.Argument(..., help="Word to define.")) -> None:
    """Look up a word the way the player does when it is clicked."""
    settings = _settings()
    typer.echo(create_lookup_service(settings).lookup(word))


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
