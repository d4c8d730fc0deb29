from __future__ import annotations

import importlib
import sys
import tempfile
from pathlib import Path

from linguasync.config.settings import Settings


def _module_available(name: str) -> bool:
    try:
        importlib.import_module(name)
    except ImportError:
        return False
    return True


def _check_writable(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=path, delete=True):
            return True
    except OSError:
        return False


def _get_version() -> str:
    try:
        import importlib.metadata

        return importlib.metadata.version("linguasync")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _status_line(ok: bool, label: str, detail: str = "") -> str:
    icon = "✅" if ok else "❌"
    return f"{icon} {label}{detail}"


def _warn_line(label: str, detail: str = "") -> str:
    return f"⚠️ {label}{detail}"


def run_doctor(settings: Settings) -> int:
    required_ok = True
    lines: list[str] = []

    lines.append("LinguaSync Doctor")
    lines.append("")

    python_version = sys.version.split()[0]
    lines.append(_status_line(True, "Python", f": {python_version}"))
    lines.append(_status_line(True, "LinguaSync version", f": {_get_version()}"))

    workdir = Path(settings.workdir).expanduser().resolve()
    writable = _check_writable(workdir)
    if not writable:
        required_ok = False
    lines.append(_status_line(writable, "Workdir writable", f": {workdir}"))

    for module, label in (("openai", "openai"), ("requests", "requests")):
        available = _module_available(module)
        if not available:
            required_ok = False
        lines.append(_status_line(available, label, " (available)" if available else " (not installed)"))

    backend = settings.transcription_backend.strip().lower()
    if _module_available("faster_whisper"):
        lines.append(_status_line(True, "faster-whisper", " (available)"))
    elif backend == "faster-whisper":
        required_ok = False
        lines.append(_status_line(False, "faster-whisper", " (not installed, required by backend)"))
    else:
        lines.append(_warn_line("faster-whisper", " (not installed)"))

    api_key = settings.api_key
    if backend == "openai" and not api_key:
        required_ok = False
    lines.append(_status_line(bool(api_key), "API key", ": set" if api_key else ": missing"))
    lines.append(
        _status_line(
            True,
            "Provider/models",
            f": {settings.api_base_url} / {settings.transcription_model} / {settings.translation_model}",
        )
    )
    lines.append(
        _status_line(
            True,
            "Languages",
            f": {settings.source_language} -> {settings.target_language}",
        )
    )

    print("\n".join(lines))
    return 0 if required_ok else 1
