from __future__ import annotations

import inspect
import os

import pytest
import typer.testing


def _patch_clirunner() -> None:
    # click 8.2 dropped mix_stderr; stderr is always captured separately there
    if "mix_stderr" in inspect.signature(typer.testing.CliRunner).parameters:
        return

    class PatchedCliRunner(typer.testing.CliRunner):
        def __init__(self, *args, **kwargs):  # noqa: ANN002, ANN003
            kwargs.pop("mix_stderr", None)
            super().__init__(*args, **kwargs)

    typer.testing.CliRunner = PatchedCliRunner


_patch_clirunner()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):  # noqa: ANN001, ANN202
    """Keep the developer's LINGUASYNC_* variables and .env out of offline tests."""
    if not os.getenv("LINGUASYNC_LIVE_TESTS"):
        for name in list(os.environ):
            if name.startswith("LINGUASYNC_"):
                monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
