"""Shared fixtures for pinner tests."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import Callable, Sequence

import pytest

from pinner.config import ENV_FIXED_POINT, ENV_MODE, ENV_STAGING_ROOT


@pytest.fixture(autouse=True)
def _restore_root_logging() -> None:
    """Undo root-logger configuration (e.g. the CLI's basicConfig) after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clean_pin_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's PIN_* variables out of a test."""
    for name in (ENV_MODE, ENV_STAGING_ROOT, ENV_FIXED_POINT):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_pin_script() -> Callable[..., Path]:
    """Return a helper that writes ``pin/main.py`` into a directory.

    The script prints *lines* in report mode, or runs *body* verbatim
    when given, and returns the directory.
    """

    def _write(
        directory: Path,
        lines: Sequence[str] = (),
        body: str | None = None,
        script: str = "pin/main.py",
    ) -> Path:
        path = directory / script
        path.parent.mkdir(parents=True, exist_ok=True)
        if body is None:
            body = "".join(f"print({line!r})\n" for line in lines)
        path.write_text(textwrap.dedent(body))
        return directory

    return _write


@pytest.fixture
def pin_project(tmp_path: Path, write_pin_script: Callable[..., Path]) -> Callable[..., Path]:
    """Return a helper creating a project that declares *lines*."""

    def _make(*lines: str) -> Path:
        project = tmp_path / "project"
        project.mkdir(exist_ok=True)
        return write_pin_script(project, lines)

    return _make
