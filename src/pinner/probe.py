"""Asking a library what it depends on.

A library announces its dependencies through a small script, by default
``pin/main.py``, that registers its constraints and calls ``run_main()``.
Run with ``PIN_MODE=report`` the script prints one dependency per line::

    github.com/acme/widgets ~> 1.2
    github.com/acme/gears >= 0.3, < 0.5

The library name comes first, then a single space, then the constraint
expression. A library without the script declares no dependencies.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from pinner.config import ENV_MODE
from pinner.exceptions import ManifestProbeError

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = " "


def read_pairs(text: str, delimiter: str = DEFAULT_DELIMITER, source: str | None = None) -> list[tuple[str, str]]:
    """Split probe output into ``(library, constraint)`` pairs.

    Lines end with a line feed; a final line without one is still read.
    Blank lines are ignored and a trailing carriage return is dropped.
    Each line is split once, at the first delimiter.

    Args:
        text: Raw probe output.
        delimiter: Field separator.
        source: Library the output came from, used in error messages.

    Returns:
        Pairs in output order.

    Raises:
        ManifestProbeError: If a non-blank line has no delimiter or an
            empty field.
    """
    pairs: list[tuple[str, str]] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        name, sep, constraint = line.partition(delimiter)
        if not sep or not name.strip() or not constraint.strip():
            where = f" from {source}" if source else ""
            raise ManifestProbeError(
                f"Malformed manifest line {lineno}{where}: {line!r}", library=source
            )
        pairs.append((name.strip(), constraint.strip()))
    return pairs


class ManifestProbe(ABC):
    """Reports the dependencies a materialized library declares."""

    @abstractmethod
    def probe(self, library: str, path: Path) -> list[tuple[str, str]]:
        """Return ``(library, constraint_text)`` pairs declared at *path*.

        Raises:
            ManifestProbeError: If the probe cannot be run or its output is
                malformed.
        """


class ScriptManifestProbe(ManifestProbe):
    """Runs a library's ``pin/main.py`` in report mode and parses its output.

    Args:
        script: Script path relative to the library's working tree.
        python: Interpreter used to run it.
    """

    def __init__(self, script: str = "pin/main.py", python: str | None = None) -> None:
        self._script = script
        self._python = python or sys.executable

    def probe(self, library: str, path: Path) -> list[tuple[str, str]]:
        script = Path(path) / self._script
        if not script.is_file():
            logger.debug("%s has no %s; no declared dependencies", library, self._script)
            return []

        env = dict(os.environ)
        env[ENV_MODE] = "report"
        try:
            proc = subprocess.run(
                [self._python, str(script)],
                cwd=path, env=env, check=True, capture_output=True, text=True,
            )
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise ManifestProbeError(
                f"Manifest probe for {library} failed: {detail}", library=library
            ) from exc
        except OSError as exc:
            raise ManifestProbeError(
                f"Manifest probe for {library} could not run: {exc}", library=library
            ) from exc
        return read_pairs(proc.stdout, source=library)
