"""Git-backed ``SourceControlClient``.

Shells out to the ``git`` executable. Libraries are named by host and path
(``github.com/acme/widgets``); each one is cloned into
``<staging_root>/<library>`` so path-shaped names become nested directories.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from pinner.exceptions import SourceControlError, UnsupportedDependencyError
from pinner.scm.base import SourceControlClient

logger = logging.getLogger(__name__)

GIT_EXECUTABLE = "git"


class GitClient(SourceControlClient):
    """Clone, fetch, list tags and check out with the git CLI.

    Args:
        staging_root: Directory holding one clone per library.
        hosts: Hosting prefixes accepted as the first path segment of a
            library name.
        url_template: Clone URL pattern formatted with ``name=<library>``.
            A local path such as ``/srv/mirror/{name}`` also works.
        git: The git executable to invoke.
    """

    def __init__(
        self,
        staging_root: Path,
        hosts: Sequence[str] = ("github.com",),
        url_template: str = "https://{name}.git",
        git: str = GIT_EXECUTABLE,
    ) -> None:
        self._root = Path(staging_root)
        self._hosts = tuple(hosts)
        self._url_template = url_template
        self._git = git

    def supports(self, library: str) -> bool:
        segments = library.strip("/").split("/")
        if len(segments) < 2 or any(s in ("", ".", "..") for s in segments):
            return False
        return segments[0] in self._hosts

    def clone_url(self, library: str) -> str:
        """Return the URL *library* is cloned from.

        Raises:
            UnsupportedDependencyError: If the name's host is not supported.
        """
        if not self.supports(library):
            raise UnsupportedDependencyError(
                f"Unsupported dependency {library!r}: host must be one of {', '.join(self._hosts)}",
                library=library,
            )
        return self._url_template.format(name=library)

    def working_dir(self, library: str) -> Path:
        return self._root / library

    def ensure_cloned(self, library: str) -> Path:
        url = self.clone_url(library)
        libdir = self.working_dir(library)
        if (libdir / ".git").exists():
            return libdir
        libdir.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Cloning %s into %s", url, libdir)
        self._run(library, ["clone", "--quiet", url, str(libdir)], cwd=libdir.parent)
        return libdir

    def fetch_updates(self, library: str) -> None:
        self._run(library, ["fetch", "--quiet", "--tags"], cwd=self.working_dir(library))

    def list_tags(self, library: str) -> list[str]:
        output = self._run(library, ["tag", "--list"], cwd=self.working_dir(library))
        return [line.strip() for line in output.splitlines() if line.strip()]

    def checkout(self, library: str, ref: str) -> None:
        libdir = self.working_dir(library)
        logger.info("Checking out %s %s", libdir, ref)
        self._run(library, ["checkout", "--quiet", ref], cwd=libdir)

    def _run(self, library: str, args: list[str], cwd: Path) -> str:
        """Run one git command and return its stdout.

        Raises:
            SourceControlError: If git cannot be launched or exits non-zero.
        """
        cmd = [self._git, *args]
        logger.debug("Running %s in %s", " ".join(cmd), cwd)
        try:
            proc = subprocess.run(
                cmd, cwd=cwd, check=True, capture_output=True, text=True,
            )
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise SourceControlError(
                f"git {args[0]} failed for {library}: {detail}", library=library
            ) from exc
        except OSError as exc:
            raise SourceControlError(
                f"git {args[0]} could not run for {library}: {exc}", library=library
            ) from exc
        return proc.stdout
