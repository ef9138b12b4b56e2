"""Checks out chosen versions into library working trees."""

from __future__ import annotations

import logging
from pathlib import Path

from pinner.core.versioning import VersionTag
from pinner.exceptions import SourceControlError
from pinner.scm.base import SourceControlClient

logger = logging.getLogger(__name__)


class Materializer:
    """Idempotent checkout on top of a ``SourceControlClient``.

    Remembers which tag each library's working tree is on, so repeating a
    checkout of the same tag is a no-op success. Failures propagate as
    ``SourceControlError`` for the caller to collect per library.
    """

    def __init__(self, client: SourceControlClient) -> None:
        self._client = client
        self._checked_out: dict[str, str] = {}
        self._failed: set[tuple[str, str]] = set()

    @property
    def checked_out(self) -> dict[str, str]:
        """Library name -> tag currently checked out."""
        return dict(self._checked_out)

    def has_failed(self, library: str, tag: str) -> bool:
        """True if checking out *tag* of *library* already failed."""
        return (library, tag) in self._failed

    def ensure_cloned(self, library: str) -> Path:
        return self._client.ensure_cloned(library)

    def checkout(self, library: str, version: VersionTag) -> Path:
        """Check out *version* of *library* and return the working tree."""
        path = self._client.working_dir(library)
        if self._checked_out.get(library) == version.tag:
            logger.debug("%s already at %s", library, version.tag)
            return path
        try:
            self._client.checkout(library, version.tag)
        except SourceControlError:
            self._failed.add((library, version.tag))
            raise
        self._checked_out[library] = version.tag
        return path
