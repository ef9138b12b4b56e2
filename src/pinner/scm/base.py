"""Source control abstraction used by discovery and materialization.

Defines the ``SourceControlClient`` abstract base class. The core never
talks to git directly: it asks a client to clone, fetch, list tags and
check out, and treats every call as blocking. ``GitClient`` is the only
concrete implementation; tests use an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class SourceControlClient(ABC):
    """Abstract lookup-and-clone protocol for source-hosted libraries.

    Implementations raise ``SourceControlError`` for any failure of the
    underlying tool and ``UnsupportedDependencyError`` when asked to act on
    a name they cannot map to a repository.
    """

    @abstractmethod
    def supports(self, library: str) -> bool:
        """Return True if *library* matches a supported hosting pattern."""

    @abstractmethod
    def working_dir(self, library: str) -> Path:
        """Return the local working tree for *library*."""

    @abstractmethod
    def ensure_cloned(self, library: str) -> Path:
        """Clone *library* if no local copy exists; return its working tree."""

    @abstractmethod
    def fetch_updates(self, library: str) -> None:
        """Bring the local copy's refs and tags up to date."""

    @abstractmethod
    def list_tags(self, library: str) -> list[str]:
        """Return every tag name in the local copy, unfiltered."""

    @abstractmethod
    def checkout(self, library: str, ref: str) -> None:
        """Check out *ref* (a tag name) in the local working tree."""
