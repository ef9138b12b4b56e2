"""Source control access for library discovery and checkout.

Public API::

    from pinner.scm import SourceControlClient, GitClient, Materializer
"""

from __future__ import annotations

from pinner.scm.base import SourceControlClient
from pinner.scm.git import GitClient
from pinner.scm.materializer import Materializer

__all__ = [
    "SourceControlClient",
    "GitClient",
    "Materializer",
]
