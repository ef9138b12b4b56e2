"""Runtime configuration for a pin run.

Everything a run needs to know about its environment lives in one
``PinnerConfig``. ``from_env`` reads the ``PIN_*`` environment variables so
that a library's ``pin/main.py`` picks up the same staging directory as the
CLI that spawned it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

# Environment variable names.
ENV_STAGING_ROOT = "PIN_STAGING_ROOT"
ENV_FIXED_POINT = "PIN_FIXED_POINT"
ENV_MODE = "PIN_MODE"

DEFAULT_STAGING_DIRNAME = ".pin_staging"

_TRUTHY = {"1", "true", "yes", "on"}


def default_staging_root() -> Path:
    """Return ``~/.pin_staging``."""
    return Path.home() / DEFAULT_STAGING_DIRNAME


@dataclass
class PinnerConfig:
    """Settings shared by discovery, resolution and materialization.

    Attributes:
        staging_root: Directory under which every library is cloned, one
            subdirectory per library name. ``github.com/acme/lib`` is cloned
            into ``<staging_root>/github.com/acme/lib``.
        marker: Leading character that marks a tag as a release (``v1.2.0``).
        hosts: Hosting prefixes the git client knows how to clone from.
        url_template: Clone URL pattern, formatted with ``name=<library>``.
        probe_script: Path, relative to a library checkout, of the script
            that announces the library's own dependencies.
        fixed_point: Re-run discovery with the resolved versions pinned
            until the resolution stops changing.
        max_rounds: Upper bound on fixed-point rounds.
    """

    staging_root: Path
    marker: str = "v"
    hosts: tuple[str, ...] = ("github.com",)
    url_template: str = "https://{name}.git"
    probe_script: str = "pin/main.py"
    fixed_point: bool = False
    max_rounds: int = 5

    def __post_init__(self) -> None:
        self.staging_root = Path(self.staging_root).expanduser()
        if len(self.marker) > 1:
            raise ValueError(f"Tag marker must be at most one character: {self.marker!r}")
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {self.max_rounds}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PinnerConfig:
        """Build a config from ``PIN_STAGING_ROOT`` and ``PIN_FIXED_POINT``.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests).

        Returns:
            A ``PinnerConfig`` with defaults for anything unset.
        """
        env = os.environ if environ is None else environ
        root = env.get(ENV_STAGING_ROOT) or default_staging_root()
        fixed_point = env.get(ENV_FIXED_POINT, "").strip().lower() in _TRUTHY
        return cls(staging_root=Path(root), fixed_point=fixed_point)
