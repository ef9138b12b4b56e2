"""Pinner: pin git-hosted libraries to one mutually acceptable version each."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from pinner.config import PinnerConfig
from pinner.exceptions import (
    CircularDependencyError,
    MalformedConstraintError,
    ManifestProbeError,
    NoSatisfyingVersionError,
    PinnerError,
    SourceControlError,
    UnsupportedDependencyError,
)
from pinner.pinner import (
    PinOutcome,
    Pinner,
    default_pinner,
    pin,
    register,
    report,
    run_main,
)

__all__ = [
    "PinnerConfig",
    "PinOutcome",
    "Pinner",
    "default_pinner",
    "pin",
    "register",
    "report",
    "run_main",
    "PinnerError",
    "UnsupportedDependencyError",
    "MalformedConstraintError",
    "SourceControlError",
    "ManifestProbeError",
    "NoSatisfyingVersionError",
    "CircularDependencyError",
]
