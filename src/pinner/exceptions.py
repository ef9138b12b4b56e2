"""Pinner exception hierarchy.

All public exceptions inherit from PinnerError, giving callers a single
base class to catch when they want to handle any pinning failure without
swallowing unrelated errors.

Discovery, resolution and materialization failures are *collected* rather
than raised: ``Pinner.pin()`` returns them as a list, one entry per failed
branch or library. Each error carries the ``library`` it concerns so that
a report can say which dependency went wrong.
"""

from __future__ import annotations

from typing import Sequence


class PinnerError(Exception):
    """Base exception for all pinner errors.

    Attributes:
        library: Name of the library the failure concerns, or None when the
            failure is not tied to a single library.
    """

    def __init__(self, message: str, library: str | None = None) -> None:
        super().__init__(message)
        self.library = library


class UnsupportedDependencyError(PinnerError):
    """Raised when a library name does not match a supported hosting pattern.

    Only one lookup-and-clone protocol is supported; a name that cannot be
    mapped onto it (e.g. ``example.org/foo/bar`` when only ``github.com`` is
    configured) contributes no catalog entries.
    """


class MalformedConstraintError(PinnerError):
    """Raised when constraint text does not parse.

    On top-level registration this is raised straight to the caller. During
    discovery it aborts the probe step of the library that declared it.
    """


class SourceControlError(PinnerError):
    """Raised when a clone, fetch, tag listing or checkout fails."""


class ManifestProbeError(PinnerError):
    """Raised when a library's manifest probe cannot be run or parsed.

    Covers a probe script exiting non-zero, a line with no delimiter, and a
    declared constraint that fails to parse.
    """


class NoSatisfyingVersionError(PinnerError):
    """Raised when no known version satisfies every constraint on a library.

    Attributes:
        constraints: The constraints whose intersection was empty.
    """

    def __init__(
        self,
        message: str,
        library: str | None = None,
        constraints: Sequence[object] = (),
    ) -> None:
        super().__init__(message, library)
        self.constraints = tuple(constraints)


class CircularDependencyError(PinnerError):
    """Raised when discovery revisits a library that is still being walked.

    Attributes:
        cycle: Library names forming the cycle, first and last equal
            (e.g. ``["a", "b", "a"]``).
    """

    def __init__(self, message: str, library: str | None = None, cycle: Sequence[str] = ()) -> None:
        super().__init__(message, library)
        self.cycle = list(cycle)
