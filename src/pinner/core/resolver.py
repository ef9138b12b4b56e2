"""Highest-common-version resolution.

For every library the resolver keeps the catalog versions that satisfy
*every* constraint recorded against it and picks the highest. There is one
pass per library and no backtracking: the choice for one library never
changes the constraints on another beyond what discovery already recorded.

Determinism: the same constraints and catalogs always give the same
result. Libraries are visited in sorted order, and when two tags parse to
versions of equal precedence (``v1.2`` and ``v1.2.0``) the one listed first
wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from pinner.core.versioning import Constraint, VersionTag
from pinner.exceptions import NoSatisfyingVersionError

logger = logging.getLogger(__name__)


def select_highest(
    catalog: Iterable[VersionTag], constraints: Sequence[Constraint]
) -> VersionTag | None:
    """Return the highest version in *catalog* satisfying all *constraints*.

    Ties on precedence keep the first-seen tag.

    Args:
        catalog: Candidate versions, in catalog order.
        constraints: Constraints combined with logical AND.

    Returns:
        The winning ``VersionTag``, or None if nothing satisfies them.
    """
    best: VersionTag | None = None
    for candidate in catalog:
        if not all(c.check(candidate) for c in constraints):
            continue
        if best is None or candidate.version > best.version:
            best = candidate
    return best


@dataclass
class ResolutionResult:
    """Outcome of resolving every constrained library.

    Attributes:
        resolved: Library name -> winning version.
        failures: Library name -> why no version could be chosen.
    """

    resolved: dict[str, VersionTag] = field(default_factory=dict)
    failures: dict[str, NoSatisfyingVersionError] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failures

    def as_dict(self) -> dict[str, str]:
        """Library name -> resolved version string, sorted by name."""
        return {name: str(self.resolved[name]) for name in sorted(self.resolved)}


def resolve(
    constraints: Mapping[str, Sequence[Constraint]],
    catalogs: Mapping[str, Sequence[VersionTag]],
) -> ResolutionResult:
    """Pick one version per library.

    Libraries without a catalog are skipped: their catalog could not be
    built, and discovery has already reported why.

    Args:
        constraints: Library name -> all constraints recorded against it.
        catalogs: Library name -> known release versions.

    Returns:
        A ``ResolutionResult``. A library with an empty intersection appears
        in ``failures``; the others are still resolved.
    """
    result = ResolutionResult()
    for library in sorted(constraints):
        lib_constraints = constraints[library]
        if not lib_constraints:
            continue
        catalog = catalogs.get(library)
        if catalog is None:
            logger.debug("No catalog for %s; skipping resolution", library)
            continue

        winner = select_highest(catalog, lib_constraints)
        if winner is None:
            joined = "; ".join(str(c) for c in lib_constraints)
            error = NoSatisfyingVersionError(
                f"No available version of {library} satisfies all constraints: {joined}",
                library=library,
                constraints=lib_constraints,
            )
            logger.warning("%s", error)
            result.failures[library] = error
            continue

        logger.info("Best available version for %s is %s", library, winner)
        result.resolved[library] = winner
    return result
