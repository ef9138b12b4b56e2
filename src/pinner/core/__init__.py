"""Constraint aggregation, transitive discovery and resolution.

Given a set of ``(library, constraint)`` registrations, discovery walks each
library's declared dependencies, the registry accumulates every constraint
expressed against each library name, and the resolver picks, per library,
the highest known version satisfying all of them.

Public names are re-exported here so callers can write
``from pinner.core import resolve, parse_constraint``.
"""

from pinner.core.versioning import (
    Constraint,
    VersionTag,
    parse_constraint,
    parse_version,
)
from pinner.core.catalog import build_catalog
from pinner.core.registry import (
    ConstraintRegistry,
    RegistryEntry,
)
from pinner.core.resolver import (
    ResolutionResult,
    resolve,
    select_highest,
)
from pinner.core.discovery import DependencyDiscoverer

__all__ = [
    "Constraint",
    "VersionTag",
    "parse_constraint",
    "parse_version",
    "build_catalog",
    "ConstraintRegistry",
    "RegistryEntry",
    "ResolutionResult",
    "resolve",
    "select_highest",
    "DependencyDiscoverer",
]
