"""Transitive dependency discovery.

Walks the dependency graph depth-first from the registered entries. For
each entry the discoverer:

1. rejects names no source control client can handle,
2. rejects names already on the walk stack (a cycle),
3. builds or reuses the library's version catalog,
4. picks, locally, the highest version satisfying this entry's constraint
   alone, just to have a working tree to ask for dependencies,
5. checks that version out and runs the manifest probe on it,
6. records each declared dependency as a new entry and recurses into it,
7. and always records the entry's own constraint, even when an earlier
   step failed, so constraint accounting is never lost to a downstream
   error.

Discovery is best-effort. A failure on one branch is collected in
``errors`` and the walk moves on to sibling branches.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from pinner.core.registry import ConstraintRegistry, RegistryEntry
from pinner.core.resolver import select_highest
from pinner.core.versioning import VersionTag, parse_constraint
from pinner.exceptions import (
    CircularDependencyError,
    ManifestProbeError,
    MalformedConstraintError,
    PinnerError,
    UnsupportedDependencyError,
)

if TYPE_CHECKING:
    from pinner.probe import ManifestProbe
    from pinner.scm.base import SourceControlClient
    from pinner.scm.materializer import Materializer

logger = logging.getLogger(__name__)


class DependencyDiscoverer:
    """Depth-first walker feeding discovered constraints into a registry.

    Args:
        registry: Registry receiving entries, constraints and catalogs.
        client: Source control client for support checks and catalogs.
        materializer: Checks out the locally picked version to probe.
        probe: Reports each library's declared dependencies.
        marker: Release tag marker character.
        pinned: Versions to probe instead of the local pick, when they
            satisfy the entry's constraint (used by fixed-point runs).
        probe_cache: Shared (library, tag) -> declared entries memo, so a
            later round does not re-run probes for unchanged versions.
    """

    def __init__(
        self,
        registry: ConstraintRegistry,
        client: SourceControlClient,
        materializer: Materializer,
        probe: ManifestProbe,
        marker: str = "v",
        pinned: Mapping[str, VersionTag] | None = None,
        probe_cache: dict[tuple[str, str], list[RegistryEntry]] | None = None,
    ) -> None:
        self._registry = registry
        self._client = client
        self._materializer = materializer
        self._probe = probe
        self._marker = marker
        self._pinned = dict(pinned or {})
        self._stack: list[str] = []
        self._probed = probe_cache if probe_cache is not None else {}
        self.errors: list[PinnerError] = []
        # Version whose manifest was probed, per library.
        self.probed_versions: dict[str, VersionTag] = {}

    def discover(self, entry: RegistryEntry) -> None:
        """Walk *entry* and everything it transitively depends on."""
        try:
            self._visit(entry)
        except PinnerError as exc:
            logger.warning("Discovery failed for %s: %s", entry.library, exc)
            self.errors.append(exc)
        finally:
            self._registry.add_constraint(entry)

    def _visit(self, entry: RegistryEntry) -> None:
        library = entry.library
        if not self._client.supports(library):
            raise UnsupportedDependencyError(
                f"Unsupported dependency {library!r}"
                + (f" (required by {entry.parent})" if entry.parent else ""),
                library=library,
            )
        if library in self._stack:
            cycle = self._stack[self._stack.index(library):] + [library]
            raise CircularDependencyError(
                f"Circular dependency: {' -> '.join(cycle)}", library=library, cycle=cycle
            )

        catalog = self._registry.catalog_for(library, self._client, self._marker)
        picked = self._pick(entry, catalog)
        if picked is None:
            logger.info("No version of %s satisfies %s; not probing", library, entry.constraint)
            return

        children = self._children(library, picked)
        self._stack.append(library)
        try:
            for child in children:
                self._registry.add_entry(child)
                self.discover(child)
        finally:
            self._stack.pop()

    def _pick(self, entry: RegistryEntry, catalog: list[VersionTag]) -> VersionTag | None:
        pinned = self._pinned.get(entry.library)
        if pinned is not None and entry.constraint.check(pinned):
            return pinned
        return select_highest(catalog, [entry.constraint])

    def _children(self, library: str, version: VersionTag) -> list[RegistryEntry]:
        """Probe *library* at *version*; results are memoized per tag."""
        self.probed_versions[library] = version
        key = (library, version.tag)
        cached = self._probed.get(key)
        if cached is not None:
            return cached

        path = self._materializer.checkout(library, version)
        pairs = self._probe.probe(library, path)

        # Parse everything before recursing: a bad declaration aborts the step.
        children: list[RegistryEntry] = []
        for name, text in pairs:
            try:
                constraint = parse_constraint(text)
            except MalformedConstraintError as exc:
                raise ManifestProbeError(
                    f"{library} {version.tag} declares {name} with a bad constraint: {exc}",
                    library=library,
                ) from exc
            children.append(RegistryEntry(library=name, constraint=constraint, parent=library))

        logger.debug("%s %s declares %d dependencies", library, version.tag, len(children))
        self._probed[key] = children
        return children
