"""Per-run constraint registry.

``ConstraintRegistry`` is the explicit context threaded through one pin run.
It accumulates, per library name:

- every ``RegistryEntry`` seen (top-level registrations and entries found by
  walking manifests),
- the list of constraints expressed against the name by any dependent at
  any depth,
- the library's version catalog, built at most once.

Constraint lists only ever grow. Once discovery is over the registry is
frozen and the resolver reads it. A new registry is created for every run,
so nothing carries over between independent invocations.

Library names are compared as exact strings. ``github.com/a/b`` and
``github.com/a/b/`` are different libraries.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Sequence

from pinner.core.catalog import build_catalog
from pinner.core.versioning import Constraint, VersionTag

if TYPE_CHECKING:
    from pinner.scm.base import SourceControlClient


@dataclass(frozen=True)
class RegistryEntry:
    """One dependent's requirement on one library.

    Attributes:
        library: Name of the required library.
        constraint: Acceptable versions.
        parent: Library whose manifest declared this entry, or None for a
            top-level registration.
    """

    library: str
    constraint: Constraint
    parent: str | None = None

    def __str__(self) -> str:
        return f"{self.library} {self.constraint}"


class ConstraintRegistry:
    """Constraints and catalogs gathered during one discovery walk.

    Not thread-safe; discovery is sequential.
    """

    def __init__(self, catalogs: Mapping[str, Sequence[VersionTag]] | None = None) -> None:
        self._entries: list[RegistryEntry] = []
        self._constraints: dict[str, list[Constraint]] = {}
        # Seeding lets a later round of the same run reuse earlier catalogs.
        self._catalogs: dict[str, list[VersionTag]] = {
            k: list(v) for k, v in (catalogs or {}).items()
        }
        self._frozen = False

    # -- Mutation (discovery only) -------------------------------------------

    def add_entry(self, entry: RegistryEntry) -> None:
        """Record an entry, top-level or discovered."""
        self._check_open()
        self._entries.append(entry)

    def add_constraint(self, entry: RegistryEntry) -> None:
        """Append *entry*'s constraint to its library's constraint list."""
        self._check_open()
        self._constraints.setdefault(entry.library, []).append(entry.constraint)

    def catalog_for(
        self, library: str, client: SourceControlClient, marker: str = "v"
    ) -> list[VersionTag]:
        """Return the catalog for *library*, building it on first use.

        A failed build is not cached, so the error surfaces on each attempt.
        """
        catalog = self._catalogs.get(library)
        if catalog is None:
            self._check_open()
            catalog = build_catalog(library, client, marker)
            self._catalogs[library] = catalog
        return catalog

    def freeze(self) -> None:
        """Stop accepting entries and constraints."""
        self._frozen = True

    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError("ConstraintRegistry is frozen; discovery is over")

    # -- Read access ------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> tuple[RegistryEntry, ...]:
        return tuple(self._entries)

    @property
    def constraints(self) -> Mapping[str, tuple[Constraint, ...]]:
        """Library name -> every constraint recorded against it."""
        return MappingProxyType({k: tuple(v) for k, v in self._constraints.items()})

    @property
    def catalogs(self) -> Mapping[str, tuple[VersionTag, ...]]:
        """Library name -> catalog, for libraries whose catalog was built."""
        return MappingProxyType({k: tuple(v) for k, v in self._catalogs.items()})

    @property
    def libraries(self) -> list[str]:
        """Sorted names of every library with at least one constraint."""
        return sorted(self._constraints)

    def has_catalog(self, library: str) -> bool:
        return library in self._catalogs
