"""Version tags and version constraints.

Release tags are plain git tags of the form ``v<version>``: a single marker
character followed by a version of one to three numeric segments with
optional pre-release and build suffixes (``v1.2``, ``v1.2.3-rc.1+build.7``).
Anything else (``latest``, ``release-notes``, ``nightly``) is not a release
and is silently skipped.

Constraints use the comparator grammar popularised by HashiCorp tooling:

- Equality: ``= 1.0.0`` (also ``1.0.0`` and ``== 1.0.0``)
- Not-equal: ``!= 1.0.0``
- Ordering: ``> 1.0``, ``>= 1.0``, ``< 2.0``, ``<= 2.0``
- Pessimistic: ``~> 1.2`` (``>= 1.2, < 2.0``) and ``~> 1.2.3``
  (``>= 1.2.3, < 1.3.0``)
- Wildcard: ``*``
- Compound, comma separated, all must hold: ``>= 1.0, < 2.0``

Ordering follows SemVer 2.0.0 precedence via ``semantic_version``; build
metadata is dropped before comparison so it never affects ordering or
equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

import semantic_version

from pinner.exceptions import MalformedConstraintError


# ---------------------------------------------------------------------------
# Version parsing
# ---------------------------------------------------------------------------

_VERSION_RE = re.compile(
    r"^(?P<segments>\d+(?:\.\d+){0,2})"
    r"(?:-(?P<pre>[0-9A-Za-z\-.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-.]+))?$",
    re.ASCII,
)


def _parse_semver(text: str) -> tuple[semantic_version.Version, int]:
    """Parse a possibly partial version into a full ``Version``.

    Missing minor/patch segments are padded with zeros and build metadata
    is discarded.

    Returns:
        ``(version, precision)`` where precision is the number of numeric
        segments actually written (1-3).

    Raises:
        ValueError: If *text* is not a version.
    """
    m = _VERSION_RE.match(text.strip())
    if not m:
        raise ValueError(f"Invalid version: {text!r}")
    segments = [int(s) for s in m.group("segments").split(".")]
    precision = len(segments)
    segments += [0] * (3 - precision)
    pre = m.group("pre")
    version = semantic_version.Version(
        major=segments[0],
        minor=segments[1],
        patch=segments[2],
        prerelease=tuple(pre.split(".")) if pre else (),
        build=(),
    )
    return version, precision


@dataclass(frozen=True)
class VersionTag:
    """A release version together with the tag it was read from.

    The raw ``tag`` is kept so that checkout uses exactly the ref that exists
    in the repository: ``v1.2`` and ``v1.2.0`` parse to the same version but
    only one of them may exist as a tag.

    Attributes:
        tag: The git tag as listed (e.g. ``"v1.2.0"``).
        version: Parsed version, build metadata removed.
    """

    tag: str
    version: semantic_version.Version

    def __str__(self) -> str:
        return str(self.version)


def parse_version(tag: str, marker: str = "v") -> VersionTag | None:
    """Parse a git tag into a ``VersionTag``.

    Args:
        tag: Raw tag text, e.g. ``"v1.2.0"``.
        marker: Required leading character. An empty marker accepts bare
            versions.

    Returns:
        The parsed tag, or None if the tag is not a release.
    """
    tag = tag.strip()
    if not tag.startswith(marker):
        return None
    try:
        version, _ = _parse_semver(tag[len(marker):])
    except ValueError:
        return None
    return VersionTag(tag=tag, version=version)


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

_ATOM_RE = re.compile(
    r"^\s*(?P<op>~>|>=|<=|!=|==|=|>|<)?\s*v?"
    r"(?P<ver>\d+(?:\.\d+){0,2}(?:-[0-9A-Za-z\-.]+)?(?:\+[0-9A-Za-z\-.]+)?)\s*$",
    re.ASCII,
)

Comparable = Union[VersionTag, semantic_version.Version]


def _release(version: semantic_version.Version) -> tuple[int, int, int]:
    return version.major, version.minor, version.patch


@dataclass(frozen=True)
class _Atom:
    """One comparator, e.g. ``>= 1.2``."""

    op: str
    operand: semantic_version.Version
    precision: int
    text: str

    def check(self, version: semantic_version.Version) -> bool:
        operand = self.operand
        v_pre, c_pre = bool(version.prerelease), bool(operand.prerelease)
        # A pre-release only matches a pre-release operand on the same release.
        if v_pre and (not c_pre or _release(version) != _release(operand)):
            return False

        op = self.op
        if op == "=":
            return version == operand
        elif op == "!=":
            return version != operand
        elif op == ">":
            return version > operand
        elif op == ">=":
            return version >= operand
        elif op == "<":
            return version < operand
        elif op == "<=":
            return version <= operand
        elif op == "~>":
            if c_pre and not v_pre:
                return False
            fixed = self.precision - 1
            if _release(version)[:fixed] != _release(operand)[:fixed]:
                return False
            return version >= operand
        else:  # pragma: no cover
            raise ValueError(f"Unknown operator: {op!r}")

    def __str__(self) -> str:
        return f"{self.op} {self.text}"


def _parse_atom(atom: str, raw: str) -> _Atom:
    m = _ATOM_RE.match(atom)
    if not m:
        raise MalformedConstraintError(f"Malformed constraint {raw!r}: bad term {atom.strip()!r}")
    op = m.group("op") or "="
    if op == "==":
        op = "="
    text = m.group("ver")
    try:
        operand, precision = _parse_semver(text)
    except ValueError as exc:
        raise MalformedConstraintError(f"Malformed constraint {raw!r}: {exc}") from exc
    return _Atom(op=op, operand=operand, precision=precision, text=text)


@dataclass(frozen=True)
class Constraint:
    """A parsed version constraint; all atoms must hold.

    Build instances with ``parse_constraint``.

    Attributes:
        raw: The constraint text as written.
        atoms: Parsed comparators. Empty for the wildcard ``*``.
    """

    raw: str
    atoms: tuple[_Atom, ...] = ()

    def check(self, version: Comparable) -> bool:
        """Return True if *version* satisfies every atom.

        The wildcard accepts every release but no pre-release.
        """
        if isinstance(version, VersionTag):
            version = version.version
        if not self.atoms:
            return not version.prerelease
        return all(atom.check(version) for atom in self.atoms)

    def __str__(self) -> str:
        if not self.atoms:
            return "*"
        return ", ".join(str(a) for a in self.atoms)

    def __repr__(self) -> str:
        return f"Constraint({self.raw!r})"


def parse_constraint(text: str) -> Constraint:
    """Parse constraint text such as ``">= 1.0, < 2.0"``.

    Args:
        text: Constraint expression.

    Returns:
        The parsed ``Constraint``.

    Raises:
        MalformedConstraintError: If the text is empty or any term fails to
            parse.
    """
    stripped = text.strip() if isinstance(text, str) else ""
    if not stripped:
        raise MalformedConstraintError(f"Malformed constraint {text!r}: empty expression")
    if stripped == "*":
        return Constraint(raw=text)
    atoms = tuple(_parse_atom(part, text) for part in stripped.split(","))
    return Constraint(raw=text, atoms=atoms)
