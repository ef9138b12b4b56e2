"""Tests for highest-common-version resolution."""

from __future__ import annotations

from pinner.core.resolver import ResolutionResult, resolve, select_highest
from pinner.core.versioning import VersionTag, parse_constraint, parse_version
from pinner.exceptions import NoSatisfyingVersionError

LIB = "github.com/acme/widgets"
OTHER = "github.com/acme/gears"


def _catalog(*tags: str) -> list[VersionTag]:
    parsed = [parse_version(t) for t in tags]
    assert all(p is not None for p in parsed)
    return parsed  # type: ignore[return-value]


class TestSelectHighest:
    """Tests for ``select_highest``."""

    def test_picks_highest_satisfying(self) -> None:
        catalog = _catalog("v1.0.0", "v1.5.0", "v1.2.0", "v2.0.0")
        pick = select_highest(catalog, [parse_constraint("< 2.0")])
        assert pick is not None and pick.tag == "v1.5.0"

    def test_no_constraints_means_highest(self) -> None:
        pick = select_highest(_catalog("v0.1.0", "v0.3.0"), [])
        assert pick is not None and pick.tag == "v0.3.0"

    def test_nothing_satisfies(self) -> None:
        assert select_highest(_catalog("v1.0.0"), [parse_constraint("> 1.0")]) is None

    def test_empty_catalog(self) -> None:
        assert select_highest([], [parse_constraint("*")]) is None

    def test_equal_precedence_keeps_first_seen(self) -> None:
        """v1.2 and v1.2.0 are the same version; the first listed tag wins."""
        pick = select_highest(_catalog("v1.2", "v1.2.0", "v1.1.0"), [parse_constraint("*")])
        assert pick is not None and pick.tag == "v1.2"
        pick = select_highest(_catalog("v1.2.0", "v1.2"), [parse_constraint("*")])
        assert pick is not None and pick.tag == "v1.2.0"

    def test_wildcard_prefers_release_over_candidate(self) -> None:
        catalog = _catalog("v1.0.0", "v1.1.0-rc.1")
        pick = select_highest(catalog, [parse_constraint("*")])
        assert pick is not None and pick.tag == "v1.0.0"
        assert pick == select_highest(catalog, [parse_constraint(">= 0")])

    def test_build_metadata_tie_keeps_first_seen(self) -> None:
        pick = select_highest(_catalog("v1.0.0+b", "v1.0.0+a"), [parse_constraint("= 1.0.0")])
        assert pick is not None and pick.tag == "v1.0.0+b"


class TestResolve:
    """Tests for ``resolve``."""

    def test_highest_pick_within_range(self) -> None:
        """Catalog {1.0.0, 1.2.0, 1.5.0} with '>= 1.0, < 2.0' resolves to 1.5.0."""
        result = resolve(
            {LIB: [parse_constraint(">= 1.0, < 2.0")]},
            {LIB: _catalog("v1.0.0", "v1.2.0", "v1.5.0")},
        )
        assert result.success
        assert str(result.resolved[LIB]) == "1.5.0"
        assert result.as_dict() == {LIB: "1.5.0"}

    def test_and_semantics_across_dependents(self) -> None:
        """A version satisfying only one of two constraints is never chosen."""
        result = resolve(
            {LIB: [parse_constraint(">= 1.0"), parse_constraint("< 1.5")]},
            {LIB: _catalog("v1.0.0", "v1.4.0", "v1.5.0", "v2.0.0")},
        )
        assert str(result.resolved[LIB]) == "1.4.0"

    def test_empty_intersection(self) -> None:
        """'= 1.0.0' and '= 2.0.0' on catalog {1.0.0, 2.0.0} cannot be met."""
        constraints = [parse_constraint("= 1.0.0"), parse_constraint("= 2.0.0")]
        result = resolve({LIB: constraints}, {LIB: _catalog("v1.0.0", "v2.0.0")})
        assert not result.success
        assert LIB not in result.resolved
        error = result.failures[LIB]
        assert isinstance(error, NoSatisfyingVersionError)
        assert error.library == LIB
        assert error.constraints == tuple(constraints)
        assert "= 1.0.0" in str(error) and "= 2.0.0" in str(error)

    def test_failure_does_not_stop_other_libraries(self) -> None:
        result = resolve(
            {
                LIB: [parse_constraint("> 5.0")],
                OTHER: [parse_constraint("~> 0.3")],
            },
            {LIB: _catalog("v1.0.0"), OTHER: _catalog("v0.3.0", "v0.4.1", "v1.0.0")},
        )
        assert set(result.failures) == {LIB}
        assert str(result.resolved[OTHER]) == "0.4.1"

    def test_library_without_catalog_is_skipped(self) -> None:
        result = resolve({LIB: [parse_constraint("*")]}, {})
        assert result.success
        assert result.resolved == {}

    def test_library_with_empty_catalog_fails(self) -> None:
        result = resolve({LIB: [parse_constraint("*")]}, {LIB: []})
        assert LIB in result.failures

    def test_catalog_without_constraints_is_ignored(self) -> None:
        result = resolve({}, {LIB: _catalog("v1.0.0")})
        assert result.resolved == {}

    def test_deterministic(self) -> None:
        constraints = {LIB: [parse_constraint(">= 1.0")], OTHER: [parse_constraint("< 1.0")]}
        catalogs = {LIB: _catalog("v1.1", "v1.1.0", "v1.0.0"), OTHER: _catalog("v0.9.0", "v0.1.0")}
        first = resolve(constraints, catalogs)
        second = resolve(constraints, catalogs)
        assert first.resolved == second.resolved
        assert first.resolved[LIB].tag == "v1.1"

    def test_result_defaults(self) -> None:
        result = ResolutionResult()
        assert result.success
        assert result.as_dict() == {}
