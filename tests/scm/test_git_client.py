"""Tests for ``GitClient`` against real local repositories.

Repositories are created under ``tmp_path`` and cloned through a path-based
URL template, so no network access is needed. Tests that need the ``git``
executable are skipped when it is not installed.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from pinner.core.catalog import build_catalog
from pinner.exceptions import SourceControlError, UnsupportedDependencyError
from pinner.scm.git import GitClient

LIB = "github.com/acme/widgets"

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(*args: str, cwd: Path) -> None:
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *args],
        cwd=cwd, check=True, capture_output=True,
    )


def make_origin(root: Path, library: str, versions: list[str], extra_tags: tuple[str, ...] = ()) -> Path:
    """Create a repository with one commit and one ``v`` tag per version."""
    repo = root / library
    repo.mkdir(parents=True)
    _git("init", "--quiet", cwd=repo)
    for version in versions:
        (repo / "VERSION").write_text(version)
        _git("add", "VERSION", cwd=repo)
        _git("commit", "--quiet", "-m", f"release {version}", cwd=repo)
        _git("tag", f"v{version}", cwd=repo)
    for tag in extra_tags:
        _git("tag", tag, cwd=repo)
    return repo


@pytest.fixture
def origin_root(tmp_path: Path) -> Path:
    return tmp_path / "origin"


@pytest.fixture
def client(tmp_path: Path, origin_root: Path) -> GitClient:
    return GitClient(tmp_path / "staging", url_template=str(origin_root) + "/{name}")


class TestHostingPattern:
    """Name-to-repository mapping; no git needed."""

    def test_supports_configured_host(self, client: GitClient) -> None:
        assert client.supports(LIB)
        assert not client.supports("example.org/foo/bar")
        assert not client.supports("github.com")
        assert not client.supports("notgithub.com/a/b")

    @pytest.mark.parametrize("name", [
        "github.com/../../tmp/x",
        "github.com/acme/../../../etc",
        "github.com/./widgets",
        "github.com//widgets",
    ])
    def test_rejects_path_escapes(self, client: GitClient, name: str) -> None:
        assert not client.supports(name)
        with pytest.raises(UnsupportedDependencyError):
            client.ensure_cloned(name)

    def test_custom_hosts(self, tmp_path: Path) -> None:
        client = GitClient(tmp_path, hosts=("gitlab.com", "github.com"))
        assert client.supports("gitlab.com/a/b")

    def test_clone_url(self, tmp_path: Path) -> None:
        assert GitClient(tmp_path).clone_url(LIB) == "https://github.com/acme/widgets.git"

    def test_clone_url_unsupported(self, tmp_path: Path) -> None:
        with pytest.raises(UnsupportedDependencyError) as excinfo:
            GitClient(tmp_path).clone_url("example.org/foo/bar")
        assert excinfo.value.library == "example.org/foo/bar"

    def test_working_dir_nests_path_segments(self, tmp_path: Path) -> None:
        assert GitClient(tmp_path).working_dir(LIB) == tmp_path / "github.com" / "acme" / "widgets"

    def test_missing_git_binary(self, tmp_path: Path) -> None:
        client = GitClient(tmp_path, git="pinner-no-such-git-binary")
        (tmp_path / LIB).mkdir(parents=True)
        with pytest.raises(SourceControlError, match="could not run") as excinfo:
            client.list_tags(LIB)
        assert excinfo.value.library == LIB


@requires_git
class TestGitOperations:
    """Clone, fetch, tag listing and checkout with real git."""

    def test_clone_and_list_tags(self, client: GitClient, origin_root: Path) -> None:
        make_origin(origin_root, LIB, ["1.0.0", "1.2.0"], extra_tags=("latest",))
        path = client.ensure_cloned(LIB)
        assert (path / ".git").is_dir()
        assert sorted(client.list_tags(LIB)) == ["latest", "v1.0.0", "v1.2.0"]

    def test_ensure_cloned_is_idempotent(self, client: GitClient, origin_root: Path) -> None:
        make_origin(origin_root, LIB, ["1.0.0"])
        first = client.ensure_cloned(LIB)
        second = client.ensure_cloned(LIB)
        assert first == second

    def test_fetch_sees_new_tags(self, client: GitClient, origin_root: Path) -> None:
        repo = make_origin(origin_root, LIB, ["1.0.0"])
        client.ensure_cloned(LIB)
        (repo / "VERSION").write_text("1.1.0")
        _git("commit", "--quiet", "-am", "release 1.1.0", cwd=repo)
        _git("tag", "v1.1.0", cwd=repo)
        client.fetch_updates(LIB)
        assert "v1.1.0" in client.list_tags(LIB)

    def test_checkout_is_idempotent(self, client: GitClient, origin_root: Path) -> None:
        make_origin(origin_root, LIB, ["1.0.0", "1.2.0"])
        path = client.ensure_cloned(LIB)
        client.checkout(LIB, "v1.0.0")
        client.checkout(LIB, "v1.0.0")
        assert (path / "VERSION").read_text() == "1.0.0"
        client.checkout(LIB, "v1.2.0")
        assert (path / "VERSION").read_text() == "1.2.0"

    def test_build_catalog_filters_tags(self, client: GitClient, origin_root: Path) -> None:
        make_origin(origin_root, LIB, ["1.0.0", "1.2.0"], extra_tags=("latest", "release-notes"))
        catalog = build_catalog(LIB, client)
        assert {str(v) for v in catalog} == {"1.0.0", "1.2.0"}

    def test_clone_failure(self, client: GitClient) -> None:
        with pytest.raises(SourceControlError) as excinfo:
            client.ensure_cloned("github.com/acme/missing")
        assert excinfo.value.library == "github.com/acme/missing"
        assert "clone" in str(excinfo.value)

    def test_checkout_unknown_ref(self, client: GitClient, origin_root: Path) -> None:
        make_origin(origin_root, LIB, ["1.0.0"])
        client.ensure_cloned(LIB)
        with pytest.raises(SourceControlError, match="checkout"):
            client.checkout(LIB, "v9.9.9")
