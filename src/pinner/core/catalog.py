"""Version catalog construction.

A catalog is the list of every release version known for one library. It is
built from the library's git tags and is a pure filter/parse step: tags that
are not releases are dropped and the survivors are returned in listing
order. Ordering policy belongs to the resolver.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pinner.core.versioning import VersionTag, parse_version

if TYPE_CHECKING:
    from pinner.scm.base import SourceControlClient

logger = logging.getLogger(__name__)


def build_catalog(library: str, client: SourceControlClient, marker: str = "v") -> list[VersionTag]:
    """List the release versions of *library*.

    Clones the library if needed and fetches updates first, since tag
    enumeration needs an up-to-date local repository.

    Args:
        library: Library name, e.g. ``"github.com/acme/widgets"``.
        client: Source control client used to clone, fetch and list tags.
        marker: Leading character that marks release tags.

    Returns:
        Parsed release tags, unsorted, in the order the client listed them.

    Raises:
        SourceControlError: If clone, fetch or tag listing fails.
        UnsupportedDependencyError: If the client cannot handle the name.
    """
    client.ensure_cloned(library)
    client.fetch_updates(library)
    tags = client.list_tags(library)

    catalog: list[VersionTag] = []
    for tag in tags:
        parsed = parse_version(tag, marker)
        if parsed is None:
            logger.debug("Skipping non-release tag %r of %s", tag, library)
            continue
        catalog.append(parsed)

    logger.info("%s: %d release tags out of %d", library, len(catalog), len(tags))
    return catalog
