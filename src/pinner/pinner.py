"""Registration API and the pin run.

Typical use from a library's or application's ``pin/main.py``::

    import pinner

    pinner.register("github.com/acme/widgets", "~> 1.2")
    pinner.register("github.com/acme/gears", ">= 0.3, < 0.5")
    pinner.run_main()

Run with ``PIN_MODE=report`` (or no mode) the script prints its
registrations, which is how dependents discover them. Run with
``PIN_MODE=pin`` it resolves and checks out every library.

A pin run goes through four steps:

1. discovery walks every registration and its transitive dependencies,
   filling a fresh ``ConstraintRegistry``;
2. the registry is frozen;
3. the resolver picks the highest version satisfying every constraint on
   each library;
4. the materializer checks each winner out.

Every failure along the way is collected. ``pin()`` returns the list,
which is empty on success. Nothing is rolled back on failure.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field

import click

from pinner.config import ENV_MODE, PinnerConfig
from pinner.core.discovery import DependencyDiscoverer
from pinner.core.registry import ConstraintRegistry, RegistryEntry
from pinner.core.resolver import ResolutionResult, resolve
from pinner.core.versioning import VersionTag, parse_constraint
from pinner.exceptions import PinnerError, SourceControlError
from pinner.probe import ManifestProbe, ScriptManifestProbe
from pinner.scm.base import SourceControlClient
from pinner.scm.git import GitClient
from pinner.scm.materializer import Materializer

logger = logging.getLogger(__name__)


@dataclass
class PinOutcome:
    """Everything a pin run produced.

    Attributes:
        resolution: Winning versions and per-library resolution failures.
        errors: Discovery errors, then resolution failures, then checkout
            failures, in that order.
        registry: The frozen registry from the last discovery round.
        rounds: Number of discovery rounds run (1 unless fixed-point).
        converged: False only when fixed-point mode hit its round limit.
    """

    resolution: ResolutionResult
    errors: list[PinnerError] = field(default_factory=list)
    registry: ConstraintRegistry | None = None
    rounds: int = 1
    converged: bool = True

    @property
    def success(self) -> bool:
        return not self.errors


class Pinner:
    """Collects registrations and pins them.

    Args:
        config: Run settings. Defaults to ``PinnerConfig.from_env()``.
        client: Source control client. Defaults to a ``GitClient`` rooted at
            ``config.staging_root``.
        probe: Manifest probe. Defaults to running ``config.probe_script``.
    """

    def __init__(
        self,
        config: PinnerConfig | None = None,
        client: SourceControlClient | None = None,
        probe: ManifestProbe | None = None,
    ) -> None:
        self._config = config or PinnerConfig.from_env()
        self._client = client or GitClient(
            self._config.staging_root,
            hosts=self._config.hosts,
            url_template=self._config.url_template,
        )
        self._probe = probe or ScriptManifestProbe(self._config.probe_script)
        self._registrations: list[RegistryEntry] = []

    @property
    def config(self) -> PinnerConfig:
        return self._config

    @property
    def registrations(self) -> list[RegistryEntry]:
        """Top-level entries, in registration order."""
        return list(self._registrations)

    def register(self, name: str, constraint: str) -> RegistryEntry:
        """Register a top-level requirement.

        Args:
            name: Library name, e.g. ``"github.com/acme/widgets"``.
            constraint: Constraint text, e.g. ``"~> 1.2"``.

        Returns:
            The new entry.

        Raises:
            MalformedConstraintError: If *constraint* does not parse.
        """
        entry = RegistryEntry(library=name, constraint=parse_constraint(constraint))
        self._registrations.append(entry)
        return entry

    def report(self) -> list[str]:
        """Return one ``"<name> <constraint>"`` line per registration.

        Constraints are printed normalized, so each fits on one line.
        """
        return [f"{e.library} {e.constraint}" for e in self._registrations]

    def run(self) -> PinOutcome:
        """Discover, resolve and materialize every registration."""
        config = self._config
        materializer = Materializer(self._client)
        probe_cache: dict[tuple[str, str], list[RegistryEntry]] = {}
        catalogs: dict[str, tuple[VersionTag, ...]] = {}
        pinned: dict[str, VersionTag] = {}
        max_rounds = config.max_rounds if config.fixed_point else 1

        converged = True
        for round_no in range(1, max_rounds + 1):
            registry = ConstraintRegistry(catalogs=catalogs)
            discoverer = DependencyDiscoverer(
                registry,
                self._client,
                materializer,
                self._probe,
                marker=config.marker,
                pinned=pinned,
                probe_cache=probe_cache,
            )
            for entry in self._registrations:
                registry.add_entry(entry)
                discoverer.discover(entry)
            registry.freeze()

            resolution = resolve(registry.constraints, registry.catalogs)
            catalogs = dict(registry.catalogs)
            if not config.fixed_point or resolution.resolved == pinned:
                break
            logger.info("Round %d changed the resolution; re-probing", round_no)
            pinned = dict(resolution.resolved)
        else:
            converged = False
            logger.warning("Resolution did not settle after %d rounds", max_rounds)

        errors: list[PinnerError] = list(discoverer.errors)
        scm_failed = {e.library for e in discoverer.errors if isinstance(e, SourceControlError)}
        errors.extend(resolution.failures.values())
        for library, version in sorted(resolution.resolved.items()):
            if library in scm_failed and materializer.has_failed(library, version.tag):
                # Discovery already reported this checkout failure.
                continue
            try:
                materializer.checkout(library, version)
            except PinnerError as exc:
                logger.warning("Checkout of %s %s failed: %s", library, version.tag, exc)
                errors.append(exc)

        return PinOutcome(
            resolution=resolution,
            errors=errors,
            registry=registry,
            rounds=round_no,
            converged=converged,
        )

    def pin(self) -> list[PinnerError]:
        """Run the pin and return every error; empty means success."""
        return self.run().errors


# ---------------------------------------------------------------------------
# Module-level convenience for pin/main.py scripts
# ---------------------------------------------------------------------------

_default: Pinner | None = None


def default_pinner() -> Pinner:
    """Return the process-wide ``Pinner`` used by the module functions."""
    global _default
    if _default is None:
        _default = Pinner()
    return _default


def register(name: str, constraint: str) -> RegistryEntry:
    """Register on the default ``Pinner``. See ``Pinner.register``."""
    return default_pinner().register(name, constraint)


def report() -> list[str]:
    """Report lines of the default ``Pinner``. See ``Pinner.report``."""
    return default_pinner().report()


def pin() -> list[PinnerError]:
    """Pin the default ``Pinner``'s registrations. See ``Pinner.pin``."""
    return default_pinner().pin()


def run_main(pinner: Pinner | None = None) -> None:
    """Entry point for a ``pin/main.py`` script; always exits.

    ``PIN_MODE`` selects the behavior:

    - unset or ``report``: print registrations, exit 0;
    - ``pin``: pin, print any errors to stderr, exit 1 on failure;
    - anything else: exit 1.
    """
    pinner = pinner or default_pinner()
    mode = os.environ.get(ENV_MODE, "").strip()
    if mode in ("", "report"):
        for line in pinner.report():
            click.echo(line)
        sys.exit(0)
    if mode == "pin":
        errors = pinner.pin()
        for error in errors:
            click.echo(str(error), err=True)
        sys.exit(1 if errors else 0)

    logger.error("Unsupported %s: %s", ENV_MODE, mode)
    click.echo(f"Unsupported {ENV_MODE}: {mode}", err=True)
    sys.exit(1)
