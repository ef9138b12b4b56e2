"""Rich output formatting helpers for the pinner CLI."""

from __future__ import annotations

import json
from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pinner.exceptions import PinnerError
from pinner.pinner import PinOutcome

console = Console()

_ERROR_LABELS: dict[str, str] = {
    "UnsupportedDependencyError": "unsupported",
    "MalformedConstraintError": "malformed constraint",
    "SourceControlError": "source control",
    "ManifestProbeError": "manifest probe",
    "NoSatisfyingVersionError": "no satisfying version",
    "CircularDependencyError": "circular dependency",
}


def error_label(error: PinnerError) -> str:
    """Short human-readable kind for an error."""
    return _ERROR_LABELS.get(type(error).__name__, type(error).__name__)


def print_registrations(pairs: Sequence[tuple[str, str]]) -> None:
    """Print declared ``(library, constraint)`` pairs as a table."""
    table = Table(title="Registered Libraries", show_header=True, header_style="bold")
    table.add_column("Library", style="bold")
    table.add_column("Constraint")
    for name, constraint in pairs:
        table.add_row(name, constraint)
    console.print(table)


def print_pin_outcome(outcome: PinOutcome) -> None:
    """Print resolved versions, then every collected error.

    Args:
        outcome: Result of ``Pinner.run()``.
    """
    resolved = outcome.resolution.resolved
    if outcome.success:
        console.print(Panel("[bold green]Pin successful[/bold green]", title="Dependency Resolution"))
    else:
        console.print(Panel("[bold red]Pin failed[/bold red]", title="Dependency Resolution"))

    if resolved:
        table = Table(show_header=True)
        table.add_column("Library", style="bold")
        table.add_column("Version")
        table.add_column("Tag", style="dim")
        for name in sorted(resolved):
            table.add_row(name, str(resolved[name]), resolved[name].tag)
        console.print(table)
    else:
        console.print("[dim]No libraries resolved.[/dim]")

    if not outcome.converged:
        console.print(f"[yellow]Resolution did not settle after {outcome.rounds} rounds.[/yellow]")

    for error in outcome.errors:
        line = escape(f"[{error_label(error)}] {error}")
        console.print(f"  [red]- {line}[/red]")


def outcome_to_dict(outcome: PinOutcome) -> dict[str, Any]:
    """JSON-serializable summary of a pin run."""
    return {
        "success": outcome.success,
        "rounds": outcome.rounds,
        "converged": outcome.converged,
        "resolved": {
            name: {"version": str(tag), "tag": tag.tag}
            for name, tag in sorted(outcome.resolution.resolved.items())
        },
        "errors": [
            {"kind": error_label(e), "library": e.library, "message": str(e)}
            for e in outcome.errors
        ],
    }


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    console.print_json(json.dumps(data, default=str))
