"""``pinner report <project>``: show a project's declared registrations.

Runs the project's ``pin/main.py`` in report mode and lists what it
registers.

Exit Codes:
    0: Registrations listed.
    1: The project's pin script failed or printed malformed output.
    2: The project declares no registrations.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from pinner.cli.output import print_json, print_registrations
from pinner.exceptions import ManifestProbeError
from pinner.probe import ScriptManifestProbe


def read_declarations(project: Path, script: str = "pin/main.py") -> list[tuple[str, str]]:
    """Return the ``(library, constraint)`` pairs *project* declares.

    Exits with code 1 on a probe failure.
    """
    probe = ScriptManifestProbe(script)
    try:
        return probe.probe(str(project), project)
    except ManifestProbeError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@click.command("report")
@click.argument("project", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--script", default="pin/main.py", show_default=True, help="Pin script relative to PROJECT.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def report_command(project: str, script: str, as_json: bool) -> None:
    """List the libraries PROJECT registers and their constraints."""
    pairs = read_declarations(Path(project), script)
    if not pairs:
        click.echo("No registrations found.")
        sys.exit(2)

    if as_json:
        print_json([{"library": name, "constraint": c} for name, c in pairs])
    else:
        print_registrations(pairs)
