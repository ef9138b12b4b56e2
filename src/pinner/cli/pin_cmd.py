"""``pinner pin <project>``: resolve and check out a project's libraries.

Reads the project's registrations from its ``pin/main.py``, discovers
their transitive dependencies, picks one version per library and checks
each one out under the staging directory.

Exit Codes:
    0: Every library resolved and checked out.
    1: One or more errors (all of them are listed).
    2: The project declares no registrations.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from pinner.cli.output import outcome_to_dict, print_json, print_pin_outcome
from pinner.cli.report_cmd import read_declarations
from pinner.config import ENV_FIXED_POINT, ENV_STAGING_ROOT, PinnerConfig, default_staging_root
from pinner.exceptions import MalformedConstraintError
from pinner.pinner import Pinner


@click.command("pin")
@click.argument("project", type=click.Path(exists=True, file_okay=False), default=".")
@click.option(
    "--staging-root",
    type=click.Path(file_okay=False),
    envvar=ENV_STAGING_ROOT,
    default=None,
    help="Directory libraries are cloned into (default: ~/.pin_staging).",
)
@click.option(
    "--fixed-point",
    is_flag=True,
    envvar=ENV_FIXED_POINT,
    help="Re-probe at resolved versions until the resolution settles.",
)
@click.option("--max-rounds", type=click.IntRange(min=1), default=5, show_default=True)
@click.option("--script", default="pin/main.py", show_default=True, help="Pin script relative to PROJECT.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def pin_command(
    project: str,
    staging_root: str | None,
    fixed_point: bool,
    max_rounds: int,
    script: str,
    as_json: bool,
) -> None:
    """Pin every library PROJECT registers, transitively.

    Exit code 0 on success, 1 if anything failed, 2 if nothing is declared.
    """
    pairs = read_declarations(Path(project), script)
    if not pairs:
        click.echo("No registrations found.")
        sys.exit(2)

    config = PinnerConfig(
        staging_root=Path(staging_root) if staging_root else default_staging_root(),
        probe_script=script,
        fixed_point=fixed_point,
        max_rounds=max_rounds,
    )
    pinner = Pinner(config)
    for name, constraint in pairs:
        try:
            pinner.register(name, constraint)
        except MalformedConstraintError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    outcome = pinner.run()
    if as_json:
        print_json(outcome_to_dict(outcome))
    else:
        print_pin_outcome(outcome)
    sys.exit(0 if outcome.success else 1)
