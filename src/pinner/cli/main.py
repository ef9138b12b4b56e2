"""Pinner CLI: resolve and pin git-hosted libraries.

Entry point for the ``pinner`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    report: List the registrations a project declares.
    pin: Resolve and check out every registered library.

Usage::

    pinner report ./my-project
    pinner pin ./my-project
    pinner pin ./my-project --staging-root /tmp/pins --fixed-point
    pinner -v pin ./my-project --json
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from pinner import __version__
from pinner.cli.pin_cmd import pin_command
from pinner.cli.report_cmd import report_command


def configure_logging(verbose: bool) -> None:
    """Route pinner's log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log progress and git commands.")
def cli(verbose: bool) -> None:
    """Pinner: pin git-hosted libraries to one version each.

    Every library a project registers, and everything those libraries
    declare in turn, is resolved to the highest version that satisfies
    every constraint expressed against it.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(report_command)
cli.add_command(pin_command)
