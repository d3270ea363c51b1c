"""locktranslate CLI --- pnpm lockfile to build-system import/link records.

Entry point for the ``locktranslate`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    translate  Translate a lockfile and write the import/link manifest.
    closure    Print the transitive closure of one package.

Usage::

    locktranslate translate pnpm-lock.yaml
    locktranslate translate pnpm-lock.yaml --prod --no-optional -o out.json
    locktranslate translate pnpm-lock.yaml --policy policy.yaml
    locktranslate -v closure pnpm-lock.yaml "@babel/core@7.18.2"
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from locktranslate import __version__
from locktranslate.cli.closure_cmd import closure_command
from locktranslate.cli.translate_cmd import translate_command

_LOG_LEVELS = {1: logging.INFO}


def _configure_logging(verbosity: int) -> None:
    """Route package logs to stderr through Rich, once per process."""
    if verbosity <= 0:
        return
    package_logger = logging.getLogger("locktranslate")
    package_logger.setLevel(_LOG_LEVELS.get(verbosity, logging.DEBUG))
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=Console(stderr=True), show_path=False)
        )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug).")
def cli(verbose: int) -> None:
    """locktranslate: pnpm lockfile translation for fine-grained build fetches.

    Re-derives each package's transitive closure, the workspace locations
    depending on it, and first-party workspace links from a resolved
    lockfile. Output is deterministic across runs.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(translate_command)
cli.add_command(closure_command)
