"""``locktranslate closure <lockfile> <key>``: Show one package's closure.

Exit Codes:
    0: Closure printed.
    1: Unknown package key or invalid lockfile.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from locktranslate.cli.output import print_closure, print_error, print_json
from locktranslate.core.dependency import ClosureResolver
from locktranslate.core.lockfile import read_lockfile
from locktranslate.exceptions import LockTranslateError


@click.command("closure")
@click.argument("lockfile", type=click.Path(exists=True, dir_okay=False))
@click.argument("key")
@click.option("--prod", is_flag=True, help="Do not traverse edges into dev-only packages.")
@click.option("--no-optional", is_flag=True, help="Do not traverse optional edges.")
@click.option("--json", "as_json", is_flag=True, help="Print the closure as a JSON list.")
def closure_command(lockfile: str, key: str, prod: bool, no_optional: bool, as_json: bool) -> None:
    """Print the transitive closure of package KEY (name@version) in LOCKFILE."""
    try:
        parsed = read_lockfile(Path(lockfile))
        resolver = ClosureResolver(
            parsed.packages, include_dev=not prod, include_optional=not no_optional
        )
        closure = resolver.closure_of(key)
    except KeyError:
        print_error(f"package {key!r} is not in the lockfile")
        sys.exit(1)
    except LockTranslateError as exc:
        print_error(str(exc))
        sys.exit(1)

    if as_json:
        print_json(sorted(closure))
    else:
        print_closure(key, closure)
