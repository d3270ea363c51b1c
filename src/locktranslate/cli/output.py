"""Rich output formatting helpers for the locktranslate CLI."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from locktranslate.core.translate import Translation

console = Console()


def _location(path: str) -> str:
    return path or "."


def print_translation_summary(translation: Translation) -> None:
    """Print import and first-party link tables for a translation.

    Args:
        translation: Result of ``translate``.
    """
    console.print(
        Panel(
            f"[bold]{len(translation.imports)}[/bold] imports | "
            f"[bold]{len(translation.links)}[/bold] first-party links | "
            f"[bold]{len(translation.link_locations)}[/bold] importers",
            title="Lockfile Translation",
        )
    )

    if translation.imports:
        table = Table(title="Imports", show_header=True, header_style="bold")
        table.add_column("Package", style="bold")
        table.add_column("Version")
        table.add_column("Closure", justify="right")
        table.add_column("Linked In", style="dim")
        table.add_column("Hooks", justify="center")
        for record in translation.imports:
            hooks = Text("yes", style="yellow") if record.run_lifecycle_hooks else Text("-", style="dim")
            table.add_row(
                record.package,
                record.version,
                str(len(record.transitive_closure)),
                ", ".join(_location(p) for p in record.link_packages) or "-",
                hooks,
            )
        console.print(table)
    else:
        console.print("[dim]No packages survived the environment filter.[/dim]")

    if translation.links:
        links_table = Table(title="First-Party Links", show_header=True, header_style="bold")
        links_table.add_column("Package", style="bold")
        links_table.add_column("Path")
        links_table.add_column("Referenced By", style="dim")
        links_table.add_column("Deps", justify="right")
        for link in translation.links.values():
            links_table.add_row(
                link.package,
                _location(link.path),
                ", ".join(_location(p) for p in link.link_packages),
                str(len(link.dependencies)),
            )
        console.print(links_table)


def print_closure(key: str, closure: Iterable[str]) -> None:
    """Print the sorted members of one package's closure."""
    members = sorted(closure)
    table = Table(title=f"Transitive closure of {key}", show_header=True)
    table.add_column("Package Key", style="bold")
    for member in members:
        table.add_row(member)
    console.print(table)
    console.print(f"[bold]{len(members)}[/bold] packages")


def print_error(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    console.print_json(json.dumps(data, sort_keys=True))
