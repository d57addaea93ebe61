"""Shared console helpers for the FIDE backend.

All human-facing output (request logs, start-up banners, warnings) goes
through the single Rich ``console`` defined here so that tests can capture or
silence it in one place.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

console = Console()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_summary_table(
    rows: Iterable[Iterable[object]],
    columns: list[str],
    title: str = "Summary",
) -> None:
    """Print a simple table with one row per item.

    Args:
        rows: Row values; each is converted with ``str``.
        columns: Column headers. The first column is rendered dim.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for index, column in enumerate(columns):
        if index == 0:
            table.add_column(column, style="dim", no_wrap=True)
        else:
            table.add_column(column)

    for row in rows:
        table.add_row(*(str(value) for value in row))

    console.print(table)
    console.print()
