"""Colorized console output for installer commands.

Thin wrapper around :mod:`rich`.  User-facing status goes through here;
``logger.*`` calls stay for diagnostics.
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=False, force_terminal=None)

# ── Symbols ────────────────────────────────────────────────────────────────

_PASS = "[bold green]✓[/]"
_FAIL = "[bold red]✗[/]"
_ARROW = "[bold cyan]›[/]"

# ── Status lines ───────────────────────────────────────────────────────────


def ok(msg: str) -> None:
    console.print(f"  {_PASS} {msg}")


def fail(msg: str) -> None:
    console.print(f"  {_FAIL} [red]{escape(msg)}[/]")


def step(msg: str) -> None:
    """Cyan arrow + action message (in-progress)."""
    console.print(f"  {_ARROW} {msg}")


def detail(key: str, value: str) -> None:
    console.print(f"    [bold]{key}[/]: {value}")


# ── Tables / panels ────────────────────────────────────────────────────────


def files_table(title: str, rows: Iterable[tuple[str, int]]) -> None:
    """Print written files with their sizes."""
    table = Table(title=title, title_justify="left")
    table.add_column("File")
    table.add_column("Bytes", justify="right")
    for filename, size in rows:
        table.add_row(filename, str(size))
    console.print(table)


def error_panel(title: str, body: str) -> None:
    console.print()
    console.print(
        Panel(
            escape(body),
            title=f"[bold red]{title}[/]",
            border_style="red",
            padding=(1, 2),
        )
    )
