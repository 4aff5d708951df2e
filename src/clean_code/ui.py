"""Shared rich console and operator-facing output helpers."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.text import Text

console = Console()


def plain_enabled() -> bool:
    return os.getenv("CLEAN_CODE_PLAIN", "0") == "1"


def section(title: str) -> None:
    console.print()
    console.print(Text(title, style="bold bright_cyan"))
    console.print(Text("-" * len(title), style="cyan"))


def success(message: str) -> None:
    console.print(f"[bold green][OK][/bold green] {message}")


def warning(message: str) -> None:
    console.print(f"[bold yellow][WARNING][/bold yellow] {message}")


def error(message: str) -> None:
    console.print(f"[bold red][ERROR][/bold red] {message}")


def note(message: str) -> None:
    console.print(f"[dim]! {message}[/dim]")


def listing(items: list[str]) -> None:
    for item in items:
        console.print(f" * {item}")


@contextmanager
def progress_bar(total: int, description: str) -> Iterator[Callable[[], None]]:
    """Yield an ``advance`` callback for a progress bar of ``total`` steps."""
    if plain_enabled() or total <= 0:
        yield lambda: None
        return

    with Progress(
        TextColumn("[bold bright_cyan]{task.description}[/bold bright_cyan]"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=False,
    ) as prog:
        task_id = prog.add_task(description, total=total)
        yield lambda: prog.advance(task_id)
