"""
console.py - Console and Output Formatting

Provides:
- err_console: stderr console for errors and diagnostics
- render_label: one picker row (directory, padded name, command preview)
- user-facing empty-state messages

stdout carries the picker and user messages; stderr carries logs and errors.
"""

from __future__ import annotations

import shutil

import typer
from rich.console import Console
from rich.panel import Panel

from ..config.logging import Colors
from ..core.aggregator import ScriptEntry

err_console = Console(stderr=True)

ELLIPSIS = "…"
_MIN_PREVIEW = 8


def terminal_label_width() -> int:
    """Widest label that fits the completion menu of the current terminal."""
    return max(shutil.get_terminal_size((100, 24)).columns - 4, 20)


def truncate(text: str, width: int) -> str:
    """Cut `text` to `width` characters, marking the cut with an ellipsis."""
    text = " ".join(text.split())
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + ELLIPSIS


def render_label(
    entry: ScriptEntry,
    name_width: int,
    dir_width: int,
    max_width: int,
    colors: bool = True,
) -> str:
    """Render `dir/ name (command)` padded into columns and capped at `max_width`."""
    dir_text = f"{entry.dir_path}/" if entry.source_dir else ""
    dir_col = dir_text.ljust(dir_width)
    name_col = entry.name.ljust(name_width)

    room = max_width - len(dir_col) - len(name_col) - 2
    if room < _MIN_PREVIEW:
        head = truncate(dir_col + entry.name, max_width)
        if not colors:
            return head
        return f"{Colors.CYAN}{head}{Colors.RESET}" if entry.source_dir else head

    preview = truncate(entry.command, room)
    if not colors:
        return f"{dir_col}{name_col}({preview})"
    return (
        f"{Colors.CYAN}{dir_col}{Colors.RESET}"
        f"{Colors.BOLD}{name_col}{Colors.RESET}"
        f"{Colors.BRIGHT_BLACK}({preview}){Colors.RESET}"
    )


def print_no_manifest(filename: str) -> None:
    typer.echo(f"yrun: can not find {filename} in current directory.")


def print_no_scripts(filename: str) -> None:
    typer.echo(f"yrun: no scripts to execute in {filename}.")


def print_error(message: str, title: str = "Error") -> None:
    err_console.print(Panel(message, title=f"[bold]{title}[/bold]", style="red", expand=False))


__all__ = [
    "err_console",
    "print_error",
    "print_no_manifest",
    "print_no_scripts",
    "render_label",
    "terminal_label_width",
    "truncate",
]
