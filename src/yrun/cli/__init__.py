"""
yrun.cli - Command line interface

Modules:
- app.py: Typer application and entry point
- console.py: console output and picker labels
- selector.py: selection state machine and command composition
- prompts.py: prompt_toolkit picker and text prompt
- executor.py: runs the final command on the terminal

The Typer object lives at `yrun.cli.app.app`; `yrun.cli.app` stays the module.
"""

from __future__ import annotations

from .app import entry_point, main
from .console import err_console
from .selector import Selector

__all__ = ["Selector", "entry_point", "err_console", "main"]
