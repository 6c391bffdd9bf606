"""
executor.py - Run the composed command attached to the terminal.

The child inherits stdin, stdout and stderr; yrun waits for it and
reports its exit status.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from ..config.logging import get_logger
from ..errors import ExecutionError

logger = get_logger("yrun.cli.executor")


def run_command(command: str, cwd: str | Path | None = None) -> int:
    """Run `command` through the platform shell and return its exit status."""
    logger.debug("Executing", command=command, cwd=str(cwd) if cwd else None)
    try:
        completed = subprocess.run(command, shell=True, cwd=cwd, check=False)
    except OSError as e:
        raise ExecutionError(f"Cannot start shell for: {command}", details={"error": str(e)}) from e
    logger.debug("Command finished", returncode=completed.returncode)
    return completed.returncode


__all__ = ["run_command"]
