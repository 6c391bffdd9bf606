"""
yrun CLI Entry Point

Responsibilities:
1. Bootstrap Environment: parse --conf / --verbose, load Settings, configure logging.
2. Discover and aggregate manifest scripts under the scan root.
3. Dispatch: interactive picker (default), `list`, `version`.
"""

from __future__ import annotations

import asyncio
import json
import sys
from functools import partial
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from ..config.logging import (
    configure_logging,
    get_log_level,
    get_logger,
    is_configured,
    is_verbose,
)
from ..config.settings import RunnerConfig, get_settings
from ..core.aggregator import ScriptIndex, collect_scripts
from ..errors import ConfigError, ExecutionError, ManifestError, PromptError, YrunError
from .console import err_console, print_error, print_no_manifest, print_no_scripts
from .executor import run_command
from .prompts import autocomplete_prompt, input_prompt
from .selector import Selector

logger = get_logger("yrun.cli.app")

console = Console()

app = typer.Typer(
    name="yrun",
    help="Pick a package.json script with fuzzy autocomplete and run it.",
    no_args_is_help=False,
    add_completion=False,
    invoke_without_command=True,
)

# Global verbose flag (set by entry_point before any command runs)
_verbose_flag: bool = False


def _bootstrap_configuration(conf_path: str | None, verbose: bool = False) -> None:
    """Load settings (honouring --conf) and configure logging."""
    global _verbose_flag

    settings = get_settings()
    if conf_path:
        settings.use_file(conf_path)

    log_level = str(settings.get("logging.level", "WARNING"))
    if verbose or _verbose_flag:
        log_level = "DEBUG"
    configure_logging(level=log_level, force=True)

    _verbose_flag = _verbose_flag or verbose
    logger.debug("Configuration loaded", sources=[str(p) for p in settings.sources])


def _report_error(error: YrunError, title: str) -> None:
    """Red panel on stderr; with --verbose, the error details follow."""
    print_error(str(error), title=title)
    if is_verbose() and error.details:
        err_console.print(error.details)


def _verbose_callback(ctx: typer.Context, param: Any, value: bool) -> None:
    global _verbose_flag
    if value:
        _verbose_flag = True
        configure_logging(level="DEBUG", force=True)


def _load_config(include_bin: bool = False, runner: str | None = None) -> RunnerConfig:
    """Settings-file RunnerConfig with this invocation's flags applied."""
    try:
        config = get_settings().runner_config()
    except ConfigError as e:
        _report_error(e, "Configuration")
        raise typer.Exit(1) from e

    update: dict[str, Any] = {}
    if include_bin:
        update["include_bin"] = True
    if runner is not None:
        update["run_command"] = runner.strip()
    return config.model_copy(update=update) if update else config


def _load_index(root: Path, config: RunnerConfig) -> ScriptIndex:
    try:
        return asyncio.run(collect_scripts(root, config))
    except ManifestError as e:
        _report_error(e, "Manifest")
        raise typer.Exit(1) from e


RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Directory to scan for manifests",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
]
BinOption = Annotated[
    bool, typer.Option("--bin", help="Also offer binaries from node_modules/.bin")
]


@app.callback()
def main(
    ctx: typer.Context,
    conf: Annotated[
        str | None,
        typer.Option("--conf", "-c", help="Path to a settings.yaml file", envvar="YRUN_CONF"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging",
            is_eager=True,
            callback=_verbose_callback,
        ),
    ] = False,
    include_bin: BinOption = False,
    runner: Annotated[
        str | None,
        typer.Option(
            "--runner",
            help="Command used to run a script (default: yarn run); '' runs script bodies directly",
        ),
    ] = None,
    root: RootOption = Path("."),
):
    """
    Choose a script from every package.json under the current directory and run it.

    Keys: enter runs, tab runs after asking for extra parameters, escape cancels.
    """
    if conf or not is_configured():
        try:
            _bootstrap_configuration(conf, verbose)
        except ConfigError as e:
            _report_error(e, "Configuration")
            raise typer.Exit(1) from e
    if ctx.invoked_subcommand is not None:
        return

    config = _load_config(include_bin, runner)
    index = _load_index(root, config)
    if not index.manifests:
        print_no_manifest(config.manifest_filename)
        return
    if not index.entries:
        print_no_scripts(config.manifest_filename)
        return

    selector = Selector(
        index.entries,
        config,
        choose=autocomplete_prompt,
        ask_params=input_prompt,
        execute=partial(run_command, cwd=root),
    )
    try:
        returncode = asyncio.run(selector.run())
    except PromptError as e:
        _report_error(e, "Prompt")
        raise typer.Exit(1) from e
    except ExecutionError as e:
        _report_error(e, "Execution")
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        raise typer.Exit(130)

    if returncode:
        raise typer.Exit(returncode)


@app.command("list")
def list_scripts(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    include_bin: BinOption = False,
    root: RootOption = Path("."),
):
    """List every discovered script in picker order without running anything."""
    config = _load_config(include_bin)
    index = _load_index(root, config)
    if not index.manifests:
        print_no_manifest(config.manifest_filename)
        return
    if not index.entries:
        print_no_scripts(config.manifest_filename)
        return

    if json_output:
        payload = [
            {
                "name": entry.name,
                "command": entry.command,
                "source_dir": list(entry.source_dir),
                "source_path": entry.source_path,
            }
            for entry in index.entries
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(show_header=True, header_style="bold magenta", box=ROUNDED)
    table.add_column("Directory", style="cyan")
    table.add_column("Script", style="bold")
    table.add_column("Command", style="dim")
    for entry in index.entries:
        table.add_row(entry.dir_path or ".", entry.name, entry.command)
    console.print(table)


@app.command()
def version():
    """Display version information."""
    from .. import __version__

    settings = get_settings()
    python_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

    typer.echo(f"yrun:      {__version__}")
    typer.echo(f"Python:    {python_version}")
    typer.echo(f"Platform:  {sys.platform}")
    sources = ", ".join(str(p) for p in settings.sources) or "defaults"
    typer.echo(f"Settings:  {sources}")
    typer.echo(f"Log level: {get_log_level()}")


def entry_point():
    """Entry point for the `yrun` console script.

    Pre-parses global options (--verbose, -v, --conf, -c) before Typer takes
    over, so logging is configured before any command runs.
    """
    conf = None
    verbose = False
    argv = sys.argv[1:]

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("--verbose", "-v"):
            verbose = True
            argv.pop(i)
            continue
        elif arg in ("--conf", "-c") and i + 1 < len(argv):
            conf = argv[i + 1]
            argv.pop(i + 1)
            argv.pop(i)
            continue
        elif arg.startswith("--conf="):
            conf = arg.split("=", 1)[1]
            argv.pop(i)
            continue
        i += 1

    try:
        _bootstrap_configuration(conf, verbose)
    except ConfigError as e:
        _report_error(e, "Configuration")
        sys.exit(1)

    sys.argv = ["yrun"] + argv
    app()


if __name__ == "__main__":
    entry_point()


__all__ = ["app", "entry_point", "main"]
