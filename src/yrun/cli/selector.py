"""
selector.py - Interactive script selection

State machine for one run:

    LISTING -> FILTERING -> SELECTED -> (PARAMS_PROMPT | CONFIRMED) -> EXECUTED
    any interactive state -> CANCELLED

The prompt collaborators are injected so the flow runs the same under a
real terminal (prompts.py) and under test fakes. The "wants parameters"
flag travels inside the Selection returned by the picker; there is no
process-wide key listener.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..config.logging import get_logger
from ..config.settings import RunnerConfig
from ..core.aggregator import ScriptEntry
from ..core.matcher import filter_matches
from ..core.normalizer import normalize_for_host
from ..errors import PromptCancelled, PromptError
from .console import render_label, terminal_label_width

logger = get_logger("yrun.cli.selector")

PARAMS_MESSAGE = "Add params to script: "


@dataclass(frozen=True, slots=True)
class CandidateChoice:
    """A ScriptEntry projected for the picker."""

    key: ScriptEntry
    display_label: str
    search_text: str


@dataclass(frozen=True, slots=True)
class Selection:
    """The picker's answer: which entry, and whether to ask for parameters."""

    entry: ScriptEntry
    with_params: bool = False


class SelectorState(str, Enum):
    LISTING = "listing"
    FILTERING = "filtering"
    SELECTED = "selected"
    PARAMS_PROMPT = "params_prompt"
    CONFIRMED = "confirmed"
    EXECUTED = "executed"
    CANCELLED = "cancelled"


ChooseFn = Callable[[Sequence[CandidateChoice]], Awaitable[Selection]]
AskFn = Callable[[str], Awaitable[str]]
ExecuteFn = Callable[[str], int] | Callable[[str], Awaitable[int]]


def search_text(entry: ScriptEntry) -> str:
    return "/".join((*entry.source_dir, entry.name))


def build_choices(
    entries: Sequence[ScriptEntry],
    max_width: int | None = None,
    colors: bool = True,
) -> list[CandidateChoice]:
    """Project entries into picker rows, keeping their order."""
    if not entries:
        return []
    if max_width is None:
        max_width = terminal_label_width()
    name_width = max(len(entry.name) for entry in entries) + 2
    dir_width = max((len(entry.dir_path) + 2 for entry in entries if entry.source_dir), default=0)
    return [
        CandidateChoice(
            key=entry,
            display_label=render_label(entry, name_width, dir_width, max_width, colors),
            search_text=search_text(entry),
        )
        for entry in entries
    ]


def filter_choices(choices: Sequence[CandidateChoice], query: str) -> list[CandidateChoice]:
    """Choices whose search text fuzzy-matches `query`, in list order."""
    return filter_matches(choices, query, key=lambda choice: choice.search_text)


def _quote_dir(path: str) -> str:
    return f'"{path}"' if any(ch.isspace() for ch in path) else path


def compose_command(
    entry: ScriptEntry,
    config: RunnerConfig,
    params: str | None = None,
) -> str:
    """Build the shell command for `entry`.

    `params=None` means no parameters were requested. An empty string still
    appends the arguments separator when a runner is configured.
    """
    if config.direct:
        command = entry.command
    else:
        command = f"{config.run_command} {entry.name}"

    if entry.source_dir:
        command = f"cd {_quote_dir(entry.dir_path)} {config.command_separator} {command}"

    if params is not None:
        if config.direct:
            command = f"{command} {params}".rstrip()
        else:
            command = f"{command} {config.args_separator} {params}".rstrip()
    return command


class Selector:
    """Drives one selection-then-execution cycle."""

    def __init__(
        self,
        entries: Sequence[ScriptEntry],
        config: RunnerConfig,
        *,
        choose: ChooseFn,
        ask_params: AskFn,
        execute: ExecuteFn,
        backslash: bool | None = None,
        colors: bool = True,
    ):
        self.entries = list(entries)
        self.config = config
        self._choose = choose
        self._ask_params = ask_params
        self._execute = execute
        self._backslash = backslash
        self._colors = colors
        self.state = SelectorState.LISTING
        self.command: str | None = None

    def _transition(self, state: SelectorState) -> None:
        logger.debug("Selector transition", source=self.state.value, target=state.value)
        self.state = state

    async def _prompt(self, call: Awaitable):
        try:
            return await call
        except PromptCancelled:
            self._transition(SelectorState.CANCELLED)
            raise
        except Exception as e:
            logger.warning("Prompt failed", state=self.state.value, error=str(e))
            self._transition(SelectorState.CANCELLED)
            raise PromptError(f"Prompt failed: {e}") from e

    async def select(self) -> tuple[Selection, str | None]:
        """Run the interactive part: pick an entry, maybe ask for parameters."""
        choices = build_choices(self.entries, self.config.max_label_width, self._colors)
        self._transition(SelectorState.FILTERING)
        selection = await self._prompt(self._choose(choices))
        self._transition(SelectorState.SELECTED)

        params = None
        if selection.with_params:
            self._transition(SelectorState.PARAMS_PROMPT)
            params = (await self._prompt(self._ask_params(PARAMS_MESSAGE))).strip()
        self._transition(SelectorState.CONFIRMED)
        return selection, params

    async def run(self) -> int | None:
        """Select, compose, normalize, execute.

        Returns the child's exit status, or None when the user cancelled.
        """
        try:
            selection, params = await self.select()
        except PromptCancelled:
            logger.info("Selection cancelled")
            return None

        command = compose_command(selection.entry, self.config, params)
        self.command = normalize_for_host(command, self._backslash)
        logger.debug("Composed command", script=selection.entry.name, command=self.command)

        result = self._execute(self.command)
        if inspect.isawaitable(result):
            result = await result
        self._transition(SelectorState.EXECUTED)
        return result


__all__ = [
    "CandidateChoice",
    "PARAMS_MESSAGE",
    "Selection",
    "Selector",
    "SelectorState",
    "build_choices",
    "compose_command",
    "filter_choices",
    "search_text",
]
