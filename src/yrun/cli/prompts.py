"""
prompts.py - prompt_toolkit collaborators for the selector

- autocomplete_prompt: fuzzy-filtered completion menu over the choices
- input_prompt: free-text line

Keys in the picker:
    enter        run the highlighted script (first match if none highlighted)
    tab          same, then ask for extra parameters
    escape, c-c  cancel, nothing runs

The params prompt cancels on the same escape and c-c keys.
"""

from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings, KeyBindingsBase, merge_key_bindings

from ..errors import PromptCancelled
from .selector import CandidateChoice, Selection, filter_choices

CHOOSE_MESSAGE = "Choose task to run, use `tab` to add params to script:\n"


class ScriptCompleter(Completer):
    """Re-filters the full choice list on every keystroke."""

    def __init__(self, choices: Sequence[CandidateChoice]):
        self.choices = list(choices)

    def get_completions(self, document: Document, complete_event: CompleteEvent):
        query = document.text
        for choice in filter_choices(self.choices, query):
            yield Completion(
                choice.search_text,
                start_position=-len(query),
                display=ANSI(choice.display_label),
            )


def resolve_choice(
    choices: Sequence[CandidateChoice],
    query: str,
    index: int | None,
) -> CandidateChoice | None:
    """The choice at menu position `index` for `query` (first match if None)."""
    matched = filter_choices(choices, query)
    if not matched:
        return None
    if index is None or not 0 <= index < len(matched):
        return matched[0]
    return matched[index]


def _cancel_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("escape", eager=True)
    @kb.add("c-c", eager=True)
    def _cancel(event):
        event.app.exit(exception=PromptCancelled(), style="class:aborting")

    return kb


def _picker_bindings(choices: Sequence[CandidateChoice]) -> KeyBindingsBase:
    kb = KeyBindings()

    def _accept(event, with_params: bool) -> None:
        buffer = event.app.current_buffer
        state = buffer.complete_state
        if state is not None:
            query = state.original_document.text
            index = state.complete_index
        else:
            query = buffer.text
            index = None
        choice = resolve_choice(choices, query, index)
        if choice is None:
            return
        event.app.exit(result=Selection(entry=choice.key, with_params=with_params))

    @kb.add("enter", eager=True)
    def _confirm(event):
        _accept(event, with_params=False)

    @kb.add("tab", eager=True)
    def _confirm_with_params(event):
        _accept(event, with_params=True)

    return merge_key_bindings([kb, _cancel_bindings()])


async def autocomplete_prompt(
    choices: Sequence[CandidateChoice],
    message: str = CHOOSE_MESSAGE,
) -> Selection:
    """Show the picker and return the user's Selection.

    Raises PromptCancelled on escape, c-c, or end of input.
    """
    session: PromptSession = PromptSession(
        completer=ScriptCompleter(choices),
        complete_while_typing=True,
        reserve_space_for_menu=min(len(choices), 12),
        key_bindings=_picker_bindings(choices),
    )
    try:
        return await session.prompt_async(
            message,
            pre_run=lambda: session.default_buffer.start_completion(select_first=False),
        )
    except (KeyboardInterrupt, EOFError) as e:
        raise PromptCancelled() from e


async def input_prompt(message: str) -> str:
    """Ask for one line of free text.

    Raises PromptCancelled on escape, c-c, or end of input.
    """
    session: PromptSession = PromptSession(key_bindings=_cancel_bindings())
    try:
        return await session.prompt_async(message)
    except (KeyboardInterrupt, EOFError) as e:
        raise PromptCancelled() from e


__all__ = [
    "CHOOSE_MESSAGE",
    "ScriptCompleter",
    "autocomplete_prompt",
    "input_prompt",
    "resolve_choice",
]
