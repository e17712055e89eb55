"""Custom key bindings for the pcomp REPL."""

from __future__ import annotations

from typing import Callable, Sequence

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys

from ..engine.session import Action, Insertion, NoOp, ShowList
from .renderer import Renderer
from .session import ReplSession


PresentList = Callable[[Sequence[str]], None]


def apply_action(buffer: Buffer, action: Action, present_list: PresentList) -> None:
    """Carry out a session action on the edit buffer."""
    if isinstance(action, Insertion):
        new_text, cursor = action.apply(buffer.text)
        buffer.document = Document(text=new_text, cursor_position=cursor)
    elif isinstance(action, ShowList):
        present_list(action.candidates)
    elif isinstance(action, NoOp):
        buffer.insert_text(action.fallback)


def insert_typed(buffer: Buffer, data: str, count: int = 1) -> None:
    """Self-insert a typed key; unbound escape sequences are dropped."""
    if data and data.isprintable():
        buffer.insert_text(data * count)


def create_key_bindings(repl_session: ReplSession, renderer: Renderer) -> KeyBindings:
    """Wire TAB / Shift-TAB to the completion session."""

    kb = KeyBindings()

    def complete(event, reverse: bool) -> None:
        buffer = event.current_buffer
        action = repl_session.completion.complete(
            buffer.text, buffer.cursor_position, reverse=reverse
        )

        def present_list(candidates: Sequence[str]) -> None:
            event.app.run_in_terminal(lambda: renderer.render_candidates(candidates))

        apply_action(buffer, action, present_list)
        if isinstance(action, NoOp) and action.reason:
            repl_session.set_status(action.reason)

    @kb.add("tab")
    def _(event) -> None:
        complete(event, reverse=False)

    @kb.add("s-tab")
    def _(event) -> None:
        complete(event, reverse=True)

    @kb.add("c-space")
    def _(event) -> None:
        event.current_buffer.start_completion(select_first=False)

    @kb.add(Keys.Any)
    def _(event) -> None:
        repl_session.completion.reset()
        insert_typed(event.current_buffer, event.data, event.arg)

    return kb
