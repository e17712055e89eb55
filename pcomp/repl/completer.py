"""prompt_toolkit completer backed by the pcomp engine."""

from __future__ import annotations

import structlog
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..engine.completer import Completer as LineCompleter
from ..engine.session import render
from ..errors import CompletionError

logger = structlog.get_logger(__name__)


class PcompCompleter(Completer):
    """Expose the merged candidate set to prompt_toolkit's completion menu.

    TAB cycling goes through the key bindings and CompletionSession; this
    adapter only feeds the menu shown on demand.
    """

    def __init__(self, completer: LineCompleter):
        self._completer = completer

    def get_completions(self, document: Document, complete_event):  # type: ignore[override]
        cursor = document.cursor_position
        try:
            context, found = self._completer.complete_line(document.text, cursor)
        except CompletionError as exc:
            logger.debug("menu.fallback", error=str(exc))
            return

        for name in found:
            yield Completion(
                render(context, name),
                start_position=context.stub_start - cursor,
                display=name,
                display_meta=found.kind(name).value,
            )
