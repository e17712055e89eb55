"""Completion session: what one press of the completion key does.

A fresh request resolves candidates and then either inserts the unique
match, inserts the common prefix, lists the candidates, or starts cycling.
Pressing the key again without touching the line moves through the cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import structlog

from ..errors import CompletionError
from .candidates import CandidateKind, CandidateSet, common_prefix
from .completer import Completer
from .context import CompletionContext

logger = structlog.get_logger(__name__)

SHELL_SPECIALS = frozenset(" \t\n\\'\"$|&;(){}<>")
DOUBLE_QUOTE_SPECIALS = frozenset('"\\$')


class Mode(str, Enum):
    """Session states between key presses."""
    IDLE = "idle"
    CYCLING = "cycling"
    LISTING = "listing"


@dataclass(frozen=True)
class Insertion:
    """Replace ``line[start:end]`` with ``text``."""

    start: int
    end: int
    text: str

    def apply(self, line: str) -> Tuple[str, int]:
        """Return the new line and cursor."""
        return line[:self.start] + self.text + line[self.end:], self.start + len(self.text)


@dataclass(frozen=True)
class InsertUnique(Insertion):
    pass


@dataclass(frozen=True)
class InsertCommonPrefix(Insertion):
    pass


@dataclass(frozen=True)
class InsertCycled(Insertion):
    index: int = 0


@dataclass(frozen=True)
class ShowList:
    candidates: Tuple[str, ...]


@dataclass(frozen=True)
class NoOp:
    """Nothing to complete: the caller inserts ``fallback`` literally."""

    fallback: str = "\t"
    reason: str = ""


Action = Union[InsertUnique, InsertCommonPrefix, InsertCycled, ShowList, NoOp]


def escape(text: str, quote: Optional[str] = None) -> str:
    """Quote ``text`` for insertion, outside quotes or inside ``quote``."""
    if quote == "'":
        return text
    specials = DOUBLE_QUOTE_SPECIALS if quote == '"' else SHELL_SPECIALS
    return "".join("\\" + char if char in specials else char for char in text)


def render(context: CompletionContext, name: str) -> str:
    """Line text that replaces the stub span for candidate ``name``."""
    text = escape(name, context.quote)
    # A quote opened mid-word lies inside the replaced span; reopen it up front.
    if context.quote_position is not None and context.quote_position >= context.stub_start:
        text = context.quote + text
    return text


class CompletionSession:
    """Per-line completion state driven by successive completion key presses."""

    def __init__(self, completer: Completer):
        self.completer = completer
        self.config = completer.config
        self.reset()

    def reset(self) -> None:
        """Forget the previous request; called when any other key is typed."""
        self.mode = Mode.IDLE
        self.last_context: Optional[CompletionContext] = None
        self.candidates: List[str] = []
        self.index = -1
        self._span: Tuple[int, int] = (0, 0)
        self._expected: Optional[Tuple[str, int]] = None

    def complete(self, line: str, cursor: Optional[int] = None, reverse: bool = False) -> Action:
        """Handle one completion key press (``reverse`` for the backward key)."""
        cursor = len(line) if cursor is None else cursor
        if self.mode is Mode.CYCLING and self._expected == (line, cursor):
            return self._cycle(line, reverse)

        self.reset()
        try:
            context, found = self.completer.complete_line(line, cursor)
        except CompletionError as exc:
            logger.info("session.fallback", error=str(exc))
            return NoOp(self.config.trigger, reason=str(exc))
        return self._start(line, cursor, context, found, reverse)

    # Transitions ---------------------------------------------------------------------
    def _start(
        self,
        line: str,
        cursor: int,
        context: CompletionContext,
        found: CandidateSet,
        reverse: bool,
    ) -> Action:
        self.last_context = context
        names = found.names()

        if not names:
            logger.debug("session.none", stub=context.stub)
            return NoOp(self.config.trigger, reason="no candidates")

        if len(names) == 1:
            name = names[0]
            return InsertUnique(*self._insertion(context, name, self._suffix(context, found, name)))

        self.candidates = names
        cutoff = self.config.cycle_cutoff
        if cutoff is not None and len(names) > cutoff:
            self.mode = Mode.LISTING
            logger.debug("session.list", count=len(names))
            return ShowList(tuple(names))

        if self.config.use_paring:
            prefix = common_prefix(names, self.config.ignore_case)
            if len(prefix) > len(context.stub):
                logger.debug("session.prefix", stub=context.stub, prefix=prefix)
                return InsertCommonPrefix(*self._insertion(context, prefix))

        self.mode = Mode.CYCLING
        self._span = (context.stub_start, context.stub_end)
        if self.config.auto_list:
            self._expected = (line, cursor)
            return ShowList(tuple(names))

        self.index = len(names) - 1 if reverse else 0
        return self._insert_cycled(line)

    def _cycle(self, line: str, reverse: bool) -> InsertCycled:
        count = len(self.candidates)
        if self.index < 0:
            self.index = count - 1 if reverse else 0
        else:
            self.index = (self.index + (-1 if reverse else 1)) % count
        return self._insert_cycled(line)

    def _insert_cycled(self, line: str) -> InsertCycled:
        start, end = self._span
        text = render(self.last_context, self.candidates[self.index])
        action = InsertCycled(start, end, text, self.index)
        new_line, new_cursor = action.apply(line)
        self._span = (start, new_cursor)
        self._expected = (new_line, new_cursor)
        logger.debug("session.cycle", index=self.index, candidate=self.candidates[self.index])
        return action

    # Insertion text ------------------------------------------------------------------
    def _suffix(self, context: CompletionContext, found: CandidateSet, name: str) -> str:
        if found.kind(name) is CandidateKind.DIRECTORY:
            return self.config.directory_suffix
        return (context.quote or "") + self.config.termination

    def _insertion(self, context: CompletionContext, name: str, suffix: str = "") -> Tuple[int, int, str]:
        """``(start, end, text)`` for ``name``; pared to the untyped tail when possible."""
        text = render(context, name) + suffix
        if self.config.use_paring and text.startswith(context.raw_stub):
            return context.stub_end, context.stub_end, text[len(context.raw_stub):]
        return context.stub_start, context.stub_end, text
