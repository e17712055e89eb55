"""Completion context: which argument is being completed, and for what command."""

from __future__ import annotations

import ntpath
import posixpath
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import structlog

from ..parser.tokenize import OpenDelimiter, Token, TokenKind
from ..runtime.config import CompletionConfig

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CompletionContext:
    """The partial argument at the cursor and what precedes it.

    ``stub_start``/``stub_end`` delimit the line text an insertion replaces;
    they exclude an opening quote at the start of the argument and the
    explicit-command marker. A quote opened mid-argument lies inside the span
    (``quote_position >= stub_start``).
    """

    stub: str
    stub_start: int
    stub_end: int
    index: int
    preceding_args: Tuple[str, ...] = field(default_factory=tuple)
    command_name: str = ""
    explicit: bool = False
    quote: Optional[str] = None
    quote_position: Optional[int] = None
    raw_stub: str = ""
    in_expression: bool = False

    @property
    def is_command_position(self) -> bool:
        return self.index == 0

    @property
    def stub_position(self) -> int:
        return self.index


def normalize_command(name: str, config: CompletionConfig) -> str:
    """Registry and rule lookup key for a command token."""
    if config.explicit_marker and name.startswith(config.explicit_marker):
        name = name[len(config.explicit_marker):]
    name = posixpath.basename(name)
    if config.strip_executable_suffix:
        name = ntpath.basename(name)
        root, suffix = posixpath.splitext(name)
        if suffix.lower() in (s.lower() for s in config.executable_suffixes):
            name = root
    return name


def resolve(
    tokens: Sequence[Token],
    cursor: int,
    config: Optional[CompletionConfig] = None,
    incomplete: Optional[OpenDelimiter] = None,
) -> CompletionContext:
    """Find the stub at ``cursor`` and classify its position.

    ``tokens`` is the current pipeline segment. If the cursor sits on
    whitespace after the last token, the stub is a synthetic empty one.
    ``incomplete`` is the quote the tokenizer found left open, if any.
    """
    config = config or CompletionConfig()
    words = [token for token in tokens if not token.is_operator and token.start <= cursor]

    if words and words[-1].start <= cursor <= words[-1].end:
        stub_token = words[-1]
        preceding = words[:-1]
    else:
        stub_token = Token("", "", cursor, cursor)
        preceding = words

    index = len(preceding)
    stub = stub_token.value
    stub_start = stub_token.start
    raw = stub_token.raw_text
    quote: Optional[str] = None
    quote_position: Optional[int] = None
    explicit = False

    if (
        stub_token.kind is TokenKind.INCOMPLETE
        and incomplete is not None
        and stub_token.start <= incomplete.position < stub_token.end
    ):
        quote = incomplete.char
        quote_position = incomplete.position
        if quote_position == stub_token.start:
            stub_start += 1

    marker = config.explicit_marker
    if index == 0 and marker and raw.startswith(marker) and stub.startswith(marker):
        explicit = True
        stub = stub[len(marker):]
        stub_start += len(marker)

    command_name = normalize_command(preceding[0].value, config) if preceding else ""

    context = CompletionContext(
        stub=stub,
        stub_start=stub_start,
        stub_end=stub_token.end,
        index=index,
        preceding_args=tuple(token.value for token in preceding),
        command_name=command_name,
        explicit=explicit,
        quote=quote,
        quote_position=quote_position,
        raw_stub=raw[stub_start - stub_token.start:],
    )
    logger.debug(
        "context.resolve",
        stub=stub,
        index=index,
        command=command_name,
        explicit=explicit,
    )
    return context
