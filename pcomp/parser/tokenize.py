"""Command-line tokenizer.

Splits a line into argument tokens that remember their source span, so the
completer can tell which argument the cursor sits in and what text to
replace. Quoting, backslash escapes and ``$`` sub-expressions are handled
here; sub-expressions are evaluated on the spot.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import structlog

from ..errors import (
    IncompleteBrace,
    IncompleteParen,
    IncompleteQuote,
    TokenPositionMismatch,
)
from .evaluate import Evaluator

logger = structlog.get_logger(__name__)

WHITESPACE = " \t\n"
OPERATORS = ("&&", "||", "|", "&", ";")
DOUBLE_QUOTE_ESCAPES = '"\\$'

_VARIABLE_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_CLOSERS = {"(": ")", "{": "}", "[": "]", "<": ">"}


class TokenKind(str, Enum):
    """What a token is."""
    WORD = "word"
    OPERATOR = "operator"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class Token:
    """One argument (or operator) and the span of line text it came from."""

    raw_text: str
    value: str
    start: int
    end: int
    kind: TokenKind = TokenKind.WORD

    @property
    def is_operator(self) -> bool:
        return self.kind is TokenKind.OPERATOR


@dataclass(frozen=True)
class OpenDelimiter:
    """A quote left open at the end of the parsed range."""

    char: str
    position: int
    kind: str = "quote"


@dataclass
class ParseResult:
    tokens: List[Token]
    source: str
    start: int
    end: int
    incomplete: Optional[OpenDelimiter] = None
    discarded: List[Token] = field(default_factory=list)

    @property
    def values(self) -> List[str]:
        return [token.value for token in self.tokens]

    def reconstruct(self) -> str:
        """Rejoin the parsed range from token raw text and the original separators."""
        pieces: List[str] = []
        offset = self.start
        for token in self.discarded + self.tokens:
            pieces.append(self.source[offset:token.start])
            pieces.append(token.raw_text)
            offset = token.end
        pieces.append(self.source[offset:self.end])
        return "".join(pieces)


class Tokenizer:
    """Turn raw line text into tokens with source positions."""

    def __init__(self, evaluator: Optional[Evaluator] = None):
        self.evaluator = evaluator or Evaluator()

    def parse(
        self,
        text: str,
        start: int = 0,
        end: Optional[int] = None,
        strict: bool = False,
    ) -> ParseResult:
        """Tokenize ``text[start:end]``.

        Offsets in the result are offsets into ``text``. An unterminated
        quote raises IncompleteQuote when ``strict`` is set, otherwise it
        yields an INCOMPLETE token. Unterminated ``$(``, ``${`` and ``$<``
        always raise IncompleteParen / IncompleteBrace.
        """
        end = len(text) if end is None else min(end, len(text))

        markers: List[int] = []
        values: List[str] = []
        spans: List[Tuple[int, TokenKind]] = []
        incomplete: Optional[OpenDelimiter] = None

        pos = start
        while True:
            while pos < end and text[pos] in WHITESPACE:
                pos += 1
            if pos >= end:
                break

            markers.append(pos)
            operator = self._match_operator(text, pos, end)
            if operator:
                values.append(operator)
                pos += len(operator)
                spans.append((pos, TokenKind.OPERATOR))
                continue

            value, pos, incomplete = self._read_word(text, pos, end, strict)
            values.append(value)
            spans.append((pos, TokenKind.INCOMPLETE if incomplete else TokenKind.WORD))
            if incomplete:
                break

        # Completion after a space targets the next argument, not the last one.
        last_end = spans[-1][0] if spans else start
        if end > start and last_end < end and text[end - 1] in WHITESPACE:
            markers.append(end)
            values.append("")
            spans.append((end, TokenKind.WORD))

        if not len(values) == len(markers) == len(spans):
            raise TokenPositionMismatch(len(values), len(markers))

        tokens = [
            Token(text[mark:stop], value, mark, stop, kind)
            for mark, value, (stop, kind) in zip(markers, values, spans)
        ]

        discarded: List[Token] = []
        for index in range(len(tokens) - 1, -1, -1):
            if tokens[index].is_operator:
                discarded, tokens = tokens[:index + 1], tokens[index + 1:]
                logger.debug("tokenize.segment", discarded=len(discarded), kept=len(tokens))
                break

        return ParseResult(
            tokens=tokens,
            source=text,
            start=start,
            end=end,
            incomplete=incomplete,
            discarded=discarded,
        )

    # Scanning helpers ----------------------------------------------------------------
    @staticmethod
    def _match_operator(text: str, pos: int, end: int) -> Optional[str]:
        for operator in OPERATORS:
            if text.startswith(operator, pos, end):
                return operator
        return None

    def _read_word(
        self, text: str, pos: int, end: int, strict: bool
    ) -> Tuple[str, int, Optional[OpenDelimiter]]:
        pieces: List[str] = []
        while pos < end:
            char = text[pos]
            if char in WHITESPACE or self._match_operator(text, pos, end):
                break
            if char == "\\":
                if pos + 1 < end:
                    pieces.append(text[pos + 1])
                    pos += 2
                else:
                    pieces.append(char)
                    pos += 1
            elif char == "'":
                close = text.find("'", pos + 1, end)
                if close < 0:
                    if strict:
                        raise IncompleteQuote(char, pos)
                    pieces.append(text[pos + 1:end])
                    return "".join(pieces), end, OpenDelimiter(char, pos)
                pieces.append(text[pos + 1:close])
                pos = close + 1
            elif char == '"':
                quoted, stop, closed = self._read_double_quoted(text, pos + 1, end)
                pieces.append(quoted)
                if not closed:
                    if strict:
                        raise IncompleteQuote(char, pos)
                    return "".join(pieces), end, OpenDelimiter(char, pos)
                pos = stop
            elif char == "$":
                value, pos = self._read_dollar(text, pos, end)
                pieces.append(value)
            else:
                pieces.append(char)
                pos += 1
        return "".join(pieces), pos, None

    def _read_double_quoted(self, text: str, pos: int, end: int) -> Tuple[str, int, bool]:
        pieces: List[str] = []
        while pos < end:
            char = text[pos]
            if char == '"':
                return "".join(pieces), pos + 1, True
            if char == "\\" and pos + 1 < end and text[pos + 1] in DOUBLE_QUOTE_ESCAPES:
                pieces.append(text[pos + 1])
                pos += 2
            elif char == "$":
                value, pos = self._read_dollar(text, pos, end)
                pieces.append(value)
            else:
                pieces.append(char)
                pos += 1
        return "".join(pieces), end, False

    def _read_dollar(self, text: str, pos: int, end: int) -> Tuple[str, int]:
        opener = text[pos + 1] if pos + 1 < end else ""
        if opener == "(":
            close = find_closing(text, pos + 1, end)
            if close < 0:
                raise IncompleteParen(opener, pos + 1)
            return self.evaluator.expression(text[pos + 2:close], pos), close + 1
        if opener in ("{", "<"):
            close = find_closing(text, pos + 1, end)
            if close < 0:
                raise IncompleteBrace(opener, pos + 1)
            return self.evaluator.command(text[pos + 2:close], opener, pos), close + 1
        match = _VARIABLE_RE.match(text, pos + 1, end)
        if match:
            return self.evaluator.variable(match.group()), match.end()
        return "$", pos + 1


def find_closing(text: str, open_pos: int, end: int) -> int:
    """Return the offset of the delimiter closing ``text[open_pos]``, or -1.

    Nested (), {} and [] are balanced and quoted text is skipped.
    """
    stack = [_CLOSERS[text[open_pos]]]
    quote: Optional[str] = None
    pos = open_pos + 1
    while pos < end:
        char = text[pos]
        if quote:
            if char == "\\" and quote == '"':
                pos += 2
                continue
            if char == quote:
                quote = None
        elif char == "\\":
            pos += 2
            continue
        elif char in "'\"":
            quote = char
        elif char == stack[-1]:
            stack.pop()
            if not stack:
                return pos
        elif char in "({[":
            stack.append(_CLOSERS[char])
        pos += 1
    return -1


def tokenize(text: str, strict: bool = True) -> List[str]:
    """Return the argument values of the last pipeline segment of a line."""
    return Tokenizer().parse(text, strict=strict).values
