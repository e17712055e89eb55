"""Exception types raised while parsing and completing a command line."""

from typing import Optional


class CompletionError(Exception):
    """Base class for recoverable completion failures."""


class IncompleteDelimiter(CompletionError):
    """A quote, brace or paren opened inside the parsed range was never closed."""

    kind = "delimiter"

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Unterminated {self.kind} {char!r} at offset {position}")


class IncompleteQuote(IncompleteDelimiter):
    kind = "quote"


class IncompleteBrace(IncompleteDelimiter):
    """Raised for `${` and `$<` substitutions; re-parse from just inside them."""

    kind = "brace"


class IncompleteParen(IncompleteDelimiter):
    """Raised for `$(`; the inner text belongs to the expression completer."""

    kind = "paren"


class EvaluationFailure(CompletionError):
    """An embedded sub-expression could not be evaluated."""

    def __init__(self, message: str, source: str = "", position: Optional[int] = None):
        self.message = message
        self.source = source
        self.position = position
        where = f" at offset {position}" if position is not None else ""
        super().__init__(f"Evaluation failed{where}: {message}")


class Inaccessible(CompletionError):
    """A directory could not be listed."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot list {path}: {reason}" if reason else f"Cannot list {path}")


class ConfigError(CompletionError):
    """Invalid configuration or rule file."""


class TokenPositionMismatch(AssertionError):
    """Tokenizer produced a different number of arguments and position markers.

    This is a defect in the tokenizer, never a user error, so it derives from
    AssertionError and is never turned into a completion fallback.
    """

    def __init__(self, values: int, positions: int):
        self.values = values
        self.positions = positions
        super().__init__(
            f"Tokenizer desynchronised: {values} arguments but {positions} position markers"
        )
