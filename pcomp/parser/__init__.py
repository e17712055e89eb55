"""Command-line tokenizer and sub-expression evaluator."""

from .evaluate import Evaluator, to_text
from .tokenize import OpenDelimiter, ParseResult, Token, TokenKind, Tokenizer, find_closing, tokenize

__all__ = [
    "Evaluator",
    "OpenDelimiter",
    "ParseResult",
    "Token",
    "TokenKind",
    "Tokenizer",
    "find_closing",
    "to_text",
    "tokenize",
]
