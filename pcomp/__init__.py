"""pcomp - context-sensitive completion for shell-like command lines.

Tokenizes a partially typed line, works out which argument the cursor is
in, gathers candidates from executables, named commands, per-command
argument rules and callable symbols, and cycles or lists them on each
press of the completion key.
"""

__version__ = "0.1.0"

from . import engine, parser, runtime
from .cli import main

__all__ = ["engine", "parser", "runtime", "main"]
