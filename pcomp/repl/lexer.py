"""Pygments lexer for command lines typed into the REPL."""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import Keyword, Name, Operator, Punctuation, String, Text

from ..runtime.registry import BUILTINS


class CommandLineLexer(RegexLexer):
    """Highlight quoting, sub-expressions and pipeline operators."""

    name = "pcomp"
    aliases = ["pcomp"]
    filenames = []

    tokens = {
        "root": [
            (r"\s+", Text),
            (r"(&&|\|\||[|&;])(\s*)", bygroups(Operator, Text), "command"),
            (r"'[^']*'?", String.Single),
            (r'"(\\.|[^"\\])*"?', String.Double),
            (r"\$[A-Za-z_][A-Za-z0-9_]*", Name.Variable),
            (r"\$[({<]", Punctuation, "substitution"),
            (r"\\.", String.Escape),
            (r"[^\s'\"$\\|&;]+", Text),
            (r"\$", Text),
        ],
        "command": [
            (r"\s+", Text),
            (r"(" +"|".join(sorted(BUILTINS)) + r")(?=\s|$)", Keyword, "#pop"),
            (r"\*?[^\s'\"$\\|&;]+", Name.Function, "#pop"),
            (r"", Text, "#pop"),
        ],
        "substitution": [
            (r"[)}>]", Punctuation, "#pop"),
            (r"\$[({<]", Punctuation, "#push"),
            (r"'[^']*'?", String.Single),
            (r'"(\\.|[^"\\])*"?', String.Double),
            (r"[^)}>$'\"]+", Text),
            (r"\$", Text),
        ],
    }

    def get_tokens_unprocessed(self, text, stack=("root", "command")):
        """The first word of the line is a command, like the word after an operator."""
        return super().get_tokens_unprocessed(text, stack)
