"""Utilities for rendering REPL and CLI output with rich."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..engine.session import Action, Insertion, NoOp, ShowList
from ..parser.tokenize import ParseResult
from ..runtime.rules import ProviderRule


class Renderer:
    """Render candidate lists, tokens and diagnostics."""

    def __init__(self, console: Optional[Console] = None, columns: Optional[int] = None):
        self.console = console or Console()
        self.columns = columns

    # General messages -----------------------------------------------------------------
    def banner(self) -> None:
        self.console.print(
            Panel("TAB completes, Shift+TAB cycles back, Ctrl+D exits", title="pcomp")
        )

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]{message}[/cyan]")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(Panel(message, title="Error", border_style="red"))

    # Completion -----------------------------------------------------------------------
    def render_candidates(self, candidates: Sequence[str]) -> None:
        """The list display used when there are too many candidates to cycle."""
        items = [Text(name) for name in candidates]
        self.console.print(Columns(items, width=self.columns, padding=(0, 2)))

    def render_action(self, action: Action, line: str) -> None:
        if isinstance(action, Insertion):
            new_line, cursor = action.apply(line)
            self.console.print(f"[green]{type(action).__name__}[/green] {action.text!r}")
            self.console.print(Text(new_line), Text(f"  (cursor {cursor})", style="dim"))
        elif isinstance(action, ShowList):
            self.console.print(f"[green]ShowList[/green] {len(action.candidates)} candidates")
            self.render_candidates(action.candidates)
        elif isinstance(action, NoOp):
            reason = f" ({action.reason})" if action.reason else ""
            self.console.print(f"[yellow]NoOp[/yellow] insert {action.fallback!r}{reason}")

    # Tables ---------------------------------------------------------------------------
    def render_tokens(self, result: ParseResult) -> None:
        table = Table(title="Tokens", show_lines=False)
        table.add_column("#", style="bold")
        table.add_column("Raw")
        table.add_column("Value", style="cyan")
        table.add_column("Span")
        table.add_column("Kind")
        for idx, token in enumerate(result.tokens):
            table.add_row(
                str(idx),
                repr(token.raw_text),
                repr(token.value),
                f"{token.start}-{token.end}",
                token.kind.value,
            )
        self.console.print(table)
        if result.incomplete:
            self.warn(
                f"Open {result.incomplete.kind} {result.incomplete.char!r} "
                f"at offset {result.incomplete.position}"
            )

    def render_rules(self, rules: Iterable[ProviderRule]) -> None:
        table = Table(title="Argument Rules", show_lines=False)
        table.add_column("Command", style="bold cyan")
        table.add_column("Match")
        table.add_column("Pattern", style="white")
        for rule in rules:
            table.add_row(rule.command, "regex" if rule.regex else "exact", rule.pattern)
        self.console.print(table)
