"""Builtin command handling for the pcomp REPL.

The REPL does not execute programs. Builtins that change completion state
(aliases, variables, working directory) are applied; any other line is
shown as the argument list the tokenizer recovered.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List

from ..engine.context import normalize_command
from ..errors import CompletionError
from ..parser.tokenize import ParseResult
from .renderer import Renderer
from .session import ReplSession


@dataclass
class CommandOutcome:
    exit_repl: bool = False


class CommandExecutor:
    """Dispatch builtins for a submitted line."""

    def __init__(self, repl_session: ReplSession, renderer: Renderer) -> None:
        self._repl_session = repl_session
        self._renderer = renderer
        self._handlers: Dict[str, Callable[[List[str]], CommandOutcome]] = {
            "alias": self._cmd_alias,
            "cd": self._cmd_cd,
            "echo": self._cmd_echo,
            "exit": self._cmd_exit,
            "export": self._cmd_export,
            "pwd": self._cmd_pwd,
            "unalias": self._cmd_unalias,
            "which": self._cmd_which,
        }

    # Public API ------------------------------------------------------------------
    def execute(self, line: str, expanded: FrozenSet[str] = frozenset()) -> CommandOutcome:
        completer = self._repl_session.completer
        try:
            result = completer.tokenizer.parse(line, strict=True)
        except CompletionError as exc:
            self._renderer.error(str(exc))
            self._repl_session.set_status("Parse error")
            return CommandOutcome()

        args = [token.value for token in result.tokens if token.end > token.start]
        if not args:
            return CommandOutcome()

        name = normalize_command(args[0], completer.config)
        definition = self._repl_session.registry.lookup(name)
        if definition is not None and definition.expansion is not None and name not in expanded:
            self._renderer.info(f"{name} -> {definition.expansion}")
            return self.execute(
                " ".join([definition.expansion, *line_tail(result)]), expanded | {name}
            )

        handler = self._handlers.get(name)
        if handler is not None:
            return handler(args[1:])

        self._renderer.render_tokens(result)
        self._repl_session.set_status(f"Parsed {len(args)} arguments")
        return CommandOutcome()

    # Builtins --------------------------------------------------------------------
    def _cmd_alias(self, args: List[str]) -> CommandOutcome:
        registry = self._repl_session.registry
        if not args:
            for definition in registry.aliases():
                self._renderer.info(f"alias {definition.name}={definition.expansion}")
            return CommandOutcome()
        for arg in args:
            name, sep, expansion = arg.partition("=")
            if not sep or not name:
                self._renderer.error(f"Usage: alias name=expansion (got {arg!r})")
                continue
            registry.define_alias(name, expansion)
            self._repl_session.set_status(f"Defined alias {name}")
        return CommandOutcome()

    def _cmd_unalias(self, args: List[str]) -> CommandOutcome:
        for name in args:
            if not self._repl_session.registry.remove(name):
                self._renderer.warn(f"No such alias: {name}")
        return CommandOutcome()

    def _cmd_cd(self, args: List[str]) -> CommandOutcome:
        target = args[0] if args else "~"
        try:
            path = self._repl_session.completer.fs.chdir(target)
        except CompletionError as exc:
            self._renderer.error(str(exc))
            return CommandOutcome()
        self._repl_session.set_status(f"cwd: {path}")
        return CommandOutcome()

    def _cmd_pwd(self, args: List[str]) -> CommandOutcome:
        self._renderer.console.print(self._repl_session.cwd)
        return CommandOutcome()

    def _cmd_echo(self, args: List[str]) -> CommandOutcome:
        self._renderer.console.print(" ".join(args), markup=False, highlight=False)
        return CommandOutcome()

    def _cmd_export(self, args: List[str]) -> CommandOutcome:
        for arg in args:
            name, sep, value = arg.partition("=")
            if not sep or not name:
                self._renderer.error(f"Usage: export NAME=value (got {arg!r})")
                continue
            self._repl_session.variables[name] = value
        return CommandOutcome()

    def _cmd_which(self, args: List[str]) -> CommandOutcome:
        registry = self._repl_session.registry
        for name in args:
            definition = registry.lookup(name)
            if definition is not None:
                self._renderer.console.print(f"{name}: {definition.kind.value}")
                continue
            found = shutil.which(name, path=_search_path(self._repl_session))
            if found:
                self._renderer.console.print(found)
            else:
                self._renderer.warn(f"{name} not found")
        return CommandOutcome()

    def _cmd_exit(self, args: List[str]) -> CommandOutcome:
        return CommandOutcome(exit_repl=True)


def line_tail(result: ParseResult) -> List[str]:
    """Raw text of every argument after the command."""
    return [token.raw_text for token in result.tokens[1:] if token.end > token.start]


def _search_path(repl_session: ReplSession) -> str:
    return os.pathsep.join(repl_session.completer.config.search_dirs())
