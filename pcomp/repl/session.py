"""REPL session state management."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..engine.completer import Completer
from ..engine.session import CompletionSession
from ..parser.evaluate import Evaluator
from ..runtime import PcompConfig, default_registry, default_rules, ensure_config_dir, load_config
from ..runtime.registry import CommandRegistry


@dataclass
class ReplSession:
    """Container for interactive REPL state."""

    config: PcompConfig
    completer: Completer
    completion: CompletionSession
    history_file: Path
    status_message: str = ""

    @classmethod
    def create(cls, config_path: Optional[Path] = None) -> "ReplSession":
        """Factory that wires configuration, registry, rules and history paths."""
        ensure_config_dir()
        config = load_config(config_path)
        registry = default_registry()
        variables: Dict[str, str] = dict(os.environ)
        completer = Completer(
            config=config.completion,
            registry=registry,
            rules=default_rules(config.rules_file),
            evaluator=Evaluator(variables=variables, functions=registry.functions()),
        )

        history_file = Path(config.repl.history_file).expanduser()
        history_file.parent.mkdir(parents=True, exist_ok=True)

        return cls(
            config=config,
            completer=completer,
            completion=CompletionSession(completer),
            history_file=history_file,
        )

    @property
    def registry(self) -> CommandRegistry:
        return self.completer.registry

    @property
    def variables(self) -> Dict[str, str]:
        return self.completer.evaluator.variables

    @property
    def cwd(self) -> str:
        return self.completer.fs.cwd

    def set_status(self, message: str) -> None:
        self.status_message = message
