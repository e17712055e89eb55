"""Aliases and builtins from the command registry."""

from __future__ import annotations

from ...runtime.config import CompletionConfig
from ...runtime.registry import CommandRegistry
from ..candidates import CandidateKind, CandidateSet
from ..context import CompletionContext
from .base import Provider


class NamedCommandProvider(Provider):
    """Registry names matching the stub. Explicit mode (``*cmd``) bypasses it."""

    name = "commands"

    def __init__(self, config: CompletionConfig, registry: CommandRegistry):
        super().__init__(config)
        self.registry = registry

    def applies(self, context: CompletionContext) -> bool:
        return context.is_command_position and not context.explicit

    def generate(self, context: CompletionContext) -> CandidateSet:
        candidates = CandidateSet()
        for name in self.registry.names():
            if self.config.matches(name, context.stub):
                candidates.add(name, CandidateKind.COMMAND)
        return candidates
