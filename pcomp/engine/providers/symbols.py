"""Callable symbols: the command-position fallback and ``$( )`` expressions."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ...runtime.config import CompletionConfig
from ...runtime.registry import CommandRegistry
from ..candidates import CandidateKind, CandidateSet
from ..context import CompletionContext
from .base import Provider


class SymbolProvider(Provider):
    """Callable names from the registry's symbol namespace."""

    name = "symbols"

    def __init__(self, config: CompletionConfig, registry: CommandRegistry):
        super().__init__(config)
        self.registry = registry

    def applies(self, context: CompletionContext) -> bool:
        return context.is_command_position

    def wanted(self, found_other: bool) -> bool:
        """Whether symbols join the command-position result."""
        if self.config.show_symbolic_completions:
            return True
        return self.config.show_symbolic_alternatives and not found_other

    def generate(self, context: CompletionContext) -> CandidateSet:
        candidates = CandidateSet()
        for name in self.registry.callable_names():
            if self.config.matches(name, context.stub):
                candidates.add(name, CandidateKind.SYMBOL)
        return candidates


class ExpressionProvider(SymbolProvider):
    """Identifiers inside an open ``$(`` expression: callables, then variables."""

    name = "expression"

    def __init__(
        self,
        config: CompletionConfig,
        registry: CommandRegistry,
        variables: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(config, registry)
        self.variables = variables or {}

    def applies(self, context: CompletionContext) -> bool:
        return True

    def generate(self, context: CompletionContext) -> CandidateSet:
        candidates = super().generate(context)
        for name in sorted(self.variables):
            if self.config.matches(name, context.stub):
                candidates.add(name, CandidateKind.SYMBOL)
        return candidates
