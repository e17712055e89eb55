"""From line text to a context and its merged candidate set."""

from __future__ import annotations

import re
from typing import Optional, Tuple

import structlog

from ..errors import IncompleteBrace, IncompleteParen
from ..parser.evaluate import Evaluator
from ..parser.tokenize import Tokenizer
from ..runtime.config import CompletionConfig
from ..runtime.fs import FileSystem
from ..runtime.registry import CommandRegistry, default_registry
from ..runtime.rules import RuleTable, default_rules
from .candidates import CandidateSet, merge
from .context import CompletionContext, resolve
from .providers import (
    ArgumentRuleProvider,
    ExecutableProvider,
    ExpressionProvider,
    NamedCommandProvider,
    SymbolProvider,
)

logger = structlog.get_logger(__name__)

_IDENTIFIER_END_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*$")


class Completer:
    """Wire the tokenizer, resolver and providers together."""

    def __init__(
        self,
        config: Optional[CompletionConfig] = None,
        registry: Optional[CommandRegistry] = None,
        rules: Optional[RuleTable] = None,
        fs: Optional[FileSystem] = None,
        evaluator: Optional[Evaluator] = None,
    ):
        self.config = config or CompletionConfig()
        self.registry = registry if registry is not None else default_registry()
        self.rules = rules if rules is not None else default_rules()
        self.fs = fs or FileSystem(executable_suffixes=self.config.executable_suffixes)
        self.evaluator = evaluator or Evaluator(functions=self.registry.functions())
        self.tokenizer = Tokenizer(self.evaluator)

        self.commands = NamedCommandProvider(self.config, self.registry)
        self.executables = ExecutableProvider(self.config, self.fs)
        self.arguments = ArgumentRuleProvider(self.config, self.rules, self.fs)
        self.symbols = SymbolProvider(self.config, self.registry)
        self.expressions = ExpressionProvider(self.config, self.registry, self.evaluator.variables)

    def complete_line(self, line: str, cursor: Optional[int] = None) -> Tuple[CompletionContext, CandidateSet]:
        """Resolve the stub at ``cursor`` and collect its candidates.

        An open ``${``/``$<`` narrows parsing to the text inside it; an open
        ``$(`` hands over to expression completion. Evaluation failures
        propagate.
        """
        cursor = len(line) if cursor is None else cursor
        start = 0
        while True:
            try:
                result = self.tokenizer.parse(line, start, cursor)
                break
            except IncompleteBrace as exc:
                start = exc.position + 1
                logger.debug("tokenize.reparse", char=exc.char, start=start)
            except IncompleteParen as exc:
                return self._complete_expression(line, exc.position + 1, cursor)

        context = resolve(result.tokens, cursor, self.config, result.incomplete)
        return context, self.candidates(context)

    def candidates(self, context: CompletionContext) -> CandidateSet:
        if not context.is_command_position:
            return self.arguments.generate(context)

        found = merge(*(
            provider.generate(context)
            for provider in (self.commands, self.executables)
            if provider.applies(context)
        ))
        if self.symbols.wanted(bool(found)):
            found.update(self.symbols.generate(context))
        return found

    def _complete_expression(self, line: str, start: int, cursor: int) -> Tuple[CompletionContext, CandidateSet]:
        match = _IDENTIFIER_END_RE.search(line, start, cursor)
        stub = match.group() if match else ""
        context = CompletionContext(
            stub=stub,
            stub_start=cursor - len(stub),
            stub_end=cursor,
            index=0,
            raw_stub=stub,
            in_expression=True,
        )
        logger.debug("context.expression", stub=stub, start=start)
        return context, self.expressions.generate(context)
