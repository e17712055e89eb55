"""File arguments filtered by the per-command rule table."""

from __future__ import annotations

from typing import Optional

import structlog

from ...runtime.config import CompletionConfig
from ...runtime.fs import FileSystem
from ...runtime.rules import RuleTable
from ..candidates import CandidateKind, CandidateSet
from ..context import CompletionContext
from .base import Provider, scan_directory, split_stub

logger = structlog.get_logger(__name__)


class ArgumentRuleProvider(Provider):
    """Entries under the stub's directory.

    When the command has a rule, files must match its pattern; directories
    are always offered so the user can descend into them. Without a rule
    every entry is offered.
    """

    name = "arguments"

    def __init__(self, config: CompletionConfig, rules: RuleTable, fs: Optional[FileSystem] = None):
        super().__init__(config)
        self.rules = rules
        self.fs = fs or FileSystem(executable_suffixes=config.executable_suffixes)

    def applies(self, context: CompletionContext) -> bool:
        return not context.is_command_position

    def generate(self, context: CompletionContext) -> CandidateSet:
        rule = self.rules.lookup(context.command_name) if context.command_name else None
        directory, prefix = split_stub(context.stub)

        candidates = CandidateSet()
        for name, _path, is_dir in scan_directory(self.fs, directory, prefix, self.config):
            if is_dir:
                candidates.add(directory + name, CandidateKind.DIRECTORY)
            elif rule is None or rule.accepts(name):
                candidates.add(directory + name, CandidateKind.FILE)

        logger.debug(
            "provider.arguments",
            command=context.command_name,
            rule=rule.pattern if rule else None,
            count=len(candidates),
        )
        return candidates
