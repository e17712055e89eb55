"""Completion engine: context resolution, candidate providers and the session."""

from .candidates import CandidateKind, CandidateSet, common_prefix, dedup, merge
from .completer import Completer
from .context import CompletionContext, normalize_command, resolve
from .session import (
    Action,
    CompletionSession,
    InsertCommonPrefix,
    InsertCycled,
    Insertion,
    InsertUnique,
    Mode,
    NoOp,
    ShowList,
    escape,
    render,
)

__all__ = [
    "Action",
    "CandidateKind",
    "CandidateSet",
    "Completer",
    "CompletionContext",
    "CompletionSession",
    "InsertCommonPrefix",
    "InsertCycled",
    "InsertUnique",
    "Insertion",
    "Mode",
    "NoOp",
    "ShowList",
    "common_prefix",
    "dedup",
    "escape",
    "merge",
    "normalize_command",
    "render",
    "resolve",
]
