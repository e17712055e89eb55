"""Candidate providers."""

from .arguments import ArgumentRuleProvider
from .base import Provider, scan_directory, split_stub
from .commands import NamedCommandProvider
from .executables import ExecutableProvider
from .symbols import ExpressionProvider, SymbolProvider

__all__ = [
    "ArgumentRuleProvider",
    "ExecutableProvider",
    "ExpressionProvider",
    "NamedCommandProvider",
    "Provider",
    "SymbolProvider",
    "scan_directory",
    "split_stub",
]
