"""Runtime collaborators: configuration, registry, rule table and filesystem."""

from .config import CompletionConfig, PcompConfig, ReplConfig, create_default_config, ensure_config_dir, load_config
from .fs import FileSystem
from .log import configure_logging
from .registry import CommandDefinition, CommandKind, CommandRegistry, default_registry
from .rules import ProviderRule, RuleTable, default_rules, load_rules

__all__ = [
    "CompletionConfig",
    "PcompConfig",
    "ReplConfig",
    "load_config",
    "ensure_config_dir",
    "create_default_config",
    "FileSystem",
    "configure_logging",
    "CommandDefinition",
    "CommandKind",
    "CommandRegistry",
    "default_registry",
    "ProviderRule",
    "RuleTable",
    "default_rules",
    "load_rules",
]
