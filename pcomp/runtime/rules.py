"""Static per-command argument rules.

A rule says which file names are sensible arguments for a command, e.g.
``gcc`` takes C and C++ sources. Rules are loaded from YAML and looked up
by normalized command name; the first matching rule wins.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from ..errors import ConfigError

DEFAULT_RULES_PATH = Path(__file__).parent / "rules.yaml"


class ProviderRule(BaseModel):
    """Argument filter for one command (or a family of commands)."""
    command: str
    pattern: str
    regex: bool = False

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {value!r}: {exc}") from exc
        return value

    def matches_command(self, name: str) -> bool:
        if self.regex:
            return re.fullmatch(self.command, name) is not None
        return self.command == name

    def accepts(self, filename: str) -> bool:
        return re.search(self.pattern, filename) is not None


class RuleTable:
    """Ordered, read-only-at-runtime collection of argument rules."""

    def __init__(self, rules: Optional[Iterable[ProviderRule]] = None):
        self._rules: List[ProviderRule] = list(rules or [])

    def add(self, command: str, pattern: str, regex: bool = False) -> ProviderRule:
        rule = ProviderRule(command=command, pattern=pattern, regex=regex)
        self._rules.append(rule)
        return rule

    def lookup(self, name: str) -> Optional[ProviderRule]:
        """First rule whose command matches ``name``."""
        for rule in self._rules:
            if rule.matches_command(name):
                return rule
        return None

    def rules(self) -> List[ProviderRule]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __add__(self, other: "RuleTable") -> "RuleTable":
        return RuleTable(self._rules + other.rules())


def load_rules(path: Union[str, Path]) -> RuleTable:
    """Load a rule table from a YAML file."""
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigError(f"Rules file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid rules file {path}: {exc}") from exc

    try:
        return RuleTable(ProviderRule(**entry) for entry in data.get("rules", []))
    except (ValidationError, TypeError) as exc:
        raise ConfigError(f"Invalid rule in {path}: {exc}") from exc


def default_rules(extra: Optional[Union[str, Path]] = None) -> RuleTable:
    """Bundled rules, preceded by the rules of ``extra`` when given."""
    table = load_rules(DEFAULT_RULES_PATH)
    if extra:
        table = load_rules(extra) + table
    return table
