"""Registry of named commands and callable symbols.

The host populates the registry at startup with aliases, builtins and the
callables that the expression completer and ``$( )`` evaluation may use.
Completion only ever performs lookups on it.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel


class CommandKind(str, Enum):
    """Kinds of named commands."""
    ALIAS = "alias"
    BUILTIN = "builtin"


class CommandDefinition(BaseModel):
    """A named command known to the shell."""
    name: str
    kind: CommandKind
    expansion: Optional[str] = None
    doc: Optional[str] = None


class CommandRegistry:
    """Registry for aliases, builtins and callable symbols."""

    def __init__(self):
        self._commands: Dict[str, CommandDefinition] = {}
        self._callables: Dict[str, Callable[..., Any]] = {}

    def define_alias(self, name: str, expansion: str, doc: Optional[str] = None) -> CommandDefinition:
        """Register an alias."""
        definition = CommandDefinition(name=name, kind=CommandKind.ALIAS, expansion=expansion, doc=doc)
        self._commands[name] = definition
        return definition

    def define_builtin(self, name: str, doc: Optional[str] = None) -> CommandDefinition:
        """Register a builtin command."""
        definition = CommandDefinition(name=name, kind=CommandKind.BUILTIN, doc=doc)
        self._commands[name] = definition
        return definition

    def register_callable(self, name: str, func: Callable[..., Any]) -> None:
        """Register a callable symbol."""
        self._callables[name] = func

    def remove(self, name: str) -> bool:
        """Remove a named command; return True when it existed."""
        return self._commands.pop(name, None) is not None

    def lookup(self, name: str) -> Optional[CommandDefinition]:
        """Get a named command by name."""
        return self._commands.get(name)

    def names(self) -> List[str]:
        """Names of all aliases and builtins in registration order."""
        return list(self._commands)

    def aliases(self) -> List[CommandDefinition]:
        return [item for item in self._commands.values() if item.kind is CommandKind.ALIAS]

    def callable_names(self) -> List[str]:
        """Names in the callable symbol namespace."""
        return list(self._callables)

    def functions(self) -> Dict[str, Callable[..., Any]]:
        return dict(self._callables)


BUILTINS = {
    "alias": "Define an alias",
    "cd": "Change the working directory",
    "echo": "Print arguments",
    "exit": "Leave the shell",
    "export": "Set an environment variable",
    "pwd": "Print the working directory",
    "unalias": "Remove an alias",
    "which": "Locate a command",
}


def default_registry() -> CommandRegistry:
    """Registry preloaded with the shell builtins and a few arithmetic callables."""
    registry = CommandRegistry()
    for name, doc in BUILTINS.items():
        registry.define_builtin(name, doc=doc)
    registry.register_callable("abs", abs)
    registry.register_callable("max", max)
    registry.register_callable("min", min)
    registry.register_callable("round", round)
    registry.register_callable("upcase", lambda text: str(text).upper())
    registry.register_callable("downcase", lambda text: str(text).lower())
    return registry
