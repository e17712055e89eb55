"""Interactive pcomp REPL package."""

from typing import Any

__all__ = ["start_repl"]


def start_repl(*args: Any, **kwargs: Any) -> Any:
    """Import the prompt loop on first use."""
    from .app import start_repl as _start_repl

    return _start_repl(*args, **kwargs)
