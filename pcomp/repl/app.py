"""prompt_toolkit front end: a shell-like prompt driven by the completion engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML, FormattedText
from prompt_toolkit.formatted_text.html import html_escape
from prompt_toolkit.history import FileHistory
from prompt_toolkit.lexers import PygmentsLexer
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style
from rich.console import Console

from ..errors import ConfigError
from ..runtime import configure_logging
from .commands import CommandExecutor
from .completer import PcompCompleter
from .keybinds import create_key_bindings
from .lexer import CommandLineLexer
from .renderer import Renderer
from .session import ReplSession

STYLE = Style.from_dict(
    {
        "prompt": "ansigreen bold",
        "bottom-toolbar": "ansibrightblack",
    }
)

HINTS = "Tab complete, Shift+Tab back, Ctrl+Space menu"


def start_repl(config_path: Optional[Path] = None) -> None:
    """Run the prompt loop until ``exit`` or end of input."""
    console = Console()
    try:
        repl_session = ReplSession.create(config_path)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    configure_logging(repl_session.config.verbose)
    renderer = Renderer(console, columns=repl_session.config.repl.list_columns)
    executor = CommandExecutor(repl_session, renderer)

    prompt = PromptSession(
        message=lambda: FormattedText([("class:prompt", repl_session.config.repl.prompt)]),
        completer=PcompCompleter(repl_session.completer),
        complete_while_typing=False,
        lexer=PygmentsLexer(CommandLineLexer),
        history=FileHistory(str(repl_session.history_file)),
        key_bindings=create_key_bindings(repl_session, renderer),
        bottom_toolbar=lambda: _toolbar(repl_session),
        style=STYLE,
    )

    renderer.banner()
    while True:
        repl_session.completion.reset()
        try:
            with patch_stdout():
                line = prompt.prompt()
        except KeyboardInterrupt:
            repl_session.set_status("interrupted")
            continue
        except EOFError:
            break

        if line.strip() and executor.execute(line).exit_repl:
            break

    renderer.info("Bye")


def _toolbar(repl_session: ReplSession) -> HTML:
    status = repl_session.status_message
    parts = [html_escape(repl_session.cwd)]
    if status:
        parts.append(f"<b>{html_escape(status)}</b>")
    parts.append(HINTS)
    return HTML("   ".join(parts))
