"""CLI commands for pcomp using Typer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .engine import Completer, CompletionSession, Insertion
from .errors import CompletionError
from .parser import Tokenizer
from .repl import start_repl
from .repl.renderer import Renderer
from .runtime import configure_logging, create_default_config, default_rules, ensure_config_dir, load_config

app = typer.Typer(help="pcomp - command-line completion engine")
console = Console()

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file to use instead of the defaults")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Default callback to launch the REPL when no subcommand is invoked."""
    if ctx.invoked_subcommand is not None:
        return

    start_repl(config)
    raise typer.Exit()


@app.command()
def complete(
    line: str = typer.Argument(..., help="Command line to complete"),
    cursor: Optional[int] = typer.Option(None, "--cursor", help="Cursor offset (default: end of line)"),
    presses: int = typer.Option(1, "--press", "-p", min=1, help="Number of completion key presses"),
    reverse: bool = typer.Option(False, "--reverse", "-r", help="Use the backward completion key"),
    cwd: Optional[Path] = typer.Option(None, "--cwd", help="Working directory for file candidates"),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Press the completion key on LINE and show what happens."""
    try:
        settings = load_config(config)
        configure_logging(verbose or settings.verbose)
        completer = Completer(config=settings.completion, rules=default_rules(settings.rules_file))
        if cwd is not None:
            completer.fs.chdir(str(cwd))
        session = CompletionSession(completer)
        renderer = Renderer(console, columns=settings.repl.list_columns)

        position = len(line) if cursor is None else cursor
        for _ in range(presses):
            action = session.complete(line, position, reverse=reverse)
            renderer.render_action(action, line)
            if not isinstance(action, Insertion):
                break
            line, position = action.apply(line)

    except CompletionError as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def tokens(
    line: str = typer.Argument(..., help="Command line to tokenize"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unterminated quotes"),
) -> None:
    """Show the tokens recovered from LINE."""
    try:
        result = Tokenizer().parse(line, strict=strict)
    except CompletionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    Renderer(console).render_tokens(result)


@app.command()
def rules(
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """List the argument rules in lookup order."""
    try:
        settings = load_config(config)
        table = default_rules(settings.rules_file)
    except CompletionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    Renderer(console).render_rules(table.rules())


@app.command()
def init() -> None:
    """Initialize pcomp configuration."""
    try:
        ensure_config_dir()
        create_default_config()
        console.print("[green]Success:[/green] pcomp configuration initialized at ~/.pcomp/config.toml")
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show pcomp version information."""
    try:
        from importlib.metadata import version as _v

        ver = _v("pcomp")
    except Exception:
        ver = "unknown"
    console.print(f"pcomp v{ver}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
