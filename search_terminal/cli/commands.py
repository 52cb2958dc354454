"""CLI commands for search-terminal."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from loguru import logger
from rich.console import Console

from search_terminal import __version__

if TYPE_CHECKING:
    from search_terminal.config.schema import ApplicationSettings

app = typer.Typer(
    name="search_terminal",
    help="search-terminal - terminal front-end for a file-search backend",
    no_args_is_help=True,
)
console = Console()

_THEMES = ("system", "dark", "light")


def version_callback(value: bool) -> None:
    if value:
        console.print(f"search-terminal v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, log_file: Path | None) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")
    if log_file is not None:
        logger.add(str(log_file), level="DEBUG", rotation="5 MB", retention=3)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write debug logs to this file."),
) -> None:
    """search-terminal entrypoint."""
    del version
    _configure_logging(verbose, log_file)


@app.command()
def repl(
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use."),
) -> None:
    """Start the interactive console terminal."""
    from search_terminal.cli.console import run_repl
    from search_terminal.config.loader import load_settings
    from search_terminal.session.state import SessionState
    from search_terminal.terminal.interpreter import CONSOLE_SETTINGS_HINT, CommandInterpreter

    settings = load_settings(settings_file)
    state = SessionState(settings=settings)
    interpreter = CommandInterpreter(
        state,
        settings_hint=CONSOLE_SETTINGS_HINT,
        settings_path=settings_file,
    )
    try:
        asyncio.run(run_repl(interpreter, console))
    except KeyboardInterrupt:
        pass


@app.command()
def gui(
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use."),
) -> None:
    """Start the desktop terminal window."""
    from search_terminal.config.loader import load_settings
    from search_terminal.gui import theme as gui_theme
    from search_terminal.gui.channel import GUIChannel
    from search_terminal.session.state import SessionState
    from search_terminal.terminal.interpreter import GUI_SETTINGS_HINT, CommandInterpreter

    settings = load_settings(settings_file)
    if settings.gui.font_size > 0:
        gui_theme.FONT_SIZE = settings.gui.font_size

    state = SessionState(settings=settings)
    interpreter = CommandInterpreter(
        state,
        settings_hint=GUI_SETTINGS_HINT,
        settings_path=settings_file,
    )
    channel = GUIChannel(interpreter)

    console.print("Starting search-terminal GUI")
    console.print(f"Backend: [cyan]{settings.backend.base_url}[/cyan]")
    console.print(f"Root: [cyan]{settings.root_path or '(not set)'}[/cyan]")

    async def run_stack() -> None:
        try:
            await channel.start()
        finally:
            await channel.stop()

    try:
        asyncio.run(run_stack())
    except KeyboardInterrupt:
        pass


@app.command()
def onboard(
    force: bool = typer.Option(False, "--force", help="Overwrite existing settings without prompt."),
    non_interactive: bool = typer.Option(
        False,
        "--non-interactive",
        help="Do not ask interactive questions during setup.",
    ),
) -> None:
    """Create the settings file."""
    from search_terminal.config.loader import get_settings_path, save_settings
    from search_terminal.config.schema import ApplicationSettings

    settings_path = get_settings_path()
    if settings_path.exists():
        if not force and non_interactive:
            console.print(f"[yellow]Settings already exist at {settings_path} (skip).[/yellow]")
            raise typer.Exit()
        if not force:
            console.print(f"[yellow]Settings already exist at {settings_path}[/yellow]")
            if not typer.confirm("Overwrite?"):
                raise typer.Exit()

    settings = ApplicationSettings()
    if not non_interactive:
        root = typer.prompt("Root folder to search", default="", show_default=False).strip()
        if root:
            settings.folder_paths.root = root
        api_key = typer.prompt("API key (leave empty for none)", default="", show_default=False).strip()
        if api_key:
            settings.api_key = api_key

    save_settings(settings, settings_path)
    console.print(f"[green]OK[/green] Created settings at {settings_path}")
    console.print("\nNext steps:")
    console.print("  1. Start the search backend on [cyan]http://127.0.0.1:8000[/cyan]")
    console.print("  2. Run [cyan]search-terminal repl[/cyan] or [cyan]search-terminal gui[/cyan]")


@app.command()
def settings(
    root: Optional[str] = typer.Option(None, "--root", help="Root folder sent as base_path."),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Bearer credential ('' to clear)."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Search backend base URL."),
    theme: Optional[str] = typer.Option(None, "--theme", help="system|dark|light"),
    language: Optional[str] = typer.Option(None, "--language", help="UI language or auto-detect."),
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use."),
) -> None:
    """Show settings, or update the given fields."""
    from search_terminal.config.loader import get_settings_path, load_settings, save_settings

    path = settings_file or get_settings_path()
    current = load_settings(path)

    if theme is not None and theme not in _THEMES:
        console.print(f"[red]Unknown theme '{theme}'. Expected: {', '.join(_THEMES)}[/red]")
        raise typer.Exit(1)

    updates = {
        "root": root,
        "api_key": api_key,
        "base_url": base_url,
        "theme": theme,
        "language": language,
    }
    if all(value is None for value in updates.values()):
        _print_settings(current, path)
        return

    if root is not None:
        current.folder_paths.root = root
    if api_key is not None:
        current.api_key = api_key
    if base_url is not None:
        current.backend.base_url = base_url
    if theme is not None:
        current.theme = theme
    if language is not None:
        current.language = language

    save_settings(current, path)
    console.print("[green]Settings updated successfully![/green]")
    _print_settings(current, path)


@app.command()
def status(
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use."),
) -> None:
    """Show search-terminal status."""
    from search_terminal.config.loader import get_settings_path, load_settings
    from search_terminal.providers.search_client import ENDPOINTS

    path = settings_file or get_settings_path()
    current = load_settings(path)

    console.print("search-terminal Status\n")
    console.print(f"Settings: {path} {'[green]OK[/green]' if path.exists() else '[red]NO[/red]'}")
    console.print(f"Backend: [cyan]{current.backend.base_url}[/cyan] (timeout {current.backend.request_timeout_s:g}s)")
    endpoints = ", ".join(f"{mode.value}->{route}" for mode, route in ENDPOINTS.items())
    console.print(f"Endpoints: [dim]{endpoints}[/dim]")
    root_path = current.root_path
    if root_path:
        exists = Path(root_path).expanduser().exists()
        console.print(f"Root: {root_path} {'[green]OK[/green]' if exists else '[yellow]missing[/yellow]'}")
    else:
        console.print("Root: [dim](not set)[/dim]")
    console.print(f"API key: {'[green]set[/green]' if current.credential else '[dim]none[/dim]'}")
    console.print(f"Filter bar: {', '.join(current.terminal.filter_tags) or '(empty)'}")


def _print_settings(current: "ApplicationSettings", path: Path) -> None:
    console.print(f"Settings file: [dim]{path}[/dim]")
    console.print(f"  root: [cyan]{current.root_path or '(not set)'}[/cyan]")
    console.print(f"  api key: {'set' if current.credential else 'none'}")
    console.print(f"  backend: [cyan]{current.backend.base_url}[/cyan]")
    console.print(f"  theme: {current.theme}")
    console.print(f"  language: {current.language}")


if __name__ == "__main__":
    app()
