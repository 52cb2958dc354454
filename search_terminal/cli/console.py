"""Rich console front-end: scrollback renderer and the interactive loop."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from search_terminal.session.events import HISTORY_CHANGED, HistoryChanged
from search_terminal.session.history import HistoryEntry, ResultsEntry, SystemEntry, UserEntry
from search_terminal.terminal.interpreter import CommandInterpreter

PROMPT = "[bold green]$[/bold green] "
EXIT_WORDS = {"exit", "quit"}
_MAX_METADATA_COLUMNS = 3


class ConsoleRenderer:
    """Prints history entries as they appear.

    A scrollback cannot be edited, so a replaced loading placeholder stays on
    screen and only the entries that follow it are printed. A full reset
    (``clear``) clears the screen and reprints the log.
    """

    def __init__(self, console: Console, echo_user_input: bool = False) -> None:
        self.console = console
        self.echo_user_input = echo_user_input
        self._rendered: list[HistoryEntry] = []

    def attach(self, events: Any) -> None:
        events.subscribe(HISTORY_CHANGED, self._on_history)

    def render_all(self, entries: tuple[HistoryEntry, ...]) -> None:
        self.console.clear()
        for entry in entries:
            self.console.print(render_entry(entry))
        self._rendered = list(entries)

    def _on_history(self, payload: object) -> None:
        if not isinstance(payload, HistoryChanged):
            return
        entries = payload.entries
        common = 0
        limit = min(len(entries), len(self._rendered))
        while common < limit and entries[common] is self._rendered[common]:
            common += 1

        if common == 0 and self._rendered:
            self.render_all(entries)
            return

        for entry in entries[common:]:
            if isinstance(entry, UserEntry) and not self.echo_user_input:
                continue
            self.console.print(render_entry(entry))
        self._rendered = list(entries)


def render_entry(entry: HistoryEntry) -> Any:
    """Turn one history entry into a rich renderable."""
    if isinstance(entry, UserEntry):
        return Text(f"$ {entry.content}", style="bold green")
    if isinstance(entry, SystemEntry):
        if entry.is_error:
            style = "bold red"
        elif entry.is_loading:
            style = "dim yellow"
        else:
            style = "green"
        return Text(entry.content, style=style)
    if isinstance(entry, ResultsEntry):
        return render_results(entry)
    raise TypeError(f"Unknown history entry: {entry!r}")


def render_results(entry: ResultsEntry) -> Any:
    if not entry.content:
        return Text("No results found.", style="dim")

    extra_keys: list[str] = []
    for result in entry.content:
        for key in result.metadata:
            if key not in extra_keys and len(extra_keys) < _MAX_METADATA_COLUMNS:
                extra_keys.append(key)

    table = Table(show_header=True, header_style="bold cyan", border_style="green", expand=False)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Path", style="dim")
    for key in extra_keys:
        table.add_column(key.replace("_", " ").title())

    for result in entry.content:
        icon = "dir" if result.is_folder else "file"
        row = [icon, escape(result.name), escape(result.path)]
        row.extend(escape(str(result.metadata.get(key, ""))) for key in extra_keys)
        table.add_row(*row)

    if entry.keywords:
        table.caption = f"Keywords: {escape(', '.join(entry.keywords))}"
    return table


async def run_repl(interpreter: CommandInterpreter, console: Console | None = None) -> None:
    """Interactive read-eval-print loop until EOF, Ctrl-C or ``exit``."""
    console = console or Console()
    renderer = ConsoleRenderer(console)
    renderer.attach(interpreter.state.events)
    renderer.render_all(interpreter.state.history.entries)
    interpreter.watch_settings()
    logger.info("Console session started")

    while True:
        try:
            line = await asyncio.to_thread(console.input, PROMPT)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if line.strip().lower() in EXIT_WORDS:
            break
        interpreter.reload_settings()
        with console.status("Processing...", spinner="dots"):
            await interpreter.submit(line)

    logger.info("Console session finished")
