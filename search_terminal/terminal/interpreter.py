"""Command interpreter: input line -> history entries and state changes."""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from search_terminal.config.loader import get_settings_path, load_settings, save_settings
from search_terminal.config.schema import ApplicationSettings
from search_terminal.providers.search_client import SearchClient, SearchResponse
from search_terminal.session.filters import FilterChange
from search_terminal.session.history import SystemEntry, UserEntry
from search_terminal.session.state import SessionState
from search_terminal.terminal.commands import (
    Clear,
    Command,
    Help,
    ListFilters,
    OpenSettingsHint,
    SearchCommand,
    ShowKeywords,
    ToggleFilter,
    Unrecognized,
    classify,
)
from search_terminal.terminal.dispatcher import SearchBackend, SearchDispatcher
from search_terminal.terminal.replay import ReplayController

HELP_TEXT = """Available commands:
search [query] - Search for files
find [query] - Search for files
cmd [query] - Search for files
filter [type] - Filter by file type (e.g., file, folder)
clear - Clear terminal history
keywords - Show detected keywords from last search
settings - Open settings panel
help - Show this help message"""

GUI_SETTINGS_HINT = "Settings can be accessed by clicking the gear icon in the bottom right corner."
CONSOLE_SETTINGS_HINT = (
    "Settings can be changed with `search-terminal settings` or by editing the settings file. "
    "Changes are picked up before the next command."
)
NO_KEYWORDS = "No keywords available. Try searching for something first."


class CommandInterpreter:
    """Owns a SessionState and applies typed commands to it.

    Only one coroutine of this class should run at a time from the user's
    point of view; front-ends disable input while ``state.is_loading``.
    """

    def __init__(
        self,
        state: SessionState,
        client: SearchBackend | None = None,
        command_delay_s: float | None = None,
        settings_hint: str = GUI_SETTINGS_HINT,
        settings_path: Path | None = None,
    ) -> None:
        self.state = state
        self._owns_client = client is None
        backend = client if client is not None else SearchClient.from_settings(state.settings)
        self.dispatcher = SearchDispatcher(state, backend)
        self.replay = ReplayController(state, self.dispatcher)
        if command_delay_s is None:
            command_delay_s = state.settings.terminal.command_delay_s
        self.command_delay_s = max(0.0, command_delay_s)
        self.settings_hint = settings_hint
        self.settings_path = settings_path
        self._settings_mtime: float | None = None

    async def submit(self, text: str) -> Command | None:
        """Handle one submitted line. Blank input is ignored (returns None)."""
        if not text or not text.strip():
            return None

        state = self.state
        state.pending_input = text
        state.history.append(UserEntry(text))
        state.is_typing = True

        command = classify(text)
        logger.debug(f"Classified {text!r} as {type(command).__name__}")

        if isinstance(command, SearchCommand):
            self._finish_input()
            await self.dispatcher.dispatch(command.query, state.filters.tags, command.mode)
            return command

        await asyncio.sleep(self.command_delay_s)
        self._run_local(command)
        self._finish_input()
        return command

    async def click_filter(self, tag: str) -> tuple[FilterChange, SearchResponse | None]:
        """Filter-bar toggle; replays the last search with the new filters."""
        return await self.replay.toggle(tag)

    def apply_settings(self, settings: ApplicationSettings, persist: bool = True) -> None:
        """Swap in new settings, optionally writing them to disk."""
        self.state.settings = settings
        if self._owns_client:
            self.dispatcher.client = SearchClient.from_settings(settings)
        if persist:
            save_settings(settings, self.settings_path)
            self.watch_settings()
        self.state.history.append(SystemEntry("Settings updated successfully!"))

    def watch_settings(self) -> None:
        """Remember the settings file's current modification time."""
        self._settings_mtime = _mtime(self._settings_file())

    def reload_settings(self) -> bool:
        """Apply the settings file if it changed since the last watch.

        Lets another process (the `settings` subcommand, an editor) update a
        running console session. Returns True when new settings were applied.
        """
        path = self._settings_file()
        mtime = _mtime(path)
        if mtime is None or mtime == self._settings_mtime:
            return False
        self._settings_mtime = mtime
        logger.info(f"Settings file changed, reloading {path}")
        self.apply_settings(load_settings(path), persist=False)
        return True

    def _settings_file(self) -> Path:
        return self.settings_path or get_settings_path()

    def _run_local(self, command: Command) -> None:
        state = self.state
        history = state.history

        if isinstance(command, Help):
            history.append(SystemEntry(HELP_TEXT))
        elif isinstance(command, Clear):
            history.reset()
        elif isinstance(command, ShowKeywords):
            if state.keywords:
                history.append(SystemEntry(f"Detected keywords from last search: {', '.join(state.keywords)}"))
            else:
                history.append(SystemEntry(NO_KEYWORDS))
        elif isinstance(command, OpenSettingsHint):
            history.append(SystemEntry(self.settings_hint))
        elif isinstance(command, ListFilters):
            history.append(SystemEntry(f"Active filters: {state.filters.describe()}"))
        elif isinstance(command, ToggleFilter):
            change = state.filters.toggle(command.tag)
            history.append(SystemEntry(change.describe()))
        elif isinstance(command, Unrecognized):
            history.append(SystemEntry(f'Command not recognized: {command.original}\nType "help" for available commands'))
        else:
            raise TypeError(f"Unhandled command: {command!r}")

    def _finish_input(self) -> None:
        self.state.is_typing = False
        self.state.pending_input = ""


def _mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return None
