"""Bridge between the Tk thread and the interpreter's event loop."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Coroutine

from loguru import logger

from search_terminal.config.schema import ApplicationSettings
from search_terminal.gui.app import TerminalApp
from search_terminal.session.events import (
    FILTERS_CHANGED,
    HISTORY_CHANGED,
    LOADING_CHANGED,
    TYPING_CHANGED,
    FiltersChanged,
    FlagChanged,
    HistoryChanged,
)
from search_terminal.terminal.interpreter import CommandInterpreter


class GUIChannel:
    """Runs TerminalApp in its own thread and feeds it session snapshots.

    State is only touched on the asyncio loop; the Tk thread submits
    coroutines and receives immutable snapshots back.
    """

    name = "gui"

    def __init__(self, interpreter: CommandInterpreter) -> None:
        self.interpreter = interpreter
        self._app: TerminalApp | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._stopped = threading.Event()

    async def start(self) -> None:
        """Start GUI in separate thread and keep coroutine alive while GUI runs."""
        if self._thread and self._thread.is_alive():
            return

        self._loop = asyncio.get_running_loop()
        self._stopped.clear()
        state = self.interpreter.state

        self._app = TerminalApp(
            settings=state.settings,
            on_submit=self._submit_callback,
            on_filter_click=self._filter_callback,
            on_save_settings=self._save_settings_callback,
            on_close=self._stopped.set,
        )
        self._app.receive_history(state.history.entries)
        self._app.receive_filters(state.filters.tags)

        events = state.events
        events.subscribe(HISTORY_CHANGED, self._on_history)
        events.subscribe(FILTERS_CHANGED, self._on_filters)
        events.subscribe(LOADING_CHANGED, self._on_loading)
        events.subscribe(TYPING_CHANGED, self._on_typing)

        self._thread = threading.Thread(target=self._run_gui, daemon=True, name="search-terminal-gui")
        self._thread.start()

        while not self._stopped.is_set():
            await asyncio.sleep(0.2)

    async def stop(self) -> None:
        """Stop GUI runtime."""
        events = self.interpreter.state.events
        events.unsubscribe(HISTORY_CHANGED, self._on_history)
        events.unsubscribe(FILTERS_CHANGED, self._on_filters)
        events.unsubscribe(LOADING_CHANGED, self._on_loading)
        events.unsubscribe(TYPING_CHANGED, self._on_typing)

        app = self._app
        if app:
            app.stop()
        self._stopped.set()
        thread = self._thread
        if thread and thread.is_alive():
            thread.join(timeout=1.0)

    async def on_save_settings(self, settings: ApplicationSettings) -> None:
        self.interpreter.apply_settings(settings)
        if self._app is not None:
            self._app.set_settings(settings)

    def _on_history(self, payload: object) -> None:
        if self._app is not None and isinstance(payload, HistoryChanged):
            self._app.receive_history(payload.entries)

    def _on_filters(self, payload: object) -> None:
        if self._app is not None and isinstance(payload, FiltersChanged):
            self._app.receive_filters(payload.tags)

    def _on_loading(self, payload: object) -> None:
        if self._app is not None and isinstance(payload, FlagChanged):
            self._app.set_loading(payload.value)

    def _on_typing(self, payload: object) -> None:
        if self._app is not None and isinstance(payload, FlagChanged):
            self._app.set_typing(payload.value)

    def _submit_callback(self, text: str) -> None:
        self._schedule(self.interpreter.submit(text))

    def _filter_callback(self, tag: str) -> None:
        self._schedule(self.interpreter.click_filter(tag))

    def _save_settings_callback(self, settings: ApplicationSettings) -> None:
        self._schedule(self.on_save_settings(settings))

    def _schedule(self, coro: Coroutine[Any, Any, Any]) -> None:
        loop = self._loop
        if loop is None:
            coro.close()
            return
        future = asyncio.run_coroutine_threadsafe(coro, loop)

        def _done_callback(fut: "asyncio.Future[Any]") -> None:
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                logger.opt(exception=exc).error("GUI action failed")

        future.add_done_callback(_done_callback)

    def _run_gui(self) -> None:
        app = self._app
        if app is None:
            return
        try:
            app.run()
        except Exception:
            logger.exception("GUI crashed")
        finally:
            self._stopped.set()
