"""Main customtkinter terminal window."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

import customtkinter as ctk
from loguru import logger

from search_terminal import __logo__, __version__
from search_terminal.config.schema import ApplicationSettings
from search_terminal.gui import theme
from search_terminal.gui.filter_bar import FilterBar
from search_terminal.gui.input_bar import InputBar
from search_terminal.gui.settings_dialog import SettingsDialog
from search_terminal.gui.state_store import WindowState, load_window_state, save_window_state
from search_terminal.gui.terminal_output import TerminalOutput
from search_terminal.gui.widgets.status_bar import StatusBar
from search_terminal.session.history import HistoryEntry

OnSubmit = Callable[[str], None]
OnFilterClick = Callable[[str], None]
OnSaveSettings = Callable[[ApplicationSettings], None]
OnClose = Callable[[], None]


class TerminalApp:
    """Desktop terminal: header, scrollback, input, filter bar, status bar.

    Every public ``receive_*``/``set_*`` method may be called from any
    thread; widget work is marshalled onto the Tk thread.
    """

    def __init__(
        self,
        settings: ApplicationSettings,
        on_submit: OnSubmit | None = None,
        on_filter_click: OnFilterClick | None = None,
        on_save_settings: OnSaveSettings | None = None,
        on_close: OnClose | None = None,
        window_state_path: Path | None = None,
    ) -> None:
        self._settings = settings
        self._on_submit = on_submit
        self._on_filter_click = on_filter_click
        self._on_save_settings = on_save_settings
        self._on_close = on_close
        self._window_state_path = window_state_path

        self._root: ctk.CTk | None = None
        self._output: TerminalOutput | None = None
        self._input_bar: InputBar | None = None
        self._filter_bar: FilterBar | None = None
        self._status_bar: StatusBar | None = None
        self._settings_dialog: SettingsDialog | None = None

        self._ui_thread_id: int | None = None
        self._ui_lock = threading.Lock()
        self._ui_ready = False
        self._closed = False
        self._pending_calls: list[Callable[[], None]] = []

    def run(self) -> None:
        """Build and run tkinter mainloop."""
        theme.setup_theme(self._settings.theme)
        root = ctk.CTk()
        self._root = root
        self._ui_thread_id = threading.get_ident()

        root.title("Terminal File Search")
        root.minsize(720, 480)
        saved_state = load_window_state(path=self._window_state_path)
        if saved_state:
            root.geometry(saved_state.to_geometry())
        else:
            root.geometry(f"{self._settings.gui.width}x{self._settings.gui.height}")
        root.configure(fg_color=theme.COLOR_BG_APP)
        root.protocol("WM_DELETE_WINDOW", self._handle_close)

        root.grid_columnconfigure(0, weight=1)
        root.grid_rowconfigure(1, weight=1)

        header = ctk.CTkLabel(
            root,
            text=f"{__logo__} Terminal File Search v{__version__}",
            anchor="w",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE + 2, "bold"),
            text_color=theme.COLOR_ACCENT,
        )
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))

        self._output = TerminalOutput(root)
        self._output.grid(row=1, column=0, sticky="nsew", padx=10, pady=4)

        self._input_bar = InputBar(
            root,
            on_submit=self._handle_submit,
            blink_ms=self._settings.terminal.cursor_blink_ms,
        )
        self._input_bar.grid(row=2, column=0, sticky="ew", padx=10, pady=4)

        self._filter_bar = FilterBar(
            root,
            presets=self._settings.terminal.filter_tags,
            on_click=self._handle_filter_click,
        )
        self._filter_bar.grid(row=3, column=0, sticky="ew", padx=10, pady=(0, 4))

        self._status_bar = StatusBar(root, on_open_settings=self._show_settings)
        self._status_bar.grid(row=4, column=0, sticky="ew")

        self._apply_pending_calls()
        if self._root is None:
            return
        self._input_bar.focus()
        logger.info("GUI ready")

        root.mainloop()

    def stop(self) -> None:
        """Close GUI safely from any thread."""
        self._run_on_ui(self._handle_close)

    def receive_history(self, entries: tuple[HistoryEntry, ...]) -> None:
        self._run_on_ui(lambda: self._output.render(entries) if self._output else None)

    def receive_filters(self, tags: tuple[str, ...]) -> None:
        self._run_on_ui(lambda: self._set_filters_ui(tags))

    def set_loading(self, loading: bool) -> None:
        self._run_on_ui(lambda: self._set_loading_ui(loading))

    def set_typing(self, typing: bool) -> None:
        self._run_on_ui(lambda: self._output.set_typing(typing) if self._output else None)

    def set_settings(self, settings: ApplicationSettings) -> None:
        self._settings = settings

    def _handle_submit(self, text: str) -> None:
        if self._on_submit is not None:
            self._on_submit(text)

    def _handle_filter_click(self, tag: str) -> None:
        if self._on_filter_click is not None:
            self._on_filter_click(tag)

    def _show_settings(self) -> None:
        if self._root is None:
            return
        if self._settings_dialog is not None and self._settings_dialog.winfo_exists():
            self._settings_dialog.focus()
            return
        self._settings_dialog = SettingsDialog(self._root, self._settings, on_save=self._handle_save_settings)

    def _handle_save_settings(self, settings: ApplicationSettings) -> None:
        if settings.theme != self._settings.theme:
            theme.setup_theme(settings.theme)
        self._settings = settings
        if self._on_save_settings is not None:
            self._on_save_settings(settings)

    def _set_filters_ui(self, tags: tuple[str, ...]) -> None:
        if self._filter_bar:
            self._filter_bar.set_active(tags)
        if self._status_bar:
            self._status_bar.set_filter_count(len(tags))

    def _set_loading_ui(self, loading: bool) -> None:
        if self._input_bar:
            self._input_bar.set_enabled(not loading)
        if self._filter_bar:
            self._filter_bar.set_enabled(not loading)
        if self._status_bar:
            self._status_bar.set_loading(loading)

    def _handle_close(self) -> None:
        with self._ui_lock:
            self._closed = True
            self._pending_calls.clear()
        root = self._root
        if root is None:
            return
        state = WindowState.from_geometry(root.winfo_geometry())
        if state is not None:
            try:
                save_window_state(state, path=self._window_state_path)
            except OSError as exc:
                logger.warning(f"Failed to save window state: {exc}")
        self._root = None
        root.destroy()
        if self._on_close is not None:
            self._on_close()

    def _run_on_ui(self, fn: Callable[[], None]) -> None:
        with self._ui_lock:
            if self._closed:
                return
            if not self._ui_ready:
                self._pending_calls.append(fn)
                return
            root = self._root
        if root is None:
            return
        if threading.get_ident() == self._ui_thread_id:
            fn()
            return
        try:
            root.after(0, fn)
        except RuntimeError as exc:
            # Tk refuses work from other threads once the mainloop has exited.
            logger.debug(f"Dropped UI call after close: {exc}")

    def _apply_pending_calls(self) -> None:
        with self._ui_lock:
            self._ui_ready = True
            queued = self._pending_calls
            self._pending_calls = []
        for fn in queued:
            fn()
