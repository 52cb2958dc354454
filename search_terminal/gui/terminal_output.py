"""Read-only scrollback panel that renders the history log."""

from __future__ import annotations

import customtkinter as ctk

from search_terminal.gui import theme
from search_terminal.session.history import HistoryEntry, ResultsEntry, SystemEntry, UserEntry

# Keys allowed in read-only output (select, copy, navigation)
_ALLOWED_KEYSYMS = {
    "Left", "Right", "Up", "Down", "Home", "End",
    "Prior", "Next", "Shift_L", "Shift_R", "Control_L", "Control_R",
}
_CTRL_MASK = 0x4

_TAG_STYLES = {
    "system": theme.COLOR_TEXT,
    "user": theme.COLOR_TEXT_USER,
    "loading": theme.COLOR_TEXT_MUTED,
    "error": theme.COLOR_DANGER,
    "result": theme.COLOR_RESULT,
    "folder": theme.COLOR_FOLDER,
    "meta": theme.COLOR_TEXT_MUTED,
    "typing": theme.COLOR_TEXT_MUTED,
}


class TerminalOutput(ctk.CTkFrame):
    """Scrollback of system, user and results entries."""

    def __init__(self, master: ctk.CTkBaseClass) -> None:
        super().__init__(
            master,
            fg_color=theme.COLOR_BG_PANEL,
            border_width=1,
            border_color=theme.COLOR_BORDER,
            corner_radius=6,
        )
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._text = ctk.CTkTextbox(
            self,
            font=(theme.FONT_FAMILY, theme.FONT_SIZE),
            fg_color=theme.COLOR_BG_PANEL,
            border_width=0,
            text_color=theme.COLOR_TEXT,
            wrap="word",
        )
        self._text.grid(row=0, column=0, sticky="nsew", padx=6, pady=6)
        for tag, color in _TAG_STYLES.items():
            self._text.tag_config(tag, foreground=color)

        widget = getattr(self._text, "_textbox", self._text)
        widget.bind("<Key>", self._block_edits, add=True)
        widget.bind("<Button-1>", lambda e: e.widget.focus_set(), add=True)

        self._entries: tuple[HistoryEntry, ...] = ()
        self._typing = False

    def render(self, entries: tuple[HistoryEntry, ...]) -> None:
        """Redraw the whole scrollback from a history snapshot."""
        self._entries = entries
        self._redraw()

    def set_typing(self, typing: bool) -> None:
        if typing == self._typing:
            return
        self._typing = typing
        self._redraw()

    def _redraw(self) -> None:
        text = self._text
        text.delete("1.0", "end")
        for entry in self._entries:
            self._insert_entry(entry)
        if self._typing:
            text.insert("end", "Processing...\n", "typing")
        text.see("end")

    def _insert_entry(self, entry: HistoryEntry) -> None:
        text = self._text
        if isinstance(entry, UserEntry):
            text.insert("end", f"$ {entry.content}\n", "user")
        elif isinstance(entry, SystemEntry):
            tag = "error" if entry.is_error else "loading" if entry.is_loading else "system"
            text.insert("end", f"{entry.content}\n", tag)
        elif isinstance(entry, ResultsEntry):
            self._insert_results(entry)
        else:
            raise TypeError(f"Unknown history entry: {entry!r}")

    def _insert_results(self, entry: ResultsEntry) -> None:
        text = self._text
        if not entry.content:
            text.insert("end", "  No results found.\n", "meta")
        for result in entry.content:
            marker = "[DIR] " if result.is_folder else "[FILE]"
            text.insert("end", f"  {marker} ", "folder" if result.is_folder else "meta")
            text.insert("end", f"{result.name}", "result")
            text.insert("end", f"  {result.path}\n", "meta")
            details = "  ".join(f"{k}: {v}" for k, v in result.metadata.items() if v not in (None, ""))
            if details:
                text.insert("end", f"         {details}\n", "meta")
        if entry.keywords:
            text.insert("end", f"  Keywords: {', '.join(entry.keywords)}\n", "meta")

    @staticmethod
    def _block_edits(event: "object") -> str | None:
        keysym = getattr(event, "keysym", "")
        state = getattr(event, "state", 0)
        ctrl = bool(state & _CTRL_MASK)
        if keysym in _ALLOWED_KEYSYMS:
            return None
        if ctrl and keysym.lower() in {"c", "a", "insert"}:
            return None
        return "break"
