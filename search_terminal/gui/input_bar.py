"""Command input line with prompt and blinking cursor."""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from search_terminal.gui import theme

SubmitHandler = Callable[[str], None]


class InputBar(ctk.CTkFrame):
    """``$`` prompt, entry field and blinking block cursor."""

    def __init__(
        self,
        master: ctk.CTkBaseClass,
        on_submit: SubmitHandler,
        blink_ms: int = 530,
    ) -> None:
        super().__init__(
            master,
            fg_color=theme.COLOR_BG_INPUT,
            border_width=1,
            border_color=theme.COLOR_BORDER,
            corner_radius=6,
        )
        self._on_submit = on_submit
        self._blink_ms = max(100, blink_ms)
        self._cursor_visible = True
        self._blink_job: str | None = None
        self._enabled = True

        self.grid_columnconfigure(0, weight=0)
        self.grid_columnconfigure(1, weight=1)
        self.grid_columnconfigure(2, weight=0)

        ctk.CTkLabel(
            self,
            text="$",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE, "bold"),
            text_color=theme.COLOR_ACCENT,
        ).grid(row=0, column=0, sticky="w", padx=(10, 4), pady=8)

        self._entry = ctk.CTkEntry(
            self,
            placeholder_text="Type a command (help for list)",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE),
            fg_color=theme.COLOR_BG_INPUT,
            border_width=0,
            text_color=theme.COLOR_TEXT,
        )
        self._entry.grid(row=0, column=1, sticky="ew", pady=8)
        self._entry.bind("<Return>", self._handle_return)

        self._cursor = ctk.CTkLabel(
            self,
            text="█",
            width=12,
            font=(theme.FONT_FAMILY, theme.FONT_SIZE),
            text_color=theme.COLOR_TEXT,
        )
        self._cursor.grid(row=0, column=2, sticky="e", padx=(2, 10), pady=8)

        self._schedule_blink()

    def focus(self) -> None:
        self._entry.focus_set()

    def set_enabled(self, enabled: bool) -> None:
        """Disable submission while a search is in flight."""
        self._enabled = enabled
        self._entry.configure(state="normal" if enabled else "disabled")
        if enabled:
            self._entry.focus_set()

    def clear(self) -> None:
        self._entry.delete(0, "end")

    def destroy(self) -> None:
        if self._blink_job is not None:
            try:
                self.after_cancel(self._blink_job)
            except ValueError:
                pass
            self._blink_job = None
        super().destroy()

    def _handle_return(self, _event: object) -> str:
        if not self._enabled:
            return "break"
        text = self._entry.get()
        if not text.strip():
            return "break"
        self.clear()
        self._on_submit(text)
        return "break"

    def _schedule_blink(self) -> None:
        self._blink_job = self.after(self._blink_ms, self._blink)

    def _blink(self) -> None:
        self._cursor_visible = not self._cursor_visible
        color = theme.COLOR_TEXT if self._cursor_visible else theme.COLOR_BG_INPUT
        self._cursor.configure(text_color=color)
        self._schedule_blink()
