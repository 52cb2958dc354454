"""Status bar widget."""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from search_terminal.gui import theme


class StatusBar(ctk.CTkFrame):
    """Bottom line: search state (left), filter count + settings gear (right)."""

    def __init__(self, master: ctk.CTkBaseClass, on_open_settings: Callable[[], None] | None = None) -> None:
        super().__init__(master, fg_color=theme.COLOR_STATUS_BG, corner_radius=0)
        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=0)
        self.grid_columnconfigure(2, weight=0)

        self._label = ctk.CTkLabel(
            self,
            text="Ready",
            anchor="w",
            text_color=theme.COLOR_TEXT_MUTED,
            font=(theme.FONT_FAMILY, 12),
        )
        self._label.grid(row=0, column=0, sticky="ew", padx=10, pady=4)

        self._filters_label = ctk.CTkLabel(
            self,
            text="",
            anchor="e",
            text_color=theme.COLOR_TEXT_MUTED,
            font=(theme.FONT_FAMILY, 12),
        )
        self._filters_label.grid(row=0, column=1, sticky="e", padx=10, pady=4)

        self._gear = ctk.CTkButton(
            self,
            text="⚙",
            width=30,
            height=24,
            fg_color="transparent",
            hover_color=theme.COLOR_BORDER,
            text_color=theme.COLOR_TEXT,
            command=on_open_settings,
        )
        self._gear.grid(row=0, column=2, sticky="e", padx=(0, 8), pady=2)

    def set_loading(self, loading: bool) -> None:
        if loading:
            self._label.configure(text="Searching...", text_color=theme.COLOR_ACCENT)
        else:
            self._label.configure(text="Ready", text_color=theme.COLOR_TEXT_MUTED)

    def set_filter_count(self, count: int) -> None:
        text = f"{count} filter{'s' if count != 1 else ''} active" if count else ""
        self._filters_label.configure(text=text)
