"""Row of toggle buttons for filter tags."""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from search_terminal.gui import theme

FilterClickHandler = Callable[[str], None]


class FilterBar(ctk.CTkFrame):
    """Preset tags plus any tag activated through the ``filter`` command.

    Clicking a button toggles the tag and replays the last search.
    """

    def __init__(self, master: ctk.CTkBaseClass, presets: list[str], on_click: FilterClickHandler) -> None:
        super().__init__(master, fg_color="transparent")
        self._presets = list(dict.fromkeys(presets))
        self._on_click = on_click
        self._active: tuple[str, ...] = ()
        self._enabled = True
        self._buttons: dict[str, ctk.CTkButton] = {}

        ctk.CTkLabel(
            self,
            text="Filters:",
            font=(theme.FONT_FAMILY, 12),
            text_color=theme.COLOR_TEXT_MUTED,
        ).pack(side="left", padx=(4, 8))
        self._rebuild()

    def set_active(self, tags: tuple[str, ...]) -> None:
        self._active = tags
        self._rebuild()

    def set_enabled(self, enabled: bool) -> None:
        """Block clicks while a search is in flight."""
        self._enabled = enabled
        state = "normal" if enabled else "disabled"
        for button in self._buttons.values():
            button.configure(state=state)

    def _rebuild(self) -> None:
        wanted = self._presets + [t for t in self._active if t not in self._presets]
        for tag in list(self._buttons):
            if tag not in wanted:
                self._buttons.pop(tag).destroy()
        for tag in wanted:
            button = self._buttons.get(tag)
            if button is None:
                button = ctk.CTkButton(
                    self,
                    text=tag,
                    width=60,
                    height=24,
                    corner_radius=12,
                    border_width=1,
                    border_color=theme.COLOR_BORDER,
                    font=(theme.FONT_FAMILY, 12),
                    command=lambda t=tag: self._on_click(t),
                )
                button.pack(side="left", padx=3, pady=4)
                self._buttons[tag] = button
            active = tag in self._active
            button.configure(
                fg_color=theme.COLOR_FILTER_ACTIVE if active else theme.COLOR_FILTER_IDLE,
                text_color=theme.COLOR_RESULT if active else theme.COLOR_TEXT,
                state="normal" if self._enabled else "disabled",
            )
