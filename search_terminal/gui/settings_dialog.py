"""Settings window opened from the status-bar gear button."""

from __future__ import annotations

from tkinter import filedialog
from typing import Callable

import customtkinter as ctk

from search_terminal.config.schema import ApplicationSettings
from search_terminal.gui import theme

SaveHandler = Callable[[ApplicationSettings], None]

_FOLDER_FIELDS = [
    ("root", "Root"),
    ("documents", "Documents"),
    ("images", "Images"),
    ("downloads", "Downloads"),
    ("other", "Other"),
]
_PREFERENCE_FIELDS = [
    ("show_code_when_using_data_analyst", "Show code when using data analyst"),
    ("show_follow_up_suggestions", "Show follow-up suggestions"),
    ("archive_chats", "Archive chats"),
]
_THEMES = ["system", "dark", "light"]
_LANGUAGES = ["auto-detect", "en", "es", "de", "fr", "ja", "ru"]


class SettingsDialog(ctk.CTkToplevel):
    """Edit ApplicationSettings; Save hands a new copy to *on_save*."""

    def __init__(self, master: ctk.CTkBaseClass, settings: ApplicationSettings, on_save: SaveHandler) -> None:
        super().__init__(master)
        self.title("Settings")
        self.geometry("560x620")
        self.configure(fg_color=theme.COLOR_BG_APP)
        self.transient(master)

        self._initial = settings
        self._on_save = on_save
        self._folder_entries: dict[str, ctk.CTkEntry] = {}
        self._pref_vars: dict[str, ctk.BooleanVar] = {}

        self._build_ui()
        self.after(50, self.grab_set)

    def _build_ui(self) -> None:
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        body = ctk.CTkScrollableFrame(self, fg_color=theme.COLOR_BG_PANEL, corner_radius=6)
        body.grid(row=0, column=0, sticky="nsew", padx=10, pady=(10, 6))
        body.grid_columnconfigure(1, weight=1)
        row = 0

        row = self._section(body, row, "API")
        ctk.CTkLabel(body, text="API key", anchor="w").grid(row=row, column=0, sticky="w", padx=8, pady=4)
        self._api_key = ctk.CTkEntry(body, show="•")
        self._api_key.insert(0, self._initial.api_key)
        self._api_key.grid(row=row, column=1, columnspan=2, sticky="ew", padx=8, pady=4)
        row += 1

        row = self._section(body, row, "Folders")
        for key, label in _FOLDER_FIELDS:
            ctk.CTkLabel(body, text=label, anchor="w").grid(row=row, column=0, sticky="w", padx=8, pady=4)
            entry = ctk.CTkEntry(body)
            entry.insert(0, getattr(self._initial.folder_paths, key))
            entry.grid(row=row, column=1, sticky="ew", padx=(8, 4), pady=4)
            ctk.CTkButton(
                body,
                text="Browse",
                width=70,
                command=lambda e=entry: self._browse(e),
            ).grid(row=row, column=2, sticky="e", padx=(0, 8), pady=4)
            self._folder_entries[key] = entry
            row += 1

        row = self._section(body, row, "Appearance")
        ctk.CTkLabel(body, text="Theme", anchor="w").grid(row=row, column=0, sticky="w", padx=8, pady=4)
        self._theme = ctk.CTkOptionMenu(body, values=_THEMES)
        self._theme.set(self._initial.theme if self._initial.theme in _THEMES else "system")
        self._theme.grid(row=row, column=1, sticky="w", padx=8, pady=4)
        row += 1
        ctk.CTkLabel(body, text="Language", anchor="w").grid(row=row, column=0, sticky="w", padx=8, pady=4)
        languages = _LANGUAGES if self._initial.language in _LANGUAGES else [*_LANGUAGES, self._initial.language]
        self._language = ctk.CTkOptionMenu(body, values=languages)
        self._language.set(self._initial.language)
        self._language.grid(row=row, column=1, sticky="w", padx=8, pady=4)
        row += 1

        row = self._section(body, row, "Behaviour")
        for key, label in _PREFERENCE_FIELDS:
            var = ctk.BooleanVar(value=bool(getattr(self._initial.preferences, key)))
            ctk.CTkCheckBox(body, text=label, variable=var).grid(
                row=row, column=0, columnspan=3, sticky="w", padx=8, pady=4
            )
            self._pref_vars[key] = var
            row += 1

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=1, column=0, sticky="e", padx=10, pady=(0, 10))
        ctk.CTkButton(
            buttons,
            text="Cancel",
            width=90,
            fg_color="transparent",
            border_width=1,
            border_color=theme.COLOR_BORDER,
            command=self.destroy,
        ).pack(side="left", padx=4)
        ctk.CTkButton(buttons, text="Save", width=90, command=self._save).pack(side="left", padx=4)

    @staticmethod
    def _section(body: ctk.CTkScrollableFrame, row: int, title: str) -> int:
        ctk.CTkLabel(
            body,
            text=title,
            anchor="w",
            font=(theme.FONT_FAMILY_UI, 13, "bold"),
            text_color=theme.COLOR_ACCENT,
        ).grid(row=row, column=0, columnspan=3, sticky="w", padx=8, pady=(10, 2))
        return row + 1

    def _browse(self, entry: ctk.CTkEntry) -> None:
        chosen = filedialog.askdirectory(parent=self, initialdir=entry.get() or None)
        if chosen:
            entry.delete(0, "end")
            entry.insert(0, chosen)

    def collect(self) -> ApplicationSettings:
        """Build a new settings object from the form."""
        updated = self._initial.model_copy(deep=True)
        updated.api_key = self._api_key.get().strip()
        for key, entry in self._folder_entries.items():
            setattr(updated.folder_paths, key, entry.get().strip())
        for key, var in self._pref_vars.items():
            setattr(updated.preferences, key, bool(var.get()))
        updated.theme = self._theme.get()
        updated.language = self._language.get()
        return updated

    def _save(self) -> None:
        self._on_save(self.collect())
        self.destroy()
