"""Shared GUI theme defaults."""

from __future__ import annotations

import customtkinter as ctk

FONT_SIZE = 13
FONT_FAMILY = "Consolas"
FONT_FAMILY_UI = "Segoe UI"

COLOR_BG_APP = "#000000"
COLOR_BG_PANEL = "#050805"
COLOR_BG_INPUT = "#070B07"
COLOR_BORDER = "#1E3A1E"
COLOR_TEXT = "#4ADE80"           # terminal green
COLOR_TEXT_MUTED = "#6B8F6B"
COLOR_TEXT_USER = "#A7F3D0"
COLOR_ACCENT = "#22C55E"
COLOR_RESULT = "#D9E2EF"
COLOR_FOLDER = "#FACC15"
COLOR_STATUS_BG = "#030503"
COLOR_FILTER_IDLE = "#0B140B"
COLOR_FILTER_ACTIVE = "#166534"
COLOR_DANGER = "#EA5F5F"

_APPEARANCE = {"system": "system", "dark": "dark", "light": "light"}


def setup_theme(appearance: str = "dark") -> None:
    """Apply global appearance settings."""
    ctk.set_appearance_mode(_APPEARANCE.get((appearance or "").lower(), "dark"))
    ctk.set_default_color_theme("green")
