"""Reusable GUI widgets."""

from search_terminal.gui.widgets.status_bar import StatusBar

__all__ = ["StatusBar"]
