"""Configuration module for search-terminal."""

from search_terminal.config.loader import get_settings_path, load_settings, save_settings
from search_terminal.config.schema import ApplicationSettings

__all__ = ["ApplicationSettings", "load_settings", "save_settings", "get_settings_path"]
