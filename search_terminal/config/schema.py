"""Configuration schema for search-terminal."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

DEFAULT_FILTER_TAGS = ["file", "folder", "pdf", "docx", "txt", "images"]


class FolderPaths(BaseModel):
    """Folder locations known to the front-end."""

    documents: str = ""
    root: str = ""
    images: str = ""
    downloads: str = ""
    other: str = ""


class Preferences(BaseModel):
    """Behaviour toggles stored alongside the folder paths."""

    show_code_when_using_data_analyst: bool = True
    show_follow_up_suggestions: bool = True
    archive_chats: bool = False


class BackendConfig(BaseModel):
    """Search backend location."""

    base_url: str = "http://127.0.0.1:8000"
    request_timeout_s: float = Field(default=30.0, gt=0)


class TerminalConfig(BaseModel):
    """Interpreter and terminal look-and-feel."""

    command_delay_s: float = 0.3
    filter_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_FILTER_TAGS))
    cursor_blink_ms: int = 530


class GUIConfig(BaseModel):
    """Desktop GUI configuration."""

    width: int = 1100
    height: int = 760
    font_size: int = 13


class ApplicationSettings(BaseSettings):
    """Root settings record for search-terminal."""

    api_key: str = ""
    theme: str = "system"
    folder_paths: FolderPaths = Field(default_factory=FolderPaths)
    preferences: Preferences = Field(default_factory=Preferences)
    language: str = "auto-detect"
    backend: BackendConfig = Field(default_factory=BackendConfig)
    terminal: TerminalConfig = Field(default_factory=TerminalConfig)
    gui: GUIConfig = Field(default_factory=GUIConfig)

    @property
    def root_path(self) -> str:
        """Configured root folder, as typed by the user."""
        return (self.folder_paths.root or "").strip()

    @property
    def transport_base_path(self) -> str:
        """Root folder with backslashes doubled for the JSON body."""
        return self.root_path.replace("\\", "\\\\")

    @property
    def credential(self) -> str | None:
        key = (self.api_key or "").strip()
        return key or None

    model_config = ConfigDict(
        env_prefix="SEARCH_TERMINAL_",
        env_nested_delimiter="__",
        extra="ignore",
    )
