"""Settings file loading and saving.

Keys are stored camelCase on disk (``folderPaths.root``, ``apiKey``) and
snake_case in Python.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from search_terminal.config.schema import ApplicationSettings

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def get_data_dir() -> Path:
    """Return ~/.search-terminal, creating it if needed."""
    path = Path.home() / ".search-terminal"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_settings_path() -> Path:
    """Return the default settings file location."""
    return get_data_dir() / "settings.json"


def load_settings(path: Path | None = None) -> ApplicationSettings:
    """Load settings from disk, falling back to defaults.

    A missing file is normal on first launch. An unreadable or invalid file
    is logged and ignored so the session can still start.
    """
    target = path or get_settings_path()
    if not target.exists():
        return ApplicationSettings()

    try:
        data = json.loads(target.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")
        return ApplicationSettings.model_validate(convert_keys(data))
    except (OSError, ValueError, ValidationError) as exc:
        logger.warning(f"Failed to parse saved settings at {target}: {exc}")
        return ApplicationSettings()


def save_settings(settings: ApplicationSettings, path: Path | None = None) -> Path:
    """Persist settings to disk and return the written path."""
    target = path or get_settings_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(settings.model_dump())
    target.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Settings saved to {target}")
    return target


def camel_to_snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word.capitalize() for word in rest)


def convert_keys(data: Any) -> Any:
    """Recursively convert camelCase dict keys to snake_case."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Recursively convert snake_case dict keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data
