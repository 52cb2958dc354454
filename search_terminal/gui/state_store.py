"""Window geometry persisted between GUI runs."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

_GEOMETRY_RE = re.compile(r"^(\d+)x(\d+)([+-]-?\d+)([+-]-?\d+)$")


@dataclass(frozen=True)
class WindowState:
    """Size and position of the terminal window."""

    width: int
    height: int
    x: int
    y: int

    @classmethod
    def from_geometry(cls, geometry: str) -> "WindowState | None":
        """Parse a Tk geometry string such as ``1100x760+40+30``."""
        match = _GEOMETRY_RE.match((geometry or "").strip())
        if not match:
            return None
        width, height, x, y = match.groups()
        return cls(int(width), int(height), int(x.replace("+", "", 1)), int(y.replace("+", "", 1)))

    def to_geometry(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"


def default_state_path() -> Path:
    return Path.home() / ".search-terminal" / "gui_state.json"


def load_window_state(path: Path | None = None) -> WindowState | None:
    target = path or default_state_path()
    if not target.exists():
        return None
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    return WindowState.from_geometry(str(payload.get("geometry", "")))


def save_window_state(state: WindowState, path: Path | None = None) -> None:
    target = path or default_state_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps({"geometry": state.to_geometry()}, indent=2), encoding="utf-8")
