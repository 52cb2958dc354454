"""Session change events and lightweight signal bus."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from search_terminal.session.history import HistoryEntry

EventHandler = Callable[[object], None]

HISTORY_CHANGED = "history"
FILTERS_CHANGED = "filters"
LOADING_CHANGED = "loading"
TYPING_CHANGED = "typing"


@dataclass(frozen=True)
class HistoryChanged:
    """Snapshot of the whole history log after a mutation."""

    entries: tuple["HistoryEntry", ...]


@dataclass(frozen=True)
class FiltersChanged:
    """Snapshot of active filter tags after a toggle."""

    tags: tuple[str, ...]


@dataclass(frozen=True)
class FlagChanged:
    """Loading or typing flag flipped."""

    value: bool


class EventHub:
    """Simple in-process pub/sub for renderers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_name: str, payload: object) -> None:
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)
