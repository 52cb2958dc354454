"""Per-session interpreter state."""

from __future__ import annotations

from search_terminal.config.schema import ApplicationSettings
from search_terminal.session.events import (
    FILTERS_CHANGED,
    HISTORY_CHANGED,
    LOADING_CHANGED,
    TYPING_CHANGED,
    EventHub,
    FiltersChanged,
    FlagChanged,
    HistoryChanged,
)
from search_terminal.session.filters import FilterSet
from search_terminal.session.history import HistoryLog


class SessionState:
    """Everything one terminal session knows.

    Mutations publish a snapshot on ``events`` so renderers never have to
    read the live containers.
    """

    def __init__(
        self,
        settings: ApplicationSettings | None = None,
        events: EventHub | None = None,
    ) -> None:
        self.settings = settings or ApplicationSettings()
        self.events = events or EventHub()
        self.history = HistoryLog(on_change=self._history_changed)
        self.filters = FilterSet(on_change=self._filters_changed)
        self.keywords: tuple[str, ...] = ()
        self.pending_input = ""
        self._is_loading = False
        self._is_typing = False

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def is_typing(self) -> bool:
        return self._is_typing

    @is_typing.setter
    def is_typing(self, value: bool) -> None:
        if value == self._is_typing:
            return
        self._is_typing = value
        self.events.publish(TYPING_CHANGED, FlagChanged(value))

    def begin_search(self) -> None:
        self._set_loading(True)

    def end_search(self) -> None:
        self._set_loading(False)

    def _set_loading(self, value: bool) -> None:
        if value == self._is_loading:
            return
        self._is_loading = value
        self.events.publish(LOADING_CHANGED, FlagChanged(value))

    def _history_changed(self) -> None:
        self.events.publish(HISTORY_CHANGED, HistoryChanged(self.history.entries))

    def _filters_changed(self) -> None:
        self.events.publish(FILTERS_CHANGED, FiltersChanged(self.filters.tags))
