"""Session state: history log, filter set and change events."""

from search_terminal.session.filters import FilterChange, FilterSet
from search_terminal.session.history import HistoryEntry, HistoryLog, ResultsEntry, SystemEntry, UserEntry
from search_terminal.session.state import SessionState

__all__ = [
    "FilterChange",
    "FilterSet",
    "HistoryEntry",
    "HistoryLog",
    "ResultsEntry",
    "SessionState",
    "SystemEntry",
    "UserEntry",
]
