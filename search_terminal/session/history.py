"""Terminal scrollback: history entry types and the history log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Iterator, Literal, Union

from search_terminal import __version__
from search_terminal.providers.search_client import FileResult

EntryKind = Literal["system", "user", "results"]
ChangeHandler = Callable[[], None]


@dataclass(frozen=True, eq=False)
class SystemEntry:
    """Message printed by the terminal itself."""

    kind: ClassVar[EntryKind] = "system"

    content: str
    is_loading: bool = False
    is_error: bool = False


@dataclass(frozen=True, eq=False)
class UserEntry:
    """Line typed by the user, echoed verbatim."""

    kind: ClassVar[EntryKind] = "user"

    content: str


@dataclass(frozen=True, eq=False)
class ResultsEntry:
    """File list returned by one completed search."""

    kind: ClassVar[EntryKind] = "results"

    content: tuple[FileResult, ...] = ()
    keywords: tuple[str, ...] = ()


HistoryEntry = Union[SystemEntry, UserEntry, ResultsEntry]


def seed_entries() -> list[HistoryEntry]:
    """Entries a fresh (or cleared) terminal starts with."""
    return [
        SystemEntry(f"Welcome v{__version__}"),
        SystemEntry('Type "help" for available commands'),
    ]


class HistoryLog:
    """Ordered scrollback with append and in-place placeholder replacement.

    Entries are compared by identity, never by value: two "Searching..."
    placeholders for the same query are still different entries.
    """

    def __init__(
        self,
        entries: list[HistoryEntry] | None = None,
        on_change: ChangeHandler | None = None,
    ) -> None:
        self._entries: list[HistoryEntry] = list(entries) if entries is not None else seed_entries()
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def __contains__(self, entry: object) -> bool:
        return any(item is entry for item in self._entries)

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def last(self) -> HistoryEntry | None:
        return self._entries[-1] if self._entries else None

    def append(self, *entries: HistoryEntry) -> None:
        if not entries:
            return
        self._entries.extend(entries)
        self._changed()

    def replace(self, target: HistoryEntry, *replacements: HistoryEntry) -> bool:
        """Swap *target* for *replacements* where it sits.

        Returns False (and leaves the log untouched) when *target* is no
        longer in the log.
        """
        for index, entry in enumerate(self._entries):
            if entry is target:
                self._entries[index:index + 1] = list(replacements)
                self._changed()
                return True
        return False

    def replace_last(self, *replacements: HistoryEntry) -> None:
        if not self._entries:
            raise IndexError("replace_last on empty history")
        self._entries[-1:] = list(replacements)
        self._changed()

    def reset(self, entries: list[HistoryEntry] | None = None) -> None:
        """Drop everything and start over from *entries* (default: seeds)."""
        self._entries = list(entries) if entries is not None else seed_entries()
        self._changed()

    def reversed_user_lines(self) -> Iterator[str]:
        """Yield typed user lines, newest first."""
        for entry in reversed(self._entries):
            if isinstance(entry, UserEntry):
                yield entry.content

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
