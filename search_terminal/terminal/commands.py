"""Typed terminal commands and the input-line classifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from loguru import logger

from search_terminal.providers.search_client import SearchMode

# Every prefixed command slices its argument at this offset, including the
# shorter ``find `` and ``cmd `` prefixes.
ARGUMENT_OFFSET = 7

FILTER_PREFIX = "filter "


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class ShowKeywords:
    pass


@dataclass(frozen=True)
class OpenSettingsHint:
    pass


@dataclass(frozen=True)
class SearchCommand:
    """Backend search; subclasses pick the endpoint."""

    mode: ClassVar[SearchMode]

    query: str


@dataclass(frozen=True)
class Search(SearchCommand):
    mode: ClassVar[SearchMode] = SearchMode.SEARCH


@dataclass(frozen=True)
class Find(SearchCommand):
    mode: ClassVar[SearchMode] = SearchMode.FIND


@dataclass(frozen=True)
class Cmd(SearchCommand):
    mode: ClassVar[SearchMode] = SearchMode.CMD


@dataclass(frozen=True)
class ListFilters:
    pass


@dataclass(frozen=True)
class ToggleFilter:
    tag: str


@dataclass(frozen=True)
class Unrecognized:
    original: str


Command = Union[
    Help,
    Clear,
    ShowKeywords,
    OpenSettingsHint,
    Search,
    Find,
    Cmd,
    ListFilters,
    ToggleFilter,
    Unrecognized,
]

SEARCH_PREFIXES: dict[str, type[SearchCommand]] = {
    "search ": Search,
    "find ": Find,
    "cmd ": Cmd,
}

_EXACT: dict[str, Command] = {
    "help": Help(),
    "clear": Clear(),
    "keywords": ShowKeywords(),
    "settings": OpenSettingsHint(),
}


def classify(text: str) -> Command:
    """Map one input line to a command. Pure; never raises.

    Matching is case-insensitive. The argument of ``search``/``find``/``cmd``
    keeps its original casing and surrounding spaces.
    """
    lowered = text.lower()
    command = _EXACT.get(lowered)
    if command is not None:
        return command

    for prefix, command_cls in SEARCH_PREFIXES.items():
        if lowered.startswith(prefix):
            return command_cls(query=text[ARGUMENT_OFFSET:])

    if lowered.startswith(FILTER_PREFIX):
        tag = text[ARGUMENT_OFFSET:].strip()
        return ToggleFilter(tag) if tag else ListFilters()

    logger.debug(f"Unrecognized command: {text!r}")
    return Unrecognized(text)


def match_search_line(line: str) -> tuple[SearchMode, str] | None:
    """Recover ``(mode, query)`` from a previously typed search line.

    Unlike :func:`classify`, the query is sliced at the real length of the
    matched prefix and stripped.
    """
    lowered = line.lower()
    for prefix, command_cls in SEARCH_PREFIXES.items():
        if lowered.startswith(prefix):
            return command_cls.mode, line[len(prefix):].strip()
    return None
