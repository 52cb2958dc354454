"""Re-run the last typed search when the filter bar changes."""

from __future__ import annotations

from loguru import logger

from search_terminal.providers.search_client import SearchMode, SearchResponse
from search_terminal.session.filters import FilterChange
from search_terminal.session.history import SystemEntry
from search_terminal.session.state import SessionState
from search_terminal.terminal.commands import match_search_line
from search_terminal.terminal.dispatcher import SearchDispatcher


class ReplayController:
    """Filter-bar toggles: flip the tag, then replay the newest user search.

    The tag is always toggled. The replay is skipped while another search is
    in flight so at most one request is outstanding.
    """

    def __init__(self, state: SessionState, dispatcher: SearchDispatcher) -> None:
        self.state = state
        self.dispatcher = dispatcher

    def last_search(self) -> tuple[SearchMode, str] | None:
        """Newest typed search line as ``(mode, query)``, if any."""
        for line in self.state.history.reversed_user_lines():
            matched = match_search_line(line)
            if matched is not None:
                return matched
        return None

    async def toggle(self, tag: str) -> tuple[FilterChange, SearchResponse | None]:
        # Look up the previous search before the toggle adds its own entry.
        previous = self.last_search()

        change = self.state.filters.toggle(tag)
        self.state.history.append(SystemEntry(change.describe()))

        if previous is None:
            return change, None
        if self.state.is_loading:
            logger.debug(f"Search in flight; not replaying after toggling {tag!r}")
            return change, None
        mode, query = previous
        if not query:
            return change, None

        logger.debug(f"Replaying {mode.value} {query!r} with filters {list(self.state.filters)}")
        response = await self.dispatcher.dispatch(query, self.state.filters.tags, mode)
        return change, response
