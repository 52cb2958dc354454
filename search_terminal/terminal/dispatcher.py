"""Search dispatch: placeholder entry, backend call, result or error entry."""

from __future__ import annotations

from typing import Protocol, Sequence

from loguru import logger

from search_terminal.providers.search_client import SearchError, SearchMode, SearchResponse
from search_terminal.session.history import HistoryEntry, ResultsEntry, SystemEntry
from search_terminal.session.state import SessionState


class SearchBackend(Protocol):
    """What the dispatcher needs from a search client."""

    async def search(
        self,
        query: str,
        base_path: str,
        filters: Sequence[str],
        mode: SearchMode | str = SearchMode.SEARCH,
        api_key: str | None = None,
    ) -> SearchResponse:
        ...


def loading_message(query: str, filters: Sequence[str]) -> str:
    suffix = f" with filters: {', '.join(filters)}" if filters else ""
    return f'Searching for "{query}"{suffix}...'


class SearchDispatcher:
    """Runs one search against the backend and records it in the history.

    Each call owns the placeholder it appended and swaps it out by identity,
    so concurrent calls never overwrite each other's entries.
    """

    def __init__(self, state: SessionState, client: SearchBackend) -> None:
        self.state = state
        self.client = client

    async def dispatch(
        self,
        query: str,
        filters: Sequence[str],
        mode: SearchMode | str = SearchMode.SEARCH,
    ) -> SearchResponse | None:
        """Search and update history. Returns None when the search failed."""
        state = self.state
        filters = list(filters)
        placeholder = SystemEntry(loading_message(query, filters), is_loading=True)
        state.history.append(placeholder)
        state.begin_search()

        try:
            response = await self.client.search(
                query=query,
                base_path=state.settings.transport_base_path,
                filters=filters,
                mode=mode,
                api_key=state.settings.credential,
            )
        except SearchError as exc:
            logger.error(f"Search error for {query!r} ({getattr(mode, 'value', mode)}): {exc}")
            self._settle(placeholder, SystemEntry(f'Error searching for "{query}": {exc}', is_error=True))
            return None
        except Exception as exc:
            logger.exception(f"Unexpected search failure for {query!r}")
            message = str(exc) or "Unknown error"
            self._settle(placeholder, SystemEntry(f'Error searching for "{query}": {message}', is_error=True))
            return None
        else:
            state.keywords = response.keywords
            self._settle(
                placeholder,
                SystemEntry(f'Results for "{query}":'),
                ResultsEntry(content=response.results, keywords=response.keywords),
            )
            logger.info(f"Search {query!r} returned {len(response.results)} result(s)")
            return response
        finally:
            state.end_search()

    def _settle(self, placeholder: SystemEntry, *entries: HistoryEntry) -> None:
        if not self.state.history.replace(placeholder, *entries):
            # Log was cleared while the request was in flight.
            self.state.history.append(*entries)
