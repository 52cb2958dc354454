"""Search dispatch: placeholder, results, errors, flags."""

from __future__ import annotations

import asyncio

from conftest import FakeSearchClient, sample_response

from search_terminal.providers.search_client import (
    BackendError,
    MalformedResponseError,
    SearchClient,
    SearchMode,
    TransportError,
)
from search_terminal.session.events import LOADING_CHANGED
from search_terminal.session.history import ResultsEntry, SystemEntry
from search_terminal.terminal.dispatcher import SearchDispatcher, loading_message


def test_loading_message():
    assert loading_message("foo", []) == 'Searching for "foo"...'
    assert loading_message("foo", ["pdf", "txt"]) == 'Searching for "foo" with filters: pdf, txt...'


def test_success_replaces_placeholder_with_summary_and_results(state, fake_client):
    dispatcher = SearchDispatcher(state, fake_client)
    before = len(state.history)

    response = asyncio.run(dispatcher.dispatch("foo", ["pdf"], SearchMode.SEARCH))

    assert response is not None
    entries = state.history.entries
    assert len(entries) == before + 2
    summary, results = entries[-2], entries[-1]
    assert isinstance(summary, SystemEntry) and summary.content == 'Results for "foo":'
    assert not summary.is_loading
    assert isinstance(results, ResultsEntry)
    assert [r.name for r in results.content] == ["report.pdf", "invoices"]
    assert results.keywords == ("report", "invoice")
    assert state.keywords == ("report", "invoice")
    assert not any(getattr(e, "is_loading", False) for e in entries)
    assert not state.is_loading


def test_request_carries_doubled_backslashes_and_credential(state, fake_client):
    state.settings.api_key = "token"
    asyncio.run(SearchDispatcher(state, fake_client).dispatch("foo", [], SearchMode.FIND))

    call = fake_client.calls[0]
    assert call["base_path"] == "C:\\\\Users\\\\me"
    assert call["api_key"] == "token"
    assert call["mode"] == "find"


def test_no_credential_when_key_blank(state, fake_client):
    state.settings.api_key = "   "
    asyncio.run(SearchDispatcher(state, fake_client).dispatch("foo", [], SearchMode.SEARCH))
    assert fake_client.calls[0]["api_key"] is None


def test_failure_leaves_error_entry_and_clears_flag(state):
    client = FakeSearchClient(error=TransportError("Network error: refused"))
    before = len(state.history)

    response = asyncio.run(SearchDispatcher(state, client).dispatch("foo", [], SearchMode.SEARCH))

    assert response is None
    assert len(state.history) == before + 1
    last = state.history.last
    assert isinstance(last, SystemEntry)
    assert last.is_error
    assert last.content == 'Error searching for "foo": Network error: refused'
    assert not state.is_loading


def test_failure_keeps_previous_keywords(state):
    state.keywords = ("old",)
    client = FakeSearchClient(error=BackendError(502))
    asyncio.run(SearchDispatcher(state, client).dispatch("foo", [], SearchMode.SEARCH))
    assert state.keywords == ("old",)
    assert state.history.last.content.endswith("Request failed with status code 502")


def test_unexpected_exception_is_contained(state):
    client = FakeSearchClient(error=ValueError("boom"))
    asyncio.run(SearchDispatcher(state, client).dispatch("foo", [], SearchMode.SEARCH))
    assert state.history.last.is_error
    assert state.history.last.content == 'Error searching for "foo": boom'


def test_unsupported_mode_becomes_error_entry(state, mock_backend, backend_url):
    client = SearchClient(base_url=backend_url)
    asyncio.run(SearchDispatcher(state, client).dispatch("foo", [], "grep"))
    assert state.history.last.is_error
    assert "Unsupported search type: grep" in state.history.last.content
    assert mock_backend.requests == []


def test_loading_flag_raised_during_request(state):
    observed: list[bool] = []

    class Probe(FakeSearchClient):
        async def search(self, *args, **kwargs):
            observed.append(state.is_loading)
            observed.append(state.history.last.is_loading)
            return await super().search(*args, **kwargs)

    flips: list[bool] = []
    state.events.subscribe(LOADING_CHANGED, lambda p: flips.append(p.value))
    asyncio.run(SearchDispatcher(state, Probe()).dispatch("foo", [], SearchMode.SEARCH))

    assert observed == [True, True]
    assert flips == [True, False]


def test_entries_appended_during_flight_are_kept(state):
    class Slow(FakeSearchClient):
        async def search(self, *args, **kwargs):
            state.history.append(SystemEntry("Added filter: pdf"))
            return await super().search(*args, **kwargs)

    asyncio.run(SearchDispatcher(state, Slow(response=sample_response())).dispatch("foo", [], SearchMode.SEARCH))

    contents = [getattr(e, "content", None) for e in state.history.entries[-3:]]
    assert contents[0] == 'Results for "foo":'
    assert isinstance(state.history.entries[-2], ResultsEntry)
    assert contents[2] == "Added filter: pdf"


def test_results_appended_when_log_cleared_mid_flight(state):
    class Clearing(FakeSearchClient):
        async def search(self, *args, **kwargs):
            state.history.reset()
            return await super().search(*args, **kwargs)

    asyncio.run(SearchDispatcher(state, Clearing(error=MalformedResponseError("bad"))).dispatch("q", [], "search"))

    assert len(state.history) == 3
    assert state.history.last.is_error
