"""End-to-end interpreter behaviour over a fake backend."""

from __future__ import annotations

import asyncio
import json

from conftest import FakeSearchClient

from search_terminal.config.loader import save_settings
from search_terminal.providers.search_client import SearchResponse, TransportError
from search_terminal.session.history import ResultsEntry, SystemEntry, UserEntry, seed_entries
from search_terminal.terminal.commands import Help, ListFilters, Search, ToggleFilter
from search_terminal.terminal.interpreter import HELP_TEXT, NO_KEYWORDS, CommandInterpreter


def run(coro):
    return asyncio.run(coro)


def contents(state):
    return [getattr(e, "content", None) for e in state.history.entries]


def test_blank_input_is_ignored(interpreter, state):
    before = state.history.entries
    assert run(interpreter.submit("")) is None
    assert run(interpreter.submit("   ")) is None
    assert state.history.entries == before
    assert not state.is_typing


def test_help_appends_user_line_and_help_text(interpreter, state):
    command = run(interpreter.submit("help"))
    assert command == Help()
    assert isinstance(state.history.entries[-2], UserEntry)
    assert state.history.entries[-2].content == "help"
    assert state.history.last.content == HELP_TEXT
    assert state.pending_input == ""
    assert not state.is_typing


def test_unrecognized_command(interpreter, state):
    run(interpreter.submit("ls -la"))
    assert state.history.last.content == 'Command not recognized: ls -la\nType "help" for available commands'
    assert not state.history.last.is_error


def test_settings_hint(interpreter, state):
    run(interpreter.submit("settings"))
    assert "gear icon" in state.history.last.content


def test_keywords_before_and_after_a_search(interpreter, state):
    run(interpreter.submit("keywords"))
    assert state.history.last.content == NO_KEYWORDS

    run(interpreter.submit("search report"))
    run(interpreter.submit("keywords"))
    assert state.history.last.content == "Detected keywords from last search: report, invoice"


def test_search_dispatches_with_active_filters(interpreter, state, fake_client):
    run(interpreter.submit("filter pdf"))
    command = run(interpreter.submit("Search annual report"))

    assert command == Search(query="annual report")
    assert fake_client.calls == [
        {
            "query": "annual report",
            "base_path": "C:\\\\Users\\\\me",
            "filters": ["pdf"],
            "mode": "search",
            "api_key": None,
        }
    ]
    entries = state.history.entries
    assert isinstance(entries[-3], UserEntry)
    assert entries[-2].content == 'Results for "annual report":'
    assert isinstance(entries[-1], ResultsEntry)


def test_find_and_cmd_use_fixed_offset(interpreter, fake_client):
    run(interpreter.submit("find invoices"))
    run(interpreter.submit("cmd dir c:"))
    assert [(c["mode"], c["query"]) for c in fake_client.calls] == [("find", "voices"), ("cmd", " c:")]


def test_filter_command_toggles_without_replay(interpreter, state, fake_client):
    run(interpreter.submit("search report"))
    calls_before = len(fake_client.calls)

    assert run(interpreter.submit("filter pdf")) == ToggleFilter("pdf")
    assert state.history.last.content == "Added filter: pdf"
    assert state.filters.tags == ("pdf",)

    run(interpreter.submit("filter pdf"))
    assert state.history.last.content == "Removed filter: pdf"
    assert state.filters.tags == ()
    assert len(fake_client.calls) == calls_before


def test_filter_with_empty_tag_lists_filters(interpreter, state):
    assert run(interpreter.submit("filter ")) == ListFilters()
    assert state.history.last.content == "Active filters: None"
    assert state.filters.tags == ()

    run(interpreter.submit("filter docx"))
    run(interpreter.submit("filter txt"))
    run(interpreter.submit("filter "))
    assert state.history.last.content == "Active filters: docx, txt"


def test_clear_resets_history_only(interpreter, state):
    run(interpreter.submit("filter pdf"))
    run(interpreter.submit("search report"))
    keywords = state.keywords

    run(interpreter.submit("clear"))

    assert len(state.history) == 2
    assert contents(state) == [e.content for e in seed_entries()]
    assert state.filters.tags == ("pdf",)
    assert state.keywords == keywords


def test_failed_search_reports_error(state):
    client = FakeSearchClient(error=TransportError("Network error: [Errno 111] Connection refused"))
    interpreter = CommandInterpreter(state, client=client, command_delay_s=0.0)

    run(interpreter.submit("search foo"))

    assert state.history.last.is_error
    assert state.history.last.content.startswith('Error searching for "foo":')
    assert not state.is_loading
    assert state.keywords == ()


def test_filter_click_replays_last_search(interpreter, state, fake_client):
    run(interpreter.submit("search foo"))
    fake_client.calls.clear()

    change, response = run(interpreter.click_filter("pdf"))

    assert change.action == "Added"
    assert response is not None
    assert len(fake_client.calls) == 1
    call = fake_client.calls[0]
    assert (call["query"], call["mode"]) == ("foo", "search")
    assert "pdf" in call["filters"]
    assert "Added filter: pdf" in contents(state)


def test_filter_click_replays_newest_search_with_real_prefix_length(interpreter, state, fake_client):
    run(interpreter.submit("search older"))
    run(interpreter.submit("help"))
    run(interpreter.submit("find invoices"))
    fake_client.calls.clear()

    run(interpreter.click_filter("txt"))

    assert [(c["mode"], c["query"], c["filters"]) for c in fake_client.calls] == [("find", "invoices", ["txt"])]


def test_filter_click_without_prior_search_is_local(interpreter, state, fake_client):
    run(interpreter.submit("help"))

    change, response = run(interpreter.click_filter("pdf"))

    assert change.action == "Added"
    assert response is None
    assert fake_client.calls == []
    assert state.history.last.content == "Added filter: pdf"


def test_filter_click_removes_and_replays_with_remaining(interpreter, state, fake_client):
    run(interpreter.submit("filter pdf"))
    run(interpreter.submit("filter txt"))
    run(interpreter.submit("search foo"))
    fake_client.calls.clear()

    change, _ = run(interpreter.click_filter("pdf"))

    assert change.action == "Removed"
    assert fake_client.calls[0]["filters"] == ["txt"]


def test_replay_keeps_keywords_when_search_fails(state):
    client = FakeSearchClient()
    client.response = SearchResponse(results=(), keywords=("first",))
    interpreter = CommandInterpreter(state, client=client, command_delay_s=0.0)
    run(interpreter.submit("search foo"))

    client.error = TransportError("down")
    run(interpreter.click_filter("pdf"))

    assert state.keywords == ("first",)
    assert state.history.last.is_error


def test_filter_click_on_blank_search_query_is_local(interpreter, state, fake_client):
    state.history.append(UserEntry("search    "))
    run(interpreter.click_filter("pdf"))
    assert fake_client.calls == []


def test_apply_settings_persists_and_announces(interpreter, state, tmp_path):
    updated = state.settings.model_copy(deep=True)
    updated.folder_paths.root = "/srv/files"
    updated.api_key = "abc"

    interpreter.apply_settings(updated)

    assert state.settings.root_path == "/srv/files"
    assert state.history.last.content == "Settings updated successfully!"
    saved = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert saved["folderPaths"]["root"] == "/srv/files"
    assert saved["apiKey"] == "abc"


def test_settings_change_reaches_next_dispatch(interpreter, state, fake_client):
    updated = state.settings.model_copy(deep=True)
    updated.folder_paths.root = "D:\\share"
    updated.api_key = "k2"
    interpreter.apply_settings(updated, persist=False)

    run(interpreter.submit("search x"))

    assert fake_client.calls[-1]["base_path"] == "D:\\\\share"
    assert fake_client.calls[-1]["api_key"] == "k2"


def test_typing_flag_raised_while_local_command_waits(state, fake_client):
    seen: list = []
    interpreter = CommandInterpreter(state, client=fake_client, command_delay_s=0.01)

    async def scenario():
        task = asyncio.create_task(interpreter.submit("help"))
        await asyncio.sleep(0)
        seen.append(state.is_typing)
        seen.append(state.pending_input)
        await task

    run(scenario())
    assert seen == [True, "help"]
    assert not state.is_typing
    assert isinstance(state.history.last, SystemEntry)


class SlowSearchClient(FakeSearchClient):
    """Holds each request open briefly and records peak concurrency."""

    def __init__(self, delay_s: float = 0.05) -> None:
        super().__init__()
        self.delay_s = delay_s
        self.active = 0
        self.max_concurrent = 0

    async def search(self, *args, **kwargs):
        self.active += 1
        self.max_concurrent = max(self.max_concurrent, self.active)
        try:
            await asyncio.sleep(self.delay_s)
            return await super().search(*args, **kwargs)
        finally:
            self.active -= 1


def test_filter_click_during_search_toggles_without_second_request(state):
    client = SlowSearchClient()
    interpreter = CommandInterpreter(state, client=client, command_delay_s=0.0)
    outcome: list = []

    async def scenario():
        search = asyncio.create_task(interpreter.submit("search foo"))
        while not state.is_loading:
            await asyncio.sleep(0)
        outcome.append(await interpreter.click_filter("pdf"))
        await search

    run(scenario())

    change, response = outcome[0]
    assert change.action == "Added"
    assert response is None
    assert state.filters.tags == ("pdf",)
    assert client.max_concurrent == 1
    assert len(client.calls) == 1
    assert "Added filter: pdf" in contents(state)
    assert not state.is_loading


def test_reload_settings_applies_external_change(interpreter, state, fake_client, tmp_path):
    interpreter.watch_settings()
    assert interpreter.reload_settings() is False

    external = state.settings.model_copy(deep=True)
    external.folder_paths.root = "/mnt/archive"
    save_settings(external, tmp_path / "settings.json")

    assert interpreter.reload_settings() is True
    assert state.settings.root_path == "/mnt/archive"
    assert state.history.last.content == "Settings updated successfully!"
    assert interpreter.reload_settings() is False

    run(interpreter.submit("search x"))
    assert fake_client.calls[-1]["base_path"] == "/mnt/archive"


def test_own_save_is_not_reloaded(interpreter, state):
    interpreter.watch_settings()
    interpreter.apply_settings(state.settings.model_copy(deep=True))
    assert interpreter.reload_settings() is False
