"""TerminalApp call marshalling without a running Tk mainloop."""

from __future__ import annotations

import pytest

pytest.importorskip("customtkinter")

from search_terminal.config.schema import ApplicationSettings  # noqa: E402
from search_terminal.gui.app import TerminalApp  # noqa: E402


def test_calls_before_startup_are_queued():
    app = TerminalApp(ApplicationSettings())
    app.set_loading(True)
    app.receive_filters(("pdf",))
    assert len(app._pending_calls) == 2


def test_calls_after_close_are_dropped():
    app = TerminalApp(ApplicationSettings())
    app.set_loading(True)

    app._handle_close()
    app.set_loading(False)
    app.receive_history(())

    assert app._pending_calls == []


def test_queued_calls_run_once_on_startup():
    app = TerminalApp(ApplicationSettings())
    ran: list[str] = []
    app._run_on_ui(lambda: ran.append("a"))
    app._run_on_ui(lambda: ran.append("b"))

    app._apply_pending_calls()

    assert ran == ["a", "b"]
    assert app._pending_calls == []
