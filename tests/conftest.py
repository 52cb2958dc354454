"""Shared fixtures: fake search client and a local mock search backend."""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

import pytest

from search_terminal.config.schema import ApplicationSettings
from search_terminal.providers.search_client import FileResult, SearchResponse
from search_terminal.session.state import SessionState
from search_terminal.terminal.interpreter import CommandInterpreter


class FakeSearchClient:
    """Records calls; answers with a canned response or raises."""

    def __init__(self, response: SearchResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or SearchResponse()
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def search(self, query, base_path, filters, mode="search", api_key=None):
        self.calls.append(
            {
                "query": query,
                "base_path": base_path,
                "filters": list(filters),
                "mode": getattr(mode, "value", mode),
                "api_key": api_key,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


def sample_response() -> SearchResponse:
    return SearchResponse(
        results=(
            FileResult(name="report.pdf", path="/data/report.pdf", type="file", metadata={"size": 1024}),
            FileResult(name="invoices", path="/data/invoices", type="folder"),
        ),
        keywords=("report", "invoice"),
    )


@pytest.fixture
def settings() -> ApplicationSettings:
    s = ApplicationSettings()
    s.folder_paths.root = "C:\\Users\\me"
    s.terminal.command_delay_s = 0.0
    return s


@pytest.fixture
def state(settings: ApplicationSettings) -> SessionState:
    return SessionState(settings=settings)


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient(response=sample_response())


@pytest.fixture
def interpreter(state: SessionState, fake_client: FakeSearchClient, tmp_path) -> CommandInterpreter:
    return CommandInterpreter(
        state,
        client=fake_client,
        command_delay_s=0.0,
        settings_path=tmp_path / "settings.json",
    )


class _MockHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        raw = self.rfile.read(length) if length else b""
        self.server.requests.append(
            {
                "path": self.path,
                "headers": dict(self.headers),
                "body": json.loads(raw) if raw else None,
            }
        )
        status, body = self.server.reply
        data = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def mock_backend():
    """Local search backend on an ephemeral port.

    Set ``server.reply = (status, body)`` to choose the answer; inspect
    ``server.requests`` afterwards.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _MockHandler)
    server.requests = []
    server.reply = (200, {"results": [], "keywords": []})
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=2)


@pytest.fixture
def backend_url(mock_backend) -> str:
    host, port = mock_backend.server_address[:2]
    return f"http://{host}:{port}"
