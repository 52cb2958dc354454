"""Search backend client."""

from search_terminal.providers.search_client import (
    BackendError,
    FileResult,
    MalformedResponseError,
    SearchClient,
    SearchError,
    SearchMode,
    SearchResponse,
    TransportError,
    UnsupportedModeError,
)

__all__ = [
    "BackendError",
    "FileResult",
    "MalformedResponseError",
    "SearchClient",
    "SearchError",
    "SearchMode",
    "SearchResponse",
    "TransportError",
    "UnsupportedModeError",
]
