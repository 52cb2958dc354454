"""HTTP client for the file-search backend.

One POST per search, JSON in and JSON out:

    POST {base_url}/search|/find|/cmd
    {"query": "...", "base_path": "...", "filters": ["pdf", ...]}
    -> {"results": [{...}, ...], "keywords": ["...", ...]}
"""

from __future__ import annotations

import asyncio
import json
import os
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger

if TYPE_CHECKING:
    from search_terminal.config.schema import ApplicationSettings


class SearchMode(str, Enum):
    """Backend search strategy; each maps to its own endpoint."""

    SEARCH = "search"
    FIND = "find"
    CMD = "cmd"


ENDPOINTS: dict[SearchMode, str] = {
    SearchMode.SEARCH: "/search",
    SearchMode.FIND: "/find",
    SearchMode.CMD: "/cmd",
}

_MAX_DETAIL_CHARS = 200


class SearchError(RuntimeError):
    """Base class for every failure a search can end with."""


class TransportError(SearchError):
    """Backend unreachable, connection dropped or request timed out."""


class BackendError(SearchError):
    """Backend answered with a non-success status."""

    def __init__(self, status: int, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        message = f"Request failed with status code {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MalformedResponseError(SearchError):
    """Backend answered 2xx but the body is not the expected shape."""


class UnsupportedModeError(SearchError):
    """Mode has no endpoint. The classifier never produces one."""


@dataclass(frozen=True, eq=False)
class FileResult:
    """One file or folder reported by the backend.

    ``metadata`` holds every field besides name/path/type so renderers can
    show whatever the backend chose to send.
    """

    name: str
    path: str
    type: str = "file"
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: object) -> "FileResult":
        if not isinstance(payload, dict):
            raise MalformedResponseError(f"result item must be an object, got {type(payload).__name__}")
        path = str(payload.get("path") or payload.get("file_path") or "")
        name = str(payload.get("name") or payload.get("file_name") or os.path.basename(path.rstrip("/\\")) or path)
        kind = str(payload.get("type") or "file")
        metadata = {
            k: v for k, v in payload.items()
            if k not in {"name", "file_name", "path", "file_path", "type"}
        }
        return cls(name=name, path=path, type=kind, metadata=metadata)

    @property
    def is_folder(self) -> bool:
        return self.type.lower() in {"folder", "directory", "dir"}


@dataclass(frozen=True)
class SearchResponse:
    """Parsed backend answer."""

    results: tuple[FileResult, ...] = ()
    keywords: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: object) -> "SearchResponse":
        if not isinstance(payload, dict):
            raise MalformedResponseError("response body must be a JSON object")
        raw_results = payload.get("results") or []
        raw_keywords = payload.get("keywords") or []
        if not isinstance(raw_results, list):
            raise MalformedResponseError("'results' must be a list")
        if not isinstance(raw_keywords, list):
            raise MalformedResponseError("'keywords' must be a list")
        return cls(
            results=tuple(FileResult.from_payload(item) for item in raw_results),
            keywords=tuple(str(word) for word in raw_keywords),
        )


class SearchClient:
    """Blocking urllib transport exposed through an async interface."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        api_key: str | None = None,
        request_timeout_s: float = 30.0,
    ) -> None:
        self.base_url = (base_url or "http://127.0.0.1:8000").rstrip("/")
        self.api_key = (api_key or "").strip()
        if request_timeout_s <= 0:
            raise ValueError(f"request_timeout_s must be positive, got {request_timeout_s}")
        self.request_timeout_s = float(request_timeout_s)

    @classmethod
    def from_settings(cls, settings: "ApplicationSettings") -> "SearchClient":
        return cls(
            base_url=settings.backend.base_url,
            api_key=settings.credential,
            request_timeout_s=settings.backend.request_timeout_s,
        )

    def endpoint_for(self, mode: SearchMode | str) -> str:
        try:
            return ENDPOINTS[SearchMode(mode)]
        except (ValueError, KeyError):
            raise UnsupportedModeError(f"Unsupported search type: {getattr(mode, 'value', mode)}") from None

    async def search(
        self,
        query: str,
        base_path: str,
        filters: Sequence[str],
        mode: SearchMode | str = SearchMode.SEARCH,
        api_key: str | None = None,
    ) -> SearchResponse:
        """Run one search; raises a SearchError subclass on any failure."""
        endpoint = self.endpoint_for(mode)
        payload = {"query": query, "base_path": base_path, "filters": list(filters)}
        credential = (api_key if api_key is not None else self.api_key) or ""
        return await asyncio.to_thread(self._post, endpoint, payload, credential.strip())

    def _post(self, endpoint: str, payload: dict, credential: str) -> SearchResponse:
        url = f"{self.base_url}{endpoint}"
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if credential:
            headers["Authorization"] = f"Bearer {credential}"

        logger.debug(f"POST {url} query={payload['query']!r} filters={payload['filters']}")
        req = urllib.request.Request(url=url, data=body, headers=headers, method="POST")

        try:
            with urllib.request.urlopen(req, timeout=self.request_timeout_s) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as exc:
            body_text = exc.read().decode("utf-8", errors="ignore")
            raise BackendError(exc.code, _error_detail(body_text) or str(exc.reason or "")) from exc
        except urllib.error.URLError as exc:
            raise TransportError(f"Network error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise TransportError(f"Request timed out after {self.request_timeout_s:g}s") from exc
        except OSError as exc:
            raise TransportError(f"Network error: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"Response is not valid JSON: {exc.msg}") from exc
        return SearchResponse.from_payload(data)


def _error_detail(body_text: str) -> str:
    """Pull a short message out of an error body (FastAPI-style ``detail``)."""
    text = (body_text or "").strip()
    if not text:
        return ""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return text[:_MAX_DETAIL_CHARS]
    if isinstance(data, dict):
        for key in ("detail", "error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value[:_MAX_DETAIL_CHARS]
    return text[:_MAX_DETAIL_CHARS]
