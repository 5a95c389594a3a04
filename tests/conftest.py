"""
Shared pytest fixtures.

HTTP is faked with FakeSession/FakeResponse objects injected wherever the
code accepts a ``session``; the retry pause is replaced by a recorder.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import pytest
import requests

from src.logger import DEFAULT_LOGGER_NAME
from src.sync import fetcher
from src.sync.config import SyncConfig


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"",
        headers: Optional[dict[str, str]] = None,
        payload: Any = None,
        stream_error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.payload = payload
        self.stream_error = stream_error
        self.closed = False

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start:start + chunk_size]
        if self.stream_error is not None:
            raise self.stream_error

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def close(self):
        self.closed = True


class FakeSession:
    """
    Session whose responses come from ``routes``.

    A route value may be a FakeResponse, an exception instance, a list of
    those (consumed in order, the last one repeating), or a callable taking
    the request keyword arguments.
    """

    def __init__(self, routes: Optional[dict[str, Any]] = None):
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}

    def get(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        if url not in self.routes:
            return FakeResponse(404)
        route = self.routes[url]
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if callable(route) and not isinstance(route, FakeResponse):
            route = route(**kwargs)
        if isinstance(route, Exception):
            raise route
        return route

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    def close(self):
        pass


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every test from a scratch directory (log files land there)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers bound to a previous test's captured streams."""
    yield
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record retry pauses instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(fetcher.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def config(tmp_path: Path) -> SyncConfig:
    return SyncConfig(
        documents_root=tmp_path / "content",
        images_root=tmp_path / "static" / "images",
    )


@pytest.fixture
def image_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0" + b"jpegdata" * 2000
