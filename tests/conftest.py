"""
Shared fixtures for html-tool tests.
"""

from __future__ import annotations

import io
import logging
from typing import Callable

import httpx
import pytest

from htmltool.core.backends.file_backend import FileStream
from htmltool.core.backends.http_backend import HttpBackend
from htmltool.core.logging import LOGGER_NAME


class TrackingStream(FileStream):
    """File stream over bytes that counts how often it is released."""

    def __init__(self, data: bytes, chunk_size: int = 64 * 1024) -> None:
        self.buffer = io.BytesIO(data)
        super().__init__(self.buffer, chunk_size=chunk_size)
        self.release_count = 0

    async def _release(self) -> None:
        self.release_count += 1
        await super()._release()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler/level changes made by setup_logging in CLI tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_stream() -> Callable[..., TrackingStream]:
    """Build an in-memory document stream."""
    def factory(data: bytes | str, chunk_size: int = 64 * 1024) -> TrackingStream:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return TrackingStream(data, chunk_size=chunk_size)

    return factory


@pytest.fixture
def write_html(tmp_path):
    """Write an HTML file under tmp_path and return its path as a string."""
    def factory(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return factory


@pytest.fixture
def mock_backend() -> Callable[..., HttpBackend]:
    """Build an HttpBackend served by an httpx.MockTransport handler."""
    def factory(handler) -> HttpBackend:
        return HttpBackend(transport=httpx.MockTransport(handler))

    return factory
