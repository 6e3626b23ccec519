"""
Backend base classes and data structures.

Defines the request, target and document stream types shared by the
file and HTTP backends, and the backend error hierarchy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator


@dataclass
class FetchRequest:
    """Specification for an outgoing HTTP request."""

    url: str
    method: str = "GET"
    headers: list[tuple[str, str]] = field(default_factory=list)


class DocumentStream(ABC):
    """Exclusively owned readable byte source for one document.

    Whoever holds the stream is responsible for closing it. ``aclose`` is
    idempotent so a stream is released exactly once.
    """

    def __init__(self) -> None:
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def chunks(self) -> AsyncIterator[bytes]:
        """Iterate over the document body in chunks.

        Raises:
            BackendError: If the underlying source fails mid-read
        """

    @abstractmethod
    async def _release(self) -> None:
        """Release the underlying resource."""

    async def aclose(self) -> None:
        """Close the stream; later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        await self._release()

    async def drain(self) -> None:
        """Read and discard whatever is left of the stream."""
        async for _ in self.chunks():
            pass


@dataclass
class Target:
    """An opened document paired with the location it was read from."""

    origin: str
    stream: DocumentStream


class BackendError(Exception):
    """Base exception for backend errors."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class FetchError(BackendError):
    """Transport failure while fetching or reading a response."""
    pass


class OpenError(BackendError):
    """Local file could not be opened or read."""
    pass


class RequestBuildError(BackendError):
    """A request could not be constructed for a location (fatal)."""
    pass

