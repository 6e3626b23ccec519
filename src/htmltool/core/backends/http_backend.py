"""
HTTP Backend implementation using httpx.

Provides async HTTP fetching with:
- Configurable headers applied verbatim to every request
- Streamed response bodies handed off as document targets
- Redirect following, with the final URL as the document origin
- TLS verification disabled unless configured otherwise
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx

from htmltool import __app_name__, __version__

from .base import (
    DocumentStream,
    FetchError,
    FetchRequest,
    RequestBuildError,
    Target,
)


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"{__app_name__}/{__version__}"


class ResponseStream(DocumentStream):
    """Document stream over a streamed httpx response body.

    The first non-empty chunk has already been read by the backend to
    check the body is not empty; it is replayed before the rest.
    """

    def __init__(
        self,
        response: httpx.Response,
        body: AsyncIterator[bytes],
        first_chunk: bytes,
    ) -> None:
        super().__init__()
        self.response = response
        self._body = body
        self._first_chunk = first_chunk

    async def chunks(self) -> AsyncIterator[bytes]:
        if self._first_chunk:
            chunk, self._first_chunk = self._first_chunk, b""
            yield chunk
        while not self._closed:
            try:
                chunk = await anext(self._body, b"")
            except httpx.HTTPError as e:
                raise FetchError(
                    f"failed to read response body: {e}",
                    url=str(self.response.url),
                    cause=e,
                ) from e
            if not chunk:
                return
            yield chunk

    async def _release(self) -> None:
        aclose = getattr(self._body, "aclose", None)
        if aclose is not None:
            await aclose()
        await self.response.aclose()


class HttpBackend:
    """HTTP backend using httpx for async requests.

    Features:
    - Persistent connection pooling sized to the fetch concurrency
    - Automatic redirect following
    - No retries: a transport error fails the request
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_tls: bool = False,
        follow_redirects: bool = True,
        user_agent: str | None = None,
        max_connections: int = 40,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP backend.

        Args:
            timeout: Transport timeout per request in seconds
            verify_tls: Verify TLS certificates
            follow_redirects: Follow redirects
            user_agent: Default user agent
            max_connections: Connection pool size
            transport: Custom transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.follow_redirects = follow_redirects
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.max_connections = max_connections
        self._transport = transport

        self._client: httpx.AsyncClient | None = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=self.follow_redirects,
                verify=self.verify_tls,
                headers={"User-Agent": self.user_agent},
                limits=httpx.Limits(max_connections=self.max_connections),
                transport=self._transport,
            )
        return self._client

    def build_request(self, request: FetchRequest) -> httpx.Request:
        """Construct the httpx request for a fetch request.

        Headers are applied in order with set semantics, so a later spec
        for the same name replaces an earlier one.

        Raises:
            RequestBuildError: If the URL cannot be used to build a request
        """
        client = self._ensure_client()
        try:
            built = client.build_request(request.method, request.url)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError) as e:
            raise RequestBuildError(
                f"failed to create request for: {request.url}. Error: {e}",
                url=request.url,
                cause=e,
            ) from e

        for name, value in request.headers:
            try:
                built.headers[name] = value
            except (TypeError, ValueError) as e:
                raise RequestBuildError(
                    f"failed to create request for: {request.url}. Error: bad header {name!r}: {e}",
                    url=request.url,
                    cause=e,
                ) from e
        return built

    async def open(self, request: FetchRequest | httpx.Request) -> Target | None:
        """Send a request and open its body as a target.

        Args:
            request: Fetch request, or an already built httpx request

        Returns:
            Target with the final URL as origin, or None if the response
            body is empty. The caller owns the returned stream.

        Raises:
            RequestBuildError: If the request cannot be constructed
            FetchError: On transport failure
        """
        if isinstance(request, FetchRequest):
            request = self.build_request(request)
        client = self._ensure_client()
        url = str(request.url)

        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise FetchError(f"failed to fetch URL: {url}: {e}", url=url, cause=e) from e

        if not response.is_success:
            logger.debug("%s -> %s", url, response.status_code)

        body = response.aiter_bytes()
        try:
            first_chunk = await anext(body, b"")
        except httpx.HTTPError as e:
            await response.aclose()
            raise FetchError(
                f"failed to fetch URL: {url}: {e}",
                url=url,
                status_code=response.status_code,
                cause=e,
            ) from e
        except BaseException:
            await response.aclose()
            raise

        if not first_chunk:
            logger.debug("Empty body from %s, skipping", url)
            await response.aclose()
            return None

        return Target(
            origin=str(response.url),
            stream=ResponseStream(response, body, first_chunk),
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpBackend":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
