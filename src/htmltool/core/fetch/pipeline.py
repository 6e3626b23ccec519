"""
Concurrent fetch pipeline.

Dispatches HTTP requests with a concurrency ceiling and a global minimum
delay between dispatches, and hands every successfully opened document
to a single consumer through a bounded channel.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from htmltool.core.backends.base import FetchError, FetchRequest, Target

from .throttling import RateLimiter

if TYPE_CHECKING:
    from htmltool.core.backends.http_backend import HttpBackend


logger = logging.getLogger(__name__)


class FetchPipeline:
    """Bounded pool of fetch workers feeding a handoff channel.

    ``submit`` suspends the producer while all worker slots are busy. A
    worker keeps its slot until the consumer has accepted its target, so
    fetched bodies never pile up in memory faster than they are processed.

    Usage:
        pipeline = FetchPipeline(backend, channel, concurrency=40, delay_ms=100)
        for request in requests:
            await pipeline.submit(request)
        await pipeline.wait()
    """

    def __init__(
        self,
        backend: "HttpBackend",
        channel: asyncio.Queue,
        concurrency: int = 40,
        delay_ms: int = 100,
    ):
        """Initialize the pipeline.

        Args:
            backend: HTTP backend used to open responses
            channel: Handoff queue read by the extraction consumer
            concurrency: Max in-flight fetches
            delay_ms: Minimum delay between dispatches in milliseconds
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        self.backend = backend
        self.channel = channel
        self.concurrency = concurrency
        self.rate_limiter = RateLimiter(delay_ms)

        self._slots = asyncio.Semaphore(concurrency)
        self._tasks: set[asyncio.Task[None]] = set()

        self.submitted = 0
        self.delivered = 0
        self.failed = 0
        self.in_flight = 0
        self.peak_in_flight = 0

    async def submit(self, request: FetchRequest | httpx.Request) -> None:
        """Queue a request, waiting for a free worker slot."""
        await self._slots.acquire()
        try:
            task = asyncio.create_task(self._worker(request))
        except BaseException:
            self._slots.release()
            raise
        self.submitted += 1
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _worker(self, request: FetchRequest | httpx.Request) -> None:
        try:
            await self.rate_limiter.acquire()

            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            try:
                target = await self.backend.open(request)
            except FetchError as e:
                self.failed += 1
                logger.error("%s", e, extra={"url": e.url})
                return
            finally:
                self.in_flight -= 1

            if target is not None:
                await self._deliver(target)
        finally:
            self._slots.release()

    async def _deliver(self, target: Target) -> None:
        """Push a target into the channel, closing it if never accepted."""
        try:
            await self.channel.put(target)
        except BaseException:
            await target.stream.aclose()
            raise
        self.delivered += 1

    async def wait(self) -> None:
        """Wait until every submitted request has finished its handoff."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def cancel(self) -> None:
        """Cancel all in-flight work and wait for it to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
