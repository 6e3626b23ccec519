"""
Extraction runner orchestrator.

Coordinates the whole run: read locations → open files / fetch URLs →
hand targets to a single consumer → extract → print.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, TextIO

from htmltool.core.backends.base import BackendError, FetchRequest, OpenError, Target
from htmltool.core.backends.file_backend import open_file
from htmltool.core.backends.http_backend import HttpBackend
from htmltool.core.config.models import FetchConfig
from htmltool.core.extract.base import Extractor
from htmltool.core.fetch.pipeline import FetchPipeline
from htmltool.core.logging import get_contextual_logger
from htmltool.core.normalize.urls import is_url


logger = logging.getLogger(__name__)

# Handoff channel size. asyncio has no unbuffered channel; one slot is
# the smallest buffer a Queue allows.
CHANNEL_SIZE = 1


@dataclass
class RunStats:
    """Statistics for an extraction run."""

    locations_read: int = 0
    urls_submitted: int = 0
    files_opened: int = 0
    targets_processed: int = 0
    lines_emitted: int = 0
    open_errors: int = 0
    fetch_errors: int = 0
    read_errors: int = 0
    extract_errors: int = 0

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    @property
    def errors_count(self) -> int:
        return self.open_errors + self.fetch_errors + self.read_errors + self.extract_errors

    @property
    def duration_seconds(self) -> float | None:
        """Get run duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "locations_read": self.locations_read,
            "urls_submitted": self.urls_submitted,
            "files_opened": self.files_opened,
            "targets_processed": self.targets_processed,
            "lines_emitted": self.lines_emitted,
            "errors_count": self.errors_count,
            "duration_seconds": self.duration_seconds,
        }


async def read_locations(source: TextIO) -> AsyncIterator[str]:
    """Yield trimmed, non-blank lines from a text stream.

    Lines are read in a worker thread so a slow stdin never stalls the
    fetches already in flight.
    """
    while True:
        line = await asyncio.to_thread(source.readline)
        if not line:
            return
        location = line.strip()
        if location:
            yield location


class ExtractionRunner:
    """Run one extractor over every location read from an input stream.

    Shutdown order: input exhausted → wait for all in-flight fetches →
    close the channel → wait for the consumer to drain it. On a fatal
    error every open target still in the pipeline is closed.
    """

    def __init__(
        self,
        extractor: Extractor,
        fetch_config: FetchConfig | None = None,
        output: TextIO | None = None,
        backend: HttpBackend | None = None,
    ):
        """Initialize the runner.

        Args:
            extractor: Strategy applied to every document
            fetch_config: Fetch settings (defaults if omitted)
            output: Where extracted lines go (default: stdout)
            backend: HTTP backend (built from fetch_config if omitted)
        """
        self.extractor = extractor
        self.fetch_config = fetch_config or FetchConfig()
        self.output = output
        self.backend = backend or HttpBackend(
            timeout=self.fetch_config.timeout,
            verify_tls=self.fetch_config.verify_tls,
            follow_redirects=self.fetch_config.follow_redirects,
            user_agent=self.fetch_config.user_agent,
            max_connections=self.fetch_config.concurrency,
        )
        self.headers = self.fetch_config.header_pairs
        self.stats = RunStats()

    async def run(self, source: TextIO | None = None) -> RunStats:
        """Process every location from ``source`` (default: stdin).

        Returns:
            Run statistics

        Raises:
            RequestBuildError: If a request cannot be built for a URL
        """
        source = source if source is not None else sys.stdin

        if self.extractor.config_error:
            logger.error("%s", self.extractor.config_error)

        channel: asyncio.Queue[Target | None] = asyncio.Queue(maxsize=CHANNEL_SIZE)
        pipeline = FetchPipeline(
            self.backend,
            channel,
            concurrency=self.fetch_config.concurrency,
            delay_ms=self.fetch_config.delay_ms,
        )

        async with self.backend:
            consumer = asyncio.create_task(self._consume(channel))

            # A consumer that dies would leave producers blocked on the channel
            main = asyncio.current_task()

            def _on_consumer_done(task: asyncio.Task[None]) -> None:
                if main is not None and not task.cancelled() and task.exception() is not None:
                    main.cancel()

            consumer.add_done_callback(_on_consumer_done)

            try:
                async for location in read_locations(source):
                    self.stats.locations_read += 1
                    await self._produce(location, pipeline, channel)

                await pipeline.wait()
                await channel.put(None)
                await consumer
            except BaseException:
                await pipeline.cancel()
                consumer.cancel()
                await asyncio.gather(consumer, return_exceptions=True)
                await self._discard(channel)
                if not consumer.cancelled() and consumer.exception() is not None:
                    raise consumer.exception()
                raise
            finally:
                self.stats.fetch_errors = pipeline.failed
                self.stats.finished_at = datetime.now(timezone.utc)

        logger.info("Run finished: %s", self.stats.to_dict())
        return self.stats

    async def _produce(
        self,
        location: str,
        pipeline: FetchPipeline,
        channel: asyncio.Queue[Target | None],
    ) -> None:
        """Route one location to the fetch pipeline or open it directly."""
        if is_url(location):
            request = self.backend.build_request(
                FetchRequest(url=location, headers=self.headers)
            )
            await pipeline.submit(request)
            self.stats.urls_submitted += 1
            return

        try:
            target = open_file(location)
        except OpenError as e:
            self.stats.open_errors += 1
            logger.error("%s", e, extra={"url": location})
            return

        self.stats.files_opened += 1
        try:
            await channel.put(target)
        except BaseException:
            await target.stream.aclose()
            raise

    async def _consume(self, channel: asyncio.Queue[Target | None]) -> None:
        """Single consumer: extract from each target in arrival order."""
        while True:
            target = await channel.get()
            if target is None:
                return
            try:
                await self._process(target)
            finally:
                await target.stream.aclose()

    async def _process(self, target: Target) -> None:
        log = get_contextual_logger("engine", origin=target.origin, mode=self.extractor.name)
        try:
            values = await self.extractor.extract(target.stream, target.origin)
        except BackendError as e:
            self.stats.read_errors += 1
            log.error("%s", e)
            return
        except Exception as e:
            self.stats.extract_errors += 1
            log.exception("extraction failed: %s", e)
            return

        out = self.output if self.output is not None else sys.stdout
        for value in values:
            out.write(value + "\n")
        out.flush()

        self.stats.targets_processed += 1
        self.stats.lines_emitted += len(values)
        log.debug("Extracted %d values", len(values))

    async def _discard(self, channel: asyncio.Queue[Target | None]) -> None:
        """Close every target left in the channel after an abort."""
        while not channel.empty():
            target = channel.get_nowait()
            if target is not None:
                await target.stream.aclose()
