"""
Rate limiting utilities.

Provides a global dispatch gate that keeps a minimum delay between
successive fetches across all workers.
"""

from __future__ import annotations

import asyncio
import time


class RateLimiter:
    """Global minimum-delay gate between successive dispatches.

    Each caller reserves the next free dispatch slot under a lock and then
    sleeps outside it until that slot arrives, so waiting workers queue up
    behind one another without holding the lock. The first dispatch is
    never delayed.
    """

    def __init__(self, delay_ms: int = 100):
        """Initialize rate limiter.

        Args:
            delay_ms: Minimum spacing between dispatches in milliseconds
        """
        self.delay = max(0, delay_ms) / 1000.0
        self._next_slot: float | None = None
        self._lock = asyncio.Lock()
        self._dispatched = 0

    @property
    def dispatched(self) -> int:
        """Number of dispatches granted so far."""
        return self._dispatched

    async def _reserve(self) -> float:
        """Reserve the next dispatch slot and return seconds to wait."""
        async with self._lock:
            now = time.monotonic()
            if self._next_slot is None or now >= self._next_slot:
                slot = now
            else:
                slot = self._next_slot
            self._next_slot = slot + self.delay
            self._dispatched += 1
            return slot - now

    async def acquire(self) -> None:
        """Block until this caller may dispatch."""
        if self.delay <= 0:
            self._dispatched += 1
            return

        wait_time = await self._reserve()
        if wait_time > 0:
            await asyncio.sleep(wait_time)

