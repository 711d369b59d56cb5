# site_crawler/crawler/pool.py
"""
Fixed-size asyncio worker pool fed by one unbounded queue.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional

from site_crawler.logger import get_logger

__all__ = ("WorkerPool",)

Handler = Callable[[str], Awaitable[None]]


class WorkerPool:
    """
    ``size`` workers pull URLs from a shared :class:`asyncio.Queue` and run
    ``handler`` on each. A handler may :meth:`submit` more work; the item is
    marked done only after the handler returns, so :meth:`join` resolves at
    quiescence.
    """

    def __init__(self, size: int, handler: Handler, name: str = "crawl") -> None:
        if size < 1:
            raise ValueError("pool size must be >= 1")
        self.size = size
        self.name = name
        self._handler = handler
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._workers: List[asyncio.Task[None]] = []
        self._closed = False
        self.logger = get_logger()

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(), name=f"{self.name}-worker-{i}")
            for i in range(self.size)
        ]

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Units queued but not yet picked up by a worker."""
        return self._queue.qsize()

    def submit(self, url: str) -> bool:
        """Enqueue *url*; return False (and drop it) once the pool is closed."""
        if self._closed:
            return False
        self._queue.put_nowait(url)
        return True

    def close(self) -> None:
        """Stop accepting new work; queued units still run."""
        self._closed = True

    async def join(self) -> None:
        """Wait until every submitted unit has finished."""
        await self._queue.join()

    def cancel(self) -> int:
        """Cancel all workers and discard queued units; return the number discarded."""
        self._closed = True
        for w in self._workers:
            w.cancel()
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
            dropped += 1
        return dropped

    async def wait_stopped(self, timeout: Optional[float] = None) -> None:
        """Wait for cancelled workers to unwind."""
        if not self._workers:
            return
        await asyncio.wait(self._workers, timeout=timeout)

    # -- internals -----------------------------------------------------------

    async def _worker(self) -> None:
        while True:
            url = await self._queue.get()
            try:
                await self._handler(url)
            except Exception:
                # handlers contain their own failures; this keeps the worker alive
                self.logger.exception("Unhandled error for %s", url)
            finally:
                self._queue.task_done()
