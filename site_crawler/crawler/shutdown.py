# site_crawler/crawler/shutdown.py
"""
Shutdown controller: drains the worker pool within a grace period and
force-cancels whatever is still running afterwards.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from site_crawler.crawler.pool import WorkerPool
from site_crawler.logger import get_logger

__all__ = ("ShutdownController", "DEFAULT_GRACE_PERIOD")

DEFAULT_GRACE_PERIOD = 600.0

# how long cancelled workers get to unwind after a forced stop
_UNWIND_TIMEOUT = 5.0


class ShutdownController:
    """Closes a :class:`WorkerPool` and brings it to a halt."""

    def __init__(self, pool: WorkerPool, grace_period: float = DEFAULT_GRACE_PERIOD) -> None:
        if grace_period <= 0:
            raise ValueError("grace_period must be > 0")
        self.pool = pool
        self.grace_period = grace_period
        self.forced = False
        self._outcome: Optional[bool] = None
        self.logger = get_logger()

    @property
    def done(self) -> bool:
        return self._outcome is not None

    async def shutdown(self) -> bool:
        """
        Stop accepting work and wait for queued and running units.

        Returns True when the pool drained within the grace period and False
        when it had to be cancelled. Cancellation of this coroutine cancels
        the pool at once and is re-raised.
        """
        if self._outcome is not None:
            return self._outcome

        self.pool.close()
        try:
            await asyncio.wait_for(self.pool.join(), timeout=self.grace_period)
        except asyncio.TimeoutError:
            self.logger.warning(
                "Pool did not finish within %.1f s, cancelling %d pending unit(s)",
                self.grace_period,
                self.pool.pending,
            )
            self.cancel()
            await self.pool.wait_stopped(timeout=_UNWIND_TIMEOUT)
            return False
        except asyncio.CancelledError:
            self.logger.warning("Shutdown interrupted, cancelling pool")
            self.cancel()
            raise

        if self._outcome is not None:
            # cancelled while we were waiting
            return self._outcome
        # idle workers are parked on queue.get()
        self.pool.cancel()
        await self.pool.wait_stopped(timeout=_UNWIND_TIMEOUT)
        self._outcome = True
        return True

    def cancel(self) -> None:
        """Cancel the pool at once; a later :meth:`shutdown` returns False."""
        if self._outcome is True:
            return
        self.forced = True
        self._outcome = False
        dropped = self.pool.cancel()
        if dropped:
            self.logger.debug("Discarded %d queued unit(s)", dropped)
