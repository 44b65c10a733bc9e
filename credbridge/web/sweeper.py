"""Background expiry sweep for issued challenges."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from credbridge.auth.secret_cache import SecretCache

logger = structlog.get_logger(__name__)


class ChallengeSweeper:
    """Periodically evicts expired secrets and deletes their token files.

    Each sweep runs in a worker thread so file deletion never blocks request
    handling on the event loop.
    """

    def __init__(self, cache: SecretCache, interval: float = 1.0) -> None:
        self._cache = cache
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Cancel the sweep loop and clean up every outstanding token file."""
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        cleared = await asyncio.to_thread(self._cache.clear)
        logger.info("sweeper_stopped", cleared=cleared)

    async def run(self) -> None:
        """Main sweep loop."""
        logger.info("sweeper_started", interval=self._interval)
        while True:
            try:
                await asyncio.sleep(self._interval)
                evicted = await asyncio.to_thread(self._cache.sweep)
                if evicted:
                    logger.debug("sweep_completed", evicted=evicted)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("sweep_error")
