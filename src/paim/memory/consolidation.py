"""Background consolidation - the periodic trigger owned by the host service."""

import asyncio
import contextlib
from datetime import datetime, timedelta

from paim.core.errors import PaimError
from paim.core.logging import get_logger
from paim.memory.engine import MemoryEngine

logger = get_logger("memory.consolidation")


class ConsolidationLoop:
    """Runs ``engine.consolidate()`` every ``interval`` until stopped.

    Failures are logged and the loop keeps going; cancellation via ``stop()``
    interrupts a run in progress without touching facts already committed.
    """

    def __init__(self, engine: MemoryEngine, interval: timedelta):
        if interval <= timedelta(0):
            raise ValueError(f"consolidation interval must be positive, got {interval}")
        self.engine = engine
        self.interval = interval
        self.last_run: datetime | None = None
        self.runs = 0
        self.failures = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Consolidation loop started (interval: {self.interval})")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        logger.info("Consolidation loop stopped")

    async def run_once(self) -> int:
        """Consolidate once; a failure is logged and counted, not raised."""
        self.runs += 1
        self.last_run = datetime.now()
        try:
            return await self.engine.consolidate()
        except PaimError as e:
            self.failures += 1
            logger.error(f"Consolidation failed: {e}")
            return 0

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval.total_seconds())
            await self.run_once()
