"""Sensory buffer - bounded, time-decaying holding area for raw observations.

The buffer is lossy under sustained overload: once ``capacity`` entries are
held, every ``add`` silently drops the oldest not-yet-consolidated
observation. Dropped entries are counted in ``dropped`` and logged.
"""

import threading
from collections import deque
from datetime import timedelta

from paim.core.logging import get_logger
from paim.core.types import BufferEntry, Clock, Observation, system_clock

logger = get_logger("memory.buffer")


class SensoryBuffer:
    """FIFO buffer with capacity eviction and TTL purge on snapshot.

    All operations share one lock, so ``add`` from request handlers can race
    safely with the consolidation task.
    """

    def __init__(self, capacity: int, ttl: timedelta, clock: Clock = system_clock):
        if capacity < 1:
            raise ValueError(f"buffer capacity must be positive, got {capacity}")
        if ttl <= timedelta(0):
            raise ValueError(f"buffer ttl must be positive, got {ttl}")
        self.capacity = capacity
        self.ttl = ttl
        self._clock = clock
        self._entries: deque[BufferEntry] = deque()
        self._lock = threading.Lock()
        self.dropped = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def add(self, observation: Observation) -> None:
        """Append an observation, evicting the oldest entries over capacity."""
        with self._lock:
            self._entries.append(BufferEntry(observation=observation, captured_at=self._clock()))
            evicted = 0
            while len(self._entries) > self.capacity:
                self._entries.popleft()
                evicted += 1
            if evicted:
                self.dropped += evicted
                logger.warning(
                    f"Sensory buffer full ({self.capacity}), dropped {evicted} oldest observation(s)"
                )

    def snapshot(self) -> list[Observation]:
        """Purge expired entries and return the rest in insertion order.

        Does not clear the buffer.
        """
        with self._lock:
            self._purge_expired()
            return [entry.observation for entry in self._entries]

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def snapshot_and_clear(self) -> list[Observation]:
        """Snapshot and clear under a single lock acquisition.

        An ``add`` racing with consolidation lands either in this snapshot or
        in the buffer afterwards, never in neither.
        """
        with self._lock:
            self._purge_expired()
            observations = [entry.observation for entry in self._entries]
            self._entries.clear()
            return observations

    def _purge_expired(self) -> None:
        cutoff = self._clock() - self.ttl
        before = len(self._entries)
        self._entries = deque(e for e in self._entries if e.captured_at > cutoff)
        expired = before - len(self._entries)
        if expired:
            logger.debug(f"Purged {expired} expired observation(s)")
