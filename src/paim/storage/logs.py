"""SQLite log store - durable record of every observation."""

import json
from collections.abc import Sequence
from uuid import uuid4

from paim.core.errors import ValidationError
from paim.core.logging import get_logger
from paim.core.types import Clock, LogRecord, Observation, system_clock
from paim.memory.base import LogStore
from paim.storage.database import SQLiteDatabase

logger = get_logger("storage.logs")

DEFAULT_RECENT_LIMIT = 50


class SQLiteLogStore(LogStore):
    """Log store over the ``memory_logs`` table."""

    def __init__(self, db: SQLiteDatabase, clock: Clock = system_clock):
        self.db = db
        self._clock = clock

    async def insert(self, observation: Observation) -> str:
        """Write a new log row and return its UUID."""
        if not observation.content:
            raise ValidationError("content is required")

        log_id = str(uuid4())
        await self.db.conn.execute(
            """INSERT INTO memory_logs (id, timestamp, source_type, content, metadata)
               VALUES (?, ?, ?, ?, ?)""",
            (
                log_id,
                self._clock(),
                observation.source,
                observation.content,
                json.dumps(observation.metadata, default=str),
            ),
        )
        await self.db.conn.commit()
        return log_id

    async def fetch_many(self, ids: Sequence[str]) -> list[LogRecord]:
        """Fetch logs by ID; unknown IDs are skipped."""
        if not ids:
            return []
        placeholders = ",".join("?" * len(ids))
        async with self.db.conn.execute(
            f"SELECT id, timestamp, source_type, content, metadata "
            f"FROM memory_logs WHERE id IN ({placeholders})",
            tuple(ids),
        ) as cursor:
            return [self._row_to_record(row) async for row in cursor]

    async def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[LogRecord]:
        """Most recent logs first."""
        if limit <= 0:
            limit = DEFAULT_RECENT_LIMIT
        async with self.db.conn.execute(
            "SELECT id, timestamp, source_type, content, metadata "
            "FROM memory_logs ORDER BY timestamp DESC LIMIT ?",
            (limit,),
        ) as cursor:
            return [self._row_to_record(row) async for row in cursor]

    @staticmethod
    def _row_to_record(row) -> LogRecord:
        metadata = {}
        if row[4]:
            try:
                metadata = json.loads(row[4])
            except json.JSONDecodeError:
                logger.warning(f"Unreadable metadata on log {row[0]}")
        return LogRecord(
            id=row[0],
            timestamp=row[1],
            source=row[2] or "",
            content=row[3],
            metadata=metadata,
        )
