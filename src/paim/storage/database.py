"""SQLite database shared by the log, graph and vector stores."""

import sqlite3
from datetime import datetime
from pathlib import Path

import aiosqlite

from paim.core.logging import get_logger

logger = get_logger("storage.database")


def _adapt_datetime(dt: datetime) -> str:
    """Convert datetime to ISO format string for SQLite storage."""
    return dt.isoformat(sep=" ", timespec="microseconds")


def _convert_datetime(val: bytes) -> datetime:
    """Convert ISO format string from SQLite to datetime."""
    return datetime.fromisoformat(val.decode())


# Register explicitly; the default adapters are deprecated since Python 3.12
sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("DATETIME", _convert_datetime)

SCHEMA = """
-- Durable log of every observation
CREATE TABLE IF NOT EXISTS memory_logs (
    id TEXT PRIMARY KEY,
    timestamp DATETIME NOT NULL,
    source_type TEXT,
    content TEXT NOT NULL,
    metadata TEXT  -- JSON object
);

CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON memory_logs(timestamp);

-- Distilled facts, unique per triple
CREATE TABLE IF NOT EXISTS triples (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject TEXT NOT NULL,
    predicate TEXT NOT NULL,
    object TEXT NOT NULL,
    confidence REAL DEFAULT 1.0,
    created_at DATETIME NOT NULL,
    UNIQUE(subject, predicate, object)
);

CREATE INDEX IF NOT EXISTS idx_subject ON triples(subject);
CREATE INDEX IF NOT EXISTS idx_object ON triples(object);
"""

VECTOR_SCHEMA = """
-- float32 embeddings keyed by log id
CREATE TABLE IF NOT EXISTS vector_embeddings (
    log_id TEXT PRIMARY KEY,
    embedding BLOB NOT NULL
);
"""


class SQLiteDatabase:
    """Single aiosqlite connection; all writes funnel through it."""

    def __init__(self, db_path: Path, enable_vector: bool = False, vector_dim: int = 1536):
        self.db_path = db_path
        self.enable_vector = enable_vector
        self.vector_dim = vector_dim
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the connection and ensure the schema exists."""
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(
            self.db_path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        )
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA busy_timeout=5000")
        await self._conn.executescript(SCHEMA)
        if self.enable_vector:
            await self._conn.executescript(VECTOR_SCHEMA)
        await self._conn.commit()
        logger.info(
            f"Connected to memory database: {self.db_path} "
            f"(vector={'on' if self.enable_vector else 'off'}, dim={self.vector_dim})"
        )

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._conn
