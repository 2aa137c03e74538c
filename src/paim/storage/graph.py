"""SQLite graph store - fact triples with upsert semantics."""

from paim.core.logging import get_logger
from paim.core.types import Clock, Fact, system_clock
from paim.memory.base import DEFAULT_TOP_K, GraphPort
from paim.storage.database import SQLiteDatabase

logger = get_logger("storage.graph")

_COLUMNS = "id, subject, predicate, object, confidence, created_at"


class SQLiteGraphStore(GraphPort):
    """Graph port over the ``triples`` table."""

    def __init__(self, db: SQLiteDatabase, clock: Clock = system_clock):
        self.db = db
        self._clock = clock

    async def upsert_fact(self, fact: Fact) -> int:
        """Insert a triple, or overwrite the confidence of an existing one."""
        async with self.db.conn.execute(
            """INSERT INTO triples (subject, predicate, object, confidence, created_at)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(subject, predicate, object)
               DO UPDATE SET confidence = excluded.confidence
               RETURNING id""",
            (
                fact.subject,
                fact.predicate,
                fact.object,
                fact.confidence,
                fact.created_at or self._clock(),
            ),
        ) as cursor:
            row = await cursor.fetchone()
        await self.db.conn.commit()
        logger.debug(f"Upserted fact {row[0]}: {fact.triple} @ {fact.confidence}")
        return row[0]

    async def search_facts(self, term: str, limit: int = DEFAULT_TOP_K) -> list[Fact]:
        """LIKE search over subject and object, newest first."""
        if limit <= 0:
            limit = DEFAULT_TOP_K
        pattern = f"%{term}%"
        return await self._query(
            f"""SELECT {_COLUMNS} FROM triples
                WHERE subject LIKE ? OR object LIKE ?
                ORDER BY created_at DESC, id DESC
                LIMIT ?""",
            (pattern, pattern, limit),
        )

    async def neighbors(self, entity: str, limit: int = DEFAULT_TOP_K) -> list[Fact]:
        """One-hop facts where entity is subject or object."""
        if limit <= 0:
            limit = DEFAULT_TOP_K
        return await self._query(
            f"""SELECT {_COLUMNS} FROM triples
                WHERE subject = ? OR object = ?
                ORDER BY confidence DESC, created_at DESC, id DESC
                LIMIT ?""",
            (entity, entity, limit),
        )

    async def count(self) -> int:
        """Number of stored facts."""
        async with self.db.conn.execute("SELECT COUNT(*) FROM triples") as cursor:
            row = await cursor.fetchone()
            return row[0]

    async def _query(self, sql: str, params: tuple) -> list[Fact]:
        async with self.db.conn.execute(sql, params) as cursor:
            return [
                Fact(
                    subject=row[1],
                    predicate=row[2],
                    object=row[3],
                    confidence=row[4],
                    created_at=row[5],
                    id=row[0],
                )
                async for row in cursor
            ]
