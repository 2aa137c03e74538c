"""SQLite vector store - float32 embeddings with exact cosine search."""

import numpy as np

from paim.core.errors import DimensionMismatchError, ValidationError
from paim.core.logging import get_logger
from paim.core.types import Embedding
from paim.memory.base import DEFAULT_TOP_K, VectorPort
from paim.storage.database import SQLiteDatabase

logger = get_logger("storage.vector")


class SQLiteVectorStore(VectorPort):
    """Vector port over the ``vector_embeddings`` table.

    Embeddings are unit vectors, so cosine similarity is a dot product.
    Search scans the whole table; fine for a single-user local store.
    """

    def __init__(self, db: SQLiteDatabase):
        self.db = db
        self.dim = db.vector_dim

    @property
    def enabled(self) -> bool:
        return self.db.enable_vector

    async def upsert_embedding(self, log_id: str, embedding: Embedding) -> None:
        """Store (or replace) the embedding for a log ID."""
        if not self.enabled:
            return
        vector = self._validate(embedding)
        await self.db.conn.execute(
            """INSERT INTO vector_embeddings (log_id, embedding) VALUES (?, ?)
               ON CONFLICT(log_id) DO UPDATE SET embedding = excluded.embedding""",
            (log_id, vector.tobytes()),
        )
        await self.db.conn.commit()

    async def search(self, embedding: Embedding, top_k: int = DEFAULT_TOP_K) -> list[str]:
        """Return up to top_k log IDs, most similar first."""
        if not self.enabled:
            return []
        if top_k <= 0:
            top_k = DEFAULT_TOP_K
        query = self._validate(embedding)

        ids: list[str] = []
        blobs: list[bytes] = []
        async with self.db.conn.execute(
            "SELECT log_id, embedding FROM vector_embeddings"
        ) as cursor:
            async for row in cursor:
                ids.append(row[0])
                blobs.append(row[1])
        if not ids:
            return []

        matrix = np.frombuffer(b"".join(blobs), dtype=np.float32).reshape(len(ids), self.dim)
        scores = matrix @ query
        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")[:top_k]
        logger.debug(f"Vector search over {len(ids)} embeddings, best score {scores[order[0]]:.3f}")
        return [ids[i] for i in order]

    def _validate(self, embedding: Embedding) -> np.ndarray:
        if len(embedding) == 0:
            raise ValidationError("embedding is empty")
        if len(embedding) != self.dim:
            raise DimensionMismatchError(self.dim, len(embedding))
        return np.asarray(embedding, dtype=np.float32)
