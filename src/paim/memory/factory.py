"""Wiring - build a MemoryEngine from settings."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from paim.core.config import Settings
from paim.core.logging import get_logger
from paim.memory.buffer import SensoryBuffer
from paim.memory.distill import HeuristicDistiller
from paim.memory.embedding import EmbeddingStrategy, HashEmbedder, HttpEmbedder
from paim.memory.engine import MemoryEngine
from paim.storage import SQLiteDatabase, SQLiteGraphStore, SQLiteLogStore, SQLiteVectorStore

logger = get_logger("memory.factory")


def create_embedder(settings: Settings) -> EmbeddingStrategy:
    """HTTP embedder when an endpoint is configured, hash placeholder otherwise."""
    if settings.embedding_url:
        logger.info(f"Using embedding endpoint {settings.embedding_url} ({settings.embedding_model})")
        return HttpEmbedder(
            base_url=settings.embedding_url,
            model=settings.embedding_model,
            dim=settings.vector_dim,
            timeout=settings.embedding_timeout,
        )
    return HashEmbedder(settings.vector_dim)


@asynccontextmanager
async def open_engine(settings: Settings) -> AsyncIterator[MemoryEngine]:
    """Connect storage, yield a ready engine, close everything on exit."""
    db = SQLiteDatabase(
        settings.db_path,
        enable_vector=settings.enable_vector,
        vector_dim=settings.vector_dim,
    )
    await db.connect()
    embedder = create_embedder(settings)
    engine = MemoryEngine(
        logs=SQLiteLogStore(db),
        graph=SQLiteGraphStore(db),
        vectors=SQLiteVectorStore(db),
        buffer=SensoryBuffer(settings.buffer_size, settings.buffer_ttl),
        embedder=embedder,
        distiller=HeuristicDistiller(),
    )
    try:
        yield engine
    finally:
        if isinstance(embedder, HttpEmbedder):
            await embedder.close()
        await db.close()
