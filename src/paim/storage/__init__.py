"""
Storage module - SQLite-backed collaborators for the memory engine.

- database: connection and schema
- logs: durable observation log
- graph: fact triples
- vector: embedding index with exact cosine search
"""

from paim.storage.database import SQLiteDatabase
from paim.storage.graph import SQLiteGraphStore
from paim.storage.logs import SQLiteLogStore
from paim.storage.vector import SQLiteVectorStore

__all__ = ["SQLiteDatabase", "SQLiteLogStore", "SQLiteGraphStore", "SQLiteVectorStore"]
