"""
Retrieval port interfaces.

The engine only talks to storage through these contracts; concrete
backends live in ``paim.storage``.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from paim.core.types import Embedding, Fact, LogRecord, Observation

DEFAULT_TOP_K = 5


class LogStore(ABC):
    """Durable append-only log of observations."""

    @abstractmethod
    async def insert(self, observation: Observation) -> str:
        """Persist observation, return its ID."""
        ...

    @abstractmethod
    async def fetch_many(self, ids: Sequence[str]) -> list[LogRecord]:
        """Fetch records by ID. Missing IDs are omitted, order is not guaranteed."""
        ...


class GraphPort(ABC):
    """Durable fact (triple) storage."""

    @abstractmethod
    async def upsert_fact(self, fact: Fact) -> int:
        """Insert fact or replace confidence of an existing triple, return its ID."""
        ...

    @abstractmethod
    async def search_facts(self, term: str, limit: int = DEFAULT_TOP_K) -> list[Fact]:
        """Substring match over subject/object, most recent first."""
        ...

    @abstractmethod
    async def neighbors(self, entity: str, limit: int = DEFAULT_TOP_K) -> list[Fact]:
        """Facts touching entity, by confidence desc then recency desc."""
        ...


class VectorPort(ABC):
    """Nearest-neighbour index over log embeddings."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether vector search is available. Disabled is a valid degraded mode."""
        ...

    @abstractmethod
    async def upsert_embedding(self, log_id: str, embedding: Embedding) -> None:
        """Store embedding for a log ID."""
        ...

    @abstractmethod
    async def search(self, embedding: Embedding, top_k: int = DEFAULT_TOP_K) -> list[str]:
        """Log IDs ordered by similarity; empty when disabled."""
        ...
