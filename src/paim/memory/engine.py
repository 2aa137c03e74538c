"""Memory engine - orchestrates observe, recall and consolidate.

Observe:     durable log write -> sensory buffer -> optional embedding write
Recall:      graph search || (embed query -> vector search -> log fetch)
Consolidate: buffer snapshot+clear -> distill -> fact upserts

Nothing is retried or rolled back. Known gaps:
- Observe commits the log before embedding; if the embedding step fails the
  log exists without a vector until something re-embeds it.
- Consolidate clears the buffer before distilling; on failure, facts already
  upserted stay committed and the cleared observations are not restored.
"""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager

from paim.core.errors import (
    DistillationError,
    EmbeddingError,
    PaimError,
    PortUnavailableError,
    Stage,
    ValidationError,
)
from paim.core.logging import get_logger
from paim.core.types import Fact, LogRecord, Observation, RecalledContext
from paim.memory.base import DEFAULT_TOP_K, GraphPort, LogStore, VectorPort
from paim.memory.buffer import SensoryBuffer
from paim.memory.distill import DistillationStrategy
from paim.memory.embedding import EmbeddingStrategy

logger = get_logger("memory.engine")


@contextmanager
def _stage(stage: Stage, wrap: type[PaimError] = PortUnavailableError) -> Iterator[None]:
    """Tag failures inside the block with ``stage``.

    PaimErrors keep their type; anything else becomes ``wrap``.
    Cancellation passes through untouched.
    """
    try:
        yield
    except PaimError as e:
        if e.stage is None:
            e.stage = stage
        logger.warning(f"Stage {stage.value} failed: {e.message}")
        raise
    except Exception as e:
        logger.warning(f"Stage {stage.value} failed: {e}")
        raise wrap(f"{stage.value} failed: {e}", stage) from e


class MemoryEngine:
    """Hybrid memory over a sensory buffer, a fact graph and a vector index."""

    def __init__(
        self,
        logs: LogStore,
        graph: GraphPort,
        vectors: VectorPort,
        buffer: SensoryBuffer,
        embedder: EmbeddingStrategy,
        distiller: DistillationStrategy,
    ):
        self.logs = logs
        self.graph = graph
        self.vectors = vectors
        self.buffer = buffer
        self.embedder = embedder
        self.distiller = distiller

    async def observe(self, observation: Observation) -> str:
        """Record an observation and return its log ID.

        The buffer append happens as soon as the log write succeeds, so a
        later embedding failure still leaves the observation eligible for
        consolidation.
        """
        if not observation.content.strip():
            raise ValidationError("content is required", Stage.LOG_WRITE)

        with _stage(Stage.LOG_WRITE):
            log_id = await self.logs.insert(observation)

        self.buffer.add(observation)
        logger.debug(f"Observed {log_id} from {observation.source or 'unknown'}")

        if self.vectors.enabled:
            with _stage(Stage.EMBEDDING, EmbeddingError):
                embedding = await self.embedder.embed_text(observation.content)
            with _stage(Stage.VECTOR_WRITE):
                await self.vectors.upsert_embedding(log_id, embedding)

        return log_id

    async def recall(self, query: str, top_k: int = DEFAULT_TOP_K) -> RecalledContext:
        """Search facts and similar logs concurrently.

        Facts and logs come back as separate lists; any sub-search failure
        fails the whole recall.
        """
        facts_task = asyncio.ensure_future(self._search_facts(query, top_k))
        logs_task = asyncio.ensure_future(self._search_logs(query, top_k))
        try:
            facts, logs = await asyncio.gather(facts_task, logs_task)
        except BaseException:
            facts_task.cancel()
            logs_task.cancel()
            # Collect the sibling outcome so a second failure is not left unretrieved
            await asyncio.gather(facts_task, logs_task, return_exceptions=True)
            raise

        logger.debug(f"Recall {query!r}: {len(facts)} facts, {len(logs)} logs")
        return RecalledContext(related_logs=logs, related_facts=facts)

    async def consolidate(self) -> int:
        """Distill buffered observations into facts, return how many were committed.

        An empty buffer is a no-op. Upserts stop at the first failure, which
        is raised; earlier upserts are not rolled back.
        """
        observations = self.buffer.snapshot_and_clear()
        if not observations:
            logger.debug("Consolidation skipped: buffer empty")
            return 0

        with _stage(Stage.DISTILLATION, DistillationError):
            facts = await self.distiller.distill(observations)

        committed = 0
        for fact in facts:
            try:
                with _stage(Stage.GRAPH_UPSERT):
                    await self.graph.upsert_fact(fact)
            except PaimError:
                logger.warning(
                    f"Consolidation stopped after {committed}/{len(facts)} facts; "
                    f"{len(observations)} cleared observation(s) not restored"
                )
                raise
            committed += 1

        logger.info(f"Consolidated {len(observations)} observation(s) into {committed} fact(s)")
        return committed

    async def _search_facts(self, query: str, top_k: int) -> list[Fact]:
        with _stage(Stage.GRAPH_SEARCH):
            return await self.graph.search_facts(query, top_k)

    async def _search_logs(self, query: str, top_k: int) -> list[LogRecord]:
        if not self.vectors.enabled:
            return []

        with _stage(Stage.EMBEDDING, EmbeddingError):
            embedding = await self.embedder.embed_text(query)
        with _stage(Stage.VECTOR_SEARCH):
            ids = await self.vectors.search(embedding, top_k)
        if not ids:
            return []
        with _stage(Stage.LOG_FETCH):
            records = await self.logs.fetch_many(ids)

        # Present logs in similarity order
        rank = {log_id: i for i, log_id in enumerate(ids)}
        return sorted(records, key=lambda r: rank.get(r.id, len(rank)))
