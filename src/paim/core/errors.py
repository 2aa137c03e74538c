"""
Error hierarchy.

Every failure surfaced by the memory engine is a PaimError subclass tagged
with the pipeline stage that produced it.
"""

from enum import Enum


class Stage(Enum):
    LOG_WRITE = "log_write"
    BUFFER = "buffer"
    EMBEDDING = "embedding"
    VECTOR_WRITE = "vector_write"
    GRAPH_SEARCH = "graph_search"
    VECTOR_SEARCH = "vector_search"
    LOG_FETCH = "log_fetch"
    DISTILLATION = "distillation"
    GRAPH_UPSERT = "graph_upsert"


class PaimError(Exception):
    """Base class for memory engine errors."""

    def __init__(self, message: str, stage: Stage | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage is None:
            return self.message
        return f"[{self.stage.value}] {self.message}"


class ValidationError(PaimError):
    """A required field is missing or a value is out of range."""


class DimensionMismatchError(PaimError):
    """Embedding length differs from the configured dimension."""

    def __init__(self, expected: int, actual: int, stage: Stage | None = None):
        super().__init__(
            f"embedding dimension mismatch: got {actual} want {expected}", stage
        )
        self.expected = expected
        self.actual = actual


class PortUnavailableError(PaimError):
    """An underlying store call failed."""


class DistillationError(PaimError):
    """The distillation strategy failed for the whole batch."""


class EmbeddingError(PaimError):
    """The embedding strategy could not process the text."""
