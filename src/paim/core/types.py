"""
Shared type definitions.

Core data structures used across modules.
"""

from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, TypeAlias

from paim.core.errors import ValidationError

Embedding: TypeAlias = list[float]
Clock: TypeAlias = Callable[[], datetime]


def system_clock() -> datetime:
    """Wall-clock source of "now"."""
    return datetime.now()


@dataclass(frozen=True)
class Observation:
    """Raw captured interaction content, not yet a structured fact."""

    content: str
    source: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class BufferEntry:
    """An observation held by the sensory buffer."""

    observation: Observation
    captured_at: datetime


@dataclass(frozen=True)
class Fact:
    """A (subject, predicate, object) assertion with confidence.

    The triple is the identity in durable storage: re-asserting it only
    replaces the confidence. ``id`` and ``created_at`` are filled in by
    the graph store on read.
    """

    subject: str
    predicate: str
    object: str
    confidence: float = 1.0
    created_at: datetime | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if not (0.0 <= self.confidence <= 1.0):
            raise ValidationError(f"confidence must be in [0, 1], got {self.confidence}")
        if not self.subject or not self.predicate or not self.object:
            raise ValidationError("fact subject, predicate and object are required")

    @property
    def triple(self) -> tuple[str, str, str]:
        return (self.subject, self.predicate, self.object)


@dataclass
class LogRecord:
    """Durable copy of an observation as stored in the log."""

    id: str
    timestamp: datetime
    source: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RecalledContext:
    """Result of one recall: logs and facts, deliberately not fused."""

    related_logs: list[LogRecord] = field(default_factory=list)
    related_facts: list[Fact] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        data = asdict(self)
        for log in data["related_logs"]:
            log["timestamp"] = log["timestamp"].isoformat()
        for fact in data["related_facts"]:
            if fact["created_at"] is not None:
                fact["created_at"] = fact["created_at"].isoformat()
        return data
