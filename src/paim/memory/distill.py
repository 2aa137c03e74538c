"""Distillation strategies - turn buffered observations into candidate facts."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from paim.core.types import Fact, Observation

STRUCTURED_CONFIDENCE = 0.9
NOTE_CONFIDENCE = 0.4
NOTE_SNIPPET_CHARS = 80
DEFAULT_SUBJECT = "user"


class DistillationStrategy(ABC):
    """Abstract distiller.

    Implementations must not mutate hidden state and must return an empty
    list for empty input. A failure applies to the whole batch.
    """

    @abstractmethod
    async def distill(self, observations: Sequence[Observation]) -> list[Fact]:
        """Derive facts from a batch of observations."""
        ...


class HeuristicDistiller(DistillationStrategy):
    """Rule-based placeholder distiller.

    - Metadata carrying subject/predicate/object yields that fact at 0.9.
    - Anything else becomes a low-confidence "notes" fact linking the source
      to the first 80 characters of the content.
    """

    async def distill(self, observations: Sequence[Observation]) -> list[Fact]:
        facts = []
        for obs in observations:
            fact = self._structured(obs) or self._note(obs)
            if fact is not None:
                facts.append(fact)
        return facts

    @staticmethod
    def _structured(obs: Observation) -> Fact | None:
        parts = [obs.metadata.get(key) for key in ("subject", "predicate", "object")]
        if not all(isinstance(p, str) and p for p in parts):
            return None
        subject, predicate, obj = parts
        return Fact(subject, predicate, obj, confidence=STRUCTURED_CONFIDENCE)

    @staticmethod
    def _note(obs: Observation) -> Fact | None:
        snippet = obs.content.strip()[:NOTE_SNIPPET_CHARS]
        if not snippet:
            return None
        subject = obs.source if obs.source.strip() else DEFAULT_SUBJECT
        return Fact(subject, "notes", snippet, confidence=NOTE_CONFIDENCE)
