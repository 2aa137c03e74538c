"""Tests for the heuristic distiller."""

from paim.core.types import Observation
from paim.memory.distill import HeuristicDistiller


async def test_empty_input():
    assert await HeuristicDistiller().distill([]) == []


async def test_structured_metadata():
    obs = Observation(
        content="Alice likes vectors",
        metadata={"subject": "Alice", "predicate": "likes", "object": "vectors"},
    )
    [fact] = await HeuristicDistiller().distill([obs])
    assert fact.triple == ("Alice", "likes", "vectors")
    assert fact.confidence == 0.9


async def test_note_fact_from_source():
    obs = Observation(content="just chatting", source="chat", metadata={})
    [fact] = await HeuristicDistiller().distill([obs])
    assert fact.triple == ("chat", "notes", "just chatting")
    assert fact.confidence == 0.4


async def test_note_defaults_to_user_and_truncates():
    content = "  " + "x" * 100 + "  "
    [fact] = await HeuristicDistiller().distill([Observation(content=content, source=" ")])
    assert fact.subject == "user"
    assert fact.object == "x" * 80


async def test_partial_metadata_falls_back_to_note():
    obs = Observation(
        content="Bob mentioned graphs",
        source="chat",
        metadata={"subject": "Bob", "predicate": "mentions", "object": 42},
    )
    [fact] = await HeuristicDistiller().distill([obs])
    assert fact.predicate == "notes"


async def test_blank_content_skipped():
    facts = await HeuristicDistiller().distill(
        [Observation(content="   "), Observation(content="kept", source="chat")]
    )
    assert [f.object for f in facts] == ["kept"]
