"""Tests for the SQLite graph store."""

import pytest

from paim.core.types import Fact
from paim.storage.graph import SQLiteGraphStore


@pytest.fixture
def graph(db, clock):
    return SQLiteGraphStore(db, clock=clock)


async def test_upsert_is_unique_per_triple(graph: SQLiteGraphStore):
    """Re-asserting a triple replaces confidence instead of duplicating."""
    first = await graph.upsert_fact(Fact("Alice", "likes", "vectors", 0.4))
    second = await graph.upsert_fact(Fact("Alice", "likes", "vectors", 0.9))

    assert first == second
    assert await graph.count() == 1
    [fact] = await graph.search_facts("Alice", 5)
    assert fact.confidence == 0.9
    assert fact.id == first


async def test_search_matches_subject_or_object(graph: SQLiteGraphStore):
    await graph.upsert_fact(Fact("Alice", "likes", "vectors", 0.9))
    await graph.upsert_fact(Fact("Bob", "knows", "Alice", 0.8))
    await graph.upsert_fact(Fact("Carol", "likes", "graphs", 0.7))

    found = await graph.search_facts("Alice", 10)
    assert {f.triple for f in found} == {
        ("Alice", "likes", "vectors"),
        ("Bob", "knows", "Alice"),
    }
    # Predicate is not searched
    assert await graph.search_facts("knows", 10) == []


async def test_search_most_recent_first_and_limit(graph: SQLiteGraphStore, clock):
    for obj in ("one", "two", "three"):
        await graph.upsert_fact(Fact("Alice", "said", obj, 0.5))
        clock.advance(seconds=1)

    found = await graph.search_facts("Alice", 2)
    assert [f.object for f in found] == ["three", "two"]


async def test_search_non_positive_limit_defaults_to_five(graph: SQLiteGraphStore):
    for i in range(7):
        await graph.upsert_fact(Fact("Alice", "said", f"thing {i}", 0.5))

    assert len(await graph.search_facts("Alice", 0)) == 5
    assert len(await graph.search_facts("Alice", -3)) == 5


async def test_neighbors_by_confidence_then_recency(graph: SQLiteGraphStore, clock):
    await graph.upsert_fact(Fact("Alice", "likes", "vectors", 0.4))
    clock.advance(seconds=1)
    await graph.upsert_fact(Fact("Bob", "knows", "Alice", 0.9))
    clock.advance(seconds=1)
    await graph.upsert_fact(Fact("Alice", "uses", "sqlite", 0.4))
    await graph.upsert_fact(Fact("Alicia", "likes", "tea", 1.0))

    found = await graph.neighbors("Alice", 10)
    assert [f.triple for f in found] == [
        ("Bob", "knows", "Alice"),
        ("Alice", "uses", "sqlite"),
        ("Alice", "likes", "vectors"),
    ]
