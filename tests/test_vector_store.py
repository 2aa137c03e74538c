"""Tests for the SQLite vector store."""

import pytest

from paim.core.errors import DimensionMismatchError, ValidationError
from paim.memory.embedding import HashEmbedder
from paim.storage.vector import SQLiteVectorStore

VECTOR_DIM = 16  # matches the db fixture


def basis(i: int) -> list[float]:
    vec = [0.0] * VECTOR_DIM
    vec[i] = 1.0
    return vec


async def test_search_orders_by_similarity(db):
    store = SQLiteVectorStore(db)
    await store.upsert_embedding("a", basis(0))
    await store.upsert_embedding("b", basis(1))
    mixed = [0.0] * VECTOR_DIM
    mixed[0], mixed[1] = 0.6, 0.8
    await store.upsert_embedding("c", mixed)

    assert await store.search(basis(1), top_k=2) == ["b", "c"]
    assert await store.search(basis(0), top_k=3) == ["a", "c", "b"]


async def test_upsert_replaces_embedding(db):
    store = SQLiteVectorStore(db)
    await store.upsert_embedding("a", basis(0))
    await store.upsert_embedding("a", basis(2))

    assert await store.search(basis(2), top_k=5) == ["a"]


async def test_identical_text_finds_its_log(db):
    store = SQLiteVectorStore(db)
    embedder = HashEmbedder(VECTOR_DIM)
    for log_id, text in [("l1", "Alice likes vectors"), ("l2", "Bob likes graphs")]:
        await store.upsert_embedding(log_id, await embedder.embed_text(text))

    hits = await store.search(await embedder.embed_text("Bob likes graphs"), top_k=1)
    assert hits == ["l2"]


async def test_dimension_mismatch(db):
    store = SQLiteVectorStore(db)
    with pytest.raises(DimensionMismatchError):
        await store.upsert_embedding("a", [1.0, 0.0])
    with pytest.raises(DimensionMismatchError):
        await store.search([1.0, 0.0])


async def test_empty_embedding_rejected(db):
    with pytest.raises(ValidationError):
        await SQLiteVectorStore(db).upsert_embedding("a", [])


async def test_empty_index(db):
    assert await SQLiteVectorStore(db).search(basis(0)) == []


async def test_disabled_store(db_no_vector):
    store = SQLiteVectorStore(db_no_vector)
    assert not store.enabled
    await store.upsert_embedding("a", [1.0])
    assert await store.search([1.0]) == []
