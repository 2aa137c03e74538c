"""Tests for the SQLite log store."""

import pytest

from paim.core.errors import ValidationError
from paim.core.types import Observation
from paim.storage.logs import SQLiteLogStore


@pytest.fixture
def logs(db, clock):
    return SQLiteLogStore(db, clock=clock)


async def test_insert_and_fetch(logs: SQLiteLogStore):
    log_id = await logs.insert(
        Observation(content="Alice likes vectors", source="chat", metadata={"mood": "happy"})
    )
    [record] = await logs.fetch_many([log_id])
    assert record.id == log_id
    assert record.source == "chat"
    assert record.content == "Alice likes vectors"
    assert record.metadata == {"mood": "happy"}


async def test_insert_requires_content(logs: SQLiteLogStore):
    with pytest.raises(ValidationError):
        await logs.insert(Observation(content=""))


async def test_fetch_many_skips_missing(logs: SQLiteLogStore):
    log_id = await logs.insert(Observation(content="kept"))
    records = await logs.fetch_many([log_id, "does-not-exist"])
    assert [r.id for r in records] == [log_id]
    assert await logs.fetch_many([]) == []


async def test_recent_newest_first(logs: SQLiteLogStore, clock):
    for i in range(3):
        await logs.insert(Observation(content=f"event {i}"))
        clock.advance(seconds=1)

    recent = await logs.recent(limit=2)
    assert [r.content for r in recent] == ["event 2", "event 1"]
    assert recent[0].timestamp > recent[1].timestamp
