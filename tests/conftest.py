"""Shared fixtures."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from paim.storage.database import SQLiteDatabase

VECTOR_DIM = 16


class FakeClock:
    """Manually advanced clock for TTL and ordering tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def db(tmp_path: Path):
    """Database with vector search enabled."""
    database = SQLiteDatabase(tmp_path / "test.db", enable_vector=True, vector_dim=VECTOR_DIM)
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
async def db_no_vector(tmp_path: Path):
    """Database without vector search."""
    database = SQLiteDatabase(tmp_path / "plain.db")
    await database.connect()
    yield database
    await database.close()
