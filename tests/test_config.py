"""Tests for configuration module."""

from datetime import timedelta
from pathlib import Path

from paim.core.config import Settings


def test_default_settings():
    """Settings load with defaults."""
    settings = Settings(_env_file=None)
    assert settings.data_dir == Path("data")
    assert settings.enable_vector is False
    assert settings.vector_dim == 1536
    assert settings.buffer_size == 128
    assert settings.buffer_ttl == timedelta(minutes=30)
    assert settings.consolidation_interval == timedelta(minutes=5)
    assert settings.embedding_url == ""


def test_db_path():
    """Database path combines data_dir and db_name."""
    settings = Settings(data_dir=Path("/tmp/test"), db_name="test.db", _env_file=None)
    assert settings.db_path == Path("/tmp/test/test.db")


def test_env_prefix(monkeypatch):
    """PAIM_ environment variables override defaults."""
    monkeypatch.setenv("PAIM_ENABLE_VECTOR", "true")
    monkeypatch.setenv("PAIM_BUFFER_SIZE", "4")
    monkeypatch.setenv("PAIM_BUFFER_TTL", "PT1M")
    settings = Settings(_env_file=None)
    assert settings.enable_vector is True
    assert settings.buffer_size == 4
    assert settings.buffer_ttl == timedelta(minutes=1)
