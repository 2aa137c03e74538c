"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: PAIM_
"""

from datetime import timedelta
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAIM_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Data storage directory")
    db_name: str = Field(default="paim.db", description="SQLite database name")

    # Vector search
    enable_vector: bool = Field(default=False, description="Enable vector similarity search")
    vector_dim: int = Field(default=1536, gt=0, description="Embedding dimension")

    # Sensory buffer
    buffer_size: int = Field(default=128, gt=0, description="Max buffered observations")
    buffer_ttl: timedelta = Field(
        default=timedelta(minutes=30),
        description="How long an observation stays eligible for consolidation",
    )

    # Consolidation
    consolidation_interval: timedelta = Field(
        default=timedelta(minutes=5),
        description="Interval between background consolidation runs",
    )

    # Recall
    default_top_k: int = Field(default=5, description="Results per modality when k is omitted")

    # Embeddings
    embedding_url: str = Field(
        default="",
        description="OpenAI-compatible embeddings endpoint; empty uses the hash embedder",
    )
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Model name sent to the endpoint"
    )
    embedding_timeout: float = Field(default=30.0, description="Embedding request timeout (s)")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
