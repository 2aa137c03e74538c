"""Embedding strategies - map text to fixed-dimension unit vectors."""

import hashlib
import math
import struct
from abc import ABC, abstractmethod

import httpx
import numpy as np

from paim.core.errors import DimensionMismatchError, EmbeddingError
from paim.core.logging import get_logger
from paim.core.types import Embedding

logger = get_logger("memory.embedding")

DEFAULT_DIM = 1536
EMPTY_TEXT_SENTINEL = "empty"


class EmbeddingStrategy(ABC):
    """Abstract embedder producing unit-normalized vectors of ``dim`` floats."""

    dim: int

    @abstractmethod
    async def embed_text(self, text: str) -> Embedding:
        """Embed a single text."""
        ...


class HashEmbedder(EmbeddingStrategy):
    """Deterministic SHA-256 derived pseudo-vectors.

    Placeholder only: vectors carry no semantic meaning, but identical text
    always maps to a bit-identical vector, so the system works with no model.
    """

    def __init__(self, dim: int = DEFAULT_DIM):
        self.dim = dim if dim > 0 else DEFAULT_DIM

    async def embed_text(self, text: str) -> Embedding:
        if not isinstance(text, str):
            raise EmbeddingError(f"cannot embed {type(text).__name__}, expected str")
        if text == "":
            text = EMPTY_TEXT_SENTINEL

        digest = hashlib.sha256(text.encode("utf-8")).digest()
        # Spread little-endian 16-bit windows of the digest across dimensions
        vec = [
            (struct.unpack_from("<H", digest, i % 16)[0] % 1000) / 1000.0
            for i in range(self.dim)
        ]
        norm = math.sqrt(sum(v * v for v in vec)) or 1.0
        return [v / norm for v in vec]


class HttpEmbedder(EmbeddingStrategy):
    """Embeddings from an OpenAI-compatible ``/embeddings`` endpoint.

    Works with Ollama, LM Studio, vLLM and hosted APIs. Results are
    re-normalized to unit length; determinism depends on the backend.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        dim: int = DEFAULT_DIM,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self.model = model
        self.dim = dim
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def embed_text(self, text: str) -> Embedding:
        if not isinstance(text, str):
            raise EmbeddingError(f"cannot embed {type(text).__name__}, expected str")
        payload = {"model": self.model, "input": text or EMPTY_TEXT_SENTINEL}

        try:
            response = await self.client.post("/embeddings", json=payload)
            response.raise_for_status()
            data = response.json()
            raw = data["data"][0]["embedding"]
        except httpx.HTTPError as e:
            logger.warning(f"Embedding endpoint {self.base_url} failed: {e}")
            raise EmbeddingError(f"embedding request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(f"malformed embedding response: {e}") from e

        if len(raw) != self.dim:
            raise DimensionMismatchError(self.dim, len(raw))

        vector = np.asarray(raw, dtype=np.float64)
        norm = float(np.linalg.norm(vector))
        if norm == 0.0:
            raise EmbeddingError("endpoint returned a zero vector")
        return (vector / norm).tolist()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
