"""Word-embedding lookups, including one built on LangChain BGE embeddings."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Protocol, Sequence

import numpy as np
from langchain_community.embeddings import HuggingFaceBgeEmbeddings

logger = logging.getLogger(__name__)


class WordEmbedding(Protocol):
    """Maps a word to a fixed-dimension vector, or ``None`` when unknown."""

    @property
    def dimension(self) -> int:
        ...

    def vector(self, word: str) -> np.ndarray | None:
        ...

    def prefetch(self, words: Iterable[str]) -> None:
        ...


class NullEmbedding:
    """Absent embedding source: no word resolves, semantic scores are 0."""

    dimension = 0

    def vector(self, word: str) -> np.ndarray | None:
        return None

    def prefetch(self, words: Iterable[str]) -> None:
        return None


class StaticWordEmbedding:
    """Lookup over an in-memory ``word -> vector`` table (keys are lowercased)."""

    def __init__(self, vectors: Mapping[str, Sequence[float]]) -> None:
        self._vectors: Dict[str, np.ndarray] = {
            word.lower(): np.asarray(vector, dtype=np.float64) for word, vector in vectors.items()
        }
        dimensions = {vector.shape[0] for vector in self._vectors.values()}
        if len(dimensions) > 1:
            raise ValueError(f"All vectors must share one dimension, got {sorted(dimensions)}")
        self._dimension = dimensions.pop() if dimensions else 0

    @property
    def dimension(self) -> int:
        return self._dimension

    def vector(self, word: str) -> np.ndarray | None:
        return self._vectors.get(word.lower())

    def prefetch(self, words: Iterable[str]) -> None:
        return None


@dataclass
class EmbedderConfig:
    model_name: str = "BAAI/bge-small-en-v1.5"
    device: str = "cpu"
    cache_folder: str | None = None
    normalize: bool = True


class BGEEmbedder:
    """Encodes texts using LangChain's HuggingFaceBgeEmbeddings."""

    def __init__(self, config: EmbedderConfig | None = None) -> None:
        config = config or EmbedderConfig()
        model_kwargs = {"device": config.device}
        encode_kwargs = {"normalize_embeddings": config.normalize}
        if config.cache_folder:
            model_kwargs["cache_folder"] = config.cache_folder
        logger.info("Loading embedding model %s on %s", config.model_name, config.device)
        self._embedder = HuggingFaceBgeEmbeddings(
            model_name=config.model_name,
            model_kwargs=model_kwargs,
            encode_kwargs=encode_kwargs,
        )

    def embed_documents(self, texts: Sequence[str]) -> np.ndarray:
        if not texts:
            return np.empty((0, 0), dtype=np.float32)
        vectors = self._embedder.embed_documents(list(texts))
        return np.asarray(vectors, dtype=np.float32)


class BGEWordEmbedding:
    """Per-word lookup over a ``BGEEmbedder`` with a memo of every word seen.

    ``prefetch`` embeds all unseen words of a document in one batch; later
    ``vector`` calls are dictionary reads.
    """

    def __init__(self, embedder: BGEEmbedder, batch_size: int = 256) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._embedder = embedder
        self._batch_size = batch_size
        self._cache: Dict[str, np.ndarray] = {}
        self._lock = threading.Lock()
        self._dimension: int | None = None

    @property
    def dimension(self) -> int:
        if self._dimension is None:
            probe = self._embedder.embed_documents(["dimension probe"])
            self._dimension = int(probe.shape[-1])
        return self._dimension

    def vector(self, word: str) -> np.ndarray | None:
        key = word.lower()
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached
        self.prefetch([key])
        with self._lock:
            return self._cache.get(key)

    def prefetch(self, words: Iterable[str]) -> None:
        with self._lock:
            missing = sorted({word.lower() for word in words if word} - self._cache.keys())
        for start in range(0, len(missing), self._batch_size):
            batch = missing[start : start + self._batch_size]
            vectors = self._embedder.embed_documents(batch)
            if vectors.size == 0:
                continue
            with self._lock:
                for word, vector in zip(batch, vectors):
                    self._cache[word] = np.asarray(vector, dtype=np.float64)
                if self._dimension is None:
                    self._dimension = int(vectors.shape[-1])
