"""Extractive sentence scoring: TF-IDF, position, length and semantic centrality."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from .embedder import NullEmbedding, WordEmbedding
from .frequency import compute_frequencies, document_frequencies
from .text_utils import STOPWORDS, sanitize_text, split_sentences, tokenize_words
from .types import ScoredCandidate, Sentence

logger = logging.getLogger(__name__)

LENGTH_SATURATION_WORDS = 30
MIN_TFIDF_WORD_LENGTH = 3


@dataclass(frozen=True)
class ScoringWeights:
    tfidf: float = 0.6
    position: float = 0.2
    length: float = 0.1
    semantic: float = 0.1


def cosine_similarity(first: np.ndarray, second: np.ndarray) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when the dimensions differ or either vector has zero
    magnitude.
    """
    first = np.asarray(first, dtype=np.float64).ravel()
    second = np.asarray(second, dtype=np.float64).ravel()
    if first.shape != second.shape or first.size == 0:
        return 0.0
    norm_first = float(np.linalg.norm(first))
    norm_second = float(np.linalg.norm(second))
    if norm_first == 0.0 or norm_second == 0.0:
        return 0.0
    similarity = float(np.dot(first, second) / (norm_first * norm_second))
    return max(-1.0, min(1.0, similarity))


def centroid(vectors: Sequence[np.ndarray]) -> np.ndarray | None:
    """Element-wise mean of the vectors sharing the first vector's dimension."""
    if not vectors:
        return None
    dimension = np.asarray(vectors[0]).shape[0]
    usable = [np.asarray(vector, dtype=np.float64) for vector in vectors if np.asarray(vector).shape == (dimension,)]
    if not usable:
        return None
    return np.mean(np.stack(usable), axis=0)


class SentenceScorer:
    """Scores sentences and picks the best of them in document order."""

    def __init__(
        self,
        embedding: WordEmbedding | None = None,
        weights: ScoringWeights | None = None,
    ) -> None:
        self.embedding: WordEmbedding = embedding or NullEmbedding()
        self.weights = weights or ScoringWeights()

    def summarize_text_as_points(self, text: str, desired_count: int = 5) -> List[str]:
        cleaned = sanitize_text(text)
        if not cleaned or desired_count <= 0:
            return []
        sentences = split_sentences(cleaned)
        if len(sentences) <= desired_count:
            return [sentence.text for sentence in sentences]

        scored = self.score_sentences(sentences)
        top = sorted(scored, key=lambda candidate: (-candidate.score, candidate.index))[:desired_count]
        return [candidate.text for candidate in sorted(top, key=lambda candidate: candidate.index)]

    def score_sentences(self, sentences: Sequence[Sentence]) -> List[ScoredCandidate]:
        if not sentences:
            return []
        total = len(sentences)
        tokens = [[token.text for token in tokenize_words(sentence.text)] for sentence in sentences]
        tfidf = self._tfidf_scores(sentences, tokens)
        semantic = self._semantic_scores(tokens)

        scored: List[ScoredCandidate] = []
        for position, sentence in enumerate(sentences):
            combined = (
                self.weights.tfidf * tfidf[position]
                + self.weights.position * (total - position) / total
                + self.weights.length * min(1.0, len(tokens[position]) / LENGTH_SATURATION_WORDS)
                + self.weights.semantic * semantic[position]
            )
            scored.append(ScoredCandidate(text=sentence.text, score=max(0.0, combined), index=sentence.index))
        logger.debug("Scored %d sentences", total)
        return scored

    def _tfidf_scores(self, sentences: Sequence[Sentence], tokens: Sequence[List[str]]) -> List[float]:
        total = len(sentences)
        frequencies = compute_frequencies(" ".join(sentence.text for sentence in sentences))
        max_frequency = frequencies.max_frequency
        if max_frequency == 0:
            return [0.0] * total
        term_counts = frequencies.lowercase_counts()
        containing = document_frequencies(sentence.text for sentence in sentences)

        idf_cache: Dict[str, float] = {}
        scores: List[float] = []
        for words in tokens:
            score = 0.0
            for word in {word.lower() for word in words}:
                if word in STOPWORDS or len(word) < MIN_TFIDF_WORD_LENGTH:
                    continue
                idf = idf_cache.get(word)
                if idf is None:
                    # Words present in nearly every sentence would go negative.
                    idf = max(0.0, math.log(total / (containing[word] + 1)))
                    idf_cache[word] = idf
                score += term_counts.get(word, 0) / max_frequency * idf
            scores.append(score)
        return scores

    def _semantic_scores(self, tokens: Sequence[List[str]]) -> List[float]:
        content_words = [[word.lower() for word in words if word.lower() not in STOPWORDS] for words in tokens]
        self.embedding.prefetch({word for words in content_words for word in words})

        dimension = self.embedding.dimension
        sentence_vectors: List[np.ndarray] = []
        for words in content_words:
            vectors = [vector for vector in (self.embedding.vector(word) for word in words) if vector is not None]
            vector = centroid(vectors)
            sentence_vectors.append(vector if vector is not None else np.zeros(dimension, dtype=np.float64))

        document_vector = centroid(sentence_vectors)
        if document_vector is None:
            return [0.0] * len(tokens)
        return [cosine_similarity(vector, document_vector) for vector in sentence_vectors]
