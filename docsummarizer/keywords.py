"""Keyword extraction from term frequencies with lexical heuristics."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .frequency import compute_frequencies
from .tagger import ENTITY_TAGS, NullTagger, PosTag, WordTagger
from .text_utils import STOPWORDS, sanitize_text
from .types import ScoredCandidate

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 3
ROOT_KEY_LENGTH = 5
ABSTRACT_SUFFIXES = ("ing", "ment", "ence", "tion")

ENTITY_MULTIPLIER = 3.0
NOUN_MULTIPLIER = 1.5
VERB_ADJECTIVE_MULTIPLIER = 0.5
NEUTRAL_MULTIPLIER = 0.8
ABSTRACT_SUFFIX_PENALTY = 0.6
CAPITALIZATION_BONUS = 1.5


def root_key(word: str) -> str:
    """Crude stem: the first five characters of words longer than five."""
    lower = word.lower()
    if len(word) > ROOT_KEY_LENGTH:
        return lower[:ROOT_KEY_LENGTH]
    return lower


class KeywordExtractor:
    """Ranks the words of a document as candidate keywords."""

    def __init__(self, tagger: WordTagger | None = None) -> None:
        self.tagger: WordTagger = tagger or NullTagger()

    def extract_key_points(self, text: str, count: int = 5) -> List[str]:
        return [candidate.text for candidate in self.score_keywords(text)[: max(count, 0)]]

    def score_keywords(self, text: str) -> List[ScoredCandidate]:
        """All deduplicated keyword candidates, highest score first."""
        cleaned = sanitize_text(text)
        if not cleaned:
            return []
        frequencies = compute_frequencies(cleaned)
        candidates: List[ScoredCandidate] = []
        for position, (word, frequency) in enumerate(frequencies.items()):
            score = self.relevance_score(word, frequency)
            if score > 0:
                candidates.append(ScoredCandidate(text=word, score=score, index=position))
        unique = deduplicate_variants(candidates)
        logger.debug("Scored %d keyword candidates (%d after dedupe)", len(candidates), len(unique))
        # Equal scores keep first-seen order.
        return sorted(unique, key=lambda candidate: (-candidate.score, candidate.index))

    def relevance_score(self, word: str, frequency: int) -> float:
        lower = word.lower()
        if lower in STOPWORDS or len(word) < MIN_KEYWORD_LENGTH:
            return 0.0

        multiplier = self._tag_multiplier(word)
        if lower.endswith(ABSTRACT_SUFFIXES):
            multiplier *= ABSTRACT_SUFFIX_PENALTY
        if word[0].isupper():
            multiplier *= CAPITALIZATION_BONUS
        return frequency * multiplier

    def _tag_multiplier(self, word: str) -> float:
        tag = self.tagger.tag(word)
        if tag in ENTITY_TAGS:
            return ENTITY_MULTIPLIER
        if tag is PosTag.NOUN:
            return NOUN_MULTIPLIER
        if tag in (PosTag.VERB, PosTag.ADJECTIVE):
            return VERB_ADJECTIVE_MULTIPLIER
        return NEUTRAL_MULTIPLIER


def deduplicate_variants(candidates: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    """Keep the best-scoring word per root key, in first-seen key order.

    "Developer", "Development" and "Developing" share the key "devel"; only
    the highest scoring of them survives. Ties keep the earlier word.
    """
    best: Dict[str, ScoredCandidate] = {}
    for candidate in candidates:
        key = root_key(candidate.text)
        existing = best.get(key)
        if existing is None or candidate.score > existing.score:
            best[key] = candidate
    return list(best.values())
