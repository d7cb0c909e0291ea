"""Part-of-speech and named-entity tagging capabilities for keyword scoring."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Protocol

logger = logging.getLogger(__name__)


class PosTag(str, Enum):
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    PERSONAL_NAME = "personal_name"
    PLACE_NAME = "place_name"
    ORGANIZATION_NAME = "organization_name"
    OTHER = "other"


ENTITY_TAGS = frozenset({PosTag.PERSONAL_NAME, PosTag.PLACE_NAME, PosTag.ORGANIZATION_NAME})


class WordTagger(Protocol):
    def tag(self, word: str) -> PosTag:
        ...


class NullTagger:
    """Absent tagger: every word is ``OTHER`` so keyword scoring stays neutral."""

    def tag(self, word: str) -> PosTag:
        return PosTag.OTHER


class DictTagger:
    """Tags words from an explicit lexicon; unknown words are ``OTHER``."""

    def __init__(self, lexicon: Mapping[str, PosTag | str]) -> None:
        self._lexicon = {word.lower(): PosTag(tag) for word, tag in lexicon.items()}

    def tag(self, word: str) -> PosTag:
        return self._lexicon.get(word.lower(), PosTag.OTHER)


@dataclass
class TaggerConfig:
    ner_model: str = "dslim/bert-base-NER"
    pos_model: str = "vblagoje/bert-english-uncased-finetuned-pos"
    device: int = -1
    min_entity_score: float = 0.5


_NER_LABELS = {
    "PER": PosTag.PERSONAL_NAME,
    "LOC": PosTag.PLACE_NAME,
    "ORG": PosTag.ORGANIZATION_NAME,
}

_POS_LABELS = {
    "NOUN": PosTag.NOUN,
    "PROPN": PosTag.NOUN,
    "VERB": PosTag.VERB,
    "AUX": PosTag.VERB,
    "ADJ": PosTag.ADJECTIVE,
}

Pipeline = Callable[[str], List[Dict[str, Any]]]


class TransformersTagger:
    """Tags single words with huggingface token-classification pipelines.

    Entity labels take precedence over part-of-speech labels. Results are
    memoized per word since keyword scoring asks for each distinct word once
    per document and documents share most of their vocabulary.
    """

    def __init__(
        self,
        config: TaggerConfig | None = None,
        ner_pipeline: Pipeline | None = None,
        pos_pipeline: Pipeline | None = None,
    ) -> None:
        self.config = config or TaggerConfig()
        if ner_pipeline is None or pos_pipeline is None:
            from transformers import pipeline

            if ner_pipeline is None:
                logger.info("Loading NER model %s", self.config.ner_model)
                ner_pipeline = pipeline(
                    "token-classification",
                    model=self.config.ner_model,
                    aggregation_strategy="simple",
                    device=self.config.device,
                )
            if pos_pipeline is None:
                logger.info("Loading POS model %s", self.config.pos_model)
                pos_pipeline = pipeline(
                    "token-classification",
                    model=self.config.pos_model,
                    aggregation_strategy="simple",
                    device=self.config.device,
                )
        self._ner = ner_pipeline
        self._pos = pos_pipeline
        self._cache: Dict[str, PosTag] = {}
        self._lock = threading.Lock()

    def tag(self, word: str) -> PosTag:
        with self._lock:
            cached = self._cache.get(word)
        if cached is not None:
            return cached
        tag = self._classify(word)
        with self._lock:
            self._cache[word] = tag
        return tag

    def _classify(self, word: str) -> PosTag:
        for entity in self._ner(word):
            label = _strip_bio(entity.get("entity_group") or entity.get("entity", ""))
            if label in _NER_LABELS and float(entity.get("score", 0.0)) >= self.config.min_entity_score:
                return _NER_LABELS[label]
        for item in self._pos(word):
            label = _strip_bio(item.get("entity_group") or item.get("entity", ""))
            if label in _POS_LABELS:
                return _POS_LABELS[label]
            break
        return PosTag.OTHER


def _strip_bio(label: str) -> str:
    if len(label) > 2 and label[1] == "-" and label[0] in "BI":
        return label[2:]
    return label
