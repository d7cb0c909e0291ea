"""Common data structures for the local document summarizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple


@dataclass(frozen=True)
class Token:
    """A word-like string and its character span in the source text."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Sentence:
    """A trimmed sentence and its position among the kept sentences."""

    text: str
    index: int

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class TermFrequencyTable:
    """Read-only mapping from canonical-cased word to occurrence count."""

    counts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    def __len__(self) -> int:
        return len(self.counts)

    def __iter__(self) -> Iterator[str]:
        return iter(self.counts)

    def __contains__(self, word: object) -> bool:
        return word in self.counts

    def __getitem__(self, word: str) -> int:
        return self.counts[word]

    def get(self, word: str, default: int = 0) -> int:
        return self.counts.get(word, default)

    def items(self) -> List[Tuple[str, int]]:
        return list(self.counts.items())

    @property
    def max_frequency(self) -> int:
        return max(self.counts.values(), default=0)

    def lowercase_counts(self) -> Dict[str, int]:
        return {word.lower(): count for word, count in self.counts.items()}


@dataclass(frozen=True)
class ScoredCandidate:
    """A keyword or sentence with its relevance score.

    ``index`` is the original sentence index for sentences and the
    first-seen position for keywords.
    """

    text: str
    score: float
    index: int = 0


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of document text with a stable 0-based index."""

    index: int
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class ChunkingResult:
    """Chunks plus the text-coverage statistics gathered while building them."""

    chunks: Tuple[Chunk, ...]
    unit_count: int
    meaningful_unit_count: int
    total_text_length: int

    @property
    def average_unit_length(self) -> float:
        if self.unit_count == 0:
            return 0.0
        return self.total_text_length / self.unit_count

    @property
    def meaningful_ratio(self) -> float:
        if self.unit_count == 0:
            return 0.0
        return self.meaningful_unit_count / self.unit_count


@dataclass(frozen=True)
class ChunkSummary:
    """Summary points produced for a single chunk."""

    chunk_index: int
    points: Tuple[str, ...]


@dataclass(frozen=True)
class SummaryResult:
    """Final summary points (document order) and keywords (score order)."""

    summary_points: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    strategy: str = "empty"

    @property
    def is_empty(self) -> bool:
        return not self.summary_points and not self.keywords

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary_points": list(self.summary_points),
            "keywords": list(self.keywords),
            "strategy": self.strategy,
        }


@dataclass(frozen=True)
class RawPage:
    """A single page of text as returned by the document loader."""

    source: str
    page: int
    text: str


@dataclass(frozen=True)
class ExtractedText:
    """Text handed from the document loader to the summarizer."""

    source: str
    chunks: Tuple[str, ...]
    page_count: int
    total_text_length: int
    meaningful_page_ratio: float
    likely_image_only: bool

    @property
    def full_text(self) -> str:
        return "\n".join(self.chunks)
