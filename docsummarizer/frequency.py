"""Term-frequency tables with capitalization variants merged."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from .text_utils import tokenize_words
from .types import TermFrequencyTable


def compute_frequencies(text: str) -> TermFrequencyTable:
    """Count word occurrences in ``text`` and merge case variants."""
    if not text:
        return TermFrequencyTable()
    raw_counts = Counter(token.text for token in tokenize_words(text))
    return TermFrequencyTable(merge_case_variants(raw_counts))


def merge_case_variants(counts: "Counter[str] | Dict[str, int]") -> Dict[str, int]:
    """Fold every casing of a word into one canonical key.

    The canonical key is the first-seen variant starting with an uppercase
    letter when there is one, otherwise the first-seen variant. Keys keep the
    first-seen order of their lowercase form.
    """
    canonical: Dict[str, str] = {}
    for word in counts:
        lower = word.lower()
        existing = canonical.get(lower)
        if existing is None:
            canonical[lower] = word
        elif _starts_upper(word) and not _starts_upper(existing):
            canonical[lower] = word

    merged: Dict[str, int] = {word: 0 for word in canonical.values()}
    for word, count in counts.items():
        merged[canonical[word.lower()]] += count
    return merged


def document_frequencies(texts: Iterable[str]) -> Counter:
    """Number of texts each lowercase word appears in."""
    frequencies: Counter = Counter()
    for text in texts:
        frequencies.update({token.text.lower() for token in tokenize_words(text)})
    return frequencies


def _starts_upper(word: str) -> bool:
    return bool(word) and word[0].isupper()
