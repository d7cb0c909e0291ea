"""Word tokenization, sentence splitting and text sanitization."""

from __future__ import annotations

import re
from typing import Iterator, List, Tuple

from .types import Sentence, Token

MIN_SENTENCE_LENGTH = 20

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "is", "are", "was", "were",
        "to", "of", "in", "for", "on", "with", "at", "by", "from", "up",
        "about", "into", "over", "after", "that", "this", "these", "those",
        "he", "she", "it", "they", "we", "you", "i", "his", "her", "their",
        "has", "have", "had", "do", "does", "did", "will", "would", "can", "could",
        "as", "if", "so", "than", "then", "just", "now", "here", "there", "when",
        "where", "why", "how", "all", "any", "some", "no", "not", "only", "own",
        "same", "too", "very", "don", "should", "such", "other", "more", "most",
        "also", "which",
    }
)

# Letters and digits, optionally joined by an apostrophe ("don't", "O'Neil").
_WORD_RE = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")
# Terminal punctuation, optional closing quotes/brackets, then whitespace or end.
_SENTENCE_END_RE = re.compile(r"[.!?…]+[\"'”’)\]]*(?=\s|$)")
_WHITESPACE_RE = re.compile(r"\s+")
_BOILERPLATE_RE = re.compile(r"\b(?:page|chapter|section)\s+\d+(?:\s+of\s+\d+)?\b", re.IGNORECASE)
_REPEATED_PERIODS_RE = re.compile(r"\.{2,}")
_REPEATED_DASHES_RE = re.compile(r"-{2,}")


def is_stopword(word: str) -> bool:
    return word.lower() in STOPWORDS


def tokenize_words(text: str) -> List[Token]:
    """Split ``text`` into word tokens, skipping tokens without any letter."""
    tokens: List[Token] = []
    for match in _WORD_RE.finditer(text):
        word = match.group()
        if any(char.isalpha() for char in word):
            tokens.append(Token(text=word, start=match.start(), end=match.end()))
    return tokens


def sentence_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield contiguous ``(start, end)`` spans that together cover ``text``."""
    start = 0
    for match in _SENTENCE_END_RE.finditer(text):
        end = match.end()
        if end > start:
            yield start, end
            start = end
    if start < len(text):
        yield start, len(text)


def split_sentences(text: str, min_length: int = MIN_SENTENCE_LENGTH) -> List[Sentence]:
    """Split ``text`` into trimmed sentences longer than ``min_length`` characters."""
    sentences: List[Sentence] = []
    for start, end in sentence_spans(text):
        candidate = text[start:end].strip()
        if len(candidate) > min_length:
            sentences.append(Sentence(text=candidate, index=len(sentences)))
    return sentences


def sanitize_text(text: str) -> str:
    """Normalize whitespace and strip page/chapter/section boilerplate."""
    if not text:
        return ""
    cleaned = _WHITESPACE_RE.sub(" ", text)
    cleaned = _BOILERPLATE_RE.sub(" ", cleaned)
    cleaned = _REPEATED_PERIODS_RE.sub(".", cleaned)
    cleaned = _REPEATED_DASHES_RE.sub("-", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
