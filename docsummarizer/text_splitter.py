"""Split long documents into bounded chunks on page, paragraph or sentence boundaries."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from .text_utils import collapse_whitespace, sentence_spans
from .types import Chunk, ChunkingResult

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"
MEANINGFUL_UNIT_LENGTH = 50

_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t\r\f\v]*\n\s*")


class TextSplitter:
    """Packs whole text units into chunks of at most ``chunk_size`` characters.

    A unit is never split, so a single unit longer than ``chunk_size``
    becomes an oversized chunk of its own.
    """

    def __init__(self, chunk_size: int = 10_000) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def split_text(self, text: str) -> ChunkingResult:
        """Chunk raw text; joining the chunk texts gives back ``text`` exactly."""
        units = self._text_units(text)
        return self._pack(units, separator="")

    def split_pages(self, pages: Iterable[str]) -> ChunkingResult:
        """Chunk page texts, each cleaned and followed by a blank line."""
        units = [collapse_whitespace(page) for page in pages]
        return self._pack(units, separator=PAGE_SEPARATOR)

    def chunk(self, text: str) -> List[Chunk]:
        return list(self.split_text(text).chunks)

    def _text_units(self, text: str) -> List[str]:
        units: List[str] = []
        for paragraph in _split_paragraphs(text):
            if len(paragraph) <= self.chunk_size:
                units.append(paragraph)
            else:
                units.extend(paragraph[start:end] for start, end in sentence_spans(paragraph))
        return units

    def _pack(self, units: Sequence[str], separator: str) -> ChunkingResult:
        chunks: List[str] = []
        current = ""
        total_length = 0
        meaningful = 0
        for unit in units:
            unit_length = len(unit.strip())
            total_length += unit_length
            if unit_length > MEANINGFUL_UNIT_LENGTH:
                meaningful += 1
            if separator and not unit:
                continue
            piece = unit + separator
            if current and len(current) + len(piece) > self.chunk_size:
                chunks.append(current)
                current = ""
            current += piece

        if current.strip():
            chunks.append(current)
        elif current and chunks:
            # Trailing whitespace only.
            chunks[-1] += current

        result = ChunkingResult(
            chunks=tuple(Chunk(index=index, text=text) for index, text in enumerate(chunks)),
            unit_count=len(units),
            meaningful_unit_count=meaningful,
            total_text_length=total_length,
        )
        logger.debug(
            "Split %d units (%d chars) into %d chunks", len(units), total_length, len(result.chunks)
        )
        return result


def _split_paragraphs(text: str) -> List[str]:
    paragraphs: List[str] = []
    start = 0
    for match in _PARAGRAPH_BREAK_RE.finditer(text):
        paragraphs.append(text[start : match.end()])
        start = match.end()
    if start < len(text):
        paragraphs.append(text[start:])
    return paragraphs
