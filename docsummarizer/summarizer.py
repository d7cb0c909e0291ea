"""Adaptive extractive summaries whose length follows the document size."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple

from .cancellation import CancellationToken
from .config import SummaryConfig
from .embedder import WordEmbedding
from .exceptions import SummarizationCancelled
from .keywords import KeywordExtractor
from .scoring import SentenceScorer
from .tagger import WordTagger
from .text_splitter import TextSplitter
from .text_utils import collapse_whitespace, sanitize_text
from .types import Chunk, ChunkSummary, SummaryResult

logger = logging.getLogger(__name__)

# (last page of the band, summary points), checked in order.
SUMMARY_LENGTH_STEPS: Tuple[Tuple[int, int], ...] = (
    (10, 5),
    (50, 10),
    (100, 15),
    (200, 25),
    (400, 35),
)
MAX_SUMMARY_POINTS = 50

STRATEGY_EMPTY = "empty"
STRATEGY_TRIVIAL = "trivial"
STRATEGY_SINGLE_PASS = "single_pass"
STRATEGY_CHUNKED = "chunked"


def target_summary_length(pages: int) -> int:
    for last_page, points in SUMMARY_LENGTH_STEPS:
        if pages <= last_page:
            return points
    return MAX_SUMMARY_POINTS


def estimate_page_count(text_length: int, chars_per_page: int = 2_000) -> int:
    return max(1, text_length // chars_per_page)


def strata_count(total_chunks: int, config: SummaryConfig | None = None) -> int:
    config = config or SummaryConfig()
    return min(config.max_strata, max(config.min_strata, total_chunks // config.chunks_per_stratum_hint))


class DocumentSummarizer:
    """Chooses a trivial, single-pass or chunked strategy for each document.

    Chunk summaries are computed in parallel and merged by stratified
    sampling: the chunk range is cut into contiguous strata and the first
    chunk summary found in each stratum represents it.
    """

    def __init__(
        self,
        sentence_scorer: SentenceScorer | None = None,
        keyword_extractor: KeywordExtractor | None = None,
        splitter: TextSplitter | None = None,
        config: SummaryConfig | None = None,
    ) -> None:
        self.config = config or SummaryConfig()
        self.sentence_scorer = sentence_scorer or SentenceScorer()
        self.keyword_extractor = keyword_extractor or KeywordExtractor()
        self.splitter = splitter or TextSplitter(chunk_size=self.config.chunk_size)

    @classmethod
    def from_capabilities(
        cls,
        embedding: WordEmbedding | None = None,
        tagger: WordTagger | None = None,
        config: SummaryConfig | None = None,
    ) -> "DocumentSummarizer":
        return cls(
            sentence_scorer=SentenceScorer(embedding=embedding),
            keyword_extractor=KeywordExtractor(tagger=tagger),
            config=config,
        )

    def extract_key_points(self, text: str, count: int = 5) -> List[str]:
        return self.keyword_extractor.extract_key_points(text, count)

    def summarize_text_as_points(self, text: str, desired_count: int = 5) -> List[str]:
        return self.sentence_scorer.summarize_text_as_points(text, desired_count)

    def summarize(
        self,
        source: str | Sequence[str],
        estimated_pages: int | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SummaryResult:
        """Summarize full text or an ordered sequence of pre-split chunks."""
        cancel_token = cancel_token or CancellationToken()
        if isinstance(source, str):
            text = source
            chunk_texts: Sequence[str] | None = None
        else:
            chunk_texts = [chunk for chunk in source]
            text = "\n".join(chunk_texts)

        total_length = sum(len(chunk) for chunk in chunk_texts) if chunk_texts is not None else len(text)
        if not sanitize_text(text):
            return SummaryResult(strategy=STRATEGY_EMPTY)

        pages = estimated_pages if estimated_pages is not None else estimate_page_count(
            total_length, self.config.chars_per_page
        )
        cancel_token.raise_if_cancelled()

        if total_length < self.config.trivial_text_length and pages <= 1:
            logger.info("Trivial summary for %d chars", total_length)
            single_point = collapse_whitespace(" ".join(chunk_texts) if chunk_texts is not None else text)
            return SummaryResult(
                summary_points=(single_point,),
                keywords=tuple(self.extract_key_points(single_point, self.config.trivial_keyword_count)),
                strategy=STRATEGY_TRIVIAL,
            )

        target = target_summary_length(pages)
        if total_length < self.config.single_pass_text_length:
            logger.info("Single-pass summary for %d chars (~%d pages)", total_length, pages)
            points = self.summarize_text_as_points(text, min(target, self.config.single_pass_sentence_cap))
            keywords = self.extract_key_points(text, self.config.single_pass_keyword_count)
            return SummaryResult(summary_points=tuple(points), keywords=tuple(keywords), strategy=STRATEGY_SINGLE_PASS)

        if chunk_texts is not None:
            chunks = [Chunk(index=index, text=chunk) for index, chunk in enumerate(chunk_texts)]
        else:
            chunks = self.splitter.chunk(text)
        logger.info("Chunked summary: %d chunks, ~%d pages, target %d points", len(chunks), pages, target)
        return self._summarize_chunks(chunks, target, cancel_token)

    def _summarize_chunks(
        self, chunks: Sequence[Chunk], target: int, cancel_token: CancellationToken
    ) -> SummaryResult:
        if not chunks:
            return SummaryResult(strategy=STRATEGY_CHUNKED)
        per_chunk = max(
            self.config.min_sentences_per_chunk,
            min(self.config.max_sentences_per_chunk, target // len(chunks)),
        )
        chunk_summaries = self.summarize_chunks(chunks, per_chunk, cancel_token)
        points = self.stratified_merge(chunk_summaries, len(chunks), target)
        cancel_token.raise_if_cancelled()
        keywords = self.sample_keywords(chunks, cancel_token)
        return SummaryResult(summary_points=tuple(points), keywords=tuple(keywords), strategy=STRATEGY_CHUNKED)

    def summarize_chunks(
        self,
        chunks: Sequence[Chunk],
        sentences_per_chunk: int,
        cancel_token: CancellationToken | None = None,
    ) -> List[ChunkSummary]:
        """Summarize every chunk; chunks yielding no points are left out."""
        cancel_token = cancel_token or CancellationToken()

        def summarize_one(chunk: Chunk) -> ChunkSummary:
            cancel_token.raise_if_cancelled()
            points = self.summarize_text_as_points(chunk.text, sentences_per_chunk)
            logger.debug("Chunk %d/%d: %d points", chunk.index + 1, len(chunks), len(points))
            return ChunkSummary(chunk_index=chunk.index, points=tuple(points))

        if self.config.max_workers == 1 or len(chunks) == 1:
            results = [summarize_one(chunk) for chunk in chunks]
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = [executor.submit(summarize_one, chunk) for chunk in chunks]
                try:
                    results = [future.result() for future in futures]
                except SummarizationCancelled:
                    for future in futures:
                        future.cancel()
                    raise
        cancel_token.raise_if_cancelled()
        return [summary for summary in results if summary.points]

    def stratified_merge(
        self,
        chunk_summaries: Sequence[ChunkSummary],
        total_chunks: int,
        final_point_count: int,
    ) -> List[str]:
        """Take the first chunk summary of each stratum, then compress if too long."""
        if total_chunks <= 0 or not chunk_summaries:
            return []
        strata = strata_count(total_chunks, self.config)
        per_stratum = max(1, total_chunks // strata)

        selected: List[str] = []
        for stratum in range(strata):
            start = stratum * per_stratum
            if start >= total_chunks:
                break
            # The last stratum also covers the remainder of the integer division.
            end = total_chunks if stratum == strata - 1 else min(start + per_stratum, total_chunks)
            representative = next(
                (summary for summary in chunk_summaries if start <= summary.chunk_index < end),
                None,
            )
            if representative is not None:
                selected.extend(representative.points)

        if len(selected) > final_point_count:
            logger.debug("Compressing %d merged points to %d", len(selected), final_point_count)
            return self.summarize_text_as_points(" ".join(selected), final_point_count)
        return selected

    def sample_keywords(self, chunks: Sequence[Chunk], cancel_token: CancellationToken | None = None) -> List[str]:
        """Keywords of every n-th chunk, refined into the final keyword list."""
        if not chunks:
            return []
        step = max(1, len(chunks) // self.config.keyword_sample_divisor)
        accumulated: List[str] = []
        for position in range(0, len(chunks), step):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            accumulated.extend(self.extract_key_points(chunks[position].text, self.config.chunk_keyword_count))
        return self.extract_key_points(" ".join(accumulated), self.config.final_keyword_count)


def extract_key_points(text: str, count: int = 5, tagger: WordTagger | None = None) -> List[str]:
    return KeywordExtractor(tagger=tagger).extract_key_points(text, count)


def summarize_text_as_points(text: str, desired_count: int = 5, embedding: WordEmbedding | None = None) -> List[str]:
    return SentenceScorer(embedding=embedding).summarize_text_as_points(text, desired_count)


def run_adaptive_summary(
    source: str | Sequence[str],
    estimated_pages: int | None = None,
    embedding: WordEmbedding | None = None,
    tagger: WordTagger | None = None,
    config: SummaryConfig | None = None,
    cancel_token: CancellationToken | None = None,
) -> SummaryResult:
    summarizer = DocumentSummarizer.from_capabilities(embedding=embedding, tagger=tagger, config=config)
    return summarizer.summarize(source, estimated_pages=estimated_pages, cancel_token=cancel_token)
