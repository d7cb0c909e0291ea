from unittest import mock

import pytest

from conftest import make_sentence
from docsummarizer.cancellation import CancellationToken
from docsummarizer.config import SummaryConfig
from docsummarizer.exceptions import SummarizationCancelled
from docsummarizer.scoring import SentenceScorer
from docsummarizer.summarizer import (
    DocumentSummarizer,
    estimate_page_count,
    extract_key_points,
    run_adaptive_summary,
    strata_count,
    summarize_text_as_points,
    target_summary_length,
)
from docsummarizer.text_utils import split_sentences
from docsummarizer.types import Chunk, ChunkSummary


def make_chunks(count, sentences_per_chunk=15):
    return [
        " ".join(make_sentence(i) for i in range(c * sentences_per_chunk, (c + 1) * sentences_per_chunk))
        for c in range(count)
    ]


class CancellingScorer(SentenceScorer):
    """Cancels the token as soon as the first chunk is summarized."""

    def __init__(self, token):
        super().__init__()
        self.token = token

    def summarize_text_as_points(self, text, desired_count=5):
        self.token.cancel()
        return super().summarize_text_as_points(text, desired_count)


@pytest.mark.parametrize(
    "pages,expected",
    [(1, 5), (10, 5), (11, 10), (50, 10), (51, 15), (100, 15), (101, 25), (200, 25), (400, 35), (401, 50), (5000, 50)],
)
def test_target_summary_length(pages, expected):
    assert target_summary_length(pages) == expected


def test_estimate_page_count():
    assert estimate_page_count(0) == 1
    assert estimate_page_count(1_999) == 1
    assert estimate_page_count(4_000) == 2
    assert estimate_page_count(4_000, chars_per_page=1_000) == 4


@pytest.mark.parametrize("chunks,expected", [(0, 5), (20, 5), (299, 5), (300, 6), (499, 9), (1_000, 10)])
def test_strata_count(chunks, expected):
    assert strata_count(chunks) == expected


class TestSummarizeStrategies:
    def test_empty_and_blank(self):
        summarizer = DocumentSummarizer()
        for source in ("", "  \n\t ", [], "Page 3", "Chapter 2 Section 4", ["Page 1", "Page 2 of 9"]):
            result = summarizer.summarize(source)
            assert result.is_empty
            assert result.strategy == "empty"

    def test_trivial_text_is_returned_whole(self, short_text):
        result = DocumentSummarizer().summarize("  " + short_text + "\n")
        assert result.strategy == "trivial"
        assert result.summary_points == (short_text,)
        assert 0 < len(result.keywords) <= 3

    def test_trivial_text_with_multiple_pages_is_not_trivial(self, short_text):
        result = DocumentSummarizer().summarize(short_text, estimated_pages=3)
        assert result.strategy == "single_pass"
        assert result.summary_points == (short_text,)

    def test_single_pass(self, medium_text):
        result = DocumentSummarizer().summarize(medium_text)
        sentences = [sentence.text for sentence in split_sentences(medium_text)]
        assert result.strategy == "single_pass"
        assert len(result.summary_points) == 5
        assert all(point in sentences for point in result.summary_points)
        assert 0 < len(result.keywords) <= 5

    def test_single_pass_is_capped_regardless_of_pages(self, medium_text):
        result = DocumentSummarizer().summarize(medium_text, estimated_pages=300)
        assert len(result.summary_points) == 5

    def test_chunked(self, long_text):
        result = DocumentSummarizer().summarize(long_text)
        sentences = set(sentence.text for sentence in split_sentences(long_text))
        assert result.strategy == "chunked"
        assert 0 < len(result.summary_points) <= target_summary_length(estimate_page_count(len(long_text)))
        assert all(point in sentences for point in result.summary_points)
        assert 0 < len(result.keywords) <= 8

    def test_pre_split_chunks_are_used_as_given(self):
        summarizer = DocumentSummarizer()
        chunks = make_chunks(20)
        with mock.patch.object(summarizer, "summarize_chunks", wraps=summarizer.summarize_chunks) as spy:
            result = summarizer.summarize(chunks, estimated_pages=10)
        given, per_chunk = spy.call_args[0][:2]
        assert [chunk.text for chunk in given] == chunks
        assert per_chunk == 2
        assert result.strategy == "chunked"
        assert 0 < len(result.summary_points) <= 5

    def test_sentences_per_chunk_upper_bound(self):
        summarizer = DocumentSummarizer()
        chunks = make_chunks(3, sentences_per_chunk=100)
        with mock.patch.object(summarizer, "summarize_chunks", wraps=summarizer.summarize_chunks) as spy:
            summarizer.summarize(chunks, estimated_pages=500)
        assert spy.call_args[0][1] == 5

    def test_deterministic(self, long_text):
        summarizer = DocumentSummarizer()
        assert summarizer.summarize(long_text) == summarizer.summarize(long_text)

    def test_parallel_matches_sequential(self, long_text):
        sequential = DocumentSummarizer(config=SummaryConfig(max_workers=1, chunk_size=2_000))
        parallel = DocumentSummarizer(config=SummaryConfig(max_workers=4, chunk_size=2_000))
        assert sequential.summarize(long_text) == parallel.summarize(long_text)


class TestCancellation:
    def test_cancelled_before_start(self, short_text, long_text):
        token = CancellationToken()
        token.cancel()
        summarizer = DocumentSummarizer()
        with pytest.raises(SummarizationCancelled):
            summarizer.summarize(short_text, cancel_token=token)
        with pytest.raises(SummarizationCancelled):
            summarizer.summarize(long_text, cancel_token=token)

    @pytest.mark.parametrize("workers", [1, 4])
    def test_cancelled_while_summarizing_chunks(self, long_text, workers):
        token = CancellationToken()
        summarizer = DocumentSummarizer(
            sentence_scorer=CancellingScorer(token),
            config=SummaryConfig(max_workers=workers, chunk_size=2_000),
        )
        with pytest.raises(SummarizationCancelled):
            summarizer.summarize(long_text, cancel_token=token)

    def test_empty_text_ignores_token(self):
        token = CancellationToken()
        token.cancel()
        assert DocumentSummarizer().summarize("", cancel_token=token).is_empty


class TestSummarizeChunks:
    def test_chunks_without_points_are_dropped(self):
        chunks = [Chunk(0, "tiny."), Chunk(1, make_sentence(1) + " " + make_sentence(2))]
        summaries = DocumentSummarizer().summarize_chunks(chunks, 2)
        assert summaries == [ChunkSummary(1, (make_sentence(1), make_sentence(2)))]

    def test_results_keep_chunk_order(self):
        chunks = [Chunk(i, text) for i, text in enumerate(make_chunks(6, sentences_per_chunk=4))]
        summaries = DocumentSummarizer(config=SummaryConfig(max_workers=3)).summarize_chunks(chunks, 2)
        assert [summary.chunk_index for summary in summaries] == list(range(6))
        assert all(len(summary.points) == 2 for summary in summaries)


class TestStratifiedMerge:
    def test_first_summary_of_each_stratum(self):
        summaries = [ChunkSummary(i, (f"p{i}",)) for i in range(20)]
        assert DocumentSummarizer().stratified_merge(summaries, 20, 100) == ["p0", "p4", "p8", "p12", "p16"]

    def test_last_stratum_covers_remainder(self):
        summaries = [ChunkSummary(21, ("p21",))]
        assert DocumentSummarizer().stratified_merge(summaries, 23, 100) == ["p21"]

    def test_empty_strata_are_skipped(self):
        summaries = [ChunkSummary(i, (f"p{i}",)) for i in (0, 1, 3, 9)]
        assert DocumentSummarizer().stratified_merge(summaries, 10, 100) == ["p0", "p3", "p9"]

    def test_fewer_chunks_than_strata(self):
        summaries = [ChunkSummary(i, (f"p{i}",)) for i in range(3)]
        assert DocumentSummarizer().stratified_merge(summaries, 3, 100) == ["p0", "p1", "p2"]

    def test_compresses_to_final_count(self):
        summaries = [ChunkSummary(i, (make_sentence(2 * i), make_sentence(2 * i + 1))) for i in range(10)]
        merged = DocumentSummarizer().stratified_merge(summaries, 10, 3)
        candidates = {point for summary in summaries for point in summary.points}
        assert len(merged) == 3
        assert set(merged) <= candidates

    def test_no_summaries(self):
        assert DocumentSummarizer().stratified_merge([], 10, 5) == []


class TestSampleKeywords:
    def test_samples_every_nth_chunk(self):
        summarizer = DocumentSummarizer()
        chunks = [Chunk(i, f"chunk {i}") for i in range(25)]
        with mock.patch.object(summarizer, "extract_key_points", return_value=["kw"]) as extract:
            keywords = summarizer.sample_keywords(chunks)
        assert keywords == ["kw"]
        assert extract.call_count == 14
        sampled = [call.args[0] for call in extract.call_args_list[:-1]]
        assert sampled == [f"chunk {i}" for i in range(0, 25, 2)]
        assert all(call.args[1] == 3 for call in extract.call_args_list[:-1])
        assert extract.call_args_list[-1].args == ("kw " * 12 + "kw", 8)

    def test_small_documents_sample_every_chunk(self):
        summarizer = DocumentSummarizer()
        chunks = [Chunk(i, f"chunk {i}") for i in range(4)]
        with mock.patch.object(summarizer, "extract_key_points", return_value=[]) as extract:
            summarizer.sample_keywords(chunks)
        assert extract.call_count == 5

    def test_no_chunks(self):
        assert DocumentSummarizer().sample_keywords([]) == []


class TestModuleFunctions:
    def test_short_document_scenario(self, short_text):
        with mock.patch.object(SentenceScorer, "score_sentences") as scoring:
            result = run_adaptive_summary(short_text)
        assert result.summary_points == (short_text,)
        assert len(result.keywords) <= 3
        scoring.assert_not_called()

    def test_empty_input_everywhere(self):
        assert run_adaptive_summary("").summary_points == ()
        assert run_adaptive_summary("").keywords == ()
        assert run_adaptive_summary("Page 3").summary_points == ()
        assert extract_key_points("") == []
        assert summarize_text_as_points("") == []

    def test_run_adaptive_summary(self, medium_text):
        result = run_adaptive_summary(medium_text)
        assert result == DocumentSummarizer().summarize(medium_text)

    def test_run_adaptive_summary_with_capabilities(self, medium_text, pet_embedding):
        result = run_adaptive_summary(medium_text, embedding=pet_embedding, config=SummaryConfig(max_workers=1))
        assert result.strategy == "single_pass"

    def test_free_functions(self, medium_text):
        assert extract_key_points(medium_text, 4) == DocumentSummarizer().extract_key_points(medium_text, 4)
        assert summarize_text_as_points(medium_text, 3) == DocumentSummarizer().summarize_text_as_points(
            medium_text, 3
        )
