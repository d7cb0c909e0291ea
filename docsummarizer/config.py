"""Thresholds that drive the adaptive summary strategy."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SummaryConfig:
    trivial_text_length: int = 500
    single_pass_text_length: int = 15_000
    chunk_size: int = 10_000
    chars_per_page: int = 2_000
    single_pass_sentence_cap: int = 5
    trivial_keyword_count: int = 3
    single_pass_keyword_count: int = 5
    chunk_keyword_count: int = 3
    final_keyword_count: int = 8
    keyword_sample_divisor: int = 10
    min_sentences_per_chunk: int = 2
    max_sentences_per_chunk: int = 5
    min_strata: int = 5
    max_strata: int = 10
    chunks_per_stratum_hint: int = 50
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.chars_per_page <= 0:
            raise ValueError("chars_per_page must be positive")
        if not 0 < self.min_strata <= self.max_strata:
            raise ValueError("strata bounds must satisfy 0 < min_strata <= max_strata")
        if not 0 < self.min_sentences_per_chunk <= self.max_sentences_per_chunk:
            raise ValueError("sentence bounds must satisfy 0 < min <= max")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be positive")

    def with_overrides(self, **overrides: object) -> "SummaryConfig":
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def default_log_level() -> str:
    return os.environ.get("DOCSUMMARIZER_LOG_LEVEL", "INFO").upper()


def default_cache_dir() -> str:
    return os.environ.get("DOCSUMMARIZER_CACHE_DIR", os.path.join(os.path.expanduser("~"), ".cache", "docsummarizer"))
