"""Cache-aware document processing: load, summarize, store."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Tuple

from .cache import SummaryCache
from .cancellation import CancellationToken
from .exceptions import CacheError, DocumentError, ImageOnlyDocumentError, SummarizationCancelled
from .pdf_loader import DocumentLoader, extract_metadata
from .summarizer import DocumentSummarizer, estimate_page_count

logger = logging.getLogger(__name__)

CACHED_KEYWORD_COUNT = 5


class ProcessingStatus(str, Enum):
    COMPLETED = "completed"
    CACHED = "cached"
    NEEDS_OCR = "needs_ocr"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ProcessingOutcome:
    source: str
    status: ProcessingStatus
    summary_points: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    message: str | None = None
    recovery_suggestion: str | None = None
    strategy: str | None = None
    elapsed_seconds: float = 0.0
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status in (ProcessingStatus.COMPLETED, ProcessingStatus.CACHED)

    def to_dict(self) -> Dict[str, object]:
        return {
            "source": self.source,
            "status": self.status.value,
            "summary_points": list(self.summary_points),
            "keywords": list(self.keywords),
            "message": self.message,
            "recovery_suggestion": self.recovery_suggestion,
            "strategy": self.strategy,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "metadata": dict(self.metadata),
        }


class DocumentSummaryService:
    """Runs check-cache, extract, summarize, store for one document at a time."""

    def __init__(
        self,
        summarizer: DocumentSummarizer | None = None,
        loader: DocumentLoader | None = None,
        cache: SummaryCache | None = None,
    ) -> None:
        self.summarizer = summarizer or DocumentSummarizer()
        self.loader = loader or DocumentLoader()
        self.cache = cache

    def process(
        self,
        path: Path,
        cancel_token: CancellationToken | None = None,
        use_cache: bool = True,
    ) -> ProcessingOutcome:
        path = Path(path)
        started = time.perf_counter()
        source = path.name

        if use_cache and self.cache is not None:
            cached = self.cache.get(source)
            if cached is not None:
                logger.info("Cache hit for %s", source)
                keywords = (
                    self.summarizer.extract_key_points(cached[0], CACHED_KEYWORD_COUNT) if cached else []
                )
                return ProcessingOutcome(
                    source=source,
                    status=ProcessingStatus.CACHED,
                    summary_points=tuple(cached),
                    keywords=tuple(keywords),
                    message="Loaded from cache",
                    elapsed_seconds=time.perf_counter() - started,
                )
            logger.info("Cache miss for %s", source)

        try:
            extracted = self.loader.extract(path, allow_image_only=False)
        except ImageOnlyDocumentError as exc:
            logger.warning("%s looks scanned or empty; OCR needed", source)
            return ProcessingOutcome(
                source=source,
                status=ProcessingStatus.NEEDS_OCR,
                message=str(exc),
                recovery_suggestion=exc.recovery_suggestion,
                elapsed_seconds=time.perf_counter() - started,
            )
        except DocumentError as exc:
            logger.error("Failed to load %s: %s", source, exc)
            return ProcessingOutcome(
                source=source,
                status=ProcessingStatus.FAILED,
                message=str(exc),
                recovery_suggestion=exc.recovery_suggestion,
                elapsed_seconds=time.perf_counter() - started,
            )

        pages = estimate_page_count(extracted.total_text_length, self.summarizer.config.chars_per_page)
        try:
            result = self.summarizer.summarize(list(extracted.chunks), estimated_pages=pages, cancel_token=cancel_token)
        except SummarizationCancelled:
            logger.info("Summarization of %s cancelled", source)
            return ProcessingOutcome(
                source=source,
                status=ProcessingStatus.CANCELLED,
                message="Cancelled",
                elapsed_seconds=time.perf_counter() - started,
            )

        if self.cache is not None and result.summary_points:
            try:
                self.cache.put(source, result.summary_points)
            except CacheError as exc:
                logger.warning("Could not cache summary for %s: %s", source, exc)
        logger.info("Summary generated for %s: %d points", source, len(result.summary_points))
        metadata: Dict[str, object] = {"pages": pages, "chunks": len(extracted.chunks)}
        if path.suffix.lower() == ".pdf":
            metadata.update(extract_metadata(path))
        return ProcessingOutcome(
            source=source,
            status=ProcessingStatus.COMPLETED,
            summary_points=result.summary_points,
            keywords=result.keywords,
            message="Complete",
            strategy=result.strategy,
            elapsed_seconds=time.perf_counter() - started,
            metadata=metadata,
        )
