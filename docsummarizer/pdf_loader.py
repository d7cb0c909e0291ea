"""Load PDF, Markdown, and TXT documents into chunked text for summarization."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .exceptions import (
    DocumentCorruptedError,
    DocumentNotFoundError,
    ImageOnlyDocumentError,
    NoTextContentError,
    PasswordProtectedError,
)
from .text_splitter import TextSplitter
from .types import ExtractedText, RawPage

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pdf", ".md", ".markdown", ".txt"}

MIN_AVERAGE_PAGE_LENGTH = 100
MIN_MEANINGFUL_PAGE_RATIO = 0.2
MIN_TEXT_LENGTH = 50


def iter_document_paths(data_dir: Path) -> Iterable[Path]:
    for path in sorted(Path(data_dir).rglob("*")):
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
            yield path


class DocumentLoader:
    """Extracts page text from documents and packs it into chunks."""

    def __init__(self, splitter: TextSplitter | None = None) -> None:
        self.splitter = splitter or TextSplitter()

    def extract(self, path: Path, allow_image_only: bool = True) -> ExtractedText:
        """Chunked text of ``path``.

        With ``allow_image_only=False`` a document that looks scanned or holds
        almost no text raises ``ImageOnlyDocumentError`` instead of being
        returned.
        """
        path = Path(path)
        if path.suffix.lower() == ".pdf":
            extracted = self._extract_pdf(path)
        else:
            extracted = self._extract_text_like(path)
        if not allow_image_only:
            if extracted.likely_image_only:
                raise ImageOnlyDocumentError(f"{extracted.source} contains only images or no readable text")
            if extracted.total_text_length <= MIN_TEXT_LENGTH:
                raise ImageOnlyDocumentError(f"{extracted.source} appears to be empty or scanned")
        return extracted

    def _extract_pdf(self, path: Path) -> ExtractedText:
        pages = self._load_pdf(path)
        result = self.splitter.split_pages(page.text for page in pages)
        average = result.total_text_length / len(pages)
        likely_image_only = (
            average < MIN_AVERAGE_PAGE_LENGTH
            or result.meaningful_ratio < MIN_MEANINGFUL_PAGE_RATIO
            or not result.chunks
        )
        logger.info(
            "Extracted %s: %d chars over %d pages (avg %.0f, meaningful %d/%d)",
            path.name,
            result.total_text_length,
            len(pages),
            average,
            result.meaningful_unit_count,
            len(pages),
        )
        return ExtractedText(
            source=path.name,
            chunks=tuple(chunk.text for chunk in result.chunks),
            page_count=len(pages),
            total_text_length=result.total_text_length,
            meaningful_page_ratio=result.meaningful_ratio,
            likely_image_only=likely_image_only,
        )

    def _extract_text_like(self, path: Path) -> ExtractedText:
        text = self._read_text(path)
        result = self.splitter.split_text(text)
        return ExtractedText(
            source=path.name,
            chunks=tuple(chunk.text for chunk in result.chunks),
            page_count=1,
            total_text_length=result.total_text_length,
            meaningful_page_ratio=result.meaningful_ratio,
            likely_image_only=not result.chunks,
        )

    def _open_pdf(self, path: Path) -> PdfReader:
        if not path.exists():
            raise DocumentNotFoundError(f"File not found: {path}")
        try:
            reader = PdfReader(str(path))
        except (PyPdfError, ValueError, OSError) as exc:
            raise DocumentCorruptedError(f"{path.name} appears to be corrupted or invalid: {exc}") from exc
        if reader.is_encrypted:
            try:
                unlocked = reader.decrypt("")
            except (PyPdfError, NotImplementedError):
                unlocked = 0
            if not unlocked:
                raise PasswordProtectedError(f"{path.name} is password-protected")
        return reader

    def _load_pdf(self, path: Path) -> List[RawPage]:
        reader = self._open_pdf(path)
        try:
            page_count = len(reader.pages)
        except PyPdfError as exc:
            raise DocumentCorruptedError(f"{path.name} appears to be corrupted or invalid: {exc}") from exc
        if page_count == 0:
            raise NoTextContentError(f"{path.name} has no pages")
        items: List[RawPage] = []
        for idx, page in enumerate(reader.pages, start=1):
            try:
                text = page.extract_text() or ""
            except PyPdfError as exc:
                logger.warning("Could not extract text from %s page %d: %s", path.name, idx, exc)
                text = ""
            items.append(RawPage(source=path.name, page=idx, text=text))
        return items

    def _read_text(self, path: Path) -> str:
        if not path.exists():
            raise DocumentNotFoundError(f"File not found: {path}")
        return path.read_text(encoding="utf-8", errors="replace")


def extract_metadata(path: Path) -> Dict[str, object]:
    """Title, author, page count, lock state and file size of a PDF."""
    path = Path(path)
    if not path.exists():
        raise DocumentNotFoundError(f"File not found: {path}")
    metadata: Dict[str, object] = {"file_size": path.stat().st_size}
    try:
        reader = PdfReader(str(path))
    except (PyPdfError, ValueError, OSError) as exc:
        logger.warning("Could not read metadata from %s: %s", path.name, exc)
        return metadata
    metadata["is_locked"] = reader.is_encrypted
    if reader.is_encrypted:
        return metadata
    info = reader.metadata
    if info is not None:
        if info.title:
            metadata["title"] = str(info.title)
        if info.author:
            metadata["author"] = str(info.author)
    metadata["page_count"] = len(reader.pages)
    return metadata
