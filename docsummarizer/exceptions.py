"""Exceptions raised by the document summarizer and its collaborators."""

from __future__ import annotations


class DocSummarizerError(Exception):
    """Base exception."""


class SummarizationCancelled(DocSummarizerError):
    """Summarization was cancelled between chunk boundaries."""


class CacheError(DocSummarizerError):
    """Summary cache could not be written."""


class DocumentError(DocSummarizerError):
    """A source document could not be turned into text."""

    recovery_suggestion = "Please try a different document."


class DocumentNotFoundError(DocumentError):
    """File not found at the specified location."""


class PasswordProtectedError(DocumentError):
    """PDF is password-protected."""

    recovery_suggestion = "Open the PDF in another app to remove the password, then try again."


class DocumentCorruptedError(DocumentError):
    """PDF is corrupted or invalid."""

    recovery_suggestion = "Try re-downloading or re-saving the PDF."


class NoTextContentError(DocumentError):
    """No text could be extracted from the document."""


class ImageOnlyDocumentError(DocumentError):
    """Document pages contain images only; OCR is required."""

    recovery_suggestion = "Run the document through OCR to extract text from images (may take longer)."
