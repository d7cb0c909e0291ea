"""Command-line entry point for the local document summarizer."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import List

from .cache import JsonFileCache
from .config import SummaryConfig, default_cache_dir, default_log_level
from .embedder import BGEEmbedder, BGEWordEmbedding, EmbedderConfig
from .keywords import KeywordExtractor
from .logger import setup_logging
from .pdf_loader import DocumentLoader, iter_document_paths
from .scoring import SentenceScorer
from .service import DocumentSummaryService, ProcessingOutcome
from .summarizer import DocumentSummarizer
from .tagger import TaggerConfig, TransformersTagger
from .text_splitter import TextSplitter

logger = logging.getLogger(__name__)


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Local adaptive document summarizer")
    parser.add_argument("--log-level", type=str, default=default_log_level(), help="Logging level.")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize = subparsers.add_parser("summarize", help="Summarize documents or directories of documents.")
    summarize.add_argument("paths", type=Path, nargs="+", help="Files or directories to summarize.")
    summarize.add_argument("--cache-dir", type=Path, default=Path(default_cache_dir()), help="Directory for cached summaries.")
    summarize.add_argument("--no-cache", action="store_true", help="Ignore and do not update the summary cache.")
    summarize.add_argument("--chunk-size", type=int, default=None, help="Chunk size in characters.")
    summarize.add_argument("--workers", type=int, default=None, help="Worker threads for chunk summaries.")
    summarize.add_argument("--embedding-model", type=str, default=None, help="BGE model for semantic scoring (disabled if omitted).")
    summarize.add_argument("--embedding-device", type=str, default="cpu", help="Device for the embedding model.")
    summarize.add_argument("--use-tagger", action="store_true", help="Score keywords with transformers POS/NER tagging.")
    summarize.add_argument("--markdown-dir", type=Path, default=None, help="Also write a Markdown summary per document here.")

    keywords = subparsers.add_parser("keywords", help="Extract keywords from a text file.")
    keywords.add_argument("path", type=Path, help="Text or Markdown file.")
    keywords.add_argument("--count", type=int, default=8, help="Number of keywords.")
    keywords.add_argument("--use-tagger", action="store_true", help="Score keywords with transformers POS/NER tagging.")

    clear = subparsers.add_parser("clear-cache", help="Delete all cached summaries.")
    clear.add_argument("--cache-dir", type=Path, default=Path(default_cache_dir()), help="Directory for cached summaries.")

    return parser.parse_args(argv)


def run_summarize(args: argparse.Namespace) -> int:
    config = SummaryConfig().with_overrides(chunk_size=args.chunk_size, max_workers=args.workers)
    embedding = None
    if args.embedding_model:
        embedding = BGEWordEmbedding(
            BGEEmbedder(EmbedderConfig(model_name=args.embedding_model, device=args.embedding_device))
        )
    tagger = TransformersTagger(TaggerConfig()) if args.use_tagger else None
    summarizer = DocumentSummarizer(
        sentence_scorer=SentenceScorer(embedding=embedding),
        keyword_extractor=KeywordExtractor(tagger=tagger),
        config=config,
    )
    service = DocumentSummaryService(
        summarizer=summarizer,
        loader=DocumentLoader(TextSplitter(chunk_size=config.chunk_size)),
        cache=None if args.no_cache else JsonFileCache(args.cache_dir),
    )

    documents = _collect_paths(args.paths)
    if not documents:
        print("No supported documents found.", file=sys.stderr)
        return 1

    outcomes: List[ProcessingOutcome] = []
    for path in documents:
        outcome = service.process(path, use_cache=not args.no_cache)
        outcomes.append(outcome)
        if args.markdown_dir is not None and outcome.succeeded:
            try:
                output_path = _write_markdown_summary(outcome, args.markdown_dir)
                logger.info("Saved markdown to %s", output_path)
            except OSError as exc:
                print(f"Failed to write markdown file: {exc}", file=sys.stderr)

    print(json.dumps([outcome.to_dict() for outcome in outcomes], indent=2, ensure_ascii=False))
    return 0 if any(outcome.succeeded for outcome in outcomes) else 1


def run_keywords(args: argparse.Namespace) -> int:
    if not args.path.is_file():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1
    tagger = TransformersTagger(TaggerConfig()) if args.use_tagger else None
    text = args.path.read_text(encoding="utf-8", errors="replace")
    keywords = KeywordExtractor(tagger=tagger).extract_key_points(text, args.count)
    print(json.dumps(keywords, ensure_ascii=False))
    return 0


def run_clear_cache(args: argparse.Namespace) -> int:
    cache = JsonFileCache(args.cache_dir)
    freed = cache.size_bytes()
    removed = cache.clear()
    print(f"Removed {removed} cached summaries ({freed} bytes) from {args.cache_dir}")
    return 0


def _collect_paths(paths: List[Path]) -> List[Path]:
    documents: List[Path] = []
    for path in paths:
        if path.is_dir():
            documents.extend(iter_document_paths(path))
        else:
            documents.append(path)
    return documents


def _write_markdown_summary(outcome: ProcessingOutcome, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / _sanitize_filename(outcome.source)

    lines = [
        f"# {outcome.source}",
        "",
        "## Summary",
        "",
    ]
    lines.extend(f"- {point}" for point in outcome.summary_points)
    lines.extend(["", "## Keywords", ""])
    if outcome.keywords:
        lines.append(", ".join(outcome.keywords))
    else:
        lines.append("- None found")

    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return output_path


def _sanitize_filename(source: str) -> str:
    sanitized = re.sub(r"[^A-Za-z0-9._-]+", "_", Path(source).stem.strip())
    sanitized = sanitized.strip("_")
    if not sanitized:
        sanitized = "summary"
    return f"{sanitized}.md"


def main(argv: List[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.log_level, json_format=args.json_logs)
    if args.command == "summarize":
        return run_summarize(args)
    if args.command == "keywords":
        return run_keywords(args)
    if args.command == "clear-cache":
        return run_clear_cache(args)
    raise ValueError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
