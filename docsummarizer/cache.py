"""Summary caches keyed by document identity."""

from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Dict, List, Protocol, Sequence

from .exceptions import CacheError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]")


class SummaryCache(Protocol):
    def get(self, key: str) -> List[str] | None:
        ...

    def put(self, key: str, summary: Sequence[str]) -> None:
        ...


def sanitize_key(key: str) -> str:
    return _UNSAFE_KEY_CHARS_RE.sub("_", key)


class InMemoryCache:
    """Process-local cache, mostly for tests and embedding callers."""

    def __init__(self) -> None:
        self._entries: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> List[str] | None:
        with self._lock:
            entry = self._entries.get(key)
        return list(entry) if entry is not None else None

    def put(self, key: str, summary: Sequence[str]) -> None:
        with self._lock:
            self._entries[key] = list(summary)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class JsonFileCache:
    """Stores each summary as a JSON array of strings in ``cache_dir``."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{sanitize_key(key)}.json"

    def get(self, key: str) -> List[str] | None:
        path = self.path_for(key)
        if not path.exists():
            logger.debug("Cache miss: %s", key)
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", path, exc)
            return None
        if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
            logger.warning("Ignoring malformed cache entry %s", path)
            return None
        logger.debug("Cache hit: %s", key)
        return payload

    def put(self, key: str, summary: Sequence[str]) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(json.dumps(list(summary), ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            raise CacheError(f"Failed to write cache entry {path}: {exc}") from exc
        logger.debug("Cached summary for %s", key)

    def clear(self) -> int:
        removed = 0
        for path in self.cache_dir.glob("*.json"):
            path.unlink()
            removed += 1
        logger.info("Cleared %d cached summaries from %s", removed, self.cache_dir)
        return removed

    def size_bytes(self) -> int:
        return sum(path.stat().st_size for path in self.cache_dir.glob("*.json"))
