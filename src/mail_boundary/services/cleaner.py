from __future__ import annotations

import logging
import re
import threading
from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_CACHE_LIMIT = 200

_TRAILING_NBSP = re.compile(r"\u00a0+$", re.MULTILINE)
_QUOTE_MARKER = re.compile(r"^>+ ?", re.MULTILINE)
_OUTLOOK_INDENT = re.compile(r"^ {4}", re.MULTILINE)


class Cleaner:
    """Whitespace normalization and body extraction shared by all detectors.

    `normalize` memoizes per exact input string. The cache is dropped in full
    once it grows past `cache_limit` entries.
    """

    def __init__(self, cache_limit: int = DEFAULT_CACHE_LIMIT) -> None:
        self.cache_limit = max(1, int(cache_limit))
        self._cache: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def normalize(self, text: str | None) -> str:
        if not text:
            return ""

        with self._lock:
            cached = self._cache.get(text)
        if cached is not None:
            return cached

        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        normalized = normalized.replace("\ufeff", "")
        normalized = _TRAILING_NBSP.sub("", normalized)
        normalized = normalized.replace("\u00a0", " ").strip()

        with self._lock:
            if len(self._cache) > self.cache_limit:
                logger.debug(
                    "Clearing normalization cache",
                    extra={"event": "normalize_cache_cleared", "entries": len(self._cache)},
                )
                self._cache.clear()
            self._cache[text] = normalized
        return normalized

    @staticmethod
    def strip_quotes(text: str) -> str:
        text = _QUOTE_MARKER.sub("", text)
        return _OUTLOOK_INDENT.sub("", text)

    @staticmethod
    def extract_body(lines: Sequence[str], last_header_index: int) -> str:
        start = last_header_index + 1
        while start < len(lines) and not lines[start].strip():
            start += 1
        return "\n".join(lines[start:]).strip()


default_cleaner = Cleaner()
