"""
Tag autocomplete with a time-limited in-memory cache.
"""

import logging
import time
from collections import Counter
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
MIN_QUERY_LENGTH = 2
DEFAULT_SUGGESTIONS = 10
MAX_SUGGESTIONS = 15
MAX_CACHED_TAGS = 50


class TagAutocomplete:
    """Suggests tags from a cached list, refreshed through loader once the TTL expires"""

    def __init__(self, loader: Callable[[], Iterable[str]], ttl: int = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.loader = loader
        self.ttl = ttl
        self._clock = clock
        self._tags: List[str] = []
        self._loaded_at: Optional[float] = None

    def _is_fresh(self) -> bool:
        return bool(self._tags) and self._loaded_at is not None and self._clock() - self._loaded_at < self.ttl

    def _load(self) -> List[str]:
        if self._is_fresh():
            return self._tags

        try:
            tags = [str(tag).strip() for tag in self.loader() or []]
        except Exception as e:
            # leave the cache stale so the next call retries the loader
            logger.error("Error loading tags: %s", e)
            self._tags = []
            self._loaded_at = None
            return self._tags

        self._tags = [tag for tag in tags if tag]
        self._loaded_at = self._clock()
        return self._tags

    def suggestions(self, query: str = '') -> List[str]:
        tags = self._load()
        query = (query or '').strip()

        if len(query) < MIN_QUERY_LENGTH:
            return tags[:DEFAULT_SUGGESTIONS]

        query_lower = query.lower()
        return [tag for tag in tags if query_lower in tag.lower()][:MAX_SUGGESTIONS]

    def suggestions_with_counts(self, query: str, counts: Counter) -> List[str]:
        """Matching tags ordered by how often they are used, ranked before truncation."""
        query_lower = (query or '').strip().lower()
        matches = [tag for tag in self._load() if query_lower in tag.lower()]
        ranked = sorted(matches, key=lambda tag: counts.get(tag, 0), reverse=True)
        return ranked[:MAX_SUGGESTIONS]

    def invalidate(self) -> None:
        self._tags = []
        self._loaded_at = None

    def add_tag(self, tag: str) -> None:
        """Put a newly created tag at the front of the cache."""
        tag = (tag or '').strip()
        if not tag:
            return
        self._load()
        if tag in self._tags:
            self._tags.remove(tag)
        self._tags = [tag] + self._tags[:MAX_CACHED_TAGS - 1]
