from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Sequence

from daily_taho.core import config
from daily_taho.core.constants import Category
from daily_taho.models import Article, CacheEntry
from daily_taho.utils import atomic_write_json, safe_read_json

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class FeedCache:
    """Per-category article cache persisted as one JSON document.

    The document maps the category label to `{"data": [...], "timestamp": ms}`.
    Entries stay fresh while `now - timestamp < ttl`.
    """

    def __init__(
        self,
        *,
        path: str | None = config.CACHE_PATH,
        ttl_sec: int = config.CACHE_TTL_SEC,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._path = path
        self._ttl_ms = ttl_sec * 1000
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[Category, CacheEntry] = self._load()

    def _load(self) -> dict[Category, CacheEntry]:
        if not self._path:
            return {}
        raw = safe_read_json(self._path, {})
        if not isinstance(raw, dict):
            logger.warning("ignoring malformed cache file %s", self._path)
            return {}
        entries: dict[Category, CacheEntry] = {}
        for label, payload in raw.items():
            if not isinstance(payload, dict):
                continue
            try:
                entries[Category.parse(label)] = CacheEntry.from_dict(payload)
            except ValueError:
                continue
        return entries

    def _persist(self) -> None:
        if not self._path:
            return
        payload = {category.value: entry.to_dict() for category, entry in self._entries.items()}
        try:
            atomic_write_json(self._path, payload)
        except OSError as e:
            # the in-memory copy still serves this process
            logger.warning("could not persist feed cache to %s: %s", self._path, e)

    def get(self, category: Category) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(category)

    def is_fresh(self, entry: CacheEntry | None) -> bool:
        if entry is None:
            return False
        return self._clock() - entry.timestamp < self._ttl_ms

    def get_fresh(self, category: Category) -> CacheEntry | None:
        entry = self.get(category)
        return entry if self.is_fresh(entry) else None

    def put(self, category: Category, articles: Sequence[Article]) -> CacheEntry:
        entry = CacheEntry(data=list(articles), timestamp=self._clock())
        with self._lock:
            self._entries[category] = entry
            self._persist()
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
            self._persist()
