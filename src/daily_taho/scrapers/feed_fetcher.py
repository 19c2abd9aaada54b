from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Mapping

import feedparser
import requests

from daily_taho.core.constants import RSS_FEEDS
from daily_taho.core.exceptions import FeedFetchError
from daily_taho.models import RawFeedItem
from daily_taho.processing.normalizer import to_raw_item
from daily_taho.processing.types import BridgeItem
from daily_taho.scrapers.feed_fetcher_config import (
    FETCH_MODE_BRIDGE,
    FETCH_MODE_DIRECT,
    FeedFetcherConfig,
)

logger = logging.getLogger(__name__)


def _entry_value(entry: Any, key: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(key)
    return getattr(entry, key, None)


def feedparser_entry_to_bridge_item(entry: Any) -> BridgeItem:
    """Reshape a feedparser entry into the bridge item layout."""
    item: BridgeItem = {
        "title": str(_entry_value(entry, "title") or ""),
        "link": str(_entry_value(entry, "link") or ""),
        "pubDate": str(_entry_value(entry, "published") or _entry_value(entry, "updated") or ""),
        "description": str(_entry_value(entry, "summary") or ""),
    }
    content_list = _entry_value(entry, "content")
    if isinstance(content_list, list) and content_list:
        first = content_list[0]
        value = first.get("value") if isinstance(first, dict) else getattr(first, "value", "")
        if value:
            item["content"] = str(value)

    thumbs = _entry_value(entry, "media_thumbnail")
    if isinstance(thumbs, list) and thumbs and isinstance(thumbs[0], dict) and thumbs[0].get("url"):
        item["thumbnail"] = str(thumbs[0]["url"])

    for key in ("enclosures", "media_content"):
        candidates = _entry_value(entry, key)
        if not isinstance(candidates, list):
            continue
        for enc in candidates:
            if not isinstance(enc, dict):
                continue
            href = enc.get("href") or enc.get("url")
            enc_type = str(enc.get("type") or "")
            if href and (not enc_type or enc_type.startswith("image")):
                item["enclosure"] = {"link": str(href), "type": enc_type}
                break
        if "enclosure" in item:
            break
    return item


class FeedFetcher:
    def __init__(
        self,
        *,
        config: FeedFetcherConfig | None = None,
        feeds: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._config = config or FeedFetcherConfig()
        self._feeds = dict(RSS_FEEDS if feeds is None else feeds)
        self._session = session or requests.Session()
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))

    @property
    def feeds(self) -> dict[str, str]:
        return dict(self._feeds)

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._config.user_agent, **self._config.headers}

    def _fetch_bridge(self, source_name: str, rss_url: str) -> list[BridgeItem]:
        params: dict[str, Any] = {"rss_url": rss_url}
        if self._config.cache_bust:
            params["_cb"] = self._clock_ms()
        try:
            resp = self._session.get(
                self._config.bridge_url,
                params=params,
                headers=self._headers(),
                timeout=self._config.timeout_sec,
            )
        except requests.RequestException as e:
            raise FeedFetchError(f"{source_name}: bridge request failed: {e}") from e
        if not resp.ok:
            raise FeedFetchError(f"{source_name}: bridge returned HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise FeedFetchError(f"{source_name}: bridge response is not JSON") from e
        if not isinstance(payload, dict) or payload.get("status") != "ok":
            status = payload.get("status") if isinstance(payload, dict) else None
            raise FeedFetchError(f"{source_name}: bridge status {status!r}")
        items = payload.get("items") or []
        return [it for it in items if isinstance(it, dict)]

    def _fetch_direct(self, source_name: str, rss_url: str) -> list[BridgeItem]:
        try:
            resp = self._session.get(rss_url, headers=self._headers(), timeout=self._config.timeout_sec)
        except requests.RequestException as e:
            raise FeedFetchError(f"{source_name}: RSS request failed: {e}") from e
        if not resp.ok:
            raise FeedFetchError(f"{source_name}: RSS returned HTTP {resp.status_code}")
        parsed = feedparser.parse(resp.content)
        entries = getattr(parsed, "entries", None) or []
        if not entries and getattr(parsed, "bozo", False):
            raise FeedFetchError(f"{source_name}: RSS parse failed: {getattr(parsed, 'bozo_exception', '')}")
        return [feedparser_entry_to_bridge_item(e) for e in entries]

    def fetch_feed(self, source_name: str, rss_url: str) -> list[RawFeedItem]:
        """Fetch one feed. Raises FeedFetchError on any transport or format problem."""
        if self._config.mode == FETCH_MODE_DIRECT:
            entries = self._fetch_direct(source_name, rss_url)
        elif self._config.mode == FETCH_MODE_BRIDGE:
            entries = self._fetch_bridge(source_name, rss_url)
        else:
            raise FeedFetchError(f"unknown fetch mode: {self._config.mode!r}")
        return [to_raw_item(entry, source_name) for entry in entries]

    def fetch_all(self) -> list[RawFeedItem]:
        """Fetch every feed concurrently; a failing feed contributes nothing."""
        if not self._feeds:
            return []
        names = list(self._feeds.keys())
        results: list[list[RawFeedItem]] = [[] for _ in names]
        worker_count = max(1, min(self._config.max_workers, len(names)))
        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            future_map = {
                executor.submit(self.fetch_feed, name, self._feeds[name]): idx
                for idx, name in enumerate(names)
            }
            for future in as_completed(future_map):
                idx = future_map[future]
                try:
                    results[idx] = future.result()
                except FeedFetchError as exc:
                    logger.warning("feed skipped: %s", exc)
                except Exception:
                    logger.exception("unexpected error fetching %s", names[idx])
                else:
                    logger.debug("%s: %d items", names[idx], len(results[idx]))
        return [item for chunk in results for item in chunk]
