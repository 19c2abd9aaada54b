from __future__ import annotations

import os
from dataclasses import dataclass, field

from daily_taho.core.config import _env_bool, _env_int

FETCH_MODE_BRIDGE = "bridge"
FETCH_MODE_DIRECT = "direct"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/121.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class FeedFetcherConfig:
    bridge_url: str = os.getenv("RSS_BRIDGE_URL", "https://api.rss2json.com/v1/api.json")
    mode: str = os.getenv("FEED_FETCH_MODE", FETCH_MODE_BRIDGE).strip().lower()
    cache_bust: bool = _env_bool("FEED_CACHE_BUST", True)
    timeout_sec: int = _env_int("FEED_FETCH_TIMEOUT_SEC", 10)
    max_workers: int = _env_int("FEED_FETCH_MAX_WORKERS", 8)
    user_agent: str = os.getenv("FEED_FETCH_USER_AGENT", DEFAULT_USER_AGENT)
    headers: dict[str, str] = field(default_factory=lambda: {"Accept": "application/json, application/rss+xml, */*"})
