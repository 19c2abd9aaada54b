from __future__ import annotations

from enum import Enum
from typing import Any, Callable, TypedDict


class BridgeItem(TypedDict, total=False):
    """One item as returned by the RSS-to-JSON bridge (direct mode mimics it)."""

    title: str
    link: str
    pubDate: str
    description: str
    content: str
    thumbnail: str
    enclosure: dict[str, Any]


class LoadingState(str, Enum):
    IDLE = "idle"
    FETCHING_RSS = "fetching_rss"
    SUMMARIZING = "summarizing"
    READY = "ready"
    ERROR = "error"


LogFunc = Callable[[str], None]
