from __future__ import annotations

from typing import Any

from daily_taho.core.constants import GENERIC_FALLBACK_URL, PUBLISHER_HOME_PAGES
from daily_taho.models import RawFeedItem
from daily_taho.processing.images import resolve_item_image
from daily_taho.processing.types import BridgeItem


def verify_and_fix_link(
    link: Any,
    source_name: str,
    *,
    home_pages: dict[str, str] | None = None,
    fallback_url: str = GENERIC_FALLBACK_URL,
) -> str:
    """Return the item link, or the publisher home page when the link is unusable."""
    if isinstance(link, str) and link.strip().startswith("http"):
        return link
    pages = PUBLISHER_HOME_PAGES if home_pages is None else home_pages
    return pages.get(source_name) or fallback_url


def to_raw_item(entry: BridgeItem, source_name: str) -> RawFeedItem:
    # bridge items carry the full body in `content` when the publisher ships one
    description = entry.get("content") or entry.get("description") or ""
    return RawFeedItem(
        title=str(entry.get("title") or "").strip(),
        link=verify_and_fix_link(entry.get("link"), source_name),
        published_at=str(entry.get("pubDate") or ""),
        source_name=source_name,
        description_html=str(description),
        image_url=resolve_item_image(entry),
    )
