from __future__ import annotations

from typing import Iterable

from daily_taho.models import ScoredItem
from daily_taho.utils import normalize_title_key


def dedupe_items(items: Iterable[ScoredItem]) -> list[ScoredItem]:
    """Keep the first occurrence per link and per (source, normalized title)."""
    seen_links: set[str] = set()
    seen_titles: set[tuple[str, str]] = set()
    kept: list[ScoredItem] = []
    for item in items:
        link_key = (item.link or "").strip().rstrip("/").lower()
        title_key = (item.source_name, normalize_title_key(item.title))
        if link_key and link_key in seen_links:
            continue
        if title_key[1] and title_key in seen_titles:
            continue
        if link_key:
            seen_links.add(link_key)
        if title_key[1]:
            seen_titles.add(title_key)
        kept.append(item)
    return kept
