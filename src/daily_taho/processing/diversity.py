from __future__ import annotations

from typing import Sequence

from daily_taho.core.config import DISPLAY_LIMIT, DIVERSITY_CAP, DIVERSITY_MAX_DEPTH
from daily_taho.models import ScoredItem


def group_by_source(items: Sequence[ScoredItem]) -> dict[str, list[ScoredItem]]:
    groups: dict[str, list[ScoredItem]] = {}
    for item in items:
        groups.setdefault(item.source_name, []).append(item)
    return groups


def select_diverse(
    items: Sequence[ScoredItem],
    *,
    cap: int = DIVERSITY_CAP,
    max_depth: int = DIVERSITY_MAX_DEPTH,
    limit: int = DISPLAY_LIMIT,
) -> list[ScoredItem]:
    """Round-robin across sources by depth, then re-sort by recency.

    `items` must already be newest first. Depth 0 takes each source's newest
    item, depth 1 each source's second newest, and so on.
    """
    groups = group_by_source(items)
    picked: list[ScoredItem] = []
    for depth in range(max_depth):
        if len(picked) >= cap:
            break
        for bucket in groups.values():
            if len(picked) >= cap:
                break
            if depth < len(bucket):
                picked.append(bucket[depth])

    # sorted() is stable, so equal timestamps keep round-robin order
    picked = sorted(picked, key=lambda it: it.published_ts, reverse=True)
    return picked[:limit] if limit > 0 else picked
