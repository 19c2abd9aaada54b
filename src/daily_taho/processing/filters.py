from __future__ import annotations

from typing import Iterable

from daily_taho.core.constants import (
    MIN_DESCRIPTION_CHARS,
    MISMATCH_PATH_HINTS,
    SERIOUS_TOPIC_KEYWORDS,
    Category,
)
from daily_taho.utils import strip_tags


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(n in text for n in needles)


def is_path_consistent(
    title: str,
    link: str,
    *,
    serious_keywords: Iterable[str] = SERIOUS_TOPIC_KEYWORDS,
    mismatch_paths: Iterable[str] = MISMATCH_PATH_HINTS,
) -> bool:
    """False for a government/economy headline filed under a lifestyle section."""
    title_lower = (title or "").lower()
    link_lower = (link or "").lower()
    has_serious = _contains_any(title_lower, [k.lower() for k in serious_keywords])
    has_mismatch = _contains_any(link_lower, [p.lower() for p in mismatch_paths])
    return not (has_serious and has_mismatch)


def has_enough_content(description_html: str, min_chars: int = MIN_DESCRIPTION_CHARS) -> bool:
    return len(strip_tags(description_html or "")) > min_chars


def matches_category(item_category: Category, view: Category) -> bool:
    if view == Category.ALL:
        return True
    return item_category == view
