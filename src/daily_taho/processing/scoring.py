from __future__ import annotations

import re
from typing import Iterable

from daily_taho.core.constants import CATEGORIES, WEIGHTED_KEYWORDS, Category


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword.lower())}\b", re.IGNORECASE)


class CategoryClassifier:
    def __init__(
        self,
        *,
        weighted_keywords: dict[Category, dict] | None = None,
        tie_break_order: Iterable[Category] | None = None,
        default_category: Category = Category.BREAKING,
    ) -> None:
        table = WEIGHTED_KEYWORDS if weighted_keywords is None else weighted_keywords
        self._rules: list[tuple[Category, int, list[re.Pattern[str]]]] = []
        for category, rule in table.items():
            if category == Category.ALL:
                continue
            keywords = list(dict.fromkeys(k.strip().lower() for k in rule.get("keywords", []) if k.strip()))
            self._rules.append((category, int(rule.get("weight", 0)), [_keyword_pattern(k) for k in keywords]))
        order = list(tie_break_order) if tie_break_order is not None else list(CATEGORIES)
        self._rank = {c: i for i, c in enumerate(order)}
        self._default = default_category

    def score(self, text: str) -> dict[Category, int]:
        """Weight times the number of distinct keywords found as whole words."""
        scores: dict[Category, int] = {}
        for category, weight, patterns in self._rules:
            hits = sum(1 for p in patterns if p.search(text or ""))
            if hits:
                scores[category] = weight * hits
        return scores

    def _sort_key(self, pair: tuple[Category, int]) -> tuple[int, int, int]:
        category, score = pair
        breaking_first = 0 if category == Category.BREAKING else 1
        return (-score, breaking_first, self._rank.get(category, len(self._rank)))

    def classify(self, title: str, description: str) -> Category:
        scores = self.score(f"{title or ''} {description or ''}")
        if not scores:
            return self._default
        ranked = sorted(scores.items(), key=self._sort_key)
        return ranked[0][0]


def build_default_classifier() -> CategoryClassifier:
    return CategoryClassifier()
