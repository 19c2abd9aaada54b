from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from daily_taho.core import config
from daily_taho.core.exceptions import LLMError
from daily_taho.models import Article, EnrichedSummary
from daily_taho.processing.llm_client import GeminiClient, log_ai_unavailable
from daily_taho.processing.prompts import build_batch_prompt
from daily_taho.utils import clean_text, normalize_title_key, read_time_label

logger = logging.getLogger(__name__)

UpdateFunc = Callable[[list[Article]], None]


@dataclass(frozen=True)
class EnrichmentOutcome:
    articles: list[Article]
    batches_attempted: int
    batches_succeeded: int

    @property
    def any_succeeded(self) -> bool:
        return self.batches_succeeded > 0


def _batch_row(article: Article) -> dict[str, Any]:
    return {
        "title": article.title,
        "source": article.source.name,
        "description": article.summary_english,
        "url": article.url,
        "date": article.published_at,
    }


def match_results(
    members: Sequence[Article],
    results: Sequence[dict[str, Any]],
) -> list[dict[str, Any] | None]:
    """Pair each batch member with a model row: by url, then by title, then by position
    among the rows nobody claimed."""
    used: set[int] = set()
    by_url: dict[str, int] = {}
    by_title: dict[str, int] = {}
    for i, row in enumerate(results):
        url = str(row.get("url") or "").strip()
        if url and url not in by_url:
            by_url[url] = i
        title_key = normalize_title_key(str(row.get("title") or ""))
        if title_key and title_key not in by_title:
            by_title[title_key] = i

    matched: list[int | None] = [None] * len(members)
    for pos, article in enumerate(members):
        idx = by_url.get(article.url.strip())
        if idx is None or idx in used:
            idx = by_title.get(normalize_title_key(article.title))
        if idx is not None and idx not in used:
            matched[pos] = idx
            used.add(idx)

    # leftovers pair up in order
    spare = [i for i in range(len(results)) if i not in used]
    for pos in range(len(members)):
        if matched[pos] is None and spare:
            matched[pos] = spare.pop(0)

    return [results[i] if i is not None else None for i in matched]


def apply_summary(article: Article, row: dict[str, Any] | None) -> Article:
    if not row:
        return article
    english = clean_text(str(row.get("summary_en") or ""))
    if not english:
        return article
    filipino = clean_text(str(row.get("summary_tl") or "")) or article.summary_filipino
    return article.with_summaries(english=english, filipino=filipino, read_time=read_time_label(english))


class BatchEnricher:
    """Priority/background batch summaries merged back into the article list.

    The first `priority_size` articles form the priority batch, the rest up to
    `limit` the background batch. Both requests go out together; the priority
    merge is published before the background merge.
    """

    def __init__(
        self,
        *,
        client: GeminiClient,
        priority_size: int = config.ENRICHMENT_PRIORITY_SIZE,
        limit: int = config.ENRICHMENT_LIMIT,
    ) -> None:
        self._client = client
        self._priority_size = max(0, priority_size)
        self._limit = max(self._priority_size, limit)

    @property
    def available(self) -> bool:
        return self._client.available

    def summarize_batch(self, members: Sequence[Article]) -> list[EnrichedSummary]:
        if not members:
            return []
        try:
            rows = self._client.generate_json_array(build_batch_prompt([_batch_row(a) for a in members]))
        except LLMError as e:
            log_ai_unavailable(str(e))
            return []
        return rows  # type: ignore[return-value]

    def _merge(self, current: list[Article], start: int, members: Sequence[Article], rows: list[EnrichedSummary]) -> list[Article]:
        merged = list(current)
        for offset, row in enumerate(match_results(members, rows)):  # type: ignore[arg-type]
            merged[start + offset] = apply_summary(members[offset], row)
        return merged

    def enrich(self, articles: Sequence[Article], *, on_update: UpdateFunc | None = None) -> EnrichmentOutcome:
        current = list(articles)
        priority = current[: self._priority_size]
        background = current[self._priority_size : self._limit]
        batches = [(0, priority), (self._priority_size, background)]
        batches = [(start, members) for start, members in batches if members]
        if not batches:
            return EnrichmentOutcome(articles=current, batches_attempted=0, batches_succeeded=0)

        succeeded = 0
        with ThreadPoolExecutor(max_workers=len(batches)) as executor:
            futures = [(start, members, executor.submit(self.summarize_batch, members)) for start, members in batches]
            # results are consumed in submission order: priority first
            for start, members, future in futures:
                rows = future.result()
                if not rows:
                    logger.info("batch at %d yielded no summaries; keeping raw text", start)
                    continue
                succeeded += 1
                current = self._merge(current, start, members, rows)
                if on_update is not None:
                    on_update(list(current))

        return EnrichmentOutcome(articles=current, batches_attempted=len(batches), batches_succeeded=succeeded)
