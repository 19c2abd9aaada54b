from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

from daily_taho.core import config
from daily_taho.core.constants import FILIPINO_PLACEHOLDER, RAW_SUMMARY_MAX_CHARS, Category
from daily_taho.core.exceptions import FeedAggregationError
from daily_taho.models import Article, NewsSource, RawFeedItem, ScoredItem
from daily_taho.processing.cache import FeedCache
from daily_taho.processing.dedupe import dedupe_items
from daily_taho.processing.diversity import select_diverse
from daily_taho.processing.enrichment import BatchEnricher
from daily_taho.processing.filters import has_enough_content, is_path_consistent, matches_category
from daily_taho.processing.llm_client import GeminiClient, log_ai_unavailable
from daily_taho.processing.scoring import CategoryClassifier, build_default_classifier
from daily_taho.processing.types import LoadingState, LogFunc
from daily_taho.scrapers.feed_fetcher import FeedFetcher
from daily_taho.utils import (
    clean_text,
    format_display_date,
    generate_slug,
    published_timestamp,
    read_time_label,
    short_hash,
    truncate_text,
)

_default_logger = logging.getLogger(__name__)

SUMMARY_SHORT_MAX_CHARS = 160

PLACEHOLDER_ARTICLE = Article(
    id="m1",
    slug="welcome-to-daily-taho-your-reliable-news-hub",
    title="Welcome to Daily Taho: Your Reliable News Hub",
    source=NewsSource(name="System"),
    category=Category.ALL,
    publish_time="Just now",
    read_time="1 min read",
    image_url="",
    summary_short="High-speed news summaries from verified Philippine RSS sources.",
    summary_english=(
        "Daily Taho provides high-speed news summaries directly from verified Philippine RSS sources. "
        "We make sure you get legitimate headlines without the clutter of ads or trackers."
    ),
    summary_filipino=(
        "Ang Daily Taho ay nagbibigay ng mabilis na buod ng balita mula sa mga beripikadong RSS sources "
        "sa Pilipinas. Tinitiyak namin na lehitimong balita ang iyong matatanggap."
    ),
    url="https://www.google.com",
)

Listener = Callable[[list[Article], LoadingState], None]


class FeedSource(Protocol):
    def fetch_all(self) -> list[RawFeedItem]: ...


def score_item(item: RawFeedItem, classifier: CategoryClassifier) -> ScoredItem:
    summary = clean_text(item.description_html)
    return ScoredItem(
        title=clean_text(item.title),
        link=item.link,
        published_at=item.published_at,
        published_ts=published_timestamp(item.published_at),
        source_name=item.source_name,
        description_html=item.description_html,
        category=classifier.classify(item.title, summary),
        image_url=item.image_url,
        clean_summary=summary,
    )


def to_article(item: ScoredItem) -> Article:
    """Raw article shown before enrichment lands."""
    slug = generate_slug(item.title) or "article"
    english = item.clean_summary[:RAW_SUMMARY_MAX_CHARS] + "..."
    return Article(
        id=f"{slug}-{short_hash(item.source_name, item.published_at)}",
        slug=slug,
        title=item.title,
        source=NewsSource(name=item.source_name),
        category=item.category,
        publish_time=format_display_date(item.published_at),
        read_time=read_time_label(item.clean_summary),
        image_url=item.image_url,
        summary_short=truncate_text(item.clean_summary, SUMMARY_SHORT_MAX_CHARS, "..."),
        summary_english=english,
        summary_filipino=FILIPINO_PLACEHOLDER,
        url=item.link,
        published_at=item.published_at,
    )


class FeedOrchestrator:
    """Fetch, filter, classify, select and enrich feed articles for one category view.

    Every refresh takes a per-category sequence token. A refresh publishes to
    listeners and writes the cache only while its token is still the newest
    one for its category; anything else it produces is dropped.
    """

    def __init__(
        self,
        *,
        fetcher: FeedSource,
        classifier: CategoryClassifier,
        cache: FeedCache,
        enricher: BatchEnricher | None,
        logger: LogFunc | None = None,
        enrichment_enabled: bool = config.ENRICHMENT_ENABLED,
        display_limit: int = config.DISPLAY_LIMIT,
        diversity_cap: int = config.DIVERSITY_CAP,
        diversity_max_depth: int = config.DIVERSITY_MAX_DEPTH,
    ) -> None:
        self._fetcher = fetcher
        self._classifier = classifier
        self._cache = cache
        self._enricher = enricher
        self._log = logger or _default_logger.info
        self._enrichment_enabled = enrichment_enabled
        self._display_limit = display_limit
        self._diversity_cap = diversity_cap
        self._diversity_max_depth = diversity_max_depth

        self._lock = threading.Lock()
        self._tokens: dict[Category, int] = {}
        self._listeners: list[Listener] = []
        self._active_category = Category.ALL
        self._articles: list[Article] = []
        self._state = LoadingState.IDLE
        self._fetch_error = False

    # ---- observable state ----

    @property
    def articles(self) -> list[Article]:
        with self._lock:
            return list(self._articles)

    @property
    def state(self) -> LoadingState:
        return self._state

    @property
    def fetch_error(self) -> bool:
        return self._fetch_error

    @property
    def active_category(self) -> Category:
        return self._active_category

    def display_articles(self) -> list[Article]:
        with self._lock:
            if self._state == LoadingState.FETCHING_RSS:
                return []
            if self._articles:
                return list(self._articles)
            if self._fetch_error:
                return [PLACEHOLDER_ARTICLE]
            return []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    # ---- sequencing ----

    def _next_token(self, category: Category) -> int:
        with self._lock:
            token = self._tokens.get(category, 0) + 1
            self._tokens[category] = token
            self._active_category = category
            return token

    def is_current(self, category: Category, token: int) -> bool:
        with self._lock:
            return self._tokens.get(category) == token

    def _publish(
        self,
        category: Category,
        token: int,
        state: LoadingState,
        articles: list[Article] | None = None,
        *,
        fetch_error: bool | None = None,
    ) -> bool:
        with self._lock:
            if self._tokens.get(category) != token or category != self._active_category:
                return False
            if articles is not None:
                self._articles = list(articles)
            if fetch_error is not None:
                self._fetch_error = fetch_error
            self._state = state
            snapshot = list(self._articles)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot, state)
        return True

    def _commit(self, category: Category, token: int, articles: list[Article]) -> bool:
        if not articles or not self.is_current(category, token):
            return False
        self._cache.put(category, articles)
        return True

    # ---- pipeline stages ----

    def aggregate(self, category: Category = Category.ALL) -> list[ScoredItem]:
        """Fetch, filter, classify and dedupe; newest first."""
        raw_items = self._fetcher.fetch_all()
        scored: list[ScoredItem] = []
        for item in raw_items:
            if not item.title:
                continue
            if not has_enough_content(item.description_html):
                continue
            if not is_path_consistent(item.title, item.link):
                continue
            scored_item = score_item(item, self._classifier)
            if not matches_category(scored_item.category, category):
                continue
            scored.append(scored_item)
        scored = dedupe_items(scored)
        scored.sort(key=lambda it: it.published_ts, reverse=True)
        self._log(f"aggregated {len(scored)}/{len(raw_items)} items for {category.value}")
        return scored

    def select(self, items: list[ScoredItem], *, limit: int | None = None) -> list[ScoredItem]:
        return select_diverse(
            items,
            cap=max(self._diversity_cap, limit or 0),
            max_depth=self._diversity_max_depth,
            limit=self._display_limit if limit is None else limit,
        )

    def _active_enricher(self) -> BatchEnricher | None:
        """The enricher to use for this refresh, or None when enrichment is off."""
        if not self._enrichment_enabled or self._enricher is None:
            return None
        if not self._enricher.available:
            log_ai_unavailable("GEMINI_API_KEY is not set")
            return None
        return self._enricher

    def refresh(self, category: Category | str = Category.ALL, *, force: bool = False) -> list[Article]:
        category = Category.parse(category)
        token = self._next_token(category)

        if not force:
            entry = self._cache.get_fresh(category)
            if entry is not None:
                self._publish(category, token, LoadingState.READY, entry.data, fetch_error=False)
                return list(entry.data)

        self._publish(category, token, LoadingState.FETCHING_RSS, [] if force else None, fetch_error=False)
        try:
            scored = self.aggregate(category)
            if not scored and category == Category.ALL:
                raise FeedAggregationError("no usable items from any feed")
        except Exception as e:
            self._log(f"aggregation failed for {category.value}: {type(e).__name__}: {e}")
            self._publish(category, token, LoadingState.ERROR, fetch_error=True)
            return []

        raw_articles = [to_article(item) for item in self.select(scored)]
        if not raw_articles:
            self._publish(category, token, LoadingState.READY, [])
            return []

        enricher = self._active_enricher()
        if enricher is None:
            self._publish(category, token, LoadingState.READY, raw_articles)
            self._commit(category, token, raw_articles)
            return raw_articles

        self._publish(category, token, LoadingState.SUMMARIZING, raw_articles)
        outcome = enricher.enrich(
            raw_articles,
            on_update=lambda updated: self._publish(category, token, LoadingState.SUMMARIZING, updated),
        )
        self._publish(category, token, LoadingState.READY, outcome.articles)
        if outcome.any_succeeded:
            self._commit(category, token, outcome.articles)
        else:
            self._log(f"no enrichment batch succeeded for {category.value}; cache left as is")
        return outcome.articles


def build_default_orchestrator(
    *,
    logger: LogFunc | None = None,
    cache: FeedCache | None = None,
) -> FeedOrchestrator:
    return FeedOrchestrator(
        fetcher=FeedFetcher(),
        classifier=build_default_classifier(),
        cache=cache or FeedCache(),
        enricher=BatchEnricher(client=GeminiClient()),
        logger=logger,
    )
