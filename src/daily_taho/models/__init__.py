"""Typed models for feed items, articles and cache entries."""

from .article import (
    Article,
    CacheEntry,
    EnrichedSummary,
    FeedPayloadItem,
    NewsSource,
    RawFeedItem,
    ScoredItem,
)

__all__ = [
    "Article",
    "CacheEntry",
    "EnrichedSummary",
    "FeedPayloadItem",
    "NewsSource",
    "RawFeedItem",
    "ScoredItem",
]
