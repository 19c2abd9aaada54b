from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, NotRequired, TypedDict

from daily_taho.core.constants import Category


@dataclass(frozen=True)
class RawFeedItem:
    title: str
    link: str
    published_at: str
    source_name: str
    description_html: str
    image_url: str = ""


@dataclass(frozen=True)
class ScoredItem:
    title: str
    link: str
    published_at: str
    published_ts: float
    source_name: str
    description_html: str
    category: Category
    image_url: str
    clean_summary: str


@dataclass(frozen=True)
class NewsSource:
    name: str


@dataclass(frozen=True)
class Article:
    """Client-facing article; summary_filipino is eventually consistent."""

    id: str
    slug: str
    title: str
    source: NewsSource
    category: Category
    publish_time: str
    read_time: str
    image_url: str
    summary_short: str
    summary_english: str
    url: str
    summary_filipino: str | None = None
    published_at: str = ""

    def with_summaries(self, *, english: str, filipino: str | None, read_time: str) -> "Article":
        return replace(self, summary_english=english, summary_filipino=filipino, read_time=read_time)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        source = data.get("source") or {}
        return cls(
            id=str(data.get("id") or ""),
            slug=str(data.get("slug") or ""),
            title=str(data.get("title") or ""),
            source=NewsSource(name=str(source.get("name") or "")),
            category=Category.parse(data.get("category")),
            publish_time=str(data.get("publish_time") or ""),
            read_time=str(data.get("read_time") or ""),
            image_url=str(data.get("image_url") or ""),
            summary_short=str(data.get("summary_short") or ""),
            summary_english=str(data.get("summary_english") or ""),
            url=str(data.get("url") or ""),
            summary_filipino=data.get("summary_filipino"),
            published_at=str(data.get("published_at") or ""),
        )


@dataclass
class CacheEntry:
    data: list[Article] = field(default_factory=list)
    timestamp: int = 0  # epoch ms

    def to_dict(self) -> dict[str, Any]:
        return {"data": [a.to_dict() for a in self.data], "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CacheEntry":
        rows = payload.get("data") or []
        return cls(
            data=[Article.from_dict(r) for r in rows if isinstance(r, dict)],
            timestamp=int(payload.get("timestamp") or 0),
        )


class FeedPayloadItem(TypedDict):
    id: str
    title: str
    slug: str
    summary_en: str
    summary_ph: str
    source_url: str
    image_url: str
    category: str
    pubDate: str


class EnrichedSummary(TypedDict):
    title: str
    source: str
    summary_en: str
    summary_tl: str
    url: str
    date: NotRequired[str]
