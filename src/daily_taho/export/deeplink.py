from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from daily_taho.models import Article

ARTICLE_PARAM = "article"


def article_param(url: str) -> str | None:
    """The `?article=` value of a URL, if any."""
    query = parse_qs(urlsplit(url).query)
    values = query.get(ARTICLE_PARAM) or []
    value = values[0].strip() if values else ""
    return value or None


def find_article(articles: Sequence[Article], key: str | None) -> Article | None:
    """Match by slug first, then by id."""
    if not key:
        return None
    for article in articles:
        if article.slug == key:
            return article
    for article in articles:
        if article.id == key:
            return article
    return None


def url_for_article(current_url: str, article: Article | None) -> str:
    parts = urlsplit(current_url)
    if article is None or not article.slug:
        return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))
    query = urlencode({ARTICLE_PARAM: article.slug})
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", query, ""))


@dataclass
class DeepLinkNavigator:
    """Keeps the address bar in step with the selected article.

    Selecting pushes a new history entry; deselecting replaces the current
    one with the bare path.
    """

    url: str
    history: list[str] = field(default_factory=list)
    selected: Article | None = None

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.url)

    def restore(self, articles: Sequence[Article]) -> Article | None:
        if self.selected is not None or not articles:
            return self.selected
        match = find_article(articles, article_param(self.url))
        if match is not None:
            self.selected = match
        return self.selected

    def select(self, article: Article | None) -> str:
        self.selected = article
        next_url = url_for_article(self.url, article)
        if article is not None and article.slug:
            self.history.append(next_url)
        else:
            self.history[-1] = next_url
        self.url = next_url
        return next_url
