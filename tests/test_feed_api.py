from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from daily_taho.core.constants import FEED_CACHE_CONTROL
from daily_taho.export.feed_api import create_app
from daily_taho.models import RawFeedItem
from daily_taho.processing.cache import FeedCache
from daily_taho.processing.pipeline import FeedOrchestrator
from daily_taho.processing.scoring import CategoryClassifier

ITEMS = [
    RawFeedItem(
        title="Senate approves measure",
        link="https://news.ph/politics/senate-approves",
        published_at="Mon, 06 Jan 2025 10:00:00 +0800",
        source_name="Source A",
        description_html="<p>Senators voted on the measure during a late session.</p>",
        image_url="https://img.ph/senate.jpg",
    ),
    RawFeedItem(
        title="Farmers harvest rice early",
        link="https://news.ph/regions/farmers-harvest",
        published_at="Mon, 06 Jan 2025 09:00:00 +0800",
        source_name="Source B",
        description_html="<p>Farmers in the province started harvesting ahead of the rainy season.</p>",
    ),
]


class _Fetcher:
    def __init__(self, items: list[RawFeedItem], *, error: Exception | None = None) -> None:
        self.items = items
        self.error = error

    def fetch_all(self) -> list[RawFeedItem]:
        if self.error is not None:
            raise self.error
        return list(self.items)


def _client(fetcher: _Fetcher) -> TestClient:
    orchestrator = FeedOrchestrator(
        fetcher=fetcher,
        classifier=CategoryClassifier(),
        cache=FeedCache(path=None),
        enricher=None,
        logger=lambda _msg: None,
        enrichment_enabled=False,
    )
    app = create_app(orchestrator=orchestrator, site_url="https://example.ph")
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    return _client(_Fetcher(ITEMS))


def test_health(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert isinstance(body["ts"], int)


def test_feed_returns_payload_items(client: TestClient) -> None:
    r = client.get("/api/feed")
    assert r.status_code == 200
    assert r.headers["cache-control"] == FEED_CACHE_CONTROL
    data = r.json()
    assert [row["title"] for row in data] == ["Senate approves measure", "Farmers harvest rice early"]
    first = data[0]
    assert set(first) == {
        "id", "title", "slug", "summary_en", "summary_ph", "source_url", "image_url", "category", "pubDate",
    }
    assert first["slug"] == "senate-approves-measure"
    assert first["category"] == "Pulitika"
    assert first["summary_en"] == "Senators voted on the measure during a late session."
    assert first["summary_ph"] == ""
    assert first["source_url"] == "https://news.ph/politics/senate-approves"


def test_feed_category_filter(client: TestClient) -> None:
    r = client.get("/api/feed", params={"category": "Politics"})
    assert r.status_code == 200
    assert [row["title"] for row in r.json()] == ["Senate approves measure"]


def test_feed_rejects_unknown_category(client: TestClient) -> None:
    r = client.get("/api/feed", params={"category": "Weather"})
    assert r.status_code == 400


def test_feed_failure_is_a_json_500() -> None:
    client = _client(_Fetcher([], error=RuntimeError("upstream down")))
    r = client.get("/api/feed")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch news", "details": "upstream down"}


def test_rss_endpoint(client: TestClient) -> None:
    r = client.get("/api/rss")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/rss+xml")
    assert r.headers["cache-control"] == FEED_CACHE_CONTROL
    root = ET.fromstring(r.text)
    links = [el.text for el in root.findall("channel/item/link")]
    assert links == [
        "https://example.ph/?article=senate-approves-measure",
        "https://example.ph/?article=farmers-harvest-rice-early",
    ]


def test_rss_failure_is_an_xml_500() -> None:
    client = _client(_Fetcher([], error=RuntimeError("upstream <down>")))
    r = client.get("/api/rss")
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/xml")
    assert r.text == "<error>upstream &lt;down&gt;</error>"
