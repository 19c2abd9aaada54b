from __future__ import annotations

import datetime
import xml.etree.ElementTree as ET

from daily_taho.core.constants import Category
from daily_taho.export.rss_builder import build_rss_feed, deep_link
from daily_taho.models import ScoredItem

NOW = datetime.datetime(2025, 1, 6, 12, 0, tzinfo=datetime.timezone.utc)


def _scored(title: str, *, image_url: str = "", summary: str = "Body text of the story.") -> ScoredItem:
    return ScoredItem(
        title=title,
        link="https://www.philstar.com/headlines/2025/01/06/story",
        published_at="2025-01-06T02:00:00Z",
        published_ts=0.0,
        source_name="PhilStar",
        description_html=f"<p>{summary}</p>",
        category=Category.POLITICS,
        image_url=image_url,
        clean_summary=summary,
    )


def test_deep_link_points_back_into_the_app() -> None:
    assert deep_link("bagong-batas", "https://example.ph/") == "https://example.ph/?article=bagong-batas"


def test_feed_is_well_formed_and_links_into_the_app() -> None:
    xml = build_rss_feed(
        [_scored("Senate & House agree <finally>", image_url="https://img.ph/a.jpg")],
        site_url="https://example.ph",
        now=NOW,
    )
    root = ET.fromstring(xml)
    channel = root.find("channel")
    assert channel is not None
    assert channel.findtext("title") == "Daily Taho News Feed"
    assert channel.findtext("language") == "en"
    assert channel.findtext("lastBuildDate") == "Mon, 06 Jan 2025 12:00:00 +0000"

    item = channel.find("item")
    assert item is not None
    assert item.findtext("title") == "Senate & House agree <finally>"
    assert item.findtext("link") == "https://example.ph/?article=senate-house-agree-finally"
    assert item.findtext("guid") == item.findtext("link")
    assert item.findtext("pubDate") == "Mon, 06 Jan 2025 02:00:00 +0000"
    source = item.find("source")
    assert source is not None
    assert source.text == "PhilStar"
    assert source.get("url") == "https://www.philstar.com/headlines/2025/01/06/story"
    enclosure = item.find("enclosure")
    assert enclosure is not None
    assert enclosure.get("url") == "https://img.ph/a.jpg"


def test_item_without_image_has_no_enclosure() -> None:
    root = ET.fromstring(build_rss_feed([_scored("Plain story")], site_url="https://example.ph", now=NOW))
    item = root.find("channel/item")
    assert item is not None
    assert item.find("enclosure") is None


def test_long_descriptions_are_truncated() -> None:
    root = ET.fromstring(build_rss_feed([_scored("Long", summary="x" * 900)], now=NOW))
    description = root.findtext("channel/item/description") or ""
    assert len(description) <= 500


def test_empty_feed_still_has_a_channel() -> None:
    root = ET.fromstring(build_rss_feed([], now=NOW))
    assert root.find("channel/item") is None
    assert root.findtext("channel/ttl") == "60"
