from __future__ import annotations

import datetime
import email.utils
from typing import Sequence

from jinja2 import Template

from daily_taho.core import config
from daily_taho.core.constants import RSS_CHANNEL_DESCRIPTION, RSS_CHANNEL_TITLE, RSS_DESCRIPTION_MAX_CHARS
from daily_taho.models import ScoredItem
from daily_taho.utils import generate_slug, to_rfc822, truncate_text

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{{ title }}</title>
    <description>{{ description }}</description>
    <link>{{ site_url }}</link>
    <atom:link href="{{ feed_url }}" rel="self" type="application/rss+xml"/>
    <image>
      <url>{{ image_url }}</url>
      <title>{{ title }}</title>
      <link>{{ site_url }}</link>
    </image>
    <language>en</language>
    <lastBuildDate>{{ build_date }}</lastBuildDate>
    <ttl>60</ttl>
{%- for item in items %}
    <item>
      <title>{{ item.title }}</title>
      <link>{{ item.link }}</link>
      <guid isPermaLink="true">{{ item.link }}</guid>
      <description>{{ item.description }}</description>
      {%- if item.pub_date %}
      <pubDate>{{ item.pub_date }}</pubDate>
      {%- endif %}
      {%- if item.image_url %}
      <enclosure url="{{ item.image_url }}" length="0" type="image/jpeg"/>
      {%- endif %}
      <source url="{{ item.original_url }}">{{ item.source }}</source>
    </item>
{%- endfor %}
  </channel>
</rss>
"""

_template = Template(RSS_TEMPLATE, autoescape=True)


def deep_link(slug: str, site_url: str = config.SITE_URL) -> str:
    return f"{site_url.rstrip('/')}/?article={slug}"


def _item_context(item: ScoredItem, site_url: str) -> dict[str, str]:
    return {
        "title": item.title,
        "link": deep_link(generate_slug(item.title), site_url),
        "description": truncate_text(item.clean_summary, RSS_DESCRIPTION_MAX_CHARS),
        "pub_date": to_rfc822(item.published_at),
        "image_url": item.image_url,
        "original_url": item.link,
        "source": item.source_name,
    }


def build_rss_feed(
    items: Sequence[ScoredItem],
    *,
    site_url: str = config.SITE_URL,
    now: datetime.datetime | None = None,
) -> str:
    """Render an RSS 2.0 document whose item links open the article in the app."""
    site_url = site_url.rstrip("/")
    build_time = now or datetime.datetime.now(datetime.timezone.utc)
    return _template.render(
        title=RSS_CHANNEL_TITLE,
        description=RSS_CHANNEL_DESCRIPTION,
        site_url=site_url,
        feed_url=f"{site_url}/api/rss",
        image_url=f"{site_url}/dt-black.png",
        build_date=email.utils.format_datetime(build_time),
        items=[_item_context(item, site_url) for item in items],
    )
