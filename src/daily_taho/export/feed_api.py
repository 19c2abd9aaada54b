from __future__ import annotations

import logging
import time
from typing import Callable
from xml.sax.saxutils import escape

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from daily_taho.core import config
from daily_taho.core.constants import FEED_CACHE_CONTROL, FILIPINO_PLACEHOLDER, Category
from daily_taho.export.rss_builder import build_rss_feed
from daily_taho.models import FeedPayloadItem, ScoredItem
from daily_taho.processing.pipeline import FeedOrchestrator, build_default_orchestrator, to_article

logger = logging.getLogger(__name__)


def to_feed_payload(item: ScoredItem) -> FeedPayloadItem:
    article = to_article(item)
    filipino = article.summary_filipino or ""
    return {
        "id": article.id,
        "title": article.title,
        "slug": article.slug,
        "summary_en": item.clean_summary,
        "summary_ph": "" if filipino == FILIPINO_PLACEHOLDER else filipino,
        "source_url": item.link,
        "image_url": item.image_url,
        "category": item.category.value,
        "pubDate": item.published_at,
    }


def _parse_category(raw: str | None) -> Category:
    try:
        return Category.parse(raw)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def create_app(
    *,
    orchestrator: FeedOrchestrator | None = None,
    orchestrator_factory: Callable[[], FeedOrchestrator] = build_default_orchestrator,
    display_limit: int = config.DISPLAY_LIMIT,
    rss_item_limit: int = config.RSS_ITEM_LIMIT,
    site_url: str = config.SITE_URL,
) -> FastAPI:
    """Serving app for the JSON feed, the RSS feed and a health probe."""
    pipeline = orchestrator or orchestrator_factory()
    app = FastAPI(title="Daily Taho")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "ts": int(time.time())}

    @app.get("/api/feed")
    def feed(category: str | None = None):
        view = _parse_category(category)
        try:
            items = pipeline.select(pipeline.aggregate(view), limit=display_limit)
        except Exception as e:
            logger.exception("feed endpoint failed")
            return JSONResponse(
                {"error": "Failed to fetch news", "details": str(e)},
                status_code=500,
            )
        return JSONResponse(
            [to_feed_payload(item) for item in items],
            headers={"Cache-Control": FEED_CACHE_CONTROL},
        )

    @app.get("/api/rss")
    def rss():
        try:
            items = pipeline.select(pipeline.aggregate(Category.ALL), limit=rss_item_limit)
            xml = build_rss_feed(items, site_url=site_url)
        except Exception as e:
            logger.exception("rss endpoint failed")
            return Response(
                f"<error>{escape(str(e))}</error>",
                status_code=500,
                media_type="application/xml",
            )
        return Response(
            xml,
            media_type="application/rss+xml",
            headers={"Cache-Control": FEED_CACHE_CONTROL},
        )

    return app
