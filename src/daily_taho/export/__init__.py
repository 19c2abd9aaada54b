"""Outer surfaces: the feed API, RSS rendering, deep links and CLI jobs."""

__all__ = ["deeplink", "feed_api", "feed_exporter", "politics_webhook", "rss_builder"]
