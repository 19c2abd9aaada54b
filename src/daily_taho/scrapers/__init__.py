"""Upstream feed transports."""

__all__ = ["feed_fetcher", "feed_fetcher_config"]
