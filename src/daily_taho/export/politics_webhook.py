"""Post newly seen Politics articles from the JSON feed to a webhook."""

from __future__ import annotations

import argparse
import datetime
import sys
from typing import Any, Sequence

import requests

from daily_taho.core import config
from daily_taho.core.constants import Category
from daily_taho.utils import atomic_write_json, safe_read_json

WEBHOOK_EVENT = "new_politics_article"
POLITICS_LABELS = {Category.POLITICS.value, "Politics"}


def _log(message: str) -> None:
    ts = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {message}")


def load_processed_ids(path: str) -> list[str]:
    data = safe_read_json(path, [])
    if not isinstance(data, list):
        _log(f"state file {path} is not a list, starting fresh")
        return []
    return [str(x) for x in data]


def save_processed_ids(path: str, ids: list[str], max_ids: int = config.WEBHOOK_STATE_MAX_IDS) -> list[str]:
    kept = ids[-max_ids:] if max_ids > 0 else list(ids)
    atomic_write_json(path, kept)
    return kept


def select_new_politics(articles: Sequence[dict[str, Any]], processed_ids: Sequence[str]) -> list[dict[str, Any]]:
    seen = set(processed_ids)
    return [
        a for a in articles
        if isinstance(a, dict) and a.get("category") in POLITICS_LABELS and str(a.get("id")) not in seen
    ]


def notify_new_politics(
    *,
    feed_url: str,
    webhook_url: str,
    state_path: str,
    session: requests.Session | None = None,
    timeout_sec: int = 15,
    max_ids: int = config.WEBHOOK_STATE_MAX_IDS,
) -> int:
    """Returns how many articles were delivered."""
    http = session or requests.Session()
    resp = http.get(feed_url, timeout=timeout_sec)
    if not resp.ok:
        raise RuntimeError(f"feed API responded with {resp.status_code}")
    articles = resp.json()
    if not isinstance(articles, list):
        raise RuntimeError("feed API did not return a list")

    processed = load_processed_ids(state_path)
    fresh = select_new_politics(articles, processed)
    if not fresh:
        _log("no new politics articles to report")
        return 0

    _log(f"found {len(fresh)} new politics article(s), sending to webhook")
    sent = 0
    for article in fresh:
        title = article.get("title") or ""
        try:
            wh = http.post(
                webhook_url,
                json={"event": WEBHOOK_EVENT, "article": article},
                timeout=timeout_sec,
            )
        except requests.RequestException as e:
            _log(f"  error sending {title!r}: {e}")
            continue
        if wh.ok:
            _log(f"  sent: {title!r}")
            processed.append(str(article.get("id")))
            sent += 1
        else:
            _log(f"  failed to send {title!r} ({wh.status_code})")

    save_processed_ids(state_path, processed, max_ids)
    _log("state updated")
    return sent


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--feed-url", default=config.FEED_API_URL, help="JSON feed endpoint")
    parser.add_argument("--webhook-url", default=config.MAKE_WEBHOOK_URL, help="webhook receiving new articles")
    parser.add_argument("--state-path", default=config.WEBHOOK_STATE_PATH, help="file remembering sent ids")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if not args.webhook_url:
        _log("MAKE_WEBHOOK_URL is not set")
        return 1
    _log(f"checking for new politics articles from {args.feed_url}")
    try:
        notify_new_politics(
            feed_url=args.feed_url,
            webhook_url=args.webhook_url,
            state_path=args.state_path,
        )
    except (requests.RequestException, RuntimeError, ValueError) as e:
        _log(f"fatal: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
