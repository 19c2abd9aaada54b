"""Refresh a category and write its articles as JSON, or serve the feed app."""

from __future__ import annotations

import argparse
import datetime
import logging
import sys
from typing import Sequence

from daily_taho.core import config
from daily_taho.core.constants import Category
from daily_taho.processing.pipeline import build_default_orchestrator
from daily_taho.utils import atomic_write_json


def _log(message: str) -> None:
    ts = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {message}")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def _category_arg(value: str) -> Category:
    try:
        return Category.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="daily-taho", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command")

    refresh = sub.add_parser("refresh", help="refresh one category and export it as JSON")
    refresh.add_argument("--category", type=_category_arg, default=Category.ALL)
    refresh.add_argument("--force", action="store_true", help="ignore a fresh cache entry")
    refresh.add_argument("--output", default=str(config.DATA_DIR / "articles.json"))

    serve = sub.add_parser("serve", help="run the feed API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def run_refresh(category: Category, *, force: bool, output: str) -> int:
    _log(f"refreshing {category.value}")
    orchestrator = build_default_orchestrator(logger=_log)
    orchestrator.refresh(category, force=force)
    articles = orchestrator.display_articles()
    atomic_write_json(output, [a.to_dict() for a in articles])
    _log(f"done: {len(articles)} article(s) written to {output} (state={orchestrator.state.value})")
    return 0 if not orchestrator.fetch_error else 2


def run_serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("daily_taho.export.feed_api:create_app", host=host, port=port, factory=True)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.verbose)
    if args.command == "serve":
        return run_serve(args.host, args.port)
    if args.command == "refresh":
        return run_refresh(args.category, force=args.force, output=args.output)
    return run_refresh(Category.ALL, force=False, output=str(config.DATA_DIR / "articles.json"))


if __name__ == "__main__":
    sys.exit(main())
