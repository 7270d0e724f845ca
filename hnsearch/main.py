"""Application entrypoint: run one search and print the resulting page."""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from hnsearch.config import get_settings
from hnsearch.db.session import Database
from hnsearch.domain.catalog import CONTENT_TAG_FILTERS, DATE_RANGE_WINDOWS, SORT_ENDPOINTS
from hnsearch.domain.models import ViewState
from hnsearch.logging import configure_logging, logger
from hnsearch.services.persistence import PersistentStore, SqlStorage
from hnsearch.services.search_api import SearchApiClient
from hnsearch.services.session import SearchSessionController
from hnsearch.services.suggestions import SuggestionStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hnsearch", description="Search Hacker News items.")
    parser.add_argument("term", nargs="?", default=None, help="Search term (defaults to the last one).")
    parser.add_argument("--content", choices=sorted(CONTENT_TAG_FILTERS))
    parser.add_argument("--sort", choices=sorted(SORT_ENDPOINTS))
    parser.add_argument("--date", choices=list(DATE_RANGE_WINDOWS))
    parser.add_argument("--page", type=int, default=0, help="Zero-based result page.")
    parser.add_argument(
        "--suggestions",
        action="store_true",
        help="Print recent search terms and exit.",
    )
    return parser


def render(controller: SearchSessionController, state: ViewState) -> str:
    if state.status == "error":
        return "Search failed, try again."
    if not state.items:
        return controller.empty_message()

    lines = []
    for item in state.items:
        title = item.title or "(untitled)"
        meta = [f"by {item.author}"]
        if item.points is not None:
            meta.append(f"{item.points} points")
        if item.num_comments is not None:
            meta.append(f"{item.num_comments} comments")
        lines.append(f"{title} ({', '.join(meta)})")
        if item.url:
            lines.append(f"    {item.url}")
    page = controller.selection.page + 1
    lines.append(f"-- page {page} of {state.total_pages}")
    return "\n".join(lines)


async def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.page < 0:
        parser.error("--page must be >= 0")
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    database = Database(settings=settings)
    store = PersistentStore(SqlStorage(database))

    try:
        if args.suggestions:
            print("\n".join(SuggestionStore(store).suggestions))
            return 0

        async with httpx.AsyncClient() as http_client:
            api = SearchApiClient(http_client, settings=settings.api)
            controller = SearchSessionController(
                api.fetch,
                store,
                hits_per_page=settings.api.hits_per_page,
                fetch_timeout_seconds=settings.api.fetch_timeout_seconds,
            )
            if args.term is not None:
                controller.set_term(args.term)
            if args.content:
                controller.set_content_type(args.content)
            if args.sort:
                controller.set_sort_mode(args.sort)
            if args.date:
                controller.set_date_range(args.date)
            if args.page:
                controller.set_page(args.page)

            logger.info("cli_search_starting", environment=settings.environment)
            controller.submit_search()
            await controller.wait_idle()
            await controller.aclose()
    finally:
        database.dispose()

    state = controller.view_state
    print(render(controller, state))
    return 1 if state.status == "error" else 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
