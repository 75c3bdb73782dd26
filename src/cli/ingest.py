"""Standalone CLI for managing the newsrag article collection.

Usage::

    python -m src.cli ingest [--csv data/articles_dataset.csv]

    python -m src.cli ingest-url --url https://example.com/news/1 [--source "Example"]

    python -m src.cli query --text "what happened in city X" [--top-k 5]

    python -m src.cli stats

Providers are selected exactly as the web app selects them
(``build_services`` in src/main.py) so the CLI writes vectors of the same
dimension into the same collection.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from src.config.settings import Settings
from src.models.rag import CorpusStats, IngestResult
from src.utils.errors import NewsRagError

_Handler = Callable[[argparse.Namespace, dict[str, Any]], Awaitable[int]]


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _print_results(results: list[IngestResult]) -> None:
    failed = [r for r in results if not r.success]
    print("\nIngestion complete:")
    print(f"  Articles:       {len(results)}")
    print(f"  Succeeded:      {len(results) - len(failed)}")
    print(f"  Failed:         {len(failed)}")
    print(f"  Chunks stored:  {sum(r.chunks_stored for r in results)}")
    for result in failed:
        error = result.error
        print(f"    {result.url}: {error.type if error else 'error'} {error.message if error else ''}")


async def _handle_ingest(args: argparse.Namespace, components: dict[str, Any]) -> int:
    from src.providers.article.csv_article_source import CSVArticleSource

    source = CSVArticleSource(args.csv) if args.csv else components["article_source"]
    articles = await source.load()
    print(f"Ingesting {len(articles)} articles")
    results = await components["ingestion_service"].ingest(articles)
    _print_results(results)
    return 0 if all(r.success for r in results) else 1


async def _handle_ingest_url(args: argparse.Namespace, components: dict[str, Any]) -> int:
    print(f"Ingesting article: {args.url}")
    result = await components["ingestion_service"].ingest_url(args.url, source_name=args.source)
    _print_results([result])
    return 0 if result.success else 1


async def _handle_query(args: argparse.Namespace, components: dict[str, Any]) -> int:
    documents = await components["retrieval_service"].search(args.text, top_k=args.top_k)
    if not documents:
        print("No documents found.")
        return 0
    for rank, document in enumerate(documents, start=1):
        print(f"[{rank}] {document.metadata.get('title', '')} ({document.metadata.get('url', document.id)})")
        print(document.content.strip())
        print("-" * 40)
    return 0


async def _handle_stats(args: argparse.Namespace, components: dict[str, Any]) -> int:
    vector_store = components["vector_store"]
    stats = CorpusStats(
        collection_name=vector_store.collection_name,
        total_documents=vector_store.count(),
    )
    print("Collection Statistics")
    print("=" * 40)
    print(f"  Collection:       {stats.collection_name}")
    print(f"  Total documents:  {stats.total_documents}")
    print(f"  Embedding:        {components['embedding_provider'].get_provider_name()}")
    return 0


_HANDLERS: dict[str, _Handler] = {
    "ingest": _handle_ingest,
    "ingest-url": _handle_ingest_url,
    "query": _handle_query,
    "stats": _handle_stats,
}


async def _run(handler: _Handler, args: argparse.Namespace, app_settings: Settings) -> int:
    """Build services, open the collection, run *handler*, then clean up."""
    # Deferred: importing src.main builds the full provider stack.
    from src.main import build_services

    components = build_services(app_settings)
    try:
        await components["vector_store"].initialize(app_settings.chromadb_collection)
        return await handler(args, components)
    finally:
        await components["http_client"].aclose()


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the collection CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Manage the newsrag article collection.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest every article in the CSV list")
    ingest_parser.add_argument(
        "--csv",
        default=None,
        help="Article list (Source,URL); defaults to ARTICLES_CSV_PATH",
    )

    url_parser = subparsers.add_parser("ingest-url", help="Ingest a single article")
    url_parser.add_argument("--url", required=True, help="Article URL")
    url_parser.add_argument("--source", default="manual", help="Source label (default: manual)")

    query_parser = subparsers.add_parser("query", help="Search the collection")
    query_parser.add_argument("--text", required=True, help="Query text")
    query_parser.add_argument("--top-k", type=int, default=None, dest="top_k", help="Results to return")

    subparsers.add_parser("stats", help="Show collection statistics")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse the subcommand, run it, and exit with its status code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    try:
        exit_code = asyncio.run(_run(_HANDLERS[args.command], args, app_settings))
    except NewsRagError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
