"""Command-line entry point for querying the hadith resolver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence, TextIO

from .config import Settings
from .http_server import create_app
from .models import to_jsonable
from .resolver import ContentResolver, build_resolver

LOGGER = logging.getLogger(__name__)


def _emit(value: Any, stream: TextIO) -> None:
    stream.write(json.dumps(to_jsonable(value), ensure_ascii=False, indent=2))
    stream.write("\n")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser_obj = argparse.ArgumentParser(description="Resolve hadith content from local data, the CDN and the paid API")
    parser_obj.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    commands = parser_obj.add_subparsers(dest="command", required=True)

    commands.add_parser("collections", help="List supported collections.")

    books = commands.add_parser("books", help="List the books of a collection.")
    books.add_argument("collection")

    book = commands.add_parser("book", help="List hadiths in one book.")
    book.add_argument("collection")
    book.add_argument("book", type=int)
    book.add_argument("--page", type=int, default=1)
    book.add_argument("--limit", type=int, default=50)
    book.add_argument("--status", help="Only keep hadiths with this grade (e.g. Sahih).")

    hadith = commands.add_parser("hadith", help="Fetch one hadith by number.")
    hadith.add_argument("collection")
    hadith.add_argument("number", type=int)

    search = commands.add_parser("search", help="Search hadith text.")
    search.add_argument("query")
    search.add_argument("--collection")
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--limit", type=int, default=20)

    serve = commands.add_parser("serve", help="Run the HTTP server.")
    serve.add_argument("--host")
    serve.add_argument("--port", type=int)
    return parser_obj.parse_args(argv)


def run(args: argparse.Namespace, resolver: ContentResolver, stream: TextIO = sys.stdout) -> int:
    if args.command == "collections":
        _emit(resolver.get_collections(), stream)
    elif args.command == "books":
        _emit(resolver.get_collection_books(args.collection), stream)
    elif args.command == "book":
        _emit(
            resolver.get_book_hadiths(
                args.collection, args.book, page=args.page, limit=args.limit, status=args.status
            ),
            stream,
        )
    elif args.command == "hadith":
        record = resolver.get_hadith(args.collection, args.number)
        if record is None:
            LOGGER.error("Hadith %s %s not found", args.collection, args.number)
            return 1
        _emit(record, stream)
    elif args.command == "search":
        _emit(
            resolver.search_hadiths(
                args.query, collection_id=args.collection, page=args.page, limit=args.limit
            ),
            stream,
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = Settings.from_env()
    resolver = build_resolver(settings)
    if args.command == "serve":  # pragma: no cover - dev runner
        app = create_app(resolver)
        app.run(host=args.host or settings.host, port=args.port or settings.port)
        return 0
    return run(args, resolver)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
