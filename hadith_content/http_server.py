"""Flask HTTP server exposing the hadith resolver as JSON routes.

Endpoints:
- GET /health
- GET /api/hadith/collections
- GET /api/hadith/<collection>/books
- GET /api/hadith/<collection>/<book>?page&limit&status
- GET /api/hadith/<collection>/hadiths?page&limit&status
- GET /api/hadith/<collection>/hadith/<number>
- GET /api/hadith/search?q&collection&page&limit

Every response is wrapped as ``{"success": bool, "data": ...}``.

Run:
  python3 -m hadith_content.http_server --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from . import catalog
from .config import Settings
from .models import HadithPage, to_jsonable
from .resolver import ContentResolver, build_resolver

LOGGER = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _page_response(result: HadithPage) -> Any:
    body = to_jsonable(result)
    return jsonify({"success": True, "data": body.pop("hadiths"), **body})


def _error(message: str, status: int) -> Any:
    return jsonify({"success": False, "error": message}), status


def create_app(resolver: Optional[ContentResolver] = None) -> Flask:
    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.json.sort_keys = False
    if resolver is None:
        resolver = build_resolver()
    app.extensions["hadith_resolver"] = resolver

    @app.get("/health")
    def health() -> Any:
        return jsonify({"ok": True})

    @app.get("/api/hadith/collections")
    def api_collections() -> Any:
        return jsonify({"success": True, "data": to_jsonable(resolver.get_collections())})

    @app.get("/api/hadith/search")
    def api_search() -> Any:
        query = (request.args.get("q") or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return _error(f"Search query must be at least {MIN_QUERY_LENGTH} characters", 400)
        collection_id = request.args.get("collection") or None
        result = resolver.search_hadiths(
            query,
            collection_id=collection_id,
            page=_int_arg("page", 1),
            limit=_int_arg("limit", 20),
        )
        return _page_response(result)

    @app.get("/api/hadith/<collection_id>/books")
    def api_books(collection_id: str) -> Any:
        books = resolver.get_collection_books(collection_id)
        return jsonify({"success": True, "data": to_jsonable(books)})

    @app.get("/api/hadith/<collection_id>/hadiths")
    def api_collection_hadiths(collection_id: str) -> Any:
        result = resolver.get_collection_hadiths(
            collection_id,
            page=_int_arg("page", 1),
            limit=_int_arg("limit", 50),
            status=request.args.get("status") or None,
        )
        return _page_response(result)

    @app.get("/api/hadith/<collection_id>/<int:book_number>")
    def api_book_hadiths(collection_id: str, book_number: int) -> Any:
        result = resolver.get_book_hadiths(
            collection_id,
            book_number,
            page=_int_arg("page", 1),
            limit=_int_arg("limit", 50),
            status=request.args.get("status") or None,
        )
        return _page_response(result)

    @app.get("/api/hadith/<collection_id>/hadith/<hadith_number>")
    def api_hadith(collection_id: str, hadith_number: str) -> Any:
        try:
            number = int(hadith_number)
        except ValueError:
            return _error("Invalid hadith number", 400)
        if number < 1:
            return _error("Invalid hadith number", 400)
        if not catalog.is_supported(collection_id):
            return _error(f"Unsupported collection: {collection_id}", 400)
        record = resolver.get_hadith(collection_id, number)
        if record is None:
            return _error("Hadith not found", 404)
        payload: Dict[str, Any] = {"success": True, "data": to_jsonable(record)}
        return jsonify(payload)

    return app


def main(argv: list[str] | None = None) -> None:  # pragma: no cover - dev runner
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Hadith content HTTP server (Flask)")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(build_resolver(settings))
    app.run(host=args.host, port=args.port)


if __name__ == "__main__":  # pragma: no cover
    main()
