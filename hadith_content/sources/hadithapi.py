"""Paid third-party hadith API (hadithapi.com).

Every request carries the ``apiKey`` query parameter. List endpoints answer
with Laravel-style pagination::

    {"status": 200, "hadiths": {"current_page": 1, "last_page": 9,
     "total": 210, "next_page_url": "...", "data": [...]}}

This source is reserved for what the CDN does not cover: free-text search,
per-item lookups for API-only collections and chapter listings.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from .. import catalog
from ..http import HttpClient, HttpError
from ..models import HadithBook, HadithGrade, HadithPage, HadithRecord
from ..normalization import from_hadith_api, normalize_batch, normalize_grade
from .base import SourceResult

LOGGER = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://hadithapi.com/api"
CHAPTER_PAGE_SIZE = 100
MAX_CHAPTER_PAGES = 50

# Grade spellings accepted by the API's `status` filter.
API_STATUS_NAMES = {
    HadithGrade.SAHIH: "Sahih",
    HadithGrade.HASAN: "Hasan",
    HadithGrade.DAIF: "Da`eef",
}

_STATUS_MESSAGES = {
    401: "Invalid API key",
    403: "API key required",
    404: "Resource not found",
}


def _paginated(payload: Any, key: str) -> Tuple[List[Mapping[str, Any]], Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        raise ValueError("Expected a JSON object from the hadith API")
    block = payload.get(key)
    if not isinstance(block, Mapping) or not isinstance(block.get("data"), list):
        raise ValueError(f"Expected '{key}.data' array from the hadith API")
    return block["data"], block


def _api_status(status: Optional[str]) -> Optional[str]:
    if status is None or not status.strip():
        return None
    grade = normalize_grade(status)
    return API_STATUS_NAMES.get(grade, grade.value)


def _int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class HadithApiSource:
    """Query hadithapi.com and normalize its rows."""

    name = "hadithapi"

    def __init__(
        self,
        client: HttpClient,
        *,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        self.client = client
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return self.api_key is not None

    def supports(self, collection_id: str) -> bool:
        info = catalog.get_collection(collection_id)
        return info is not None and info.api_slug is not None

    def _slug(self, collection_id: str) -> Optional[str]:
        info = catalog.get_collection(collection_id)
        return info.api_slug if info is not None else None

    def _get(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        query: Dict[str, Any] = {"apiKey": self.api_key}
        query.update({key: value for key, value in params.items() if value not in (None, "")})
        try:
            return self.client.get_json(f"{self.base_url}{endpoint}", params=query)
        except HttpError as exc:
            message = _STATUS_MESSAGES.get(exc.status_code or 0)
            if message:
                LOGGER.warning("Hadith API %s: %s", message, endpoint)
            raise

    def _unconfigured(self) -> SourceResult[Any]:
        return SourceResult.unavailable(self.name, "API key not configured")

    def hadiths(
        self,
        collection_id: str,
        *,
        chapter: Optional[int] = None,
        page: int = 1,
        limit: int = 25,
        status: Optional[str] = None,
    ) -> SourceResult[HadithPage]:
        """List hadiths of a collection, optionally narrowed to one chapter."""
        slug = self._slug(collection_id)
        if slug is None:
            return SourceResult.empty(self.name, f"no API slug for {collection_id}")
        if not self.configured:
            return self._unconfigured()
        params = {
            "book": slug,
            "chapter": chapter,
            "paginate": limit,
            "page": page,
            "status": _api_status(status),
        }
        try:
            rows, meta = _paginated(self._get("/hadiths", params), "hadiths")
        except (HttpError, ValueError) as exc:
            LOGGER.warning("Hadith API list failed for %s: %s", collection_id, exc)
            return SourceResult.unavailable(self.name, str(exc))
        return self._page_result(rows, meta, lambda row: from_hadith_api(row, collection_id), page, limit)

    def hadith(self, collection_id: str, hadith_number: int) -> SourceResult[HadithRecord]:
        slug = self._slug(collection_id)
        if slug is None:
            return SourceResult.empty(self.name, f"no API slug for {collection_id}")
        if not self.configured:
            return self._unconfigured()
        try:
            rows, _ = _paginated(
                self._get("/hadiths", {"book": slug, "hadithNumber": hadith_number}), "hadiths"
            )
        except (HttpError, ValueError) as exc:
            LOGGER.warning("Hadith API lookup %s/%s failed: %s", collection_id, hadith_number, exc)
            return SourceResult.unavailable(self.name, str(exc))
        records = normalize_batch(rows, lambda row: from_hadith_api(row, collection_id))
        match = next((r for r in records if r.hadith_number == hadith_number), None)
        return SourceResult.from_data(self.name, match)

    def search(
        self,
        query: str,
        *,
        collection_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> SourceResult[HadithPage]:
        """Search English text, optionally within one collection."""
        if not self.configured:
            return self._unconfigured()
        params: Dict[str, Any] = {"hadithEnglish": query, "paginate": limit, "page": page}
        if collection_id is not None:
            slug = self._slug(collection_id)
            if slug is None:
                return SourceResult.empty(self.name, f"no API slug for {collection_id}")
            params["book"] = slug
        try:
            rows, meta = _paginated(self._get("/hadiths", params), "hadiths")
        except (HttpError, ValueError) as exc:
            LOGGER.warning("Hadith API search failed for %r: %s", query, exc)
            return SourceResult.unavailable(self.name, str(exc))

        def adapt(row: Mapping[str, Any]) -> Optional[HadithRecord]:
            slug = row.get("bookSlug")
            if not isinstance(slug, str):
                slug = None
            owner = catalog.collection_for_api_slug(slug) or collection_id or slug or "unknown"
            return from_hadith_api(row, owner)

        return self._page_result(rows, meta, adapt, page, limit)

    def chapters(self, collection_id: str) -> SourceResult[List[HadithBook]]:
        """Walk every chapter page for a collection."""
        slug = self._slug(collection_id)
        if slug is None:
            return SourceResult.empty(self.name, f"no API slug for {collection_id}")
        if not self.configured:
            return self._unconfigured()
        rows: List[Mapping[str, Any]] = []
        page = 1
        while page <= MAX_CHAPTER_PAGES:
            try:
                data, meta = _paginated(
                    self._get(f"/{slug}/chapters", {"paginate": CHAPTER_PAGE_SIZE, "page": page}),
                    "chapters",
                )
            except (HttpError, ValueError) as exc:
                LOGGER.warning("Hadith API chapters failed for %s (page %d): %s", collection_id, page, exc)
                if not rows:
                    return SourceResult.unavailable(self.name, str(exc))
                break
            rows.extend(data)
            if page >= _int(meta.get("last_page"), 1):
                break
            page += 1

        books: List[HadithBook] = []
        for row in rows:
            if not isinstance(row, Mapping):
                continue
            number = _int(row.get("chapterNumber"), 0)
            try:
                book = HadithBook(
                    book_number=number,
                    name=row.get("chapterEnglish") or f"Chapter {row.get('chapterNumber')}",
                    name_arabic=row.get("chapterArabic") or "",
                )
            except ValidationError as exc:
                LOGGER.debug("Dropping %s chapter %s: %s", collection_id, row.get("chapterNumber"), exc)
                continue
            books.append(book)
        return SourceResult.from_data(self.name, books)

    def _page_result(
        self,
        rows: List[Any],
        meta: Mapping[str, Any],
        adapter: Callable[[Mapping[str, Any]], Optional[HadithRecord]],
        page: int,
        limit: int,
    ) -> SourceResult[HadithPage]:
        records = normalize_batch(rows, adapter)
        if not records:
            return SourceResult.empty(self.name)
        result = HadithPage(
            hadiths=records,
            total=_int(meta.get("total"), len(records)),
            has_more=meta.get("next_page_url") is not None,
            page=_int(meta.get("current_page"), page),
            limit=limit,
            last_page=_int(meta.get("last_page"), 1),
        )
        return SourceResult.ok(self.name, result)


__all__ = ["HadithApiSource", "DEFAULT_API_BASE_URL"]
