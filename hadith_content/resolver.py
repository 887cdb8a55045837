"""Source-priority resolver for hadith content.

Local curated data always wins when it has enough records. Below the
threshold the public CDN is consulted, and the paid API only fills the gaps
the CDN does not cover (single lookups, search, API-only collections). The
first non-empty source wins; upstream failures resolve to empty results and
never escape the public methods.

Cache keys:

- ``<collection>:cdn:collection``: full merged CDN collection
- ``<collection>:cdn:hadith:<n>``: one CDN hadith
- ``<collection>:api:hadith:<n>``: one paid-API hadith
- ``<collection>:api:chapters``: paid-API chapter list
- ``<collection>:api:page:<book>:<page>:<limit>:<grade>``: one paid-API page,
  with ``limit`` capped at ``MAX_API_PAGE_SIZE`` and the grade normalized

Cached values are copied on the way out so callers cannot mutate them.
"""

from __future__ import annotations

import logging
from typing import List, Optional, TypeVar

from pydantic import BaseModel

from . import catalog
from .cache import TTLCache
from .config import CDN_STRATEGIES, Settings
from .http import HttpClient, RateLimiter
from .models import HadithBook, HadithCollection, HadithGrade, HadithPage, HadithRecord
from .normalization import normalize_grade, unique_by_number
from .pagination import filter_by_grade, paginate
from .sources import CdnSource, HadithApiSource, LocalSource

LOGGER = logging.getLogger(__name__)

MAX_API_PAGE_SIZE = 100

T = TypeVar("T")


def _detached(value: T) -> T:
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    if isinstance(value, list):
        return [_detached(item) for item in value]
    return value


class ContentResolver:
    def __init__(
        self,
        local: LocalSource,
        cdn: Optional[CdnSource] = None,
        api: Optional[HadithApiSource] = None,
        cache: Optional[TTLCache] = None,
        *,
        min_local_records: int = 5,
        cdn_strategy: str = "collection",
    ) -> None:
        if cdn_strategy not in CDN_STRATEGIES:
            raise ValueError(f"Unknown CDN strategy: {cdn_strategy!r}")
        self.local = local
        self.cdn = cdn
        self.api = api
        self.cache = cache if cache is not None else TTLCache()
        self.min_local_records = max(0, int(min_local_records))
        self.cdn_strategy = cdn_strategy

    # collections and books --------------------------------------
    def get_collections(self) -> List[HadithCollection]:
        return catalog.list_collections()

    def get_collection_books(self, collection_id: str) -> List[HadithBook]:
        """Local book index, else CDN section metadata, else paid-API chapters."""
        if not catalog.is_supported(collection_id):
            return []
        books = self.local.books(collection_id)
        if books:
            return _detached(books)
        if self.cdn is not None and self.cdn.supports(collection_id):
            result = self.cdn.books(collection_id)
            if result.is_ok:
                return result.data
            LOGGER.debug("CDN has no books for %s (%s)", collection_id, result.status.value)
        if self.api is not None and self.api.supports(collection_id):
            key = f"{collection_id}:api:chapters"
            cached = self.cache.get(key)
            if cached is not None:
                return _detached(cached)
            result = self.api.chapters(collection_id)
            if result.is_ok:
                self.cache.set(key, result.data)
                return _detached(result.data)
        return []

    # hadith lists -----------------------------------------------
    def get_book_hadiths(
        self,
        collection_id: str,
        book_number: int,
        page: int = 1,
        limit: int = 50,
        status: Optional[str] = None,
    ) -> HadithPage:
        if not catalog.is_supported(collection_id):
            return HadithPage.empty(page, limit)

        records = self.local.book_hadiths(collection_id, book_number)
        if len(records) < self.min_local_records:
            LOGGER.debug(
                "Only %d local record(s) for %s book %s; consulting remote sources",
                len(records),
                collection_id,
                book_number,
            )
            remote = self._cdn_book(collection_id, book_number)
            if remote:
                records = remote
            elif not self._cdn_covers(collection_id):
                api_page = self._api_page(collection_id, book_number, page, limit, status)
                if api_page is not None:
                    return api_page
        return self._finish(records, page, limit, status)

    def get_collection_hadiths(
        self,
        collection_id: str,
        page: int = 1,
        limit: int = 50,
        status: Optional[str] = None,
    ) -> HadithPage:
        if not catalog.is_supported(collection_id):
            return HadithPage.empty(page, limit)

        records = self.local.all_hadiths(collection_id)
        if len(records) < self.min_local_records:
            LOGGER.debug(
                "Only %d local record(s) for %s; consulting remote sources",
                len(records),
                collection_id,
            )
            remote = self._cdn_collection(collection_id)
            if remote:
                records = remote
            elif not self._cdn_covers(collection_id):
                api_page = self._api_page(collection_id, None, page, limit, status)
                if api_page is not None:
                    return api_page
        return self._finish(records, page, limit, status)

    # single hadith ----------------------------------------------
    def get_hadith(self, collection_id: str, hadith_number: int) -> Optional[HadithRecord]:
        if not catalog.is_supported(collection_id):
            return None

        record = self.local.hadith(collection_id, hadith_number)
        if record is not None:
            return _detached(record)

        full = self.cache.get(f"{collection_id}:cdn:collection")
        if full:
            match = next((r for r in full if r.hadith_number == hadith_number), None)
            if match is not None:
                return _detached(match)

        if self.cdn is not None and self.cdn.supports(collection_id):
            key = f"{collection_id}:cdn:hadith:{hadith_number}"
            cached = self.cache.get(key)
            if cached is not None:
                return _detached(cached)
            result = self.cdn.hadith(collection_id, hadith_number)
            if result.is_ok:
                self.cache.set(key, result.data)
                return _detached(result.data)

        if self.api is not None and self.api.supports(collection_id):
            key = f"{collection_id}:api:hadith:{hadith_number}"
            cached = self.cache.get(key)
            if cached is not None:
                return _detached(cached)
            result = self.api.hadith(collection_id, hadith_number)
            if result.is_ok:
                self.cache.set(key, result.data)
                return _detached(result.data)
        return None

    # search -----------------------------------------------------
    def search_hadiths(
        self,
        query: str,
        collection_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> HadithPage:
        """Substring search over local data, then the paid API. Never cached."""
        query = (query or "").strip()
        if not query:
            return HadithPage.empty(page, limit)
        if collection_id is not None and not catalog.is_supported(collection_id):
            return HadithPage.empty(page, limit)

        hits = self.local.search(query, collection_id)
        if hits:
            return _detached(paginate(hits, page, limit))

        if self.api is not None:
            result = self.api.search(query, collection_id=collection_id, page=page, limit=limit)
            if result.is_ok:
                return result.data
            LOGGER.debug("API search for %r gave %s", query, result.status.value)
        return HadithPage.empty(page, limit)

    # internals --------------------------------------------------
    def _cdn_covers(self, collection_id: str) -> bool:
        return self.cdn is not None and self.cdn.supports(collection_id)

    def _cdn_collection(self, collection_id: str) -> List[HadithRecord]:
        key = f"{collection_id}:cdn:collection"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        if not self._cdn_covers(collection_id):
            return []
        result = self.cdn.collection(collection_id)
        if not result.is_ok:
            LOGGER.debug("CDN collection for %s gave %s", collection_id, result.status.value)
            return []
        self.cache.set(key, result.data)
        return result.data

    def _cdn_book(self, collection_id: str, book_number: int) -> List[HadithRecord]:
        if not self._cdn_covers(collection_id):
            return []
        if self.cdn_strategy == "section":
            result = self.cdn.section(collection_id, book_number)
            return result.data if result.is_ok else []
        return [r for r in self._cdn_collection(collection_id) if r.book_number == book_number]

    def _api_page(
        self,
        collection_id: str,
        book_number: Optional[int],
        page: int,
        limit: int,
        status: Optional[str],
    ) -> Optional[HadithPage]:
        if self.api is None or not self.api.supports(collection_id):
            return None
        page = max(1, int(page))
        limit = min(max(1, int(limit)), MAX_API_PAGE_SIZE)
        grade: Optional[HadithGrade] = None
        if status is not None and status.strip():
            grade = normalize_grade(status)
            if grade is HadithGrade.UNKNOWN and status.strip().lower() != "unknown":
                return HadithPage.empty(page, limit)
        grade_key = grade.value if grade is not None else "all"
        key = f"{collection_id}:api:page:{book_number}:{page}:{limit}:{grade_key}"
        cached = self.cache.get(key)
        if cached is not None:
            return _detached(cached)
        result = self.api.hadiths(
            collection_id,
            chapter=book_number,
            page=page,
            limit=limit,
            status=grade.value if grade is not None else None,
        )
        if not result.is_ok:
            return None
        self.cache.set(key, result.data)
        return _detached(result.data)

    @staticmethod
    def _finish(
        records: List[HadithRecord], page: int, limit: int, status: Optional[str]
    ) -> HadithPage:
        return _detached(paginate(filter_by_grade(unique_by_number(records), status), page, limit))


def build_resolver(settings: Optional[Settings] = None) -> ContentResolver:
    """Wire the cache, HTTP clients and sources once per process."""
    settings = settings or Settings.from_env()
    cdn_client = HttpClient(timeout=settings.http_timeout, max_attempts=settings.http_max_attempts)
    api_client = HttpClient(
        rate_limiter=RateLimiter(min_interval=settings.api_min_interval),
        timeout=settings.http_timeout,
        max_attempts=settings.http_max_attempts,
    )
    cdn = CdnSource(
        cdn_client,
        base_url=settings.cdn_base_url,
        section_cache=TTLCache(settings.section_cache_ttl),
        info_cache=TTLCache(settings.info_cache_ttl),
    )
    api = HadithApiSource(api_client, api_key=settings.api_key, base_url=settings.api_base_url)
    LOGGER.info(
        "Hadith resolver ready (strategy=%s, paid API %s)",
        settings.cdn_strategy,
        "enabled" if api.configured else "disabled",
    )
    return ContentResolver(
        LocalSource(settings.local_data_dir),
        cdn,
        api,
        TTLCache(settings.cache_ttl),
        min_local_records=settings.min_local_records,
        cdn_strategy=settings.cdn_strategy,
    )


__all__ = ["ContentResolver", "build_resolver"]
