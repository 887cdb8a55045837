"""Public CDN of pre-indexed hadith editions (fawazahmed0/hadith-api).

Endpoints, relative to the base URL:

- ``editions/eng-<edition>`` and ``editions/ara-<edition>``: full collections
- ``editions/<lang>-<edition>/sections/<n>``: one section (book)
- ``editions/<lang>-<edition>/<n>``: one hadith
- ``info``: per-collection metadata, including section hadith ranges

Each endpoint is served both as ``.json`` and ``.min.json``; whichever is
tried first, the other is used as a fallback.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .. import catalog
from ..cache import ONE_DAY, TWO_HOURS, TTLCache
from ..http import HttpClient, HttpError
from ..models import HadithBook, HadithRecord
from ..normalization import from_cdn, merge_cdn_editions
from .base import SourceResult

LOGGER = logging.getLogger(__name__)

DEFAULT_CDN_BASE_URL = "https://cdn.jsdelivr.net/gh/fawazahmed0/hadith-api@1"
INFO_CACHE_KEY = "cdn:info"


class MalformedPayload(ValueError):
    """Raised when a CDN response does not have the expected shape."""


def _hadith_rows(payload: Any, endpoint: str) -> List[Mapping[str, Any]]:
    if not isinstance(payload, Mapping) or not isinstance(payload.get("hadiths"), list):
        raise MalformedPayload(f"Expected a 'hadiths' array from {endpoint}")
    return payload["hadiths"]


def _books_from_info(info: Mapping[str, Any], edition: str) -> List[HadithBook]:
    metadata = (info.get(edition) or {}).get("metadata") or {}
    sections = metadata.get("sections") or {}
    details = metadata.get("section_details") or {}
    books: List[HadithBook] = []
    for key, title in sections.items():
        try:
            number = int(key)
        except (TypeError, ValueError):
            continue
        if number <= 0 or not isinstance(title, str) or not title.strip():
            continue
        detail = details.get(key) or {}
        first = int(detail.get("hadithnumber_first") or 0)
        last = int(detail.get("hadithnumber_last") or 0)
        books.append(
            HadithBook(
                book_number=number,
                name=title.strip(),
                hadith_count=(last - first + 1) if first > 0 and last > 0 else 0,
                hadith_start_number=first,
                hadith_end_number=last,
            )
        )
    books.sort(key=lambda book: book.book_number)
    return books


class CdnSource:
    """Fetch and normalize hadiths from the public CDN."""

    name = "cdn"

    def __init__(
        self,
        client: HttpClient,
        *,
        base_url: str = DEFAULT_CDN_BASE_URL,
        section_cache: TTLCache | None = None,
        info_cache: TTLCache | None = None,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.section_cache = section_cache if section_cache is not None else TTLCache(TWO_HOURS)
        self.info_cache = info_cache if info_cache is not None else TTLCache(ONE_DAY)

    # internals --------------------------------------------------
    def _fetch(self, endpoint: str, *, prefer_minified: bool = False) -> Any:
        suffixes: Sequence[str] = (".min.json", ".json") if prefer_minified else (".json", ".min.json")
        last_error: Exception | None = None
        for suffix in suffixes:
            url = f"{self.base_url}/{endpoint}{suffix}"
            try:
                return self.client.get_json(url)
            except (HttpError, ValueError) as exc:
                LOGGER.debug("CDN fetch failed for %s: %s", url, exc)
                last_error = exc
        assert last_error is not None
        raise last_error

    def _edition(self, collection_id: str) -> Optional[str]:
        info = catalog.get_collection(collection_id)
        return info.cdn_edition if info is not None else None

    def _fetch_pair(
        self, english_endpoint: str, arabic_endpoint: str, *, prefer_minified: bool = False
    ) -> Tuple[List[Mapping[str, Any]], List[Mapping[str, Any]]]:
        english = _hadith_rows(self._fetch(english_endpoint, prefer_minified=prefer_minified), english_endpoint)
        arabic = _hadith_rows(self._fetch(arabic_endpoint, prefer_minified=prefer_minified), arabic_endpoint)
        return english, arabic

    # public API -------------------------------------------------
    def supports(self, collection_id: str) -> bool:
        return self._edition(collection_id) is not None

    def collection(self, collection_id: str) -> SourceResult[List[HadithRecord]]:
        """Fetch the whole collection (both languages) in one go."""
        edition = self._edition(collection_id)
        if edition is None:
            return SourceResult.empty(self.name, f"no CDN edition for {collection_id}")
        try:
            english, arabic = self._fetch_pair(
                f"editions/eng-{edition}",
                f"editions/ara-{edition}",
                prefer_minified=True,
            )
        except (HttpError, ValueError) as exc:
            LOGGER.warning("CDN collection fetch failed for %s: %s", collection_id, exc)
            return SourceResult.unavailable(self.name, str(exc))
        records = merge_cdn_editions(english, arabic, collection_id)
        LOGGER.info(
            "Fetched %d CDN record(s) for %s (%d usable)",
            len(english),
            collection_id,
            len(records),
        )
        return SourceResult.from_data(self.name, records)

    def section(self, collection_id: str, section_number: int) -> SourceResult[List[HadithRecord]]:
        """Fetch one section (book); results are cached for two hours."""
        edition = self._edition(collection_id)
        if edition is None:
            return SourceResult.empty(self.name, f"no CDN edition for {collection_id}")
        cache_key = f"{collection_id}:cdn:section:{section_number}"
        cached = self.section_cache.get(cache_key)
        if cached is not None:
            return SourceResult.from_data(self.name, cached)
        try:
            english, arabic = self._fetch_pair(
                f"editions/eng-{edition}/sections/{section_number}",
                f"editions/ara-{edition}/sections/{section_number}",
            )
        except (HttpError, ValueError) as exc:
            LOGGER.warning(
                "CDN section %s fetch failed for %s: %s", section_number, collection_id, exc
            )
            return SourceResult.unavailable(self.name, str(exc))
        records = merge_cdn_editions(english, arabic, collection_id, fallback_book=section_number)
        if records:
            self.section_cache.set(cache_key, records)
        return SourceResult.from_data(self.name, records)

    def hadith(self, collection_id: str, hadith_number: int) -> SourceResult[HadithRecord]:
        """Fetch a single hadith by number."""
        edition = self._edition(collection_id)
        if edition is None:
            return SourceResult.empty(self.name, f"no CDN edition for {collection_id}")
        try:
            english, arabic = self._fetch_pair(
                f"editions/eng-{edition}/{hadith_number}",
                f"editions/ara-{edition}/{hadith_number}",
            )
        except (HttpError, ValueError) as exc:
            LOGGER.warning("CDN hadith %s fetch failed for %s: %s", hadith_number, collection_id, exc)
            return SourceResult.unavailable(self.name, str(exc))
        if not english or not isinstance(english[0], Mapping):
            return SourceResult.empty(self.name)
        record = from_cdn(
            english[0],
            arabic[0] if arabic and isinstance(arabic[0], Mapping) else None,
            collection_id,
            position=hadith_number,
        )
        return SourceResult.from_data(self.name, record)

    def _info(self) -> Mapping[str, Any]:
        cached = self.info_cache.get(INFO_CACHE_KEY)
        if cached is not None:
            return cached
        payload = self._fetch("info")
        if not isinstance(payload, Mapping):
            raise MalformedPayload("Expected an object from info")
        self.info_cache.set(INFO_CACHE_KEY, payload)
        return payload

    def books(self, collection_id: str) -> SourceResult[List[HadithBook]]:
        """Build the book list from ``info.json`` section metadata."""
        edition = self._edition(collection_id)
        if edition is None:
            return SourceResult.empty(self.name, f"no CDN edition for {collection_id}")
        try:
            info = self._info()
        except (HttpError, ValueError) as exc:
            LOGGER.warning("CDN info fetch failed for %s: %s", collection_id, exc)
            return SourceResult.unavailable(self.name, str(exc))

        try:
            books = _books_from_info(info, edition)
        except (AttributeError, TypeError, ValueError) as exc:
            LOGGER.warning("CDN info for %s is malformed: %s", collection_id, exc)
            return SourceResult.unavailable(self.name, str(exc))
        return SourceResult.from_data(self.name, books)


__all__ = ["CdnSource", "MalformedPayload", "DEFAULT_CDN_BASE_URL"]
