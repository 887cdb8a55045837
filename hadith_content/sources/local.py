"""Curated, read-only hadith dataset bundled with the package."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..models import HadithBook, HadithRecord
from ..normalization import from_local, normalize_batch

LOGGER = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "local"
BOOKS_FILENAME = "books.json"


class LocalDataError(ValueError):
    """Raised when the bundled dataset cannot be parsed."""


class LocalSource:
    """Loads curated hadiths from ``<collection>.jsonl`` files on first use."""

    name = "local"

    def __init__(self, data_dir: Path | str = DEFAULT_DATA_DIR) -> None:
        self.data_dir = Path(data_dir)
        if not self.data_dir.exists():
            raise FileNotFoundError(f"Local hadith data directory not found: {self.data_dir}")
        self._records: Dict[str, List[HadithRecord]] | None = None
        self._books: Dict[str, List[HadithBook]] | None = None

    @property
    def records(self) -> Dict[str, List[HadithRecord]]:
        if self._records is None:
            self._load()
        assert self._records is not None
        return self._records

    @property
    def books_by_collection(self) -> Dict[str, List[HadithBook]]:
        if self._books is None:
            self._load()
        assert self._books is not None
        return self._books

    def _load(self) -> None:
        records: Dict[str, List[HadithRecord]] = {}
        for path in sorted(self.data_dir.glob("*.jsonl")):
            collection_id = path.stem
            rows = []
            with path.open("r", encoding="utf-8") as handle:
                for line_number, line in enumerate(handle, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        rows.append(json.loads(line))
                    except json.JSONDecodeError as exc:
                        raise LocalDataError(f"Invalid JSON at {path}:{line_number}: {exc}") from exc
            parsed = normalize_batch(rows, lambda row, cid=collection_id: from_local(row, cid))
            if len(parsed) != len(rows):
                LOGGER.warning(
                    "Dropped %d malformed curated record(s) from %s",
                    len(rows) - len(parsed),
                    path.name,
                )
            records[collection_id] = parsed

        books: Dict[str, List[HadithBook]] = {}
        books_path = self.data_dir / BOOKS_FILENAME
        if books_path.exists():
            try:
                payload = json.loads(books_path.read_text(encoding="utf-8"))
                for collection_id, entries in payload.items():
                    books[collection_id] = sorted(
                        (HadithBook.model_validate(entry) for entry in entries),
                        key=lambda book: book.book_number,
                    )
            except (json.JSONDecodeError, ValidationError, AttributeError) as exc:
                raise LocalDataError(f"Invalid book index {books_path}: {exc}") from exc

        self._records = records
        self._books = books
        LOGGER.debug(
            "Loaded %d curated hadith(s) across %d collection(s)",
            sum(len(items) for items in records.values()),
            len(records),
        )

    def collections(self) -> List[str]:
        return sorted(set(self.records) | set(self.books_by_collection))

    def all_hadiths(self, collection_id: str) -> List[HadithRecord]:
        return list(self.records.get(collection_id, []))

    def book_hadiths(self, collection_id: str, book_number: int) -> List[HadithRecord]:
        return [
            record
            for record in self.records.get(collection_id, [])
            if record.book_number == book_number
        ]

    def hadith(self, collection_id: str, hadith_number: int) -> Optional[HadithRecord]:
        for record in self.records.get(collection_id, []):
            if record.hadith_number == hadith_number:
                return record
        return None

    def books(self, collection_id: str) -> List[HadithBook]:
        return list(self.books_by_collection.get(collection_id, []))

    def search(self, query: str, collection_id: Optional[str] = None) -> List[HadithRecord]:
        """Naive substring search over English, Arabic, narrator and chapter text."""
        query = (query or "").strip()
        if not query:
            return []
        lowered = query.lower()
        if collection_id is not None:
            pools = [self.records.get(collection_id, [])]
        else:
            pools = [self.records[key] for key in sorted(self.records)]
        hits: List[HadithRecord] = []
        for pool in pools:
            for record in pool:
                if (
                    lowered in record.english_text.lower()
                    or query in record.arabic_text
                    or lowered in (record.primary_narrator or "").lower()
                    or lowered in (record.chapter_title or "").lower()
                ):
                    hits.append(record)
        return hits


__all__ = ["LocalSource", "LocalDataError", "DEFAULT_DATA_DIR"]
