"""Normalization helpers mapping source-specific records onto ``HadithRecord``.

Each backing source names its fields differently. The adapters here translate
one raw row into the canonical record and return ``None`` when a required
field (the Arabic text, the hadith number) cannot be resolved, so a single bad
row never fails a whole batch.

Grade and narrator extraction are driven by ordered, pure rule tables that can
be swapped out by callers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple

from pydantic import ValidationError

from . import catalog
from .models import HadithGrade, HadithRecord

LOGGER = logging.getLogger(__name__)

HONORIFICS_PATTERN = re.compile(
    r"\((?:may|may allah be pleased|رضي الله عن(?:ه|ها|هم))[^)]*\)", re.IGNORECASE
)
VERB_PATTERN = re.compile(r"\b(reported|narrated|said|stated)\b:?", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class GradeRule:
    """Map any of ``needles`` (lower-case substrings) onto ``grade``."""

    needles: Tuple[str, ...]
    grade: HadithGrade


DEFAULT_GRADE_RULES: Tuple[GradeRule, ...] = (
    GradeRule(("sahih",), HadithGrade.SAHIH),
    GradeRule(("hasan",), HadithGrade.HASAN),
    GradeRule(("da'if", "daif", "da`eef", "daeef", "da'eef", "da’if", "weak"), HadithGrade.DAIF),
    GradeRule(("mawdu", "fabricat"), HadithGrade.MAWDU),
)

DEFAULT_NARRATOR_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"^Narrated\s+([^:]+):", re.IGNORECASE),
    re.compile(r"^([^:]+?)\s+reported\s*(?:that)?:", re.IGNORECASE),
    re.compile(r"^([^:]+?)\s+narrated\s*(?:that)?:", re.IGNORECASE),
    re.compile(r"^It was narrated (?:from|on the authority of)\s+([^:,]+)", re.IGNORECASE),
    re.compile(r"^(?:Abu|Ibn|Umar|Anas|Aisha|Abdullah|Jabir|Ali|Muadh)[^:]{0,50}(?=:)", re.IGNORECASE),
)


def normalize_grade(
    raw: Optional[str],
    rules: Sequence[GradeRule] = DEFAULT_GRADE_RULES,
    default: HadithGrade = HadithGrade.UNKNOWN,
) -> HadithGrade:
    """Return the grade of the first rule whose needle occurs in ``raw``.

    A missing grade yields ``default``. A present but unrecognized grade
    always yields ``Unknown``.
    """
    if raw is None or not str(raw).strip():
        return default
    lowered = str(raw).lower()
    for rule in rules:
        if any(needle in lowered for needle in rule.needles):
            return rule.grade
    return HadithGrade.UNKNOWN


def grade_for_collection(
    raw: Optional[str],
    collection_id: str,
    rules: Sequence[GradeRule] = DEFAULT_GRADE_RULES,
) -> HadithGrade:
    """Like ``normalize_grade`` but defaults ungraded Bukhari/Muslim rows to Sahih."""
    info = catalog.get_collection(collection_id)
    default = HadithGrade.UNKNOWN
    if info is not None and info.default_grade:
        default = HadithGrade(info.default_grade)
    return normalize_grade(raw, rules, default=default)


def extract_narrator_name(raw: Optional[str]) -> Optional[str]:
    """Return a canonical narrator name stripped of honorifics and verbs."""
    if not raw or not isinstance(raw, str):
        return None
    cleaned = HONORIFICS_PATTERN.sub("", raw)
    cleaned = VERB_PATTERN.sub("", cleaned)
    cleaned = cleaned.replace(":", "").replace("،", "")
    cleaned = WHITESPACE_PATTERN.sub(" ", cleaned)
    return cleaned.strip(" -\u200f\u200e\ufeff") or None


def extract_primary_narrator(
    text: Optional[str],
    patterns: Sequence[Pattern[str]] = DEFAULT_NARRATOR_PATTERNS,
) -> Optional[str]:
    """Scan English text for a narrator phrase; the first matching pattern wins."""
    if not text or not isinstance(text, str):
        return None
    stripped = text.strip()
    for pattern in patterns:
        match = pattern.search(stripped)
        if match is None:
            continue
        value = match.group(1) if pattern.groups else match.group(0)
        return extract_narrator_name(value)
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _build(collection_id: str, **fields: Any) -> Optional[HadithRecord]:
    try:
        return HadithRecord(collection_id=collection_id, **fields)
    except ValidationError as exc:
        LOGGER.debug(
            "Dropping %s hadith %s: %s",
            collection_id,
            fields.get("hadith_number"),
            exc.errors()[0].get("msg") if exc.errors() else exc,
        )
        return None


def _nested(row: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    """Return ``row[key]`` as a mapping: ``{}`` when absent, ``None`` when mistyped."""
    value = row.get(key)
    if value is None:
        return {}
    return value if isinstance(value, Mapping) else None


def _drop(collection_id: str, number: Any, reason: str) -> None:
    LOGGER.debug("Dropping %s hadith %s: %s", collection_id, number, reason)
    return None


def _reference(collection_id: str, number: Optional[int]) -> str:
    return f"{catalog.display_name(collection_id)} {number}"


def from_local(row: Mapping[str, Any], collection_id: str) -> Optional[HadithRecord]:
    """Adapt a curated local row (camelCase, already HadithRecord-shaped)."""
    number = _as_int(row.get("hadithNumber"))
    book = _as_int(row.get("bookNumber"))
    english = row.get("englishText") or ""
    narrator = row.get("primaryNarrator") or extract_primary_narrator(english)
    return _build(
        collection_id,
        book_number=book,
        hadith_number=number,
        arabic_text=row.get("arabicText"),
        english_text=english,
        primary_narrator=narrator,
        grade=grade_for_collection(row.get("grade"), collection_id),
        graded_by=row.get("gradedBy") or catalog.default_grader(collection_id),
        chapter_number=_as_int(row.get("chapterNumber")),
        chapter_title=row.get("chapterTitle"),
        reference=row.get("reference") or _reference(collection_id, number),
        in_book_reference=row.get("inBookReference")
        or (f"Book {book}, Hadith {number}" if book is not None else None),
    )


def from_cdn(
    english: Mapping[str, Any],
    arabic: Optional[Mapping[str, Any]],
    collection_id: str,
    *,
    fallback_book: Optional[int] = None,
    position: Optional[int] = None,
) -> Optional[HadithRecord]:
    """Adapt a pair of CDN edition rows (English + Arabic) for one hadith."""
    number = _as_int(english.get("hadithnumber")) or position
    grades = english.get("grades")
    first_grade: Mapping[str, Any] = {}
    if isinstance(grades, list) and grades and isinstance(grades[0], Mapping):
        first_grade = grades[0]
    reference = _nested(english, "reference")
    if reference is None:
        return _drop(collection_id, number, "reference is not an object")
    book = _as_int(reference.get("book")) or fallback_book
    in_book_hadith = _as_int(reference.get("hadith")) or number
    text = english.get("text") or ""
    return _build(
        collection_id,
        book_number=book,
        hadith_number=number,
        arabic_text=(arabic or {}).get("text"),
        english_text=text,
        primary_narrator=extract_primary_narrator(text),
        grade=grade_for_collection(first_grade.get("grade"), collection_id),
        graded_by=first_grade.get("graded_by")
        or first_grade.get("name")
        or catalog.default_grader(collection_id),
        chapter_number=_as_int(reference.get("hadith")),
        reference=_reference(collection_id, number),
        in_book_reference=f"Book {book}, Hadith {in_book_hadith}" if book is not None else None,
    )


def merge_cdn_editions(
    english_rows: Iterable[Mapping[str, Any]],
    arabic_rows: Iterable[Mapping[str, Any]],
    collection_id: str,
    *,
    fallback_book: Optional[int] = None,
) -> List[HadithRecord]:
    """Join English and Arabic CDN rows by hadith number and adapt them."""
    arabic_by_number = {}
    for row in arabic_rows:
        if not isinstance(row, Mapping):
            continue
        number = _as_int(row.get("hadithnumber"))
        if number is not None:
            arabic_by_number[number] = row

    records: List[HadithRecord] = []
    for index, row in enumerate(english_rows, start=1):
        if not isinstance(row, Mapping):
            continue
        number = _as_int(row.get("hadithnumber")) or index
        record = from_cdn(
            row,
            arabic_by_number.get(number),
            collection_id,
            fallback_book=fallback_book,
            position=index,
        )
        if record is not None:
            records.append(record)
    return records


def from_hadith_api(row: Mapping[str, Any], collection_id: str) -> Optional[HadithRecord]:
    """Adapt a paid-API hadith row (``hadithEnglish``/``hadithArabic``/``status``)."""
    number = _as_int(row.get("hadithNumber"))
    chapter = _nested(row, "chapter")
    if chapter is None:
        return _drop(collection_id, number, "chapter is not an object")
    chapter_number = _as_int(chapter.get("chapterNumber")) or _as_int(row.get("chapterId"))
    english = row.get("hadithEnglish") or ""
    narrator = extract_narrator_name(row.get("englishNarrator")) or extract_primary_narrator(english)
    return _build(
        collection_id,
        book_number=chapter_number,
        hadith_number=number,
        arabic_text=row.get("hadithArabic"),
        english_text=english,
        primary_narrator=narrator,
        grade=normalize_grade(row.get("status")),
        chapter_number=chapter_number,
        chapter_title=chapter.get("chapterEnglish") or row.get("headingEnglish"),
        reference=_reference(collection_id, number),
        in_book_reference=(
            f"Book {chapter_number}, Hadith {number}" if chapter_number is not None else None
        ),
    )


def normalize_batch(
    rows: Iterable[Mapping[str, Any]],
    adapter: Callable[[Mapping[str, Any]], Optional[HadithRecord]],
) -> List[HadithRecord]:
    """Apply ``adapter`` to every row, dropping rows that fail to normalize."""
    records: List[HadithRecord] = []
    dropped = 0
    for row in rows:
        if not isinstance(row, Mapping):
            dropped += 1
            continue
        record = adapter(row)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        LOGGER.debug("Dropped %d malformed record(s) during normalization", dropped)
    return records


def unique_by_number(records: Iterable[HadithRecord]) -> List[HadithRecord]:
    """Keep the first record for each hadith number, preserving order."""
    seen = set()
    unique: List[HadithRecord] = []
    for record in records:
        if record.hadith_number in seen:
            continue
        seen.add(record.hadith_number)
        unique.append(record)
    return unique


__all__ = [
    "GradeRule",
    "DEFAULT_GRADE_RULES",
    "DEFAULT_NARRATOR_PATTERNS",
    "normalize_grade",
    "grade_for_collection",
    "extract_narrator_name",
    "extract_primary_narrator",
    "from_local",
    "from_cdn",
    "merge_cdn_editions",
    "from_hadith_api",
    "normalize_batch",
    "unique_by_number",
]
