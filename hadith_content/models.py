"""Data models shared by the hadith content sources and resolver."""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class HadithGrade(str, Enum):
    """Authenticity classification of a hadith."""

    SAHIH = "Sahih"
    HASAN = "Hasan"
    DAIF = "Da'if"
    MAWDU = "Mawdu"
    UNKNOWN = "Unknown"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class HadithRecord(_CamelModel):
    """Normalized hadith payload returned by every source."""

    collection_id: str
    book_number: Optional[int] = None
    hadith_number: int
    arabic_text: str = Field(..., min_length=1)
    english_text: str = ""
    primary_narrator: Optional[str] = None
    grade: HadithGrade = HadithGrade.UNKNOWN
    graded_by: Optional[str] = None
    chapter_number: Optional[int] = None
    chapter_title: Optional[str] = None
    reference: str = ""
    in_book_reference: Optional[str] = None

    @field_validator("arabic_text", "english_text", mode="before")
    @classmethod
    def strip_text(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("primary_narrator", "chapter_title", "graded_by", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class HadithBook(_CamelModel):
    """A numbered subdivision of a collection."""

    book_number: int
    name: str
    name_arabic: str = ""
    hadith_count: int = 0
    hadith_start_number: int = 0
    hadith_end_number: int = 0


class HadithCollection(_CamelModel):
    """Display metadata about a collection."""

    id: str
    name: str
    name_arabic: str = ""
    compiler_name: str = ""
    total_hadiths: int = 0
    total_books: int = 0
    description: str = ""
    compiler_death_year: int = 0


class HadithPage(_CamelModel):
    """One page of resolved hadiths."""

    hadiths: List[HadithRecord] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    page: int = 1
    limit: int = 0
    last_page: int = 1

    @classmethod
    def empty(cls, page: int = 1, limit: int = 0) -> "HadithPage":
        return cls(hadiths=[], total=0, has_more=False, page=page, limit=limit, last_page=1)


class CacheEntry(BaseModel, Generic[T]):
    """A cached value and the clock reading at which it was stored."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str
    data: T
    timestamp: float


def to_jsonable(value: Any) -> Any:
    """Dump models (or lists of them) with their camelCase aliases."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    return value


__all__ = [
    "to_jsonable",
    "HadithGrade",
    "HadithRecord",
    "HadithBook",
    "HadithCollection",
    "HadithPage",
    "CacheEntry",
]
