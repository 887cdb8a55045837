"""Registry of the hadith collections the platform recognizes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import HadithCollection


@dataclass(frozen=True)
class CollectionInfo:
    """Static metadata and per-source identifiers for one collection."""

    id: str
    name: str
    display_name: str
    name_arabic: str = ""
    compiler_name: str = ""
    default_grader: str = ""
    total_hadiths: int = 0
    total_books: int = 0
    description: str = ""
    compiler_death_year: int = 0
    cdn_edition: Optional[str] = None
    api_slug: Optional[str] = None
    default_grade: Optional[str] = None

    def to_model(self) -> HadithCollection:
        return HadithCollection(
            id=self.id,
            name=self.name,
            name_arabic=self.name_arabic,
            compiler_name=self.compiler_name,
            total_hadiths=self.total_hadiths,
            total_books=self.total_books,
            description=self.description,
            compiler_death_year=self.compiler_death_year,
        )


COLLECTIONS: Dict[str, CollectionInfo] = {
    info.id: info
    for info in (
        CollectionInfo(
            id="bukhari",
            name="Sahih al-Bukhari",
            display_name="Bukhari",
            name_arabic="صحيح البخاري",
            compiler_name="Imam Muhammad al-Bukhari",
            default_grader="Al-Bukhari",
            total_hadiths=7563,
            total_books=97,
            description=(
                "The most authentic collection of Hadith, compiled by Imam Bukhari. "
                "It is considered the most reliable source after the Quran."
            ),
            compiler_death_year=256,
            cdn_edition="bukhari",
            api_slug="sahih-bukhari",
            default_grade="Sahih",
        ),
        CollectionInfo(
            id="muslim",
            name="Sahih Muslim",
            display_name="Muslim",
            name_arabic="صحيح مسلم",
            compiler_name="Imam Muslim ibn al-Hajjaj",
            default_grader="Muslim",
            total_hadiths=7500,
            total_books=56,
            description=(
                "The second most authentic collection, known for its excellent "
                "arrangement and strict criteria."
            ),
            compiler_death_year=261,
            cdn_edition="muslim",
            api_slug="sahih-muslim",
            default_grade="Sahih",
        ),
        CollectionInfo(
            id="tirmidhi",
            name="Jami` at-Tirmidhi",
            display_name="Tirmidhi",
            name_arabic="جامع الترمذي",
            compiler_name="Imam Abu Isa at-Tirmidhi",
            default_grader="At-Tirmidhi",
            total_hadiths=3956,
            total_books=49,
            description=(
                "Known for including the grading of each hadith and valuable "
                "jurisprudential discussions."
            ),
            compiler_death_year=279,
            cdn_edition="tirmidhi",
            api_slug="al-tirmidhi",
        ),
        CollectionInfo(
            id="abudawud",
            name="Sunan Abu Dawud",
            display_name="Abu Dawud",
            name_arabic="سنن أبي داود",
            compiler_name="Imam Abu Dawud as-Sijistani",
            default_grader="Abu Dawud",
            total_hadiths=5274,
            total_books=43,
            description=(
                "Focuses primarily on legal hadiths and is an essential source for "
                "Islamic jurisprudence."
            ),
            compiler_death_year=275,
            cdn_edition="abudawud",
            api_slug="abu-dawood",
        ),
        CollectionInfo(
            id="nasai",
            name="Sunan an-Nasa'i",
            display_name="Nasai",
            name_arabic="سنن النسائي",
            compiler_name="Imam Ahmad an-Nasa'i",
            default_grader="An-Nasai",
            total_hadiths=5761,
            total_books=51,
            description=(
                "Known for its strict criteria in selecting hadiths, focusing on "
                "narrator criticism."
            ),
            compiler_death_year=303,
            cdn_edition="nasai",
            api_slug="sunan-nasai",
        ),
        CollectionInfo(
            id="ibnmajah",
            name="Sunan Ibn Majah",
            display_name="Ibn Majah",
            name_arabic="سنن ابن ماجه",
            compiler_name="Imam Ibn Majah al-Qazwini",
            default_grader="Ibn Majah",
            total_hadiths=4341,
            total_books=37,
            description=(
                "Contains many unique hadiths not found in other collections, "
                "completing the six major books."
            ),
            compiler_death_year=273,
            cdn_edition="ibnmajah",
            api_slug="ibn-e-majah",
        ),
        CollectionInfo(
            id="malik",
            name="Muwatta Malik",
            display_name="Malik",
            name_arabic="موطأ مالك",
            compiler_name="Imam Malik ibn Anas",
            default_grader="Imam Malik",
            compiler_death_year=179,
            cdn_edition="malik",
        ),
        CollectionInfo(
            id="nawawi",
            name="Forty Hadith of an-Nawawi",
            display_name="Nawawi",
            name_arabic="الأربعون النووية",
            compiler_name="Imam Yahya ibn Sharaf an-Nawawi",
            default_grader="An-Nawawi",
            total_hadiths=42,
            total_books=1,
            compiler_death_year=676,
        ),
        CollectionInfo(
            id="mishkat",
            name="Mishkat al-Masabih",
            display_name="Mishkat",
            name_arabic="مشكاة المصابيح",
            compiler_name="Al-Khatib al-Tabrizi",
            api_slug="mishkat",
        ),
        CollectionInfo(
            id="ahmad",
            name="Musnad Ahmad",
            display_name="Ahmad",
            name_arabic="مسند أحمد",
            compiler_name="Imam Ahmad ibn Hanbal",
            compiler_death_year=241,
            api_slug="musnad-ahmad",
        ),
    )
}

_SLUG_TO_ID: Dict[str, str] = {
    info.api_slug: info.id for info in COLLECTIONS.values() if info.api_slug
}


def is_supported(collection_id: Optional[str]) -> bool:
    return bool(collection_id) and collection_id in COLLECTIONS


def get_collection(collection_id: Optional[str]) -> Optional[CollectionInfo]:
    if not collection_id:
        return None
    return COLLECTIONS.get(collection_id)


def list_collections() -> List[HadithCollection]:
    return [info.to_model() for info in COLLECTIONS.values()]


def collection_for_api_slug(slug: Optional[str]) -> Optional[str]:
    """Map a paid-API book slug back to our collection id."""
    if not slug:
        return None
    return _SLUG_TO_ID.get(slug)


def display_name(collection_id: str) -> str:
    info = COLLECTIONS.get(collection_id)
    if info is not None:
        return info.display_name
    return collection_id[:1].upper() + collection_id[1:]


def default_grader(collection_id: str) -> str:
    info = COLLECTIONS.get(collection_id)
    return info.default_grader if info is not None else ""


__all__ = [
    "CollectionInfo",
    "COLLECTIONS",
    "is_supported",
    "get_collection",
    "list_collections",
    "collection_for_api_slug",
    "display_name",
    "default_grader",
]
