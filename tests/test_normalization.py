from __future__ import annotations

import re
import unittest

from hadith_content.models import HadithGrade
from hadith_content.normalization import (
    GradeRule,
    extract_narrator_name,
    extract_primary_narrator,
    from_cdn,
    from_hadith_api,
    from_local,
    grade_for_collection,
    merge_cdn_editions,
    normalize_batch,
    normalize_grade,
    unique_by_number,
)

from fakes import api_row, cdn_row, local_row, make_record


class GradeTests(unittest.TestCase):
    def test_known_grades(self) -> None:
        self.assertIs(normalize_grade("Sahih"), HadithGrade.SAHIH)
        self.assertIs(normalize_grade("sahih (al-bukhari)"), HadithGrade.SAHIH)
        self.assertIs(normalize_grade("Hasan Sahih"), HadithGrade.SAHIH)
        self.assertIs(normalize_grade("Hasan"), HadithGrade.HASAN)
        self.assertIs(normalize_grade("Da'if"), HadithGrade.DAIF)
        self.assertIs(normalize_grade("Da`eef"), HadithGrade.DAIF)
        self.assertIs(normalize_grade("Weak isnad"), HadithGrade.DAIF)
        self.assertIs(normalize_grade("Mawdu"), HadithGrade.MAWDU)

    def test_unrecognized_grade_is_unknown(self) -> None:
        self.assertIs(normalize_grade("garbage-unrecognized"), HadithGrade.UNKNOWN)
        self.assertIs(
            normalize_grade("garbage", default=HadithGrade.SAHIH),
            HadithGrade.UNKNOWN,
        )

    def test_missing_grade_uses_default(self) -> None:
        self.assertIs(normalize_grade(None), HadithGrade.UNKNOWN)
        self.assertIs(normalize_grade("  ", default=HadithGrade.HASAN), HadithGrade.HASAN)

    def test_collection_defaults(self) -> None:
        self.assertIs(grade_for_collection(None, "bukhari"), HadithGrade.SAHIH)
        self.assertIs(grade_for_collection(None, "muslim"), HadithGrade.SAHIH)
        self.assertIs(grade_for_collection(None, "tirmidhi"), HadithGrade.UNKNOWN)
        self.assertIs(grade_for_collection("Da'if", "bukhari"), HadithGrade.DAIF)

    def test_custom_rules_are_ordered(self) -> None:
        rules = (GradeRule(("hasan",), HadithGrade.HASAN), GradeRule(("sahih",), HadithGrade.SAHIH))
        self.assertIs(normalize_grade("Hasan Sahih", rules), HadithGrade.HASAN)


class NarratorTests(unittest.TestCase):
    def test_narrated_prefix(self) -> None:
        text = "Narrated Abu Hurairah (رضي الله عنه): The Messenger of Allah said..."
        self.assertEqual(extract_primary_narrator(text), "Abu Hurairah")

    def test_reported_form(self) -> None:
        self.assertEqual(
            extract_primary_narrator("Abdullah bin Umar reported: The Prophet said..."),
            "Abdullah bin Umar",
        )

    def test_narrated_on_the_authority_of(self) -> None:
        text = "It was narrated from Aisha, the mother of the believers, that..."
        self.assertEqual(extract_primary_narrator(text), "Aisha")

    def test_no_match(self) -> None:
        self.assertIsNone(extract_primary_narrator("The Prophet said: pray as you have seen me pray."))
        self.assertIsNone(extract_primary_narrator(""))

    def test_custom_patterns(self) -> None:
        patterns = (re.compile(r"^From\s+([^,]+),"),)
        self.assertEqual(extract_primary_narrator("From Jabir, who said...", patterns), "Jabir")

    def test_name_cleanup(self) -> None:
        self.assertEqual(extract_narrator_name("Narrated Anas bin Malik:"), "Anas bin Malik")
        self.assertIsNone(extract_narrator_name("  "))


class AdapterTests(unittest.TestCase):
    def test_from_local_fills_reference_and_grade(self) -> None:
        record = from_local(local_row(12, book=2), "bukhari")
        assert record is not None
        self.assertEqual(record.reference, "Bukhari 12")
        self.assertEqual(record.in_book_reference, "Book 2, Hadith 12")
        self.assertIs(record.grade, HadithGrade.SAHIH)
        self.assertEqual(record.graded_by, "Al-Bukhari")

    def test_from_local_drops_blank_arabic(self) -> None:
        self.assertIsNone(from_local(local_row(1, arabicText="   "), "muslim"))
        row = local_row(2)
        del row["arabicText"]
        self.assertIsNone(from_local(row, "muslim"))

    def test_from_cdn_uses_first_grade_and_reference(self) -> None:
        record = from_cdn(
            cdn_row(7, "Narrated Anas: text", book=2, grade="Hasan"),
            {"hadithnumber": 7, "text": "نص عربي"},
            "tirmidhi",
        )
        assert record is not None
        self.assertEqual(record.book_number, 2)
        self.assertIs(record.grade, HadithGrade.HASAN)
        self.assertEqual(record.graded_by, "Al-Albani")
        self.assertEqual(record.primary_narrator, "Anas")
        self.assertEqual(record.reference, "Tirmidhi 7")

    def test_merge_drops_rows_without_arabic(self) -> None:
        english = [cdn_row(1, "one", book=1), cdn_row(2, "two", book=1), "not-a-row"]
        arabic = [{"hadithnumber": 1, "text": "واحد"}, {"hadithnumber": 2, "text": ""}]
        records = merge_cdn_editions(english, arabic, "bukhari")
        self.assertEqual([r.hadith_number for r in records], [1])
        self.assertEqual(records[0].arabic_text, "واحد")

    def test_merge_uses_fallback_book(self) -> None:
        records = merge_cdn_editions(
            [cdn_row(5, "five")], [{"hadithnumber": 5, "text": "خمسة"}], "muslim", fallback_book=3
        )
        self.assertEqual(records[0].book_number, 3)

    def test_from_hadith_api(self) -> None:
        record = from_hadith_api(
            api_row(42, "Text", status="Da`eef", chapter=4, narrator="Narrated Abu Hurairah:"),
            "bukhari",
        )
        assert record is not None
        self.assertEqual(record.hadith_number, 42)
        self.assertEqual(record.chapter_number, 4)
        self.assertEqual(record.chapter_title, "Chapter 4")
        self.assertIs(record.grade, HadithGrade.DAIF)
        self.assertEqual(record.primary_narrator, "Abu Hurairah")
        self.assertIsNone(record.graded_by)

    def test_mistyped_fields_drop_the_row(self) -> None:
        arabic = {"hadithnumber": 1, "text": "نص"}
        self.assertIsNone(from_cdn({"hadithnumber": 1, "text": 123}, arabic, "bukhari"))
        self.assertIsNone(from_cdn({"hadithnumber": 1, "text": "x", "reference": "1:1"}, arabic, "bukhari"))
        bad_chapter = dict(api_row(1, "Text"), chapter="bad")
        self.assertIsNone(from_hadith_api(bad_chapter, "ahmad"))
        self.assertIsNone(from_local(local_row(3, englishText=["not", "text"]), "nawawi"))

    def test_narrator_helpers_ignore_non_strings(self) -> None:
        self.assertIsNone(extract_primary_narrator(123))
        self.assertIsNone(extract_narrator_name({"name": "Anas"}))

    def test_merge_keeps_valid_rows_next_to_mistyped_ones(self) -> None:
        english = [
            {"hadithnumber": 1, "text": 123},
            {"hadithnumber": 2, "text": "two", "reference": {"book": 1, "hadith": 2}},
            {"hadithnumber": 3, "text": "three", "reference": "1:3"},
            {"hadithnumber": 4, "text": "four", "grades": {"grade": "Sahih"}},
        ]
        arabic = [{"hadithnumber": n, "text": f"نص {n}"} for n in (1, 2, 3, 4)]
        records = merge_cdn_editions(english, arabic, "bukhari")
        self.assertEqual([r.hadith_number for r in records], [2, 4])

    def test_normalize_batch_skips_failures(self) -> None:
        rows = [local_row(1), {"hadithNumber": "x"}, None, local_row(2)]
        records = normalize_batch(rows, lambda row: from_local(row, "nawawi"))
        self.assertEqual([r.hadith_number for r in records], [1, 2])

    def test_unique_by_number_keeps_first(self) -> None:
        first = make_record(1, english="first")
        records = unique_by_number([first, make_record(2), make_record(1, english="second")])
        self.assertEqual([r.hadith_number for r in records], [1, 2])
        self.assertEqual(records[0].english_text, "first")


if __name__ == "__main__":
    unittest.main()
