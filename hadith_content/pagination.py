"""Slicing and grade filtering applied after sources are resolved."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .models import HadithGrade, HadithPage, HadithRecord
from .normalization import DEFAULT_GRADE_RULES, GradeRule, normalize_grade


def paginate(items: Sequence[HadithRecord], page: int = 1, limit: int = 50) -> HadithPage:
    """Return the 1-indexed ``page`` of ``items``.

    ``has_more`` is true while records remain past this slice; a page past
    the end yields an empty slice with ``has_more`` false.
    """
    page = max(1, int(page))
    limit = max(1, int(limit))
    total = len(items)
    start = (page - 1) * limit
    window = list(items[start:start + limit])
    return HadithPage(
        hadiths=window,
        total=total,
        has_more=start + len(window) < total,
        page=page,
        limit=limit,
        last_page=max(1, math.ceil(total / limit)),
    )


def filter_by_grade(
    items: Sequence[HadithRecord],
    status: Optional[str],
    rules: Sequence[GradeRule] = DEFAULT_GRADE_RULES,
) -> List[HadithRecord]:
    """Keep records whose grade matches ``status`` (``None`` keeps everything)."""
    if status is None or not str(status).strip():
        return list(items)
    wanted = normalize_grade(status, rules)
    if wanted is HadithGrade.UNKNOWN and str(status).strip().lower() != "unknown":
        return []
    return [record for record in items if record.grade is wanted]


__all__ = ["paginate", "filter_by_grade"]
