"""Multi-source hadith retrieval with normalization and a TTL cache."""

from .cache import TTLCache
from .config import Settings
from .models import HadithBook, HadithCollection, HadithGrade, HadithPage, HadithRecord
from .resolver import ContentResolver, build_resolver

__all__ = [
    "ContentResolver",
    "build_resolver",
    "Settings",
    "TTLCache",
    "HadithBook",
    "HadithCollection",
    "HadithGrade",
    "HadithPage",
    "HadithRecord",
]
