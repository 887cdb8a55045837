"""Backing sources consulted by the resolver, in priority order."""

from .base import SourceResult, SourceStatus
from .cdn import CdnSource, MalformedPayload
from .hadithapi import HadithApiSource
from .local import LocalDataError, LocalSource

__all__ = [
    "SourceResult",
    "SourceStatus",
    "LocalSource",
    "LocalDataError",
    "CdnSource",
    "MalformedPayload",
    "HadithApiSource",
]
