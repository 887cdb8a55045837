"""Typed outcome of asking one backing source for data."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SourceStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SourceResult(Generic[T]):
    """``Ok(data) | Empty | SourceUnavailable`` for a single source attempt."""

    status: SourceStatus
    source: str
    data: Optional[T] = None
    detail: Optional[str] = None

    @classmethod
    def ok(cls, source: str, data: T) -> "SourceResult[T]":
        return cls(SourceStatus.OK, source, data)

    @classmethod
    def empty(cls, source: str, detail: Optional[str] = None) -> "SourceResult[T]":
        return cls(SourceStatus.EMPTY, source, None, detail)

    @classmethod
    def unavailable(cls, source: str, detail: str) -> "SourceResult[T]":
        return cls(SourceStatus.UNAVAILABLE, source, None, detail)

    @classmethod
    def from_data(cls, source: str, data: Optional[T]) -> "SourceResult[T]":
        """``ok`` when ``data`` is non-empty, otherwise ``empty``."""
        if data:
            return cls.ok(source, data)
        return cls.empty(source)

    @property
    def is_ok(self) -> bool:
        return self.status is SourceStatus.OK


__all__ = ["SourceStatus", "SourceResult"]
