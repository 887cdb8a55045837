"""Process configuration resolved from ``HADITH_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .cache import ONE_DAY, ONE_HOUR, TWO_HOURS
from .sources.cdn import DEFAULT_CDN_BASE_URL
from .sources.hadithapi import DEFAULT_API_BASE_URL
from .sources.local import DEFAULT_DATA_DIR

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_MIN_LOCAL_RECORDS = 5
CDN_STRATEGIES = ("collection", "section")


def _resolve_str(env: Mapping[str, str], name: str, default: Optional[str]) -> Optional[str]:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _resolve_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {name} value: {value!r}") from exc


def _resolve_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {name} value: {value!r}") from exc


def _resolve_strategy(env: Mapping[str, str]) -> str:
    value = (_resolve_str(env, "HADITH_CDN_STRATEGY", "collection") or "collection").lower()
    if value not in CDN_STRATEGIES:
        raise ValueError(f"Invalid HADITH_CDN_STRATEGY value: {value!r}")
    return value


@dataclass(frozen=True)
class Settings:
    cdn_base_url: str = DEFAULT_CDN_BASE_URL
    api_base_url: str = DEFAULT_API_BASE_URL
    api_key: Optional[str] = None
    api_min_interval: float = 0.0
    http_timeout: float = 20.0
    http_max_attempts: int = 3
    cache_ttl: float = ONE_HOUR
    section_cache_ttl: float = TWO_HOURS
    info_cache_ttl: float = ONE_DAY
    min_local_records: int = DEFAULT_MIN_LOCAL_RECORDS
    cdn_strategy: str = "collection"
    local_data_dir: Path = DEFAULT_DATA_DIR
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (``os.environ`` when omitted)."""
        env = os.environ if env is None else env
        return cls(
            cdn_base_url=_resolve_str(env, "HADITH_CDN_BASE_URL", DEFAULT_CDN_BASE_URL),
            api_base_url=_resolve_str(env, "HADITH_API_BASE_URL", DEFAULT_API_BASE_URL),
            api_key=_resolve_str(env, "HADITH_API_KEY", None),
            api_min_interval=_resolve_float(env, "HADITH_API_MIN_INTERVAL", 0.0),
            http_timeout=_resolve_float(env, "HADITH_HTTP_TIMEOUT", 20.0),
            http_max_attempts=_resolve_int(env, "HADITH_HTTP_MAX_ATTEMPTS", 3),
            cache_ttl=_resolve_float(env, "HADITH_CACHE_TTL", ONE_HOUR),
            section_cache_ttl=_resolve_float(env, "HADITH_SECTION_CACHE_TTL", TWO_HOURS),
            info_cache_ttl=_resolve_float(env, "HADITH_INFO_CACHE_TTL", ONE_DAY),
            min_local_records=_resolve_int(env, "HADITH_MIN_LOCAL_RECORDS", DEFAULT_MIN_LOCAL_RECORDS),
            cdn_strategy=_resolve_strategy(env),
            local_data_dir=Path(_resolve_str(env, "HADITH_LOCAL_DATA_DIR", str(DEFAULT_DATA_DIR))),
            host=_resolve_str(env, "HADITH_HOST", DEFAULT_HOST),
            port=_resolve_int(env, "HADITH_PORT", DEFAULT_PORT),
        )


__all__ = ["Settings", "CDN_STRATEGIES"]
