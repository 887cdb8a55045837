"""HTTP utilities with retry and optional rate limiting for the remote sources."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_random_exponential

LOGGER = logging.getLogger(__name__)

USER_AGENT = "hadith-content/0.1 (+https://example.com/contact)"


class HttpError(RuntimeError):
    """Raised when the HTTP client cannot recover from an error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientHttpError(HttpError):
    """A failure worth retrying: connection trouble, timeouts, 5xx, 429."""


RETRYABLE_STATUS = {408, 425, 429, 500, 502, 503, 504}


@dataclass
class RateLimiter:
    """Simple per-process rate limiter."""

    min_interval: float = 1.0
    jitter: float = 0.3
    _last_call: Optional[float] = None

    def wait(self) -> None:
        if self.min_interval <= 0:
            return
        now = time.monotonic()
        if self._last_call is not None:
            elapsed = now - self._last_call
            target = self.min_interval + random.uniform(0, self.jitter)
            if elapsed < target:
                time.sleep(target - elapsed)
        self._last_call = time.monotonic()


class HttpClient:
    """Minimal JSON client shared by the CDN and paid-API sources."""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 20.0,
        max_attempts: int = 3,
    ) -> None:
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })
        self._rate_limiter = rate_limiter
        self.timeout = timeout
        self.max_attempts = max(1, int(max_attempts))

    def get_json(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """GET ``url`` and decode JSON, retrying transient failures.

        Raises ``HttpError`` for transport or status failures and
        ``ValueError`` when the body is not valid JSON.
        """
        retryer = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_random_exponential(multiplier=0.5, max=10),
            retry=retry_if_exception_type(TransientHttpError),
            before_sleep=before_sleep_log(LOGGER, logging.WARNING),
        )
        return retryer(self._get_json, url, params, timeout or self.timeout)

    def _get_json(self, url: str, params: Optional[Mapping[str, Any]], timeout: float) -> Any:
        if self._rate_limiter is not None:
            self._rate_limiter.wait()
        try:
            response = self._session.get(url, params=params, timeout=timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise TransientHttpError(f"Connection failure for {url}: {exc}") from exc
        except requests.RequestException as exc:
            raise HttpError(f"Request failed for {url}: {exc}") from exc

        status = response.status_code
        if status in RETRYABLE_STATUS or status >= 500:
            raise TransientHttpError(f"Server error {status} for {url}", status_code=status)
        if status >= 400:
            raise HttpError(f"Client error {status} for {url}", status_code=status)
        try:
            return response.json()
        except ValueError as exc:
            raise ValueError(f"Malformed JSON from {url}: {exc}") from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "HttpClient":  # pragma: no cover - convenience
        return self

    def __exit__(self, *exc_info: object) -> None:  # pragma: no cover - convenience
        self.close()


__all__ = ["HttpClient", "HttpError", "TransientHttpError", "RateLimiter", "RETRYABLE_STATUS"]
