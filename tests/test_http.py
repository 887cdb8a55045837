from __future__ import annotations

import unittest
from unittest.mock import patch

import requests
from tenacity import wait_none

from hadith_content.http import HttpClient, HttpError, RateLimiter, TransientHttpError

from fakes import FakeResponse, FakeSession, invalid_json

URL = "https://cdn.test/hadith-api@1/info.json"


class HttpClientTests(unittest.TestCase):
    def test_returns_json_and_sets_headers(self) -> None:
        session = FakeSession({URL: {"ok": True}})
        client = HttpClient(session=session)
        self.assertEqual(client.get_json(URL, params={"a": 1}), {"ok": True})
        self.assertEqual(session.calls, [(URL, {"a": 1})])
        self.assertEqual(session.headers["Accept"], "application/json")

    def test_retries_transient_failures(self) -> None:
        session = FakeSession({
            URL: [
                requests.ConnectionError("boom"),
                FakeResponse({}, 503),
                FakeResponse({"ok": True}),
            ]
        })
        client = HttpClient(session=session, max_attempts=3)
        with patch("hadith_content.http.wait_random_exponential", return_value=wait_none()):
            self.assertEqual(client.get_json(URL), {"ok": True})
        self.assertEqual(len(session.calls), 3)

    def test_gives_up_after_max_attempts(self) -> None:
        session = FakeSession({URL: FakeResponse({}, 500)})
        client = HttpClient(session=session, max_attempts=2)
        with patch("hadith_content.http.wait_random_exponential", return_value=wait_none()):
            with self.assertRaises(TransientHttpError) as ctx:
                client.get_json(URL)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(len(session.calls), 2)

    def test_client_errors_are_not_retried(self) -> None:
        session = FakeSession({URL: FakeResponse({}, 401)})
        client = HttpClient(session=session, max_attempts=3)
        with self.assertRaises(HttpError) as ctx:
            client.get_json(URL)
        self.assertNotIsInstance(ctx.exception, TransientHttpError)
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(len(session.calls), 1)

    def test_malformed_json(self) -> None:
        client = HttpClient(session=FakeSession({URL: invalid_json()}))
        with self.assertRaises(ValueError):
            client.get_json(URL)

    def test_close_closes_session(self) -> None:
        session = FakeSession()
        HttpClient(session=session).close()
        self.assertTrue(session.closed)


class RateLimiterTests(unittest.TestCase):
    def test_disabled_limiter_never_sleeps(self) -> None:
        limiter = RateLimiter(min_interval=0)
        with patch("hadith_content.http.time.sleep") as sleep:
            limiter.wait()
            limiter.wait()
        sleep.assert_not_called()

    def test_spaces_consecutive_calls(self) -> None:
        limiter = RateLimiter(min_interval=1.0, jitter=0.0)
        with patch("hadith_content.http.time.monotonic", side_effect=[10.0, 10.0, 10.2, 11.0]), patch(
            "hadith_content.http.time.sleep"
        ) as sleep:
            limiter.wait()
            limiter.wait()
        sleep.assert_called_once()
        self.assertAlmostEqual(sleep.call_args[0][0], 0.8)


if __name__ == "__main__":
    unittest.main()
