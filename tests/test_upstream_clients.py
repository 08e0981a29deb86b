"""
tests/test_upstream_clients.py — Gemini and Tenor Client Tests
===============================================================

Both clients are driven through ``httpx.MockTransport``; no network.
"""

from __future__ import annotations

import asyncio
import json
import random

import httpx
import pytest

from nuggies.constants import AI_APOLOGY
from nuggies.errors import UpstreamUnavailable
from nuggies.services.ai_client import GeminiClient, extract_text
from nuggies.services.media_client import TenorClient, extract_gif_urls

DEFAULT_GIF = "https://media.tenor.com/default/fox-dance.gif"


def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _tenor_body(*urls):
    return {"results": [{"media_formats": {"gif": {"url": u}}} for u in urls]}


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------
class TestGeminiClient:
    def _client(self, handler):
        return GeminiClient("secret", model="gemini-test", transport=httpx.MockTransport(handler))

    def test_complete_returns_candidate_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_body("Hej!"))

        client = self._client(handler)
        assert run_async(client.complete("hello")) == "Hej!"
        assert seen["url"].endswith("/models/gemini-test:generateContent")
        assert seen["key"] == "secret"
        assert seen["body"] == {"contents": [{"parts": [{"text": "hello"}]}]}

    def test_missing_candidates_returns_apology(self):
        client = self._client(lambda r: httpx.Response(200, json={"promptFeedback": {}}))
        assert run_async(client.complete("hello")) == AI_APOLOGY

    def test_server_error_raises_upstream_unavailable(self):
        client = self._client(lambda r: httpx.Response(503, json={"error": "overloaded"}))
        with pytest.raises(UpstreamUnavailable):
            run_async(client.complete("hello"))

    def test_non_json_raises_upstream_unavailable(self):
        client = self._client(lambda r: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(UpstreamUnavailable):
            run_async(client.complete("hello"))

    def test_transport_error_raises_upstream_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamUnavailable):
            run_async(self._client(handler).complete("hello"))

    @pytest.mark.parametrize(
        "payload",
        [{}, {"candidates": []}, _gemini_body(""), _gemini_body("   "), _gemini_body(None), []],
    )
    def test_extract_text_rejects_empty(self, payload):
        assert extract_text(payload) is None


# ---------------------------------------------------------------------------
# Tenor
# ---------------------------------------------------------------------------
class TestTenorClient:
    def _client(self, handler):
        return TenorClient(
            "tenor-key", default_url=DEFAULT_GIF, transport=httpx.MockTransport(handler)
        )

    def test_search_sends_query_and_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json=_tenor_body("https://a.gif", "https://b.gif"))

        urls = run_async(self._client(handler).search_gifs("fox"))
        assert urls == ["https://a.gif", "https://b.gif"]
        assert seen == {"q": "fox", "key": "tenor-key", "limit": "50"}

    def test_random_gif_picks_from_results(self):
        urls = [f"https://{i}.gif" for i in range(5)]
        client = self._client(lambda r: httpx.Response(200, json=_tenor_body(*urls)))
        assert run_async(client.random_gif("fox", random.Random(1))) in urls

    def test_empty_results_use_default(self):
        client = self._client(lambda r: httpx.Response(200, json={"results": []}))
        assert run_async(client.random_gif("fox")) == DEFAULT_GIF

    def test_http_error_raises_upstream_unavailable(self):
        client = self._client(lambda r: httpx.Response(429))
        with pytest.raises(UpstreamUnavailable):
            run_async(client.random_gif("fox"))

    def test_extract_skips_malformed_items(self):
        payload = {
            "results": [
                {"media_formats": {"gif": {"url": "https://ok.gif"}}},
                {"media_formats": {}},
                {"media_formats": {"gif": {"url": ""}}},
                "junk",
            ]
        }
        assert extract_gif_urls(payload) == ["https://ok.gif"]
        assert extract_gif_urls({"results": None}) == []
        assert extract_gif_urls(None) == []
