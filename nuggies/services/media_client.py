"""
nuggies.services.media_client — Tenor GIF Search Port
======================================================
"""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx

from nuggies.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

TENOR_API = "https://tenor.googleapis.com/v2"


def extract_gif_urls(payload: Any) -> list[str]:
    """Collect ``results[*].media_formats.gif.url`` entries, skipping junk."""
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []
    urls: list[str] = []
    for item in results:
        try:
            url = item["media_formats"]["gif"]["url"]
        except (KeyError, TypeError):
            continue
        if isinstance(url, str) and url:
            urls.append(url)
    return urls


class TenorClient:
    def __init__(
        self,
        api_key: str,
        *,
        default_url: str,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.default_url = default_url
        self._client = httpx.AsyncClient(
            base_url=TENOR_API,
            timeout=timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=1),
        )

    async def search_gifs(self, query: str, limit: int = 50) -> list[str]:
        """Return GIF URLs for *query*; raises UpstreamUnavailable on failure."""
        try:
            resp = await self._client.get(
                "/search", params={"q": query, "key": self.api_key, "limit": limit}
            )
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Tenor search for %r failed: %s", query, exc)
            raise UpstreamUnavailable(str(exc)) from exc
        return extract_gif_urls(payload)

    async def random_gif(self, query: str, rng: random.Random | None = None) -> str:
        """One random GIF URL for *query*, or the default URL if none came back."""
        urls = await self.search_gifs(query)
        if not urls:
            return self.default_url
        return (rng or random).choice(urls)

    async def aclose(self) -> None:
        await self._client.aclose()
