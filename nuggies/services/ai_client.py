"""
nuggies.services.ai_client — Gemini Text Port
==============================================

``complete(prompt) -> str`` over Google's ``generateContent`` REST endpoint.

* Transport errors, timeouts and non-2xx responses raise
  :class:`~nuggies.errors.UpstreamUnavailable`.
* A well-formed response without candidate text (safety block, overload)
  maps to the fixed :data:`~nuggies.constants.AI_APOLOGY` string — never a
  raw ``None``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from nuggies.constants import AI_APOLOGY
from nuggies.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

GEMINI_API = "https://generativelanguage.googleapis.com/v1beta/models"


def extract_text(payload: Any) -> str | None:
    """Pull ``candidates[0].content.parts[0].text`` out of a response body."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class GeminiClient:
    """Thin async client; one shared :class:`httpx.AsyncClient` per bot."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-1.5-flash",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model = model
        self._client = httpx.AsyncClient(
            base_url=GEMINI_API,
            headers={"x-goog-api-key": api_key},
            timeout=timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=1),
        )

    async def complete(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            resp = await self._client.post(f"/{self.model}:generateContent", json=body)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Gemini request failed: %s", exc)
            raise UpstreamUnavailable(str(exc)) from exc

        text = extract_text(payload)
        if text is None:
            logger.warning("Gemini returned no candidate text: %s", str(payload)[:200])
            return AI_APOLOGY
        return text

    async def aclose(self) -> None:
        await self._client.aclose()
