"""
JustTCG pricing API client.

Thin async wrapper over the three endpoints the backend proxies: card search,
card by id and the games list. Requests are authenticated with the static
``X-API-Key`` header.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .errors import ConfigurationError
from .settings import Settings

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "JustTCG API key not configured on server (JUSTTCG_API_KEY)"


def require_api_key(settings: Settings) -> str:
    """Return the configured key or raise ConfigurationError."""
    if not settings.justtcg_api_key:
        raise ConfigurationError(MISSING_KEY_MESSAGE)
    return settings.justtcg_api_key


def upstream_error_message(response: httpx.Response, default: str) -> str:
    """Extract the ``error`` field from an upstream error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


class JustTCGClient:
    """
    Client for the JustTCG API.

    Every method raises ``httpx.HTTPStatusError`` for non-2xx responses and
    lets transport / JSON errors propagate; the route layer maps them to
    HTTP responses.
    """

    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self.http = http
        self.base_url = settings.justtcg_base_url.rstrip("/")
        self.api_key = require_api_key(settings)

    def _headers(self) -> Dict[str, str]:
        return {"X-API-Key": self.api_key, "Content-Type": "application/json"}

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self.http.get(f"{self.base_url}{path}", params=params, headers=self._headers())
        if response.is_error:
            logger.warning("JustTCG %s returned %s", path, response.status_code)
        response.raise_for_status()
        return response.json()

    async def search_cards(self, game: str, q: str, limit: int = 20) -> list[Dict[str, Any]]:
        """
        Search cards by free text within a game.

        Returns:
            The raw card records (``data`` of the upstream payload).
        """
        payload = await self._get("/cards", {"q": q, "game": game, "limit": limit})
        if isinstance(payload, dict):
            return [c for c in payload.get("data") or [] if isinstance(c, dict)]
        return []

    async def get_card(self, card_id: str) -> Dict[str, Any]:
        """
        Fetch one card by its JustTCG id.

        The API wraps results in ``{"data": [...]}``; a bare card object is
        accepted too. An empty envelope is returned as ``{}``.
        """
        payload = await self._get(f"/cards/{quote(str(card_id), safe='')}")
        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            cards = payload["data"]
            return cards[0] if cards and isinstance(cards[0], dict) else {}
        return payload if isinstance(payload, dict) else {}

    async def list_games(self) -> Any:
        return await self._get("/games")
