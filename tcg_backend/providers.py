from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .schemas import ImageQuery
from .settings import Settings


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _url(*candidates: Any) -> Optional[str]:
    for value in candidates:
        if isinstance(value, str) and value:
            return value
    return None


class ImageProvider:
    """An external card catalog that can be asked for a card image.

    Lookup methods return ``None`` when the query cannot be built or the
    catalog has no match, and raise ``httpx.HTTPError``/``ValueError`` when the
    request itself fails. Callers decide how failures are handled.
    """

    name = "provider"

    def __init__(self, http: httpx.AsyncClient, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    def headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        r = await self.http.get(f"{self.base_url}{path}", params=params, headers=self.headers())
        r.raise_for_status()
        return r.json()


class PokemonTCGImageProvider(ImageProvider):
    """pokemontcg.io v2; the API key is optional and only raises rate limits."""

    name = "pokemontcg"

    def __init__(self, http: httpx.AsyncClient, base_url: str, api_key: Optional[str] = None):
        super().__init__(http, base_url)
        self.api_key = api_key

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "PokemonTCGImageProvider":
        return cls(http, settings.pokemontcg_base_url, settings.pokemontcg_io_api_key)

    def headers(self) -> Dict[str, str]:
        headers = super().headers()
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    @staticmethod
    def _pick_image(payload: Any) -> Optional[str]:
        cards = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(cards, list) or not cards or not isinstance(cards[0], dict):
            return None
        images = _mapping(cards[0].get("images"))
        return _url(images.get("large"), images.get("small"))

    async def by_set_number(self, query: ImageQuery) -> Optional[str]:
        if not (query.set and query.number):
            return None
        # pokemontcg.io set ids rarely match upstream set codes, but it's worth a try
        q = f"set.id:{query.set} number:{query.number}"
        payload = await self._get_json("/cards", {"q": q, "pageSize": 1})
        return self._pick_image(payload)

    async def by_name(self, query: ImageQuery) -> Optional[str]:
        if not query.name:
            return None
        escaped = query.name.replace('"', '\\"')
        payload = await self._get_json("/cards", {"q": f'name:"{escaped}"', "pageSize": 1})
        return self._pick_image(payload)


class ScryfallImageProvider(ImageProvider):
    name = "scryfall"

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "ScryfallImageProvider":
        return cls(http, settings.scryfall_base_url)

    def headers(self) -> Dict[str, str]:
        headers = super().headers()
        # Scryfall rejects requests without a descriptive User-Agent
        headers["User-Agent"] = "tcg-backend/0.1"
        return headers

    @staticmethod
    def _face_image(card: Dict[str, Any]) -> Optional[str]:
        faces = card.get("card_faces")
        if isinstance(faces, list) and faces and isinstance(faces[0], dict):
            return _url(_mapping(faces[0].get("image_uris")).get("normal"))
        return None

    async def by_exact_name(self, query: ImageQuery) -> Optional[str]:
        if not query.name:
            return None
        card = await self._get_json("/cards/named", {"exact": query.name})
        if not isinstance(card, dict):
            return None
        uris = _mapping(card.get("image_uris"))
        return _url(uris.get("normal"), uris.get("large"), self._face_image(card))

    async def by_set_number(self, query: ImageQuery) -> Optional[str]:
        if not (query.set and query.number):
            return None
        parts = [query.name, f"set:{query.set}", f"number:{query.number}"]
        q = " ".join(p for p in parts if p)
        payload = await self._get_json("/cards/search", {"q": q})
        cards = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(cards, list) or not cards or not isinstance(cards[0], dict):
            return None
        first = cards[0]
        return _url(_mapping(first.get("image_uris")).get("normal"), self._face_image(first))
