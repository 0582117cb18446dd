"""
Card endpoints proxied to JustTCG.

- search and single-card price, both reshaped into the outward card format
- the games list, passed through untouched
- image lookup against the public card catalogs
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from .images import ImageResolver
from .justtcg import JustTCGClient, upstream_error_message
from .pricing import shape_card, shape_card_price
from .schemas import CardPrice, CardSearchResponse, ImageQuery, ImageResponse, OutwardCard
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["cards"])


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield client


def get_justtcg_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> JustTCGClient:
    # Raises ConfigurationError (-> 500) before any parameter checks run
    return JustTCGClient(http, settings)


def get_image_resolver(
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ImageResolver:
    return ImageResolver.from_settings(http, settings)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def fill_missing_images(
    resolver: ImageResolver,
    cards: List[OutwardCard],
    raw_cards: List[Dict[str, Any]],
    game: Optional[str] = None,
) -> None:
    for card, raw in zip(cards, raw_cards):
        if card.image:
            continue
        card.image = await resolver.resolve(ImageQuery.from_card(raw, game))


@router.get("/cards/search", response_model=CardSearchResponse)
async def search_cards(
    game: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    limit: int = Query(20, ge=1),
    client: JustTCGClient = Depends(get_justtcg_client),
    resolver: ImageResolver = Depends(get_image_resolver),
    settings: Settings = Depends(get_settings),
):
    if not game or not q:
        return _error("Missing game or q", 400)

    try:
        raw_cards = await client.search_cards(game, q, limit)
    except httpx.HTTPStatusError as e:
        return _error(upstream_error_message(e.response, "JustTCG API error"), e.response.status_code)
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Search error: %s", e, exc_info=True)
        return _error("Internal server error", 500)

    cards = [shape_card(c) for c in raw_cards]
    if settings.image_fallback_enabled:
        await fill_missing_images(resolver, cards, raw_cards, game)
    return CardSearchResponse(data=cards)


@router.get("/cards/price", response_model=CardPrice, response_model_exclude_unset=True)
async def card_price(
    id: Optional[str] = Query(None),
    client: JustTCGClient = Depends(get_justtcg_client),
    resolver: ImageResolver = Depends(get_image_resolver),
    settings: Settings = Depends(get_settings),
):
    if not id:
        return _error("Missing id", 400)

    try:
        card = await client.get_card(id)
    except httpx.HTTPStatusError as e:
        return _error(upstream_error_message(e.response, "Card not found"), e.response.status_code)
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Price error: %s", e, exc_info=True)
        return _error("Failed to fetch price", 500)

    if not card:
        return _error("Card not found", 404)

    result = shape_card_price(card, show_raw=settings.show_raw)
    if not result.image and settings.image_fallback_enabled:
        result.image = await resolver.resolve(ImageQuery.from_card(card))
    return result


@router.get("/games")
async def list_games(client: JustTCGClient = Depends(get_justtcg_client)):
    try:
        payload = await client.list_games()
    except httpx.HTTPStatusError as e:
        return _error(upstream_error_message(e.response, "Failed to fetch games"), e.response.status_code)
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Games error: %s", e, exc_info=True)
        return _error("Failed to fetch games", 500)
    return JSONResponse(payload)


@router.get("/cards/image", response_model=ImageResponse)
async def card_image(
    name: Optional[str] = Query(None),
    set: Optional[str] = Query(None),
    number: Optional[str] = Query(None),
    game: Optional[str] = Query(None),
    resolver: ImageResolver = Depends(get_image_resolver),
):
    """Look a card image up directly in the public catalogs (no JustTCG key needed)."""
    query = ImageQuery.from_card({"name": name, "set": set, "number": number}, game)
    if not query.name and not (query.set and query.number):
        return _error("Missing name or set and number", 400)
    return ImageResponse(image=await resolver.resolve(query))
