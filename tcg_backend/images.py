"""Fill in missing card images from the public card catalogs."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Tuple

import httpx

from .providers import ImageProvider, PokemonTCGImageProvider, ScryfallImageProvider
from .schemas import ImageQuery
from .settings import Settings

logger = logging.getLogger(__name__)

Strategy = Callable[[ImageQuery], Awaitable[Optional[str]]]
Attempt = Tuple[ImageProvider, Strategy]

POKEMON_HINTS: tuple[str, ...] = ("pokemon", "pokémon")
MAGIC_HINTS: tuple[str, ...] = ("magic", "mtg")


def _contains(value: Optional[str], needles: tuple[str, ...]) -> bool:
    text = (value or "").lower()
    return any(n in text for n in needles)


def is_pokemon(query: ImageQuery) -> bool:
    return _contains(query.game, POKEMON_HINTS) or _contains(query.set, POKEMON_HINTS)


def is_magic(query: ImageQuery) -> bool:
    return _contains(query.game, MAGIC_HINTS) or _contains(query.set, ("mtg",))


class ImageResolver:
    """Try each catalog lookup in a fixed order and return the first image URL.

    Pokémon-looking queries go to pokemontcg.io first and Magic-looking ones to
    Scryfall first; after that both catalogs are always tried, so unknown games
    still get a chance. A lookup that errors counts as "no result".
    """

    def __init__(self, pokemon: PokemonTCGImageProvider, scryfall: ScryfallImageProvider):
        self.pokemon = pokemon
        self.scryfall = scryfall

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "ImageResolver":
        return cls(
            PokemonTCGImageProvider.from_settings(http, settings),
            ScryfallImageProvider.from_settings(http, settings),
        )

    def plan(self, query: ImageQuery) -> List[Attempt]:
        pokemon_attempts: List[Attempt] = [
            (self.pokemon, self.pokemon.by_set_number),
            (self.pokemon, self.pokemon.by_name),
        ]
        scryfall_attempts: List[Attempt] = [
            (self.scryfall, self.scryfall.by_exact_name),
            (self.scryfall, self.scryfall.by_set_number),
        ]

        ordered: List[Attempt] = []
        if is_pokemon(query):
            ordered += pokemon_attempts
        if is_magic(query):
            ordered += scryfall_attempts
        ordered += pokemon_attempts + scryfall_attempts

        # Hinted attempts are already in front; don't repeat them
        plan: List[Attempt] = []
        for attempt in ordered:
            if attempt not in plan:
                plan.append(attempt)
        return plan

    async def _attempt(self, provider: ImageProvider, lookup: Strategy, query: ImageQuery) -> Optional[str]:
        strategy = lookup.__name__
        try:
            image = await lookup(query)
        except httpx.HTTPStatusError as e:
            logger.debug(
                "%s.%s returned %s for %r", provider.name, strategy, e.response.status_code, query.name
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("%s.%s failed for %r: %s", provider.name, strategy, query.name, e)
        except (AttributeError, TypeError) as e:
            # 200 response with an unexpected shape
            logger.warning("%s.%s returned malformed data for %r: %s", provider.name, strategy, query.name, e)
        else:
            if isinstance(image, str) and image:
                return image
        return None

    async def resolve(self, query: ImageQuery) -> Optional[str]:
        for provider, lookup in self.plan(query):
            image = await self._attempt(provider, lookup, query)
            if image:
                logger.debug(
                    "Resolved image for %r via %s.%s", query.name, provider.name, lookup.__name__
                )
                return image
        return None
