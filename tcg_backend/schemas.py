from pydantic import BaseModel, Field
from typing import Any, Optional, List, Dict, Union

# Upstream ids and collector numbers arrive as strings or integers
Identifier = Optional[Union[str, int]]


class NormalizedPrice(BaseModel):
    amount: float = 0.0
    currency: Optional[str] = None


class OutwardCard(BaseModel):
    id: Identifier = None
    name: Optional[str] = None
    set_name: Identifier = None
    set: Identifier = None
    number: Identifier = None
    image: Optional[str] = None
    price: float = 0.0
    currency: Optional[str] = None
    variant_id: Identifier = None


class CardSearchResponse(BaseModel):
    data: List[OutwardCard] = Field(default_factory=list)


class CardPrice(BaseModel):
    price: float = 0.0
    currency: Optional[str] = None
    image: Optional[str] = None
    variant_id: Identifier = None
    # Only populated when SHOW_RAW is enabled
    raw: Optional[Dict[str, Any]] = None


class ImageQuery(BaseModel):
    """Lookup key sent to the image catalogs."""
    game: Optional[str] = None
    set: Optional[str] = None
    number: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_card(cls, card: Dict[str, Any], game: Optional[str] = None) -> "ImageQuery":
        def _text(value: Any) -> Optional[str]:
            if value is None:
                return None
            s = str(value).strip()
            return s or None

        return cls(
            game=_text(game or card.get("game")),
            set=_text(card.get("set")),
            number=_text(card.get("number")),
            name=_text(card.get("name")),
        )


class ImageResponse(BaseModel):
    image: Optional[str] = None


class HealthStatus(BaseModel):
    status: str
    message: str
