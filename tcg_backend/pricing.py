from __future__ import annotations

import math
from typing import Any, Dict, Optional, Sequence, Union

from .schemas import CardPrice, NormalizedPrice, OutwardCard

_AMOUNT_KEYS: tuple[str, ...] = ("amount", "value", "price", "lowest", "min")
_CURRENCY_KEYS: tuple[str, ...] = ("currency", "cur")


def _first_present(data: Dict[str, Any], keys: Sequence[Any]) -> Any:
    for k in keys:
        if data.get(k) is not None:
            return data.get(k)
    return None


def _to_number(value: Any) -> Optional[float]:
    """Return a finite float for numbers and numeric strings, otherwise None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        try:
            num = float(value.strip() or 0)
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def _nested_price(prices: Any) -> Any:
    if isinstance(prices, dict):
        return _first_present(prices, ("lowest", "min", 0, "0"))
    if isinstance(prices, (list, tuple)):
        return prices[0] if prices else None
    return None


def normalize_price(price: Any) -> NormalizedPrice:
    """Collapse the price shapes seen in upstream payloads into ``{amount, currency}``.

    Accepts plain numbers, numeric strings and objects carrying the amount under
    one of several keys (or inside a nested ``prices`` collection). Unparseable
    input yields ``amount=0`` so "no price" and "free" look the same.
    """
    if isinstance(price, dict):
        raw_currency = _first_present(price, _CURRENCY_KEYS)
        currency = str(raw_currency) if raw_currency else None

        amount = _to_number(_first_present(price, _AMOUNT_KEYS))
        if amount is not None:
            return NormalizedPrice(amount=amount, currency=currency)

        if price.get("prices"):
            nested = _to_number(_nested_price(price["prices"]))
            if nested is not None:
                return NormalizedPrice(amount=nested, currency=currency)
        return NormalizedPrice()

    amount = _to_number(price)
    if amount is not None:
        return NormalizedPrice(amount=amount)
    return NormalizedPrice()


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _identifier(value: Any) -> Optional[Union[str, int]]:
    # JustTCG sends some ids and numbers as integers; keep them as sent
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return str(value)


def select_variant(card: Dict[str, Any]) -> Dict[str, Any]:
    variants = card.get("variants") or []
    if isinstance(variants, list) and variants and isinstance(variants[0], dict):
        return variants[0]
    return {}


def select_image(card: Dict[str, Any], variant: Dict[str, Any]) -> Optional[str]:
    # Variant artwork is SKU specific, so it wins over the generic card image
    return variant.get("image") or card.get("image") or None


def select_price_source(card: Dict[str, Any], variant: Dict[str, Any]) -> Any:
    for source, key in ((variant, "price"), (variant, "prices"), (card, "price"), (card, "prices")):
        if source.get(key) is not None:
            return source[key]
    return None


def shape_card(card: Dict[str, Any]) -> OutwardCard:
    """Build the outward card record from a raw JustTCG card."""
    variant = select_variant(card)
    price_info = normalize_price(select_price_source(card, variant))
    return OutwardCard(
        id=_identifier(card.get("id")),
        name=_text(card.get("name")),
        set_name=_identifier(card.get("set_name") or card.get("set")),
        set=_identifier(card.get("set")),
        number=_identifier(card.get("number")),
        image=select_image(card, variant),
        price=price_info.amount,
        currency=price_info.currency,
        variant_id=_identifier(variant.get("id")),
    )


def shape_card_price(card: Dict[str, Any], show_raw: bool = False) -> CardPrice:
    variant = select_variant(card)
    price_info = normalize_price(select_price_source(card, variant))
    fields: Dict[str, Any] = {
        "price": price_info.amount,
        "currency": price_info.currency,
        "image": select_image(card, variant),
        "variant_id": _identifier(variant.get("id")),
    }
    # Left unset otherwise so the field is dropped from the response
    if show_raw:
        fields["raw"] = {"card": card, "variant": variant}
    return CardPrice(**fields)
