"""Tests for price normalization and card shaping."""

from __future__ import annotations

import pytest

from tcg_backend.pricing import normalize_price, select_price_source, shape_card, shape_card_price


def _pair(price):
    normalized = normalize_price(price)
    return normalized.amount, normalized.currency


@pytest.mark.parametrize("value", [0, 1, 2.5, 1234.56])
def test_numbers_pass_through(value):
    assert _pair(value) == (value, None)


@pytest.mark.parametrize("value,expected", [("0", 0), ("3.5", 3.5), (" 12 ", 12), ("1e2", 100)])
def test_numeric_strings_are_parsed(value, expected):
    assert _pair(value) == (expected, None)


@pytest.mark.parametrize("value", [None, {}, [], "abc", "nan", "inf", float("nan"), float("inf"), True, object()])
def test_unparseable_values_default_to_zero(value):
    assert _pair(value) == (0, None)


def test_object_with_amount_and_currency():
    assert _pair({"amount": 5, "currency": "USD"}) == (5, "USD")


def test_object_key_priority():
    assert _pair({"min": 1, "lowest": 2, "price": 3, "value": 4}) == (4, None)
    assert _pair({"min": 1, "lowest": 2}) == (2, None)
    assert _pair({"amount": None, "value": "7.25", "cur": "EUR"}) == (7.25, "EUR")


def test_empty_currency_becomes_none():
    assert _pair({"amount": 1, "currency": ""}) == (1, None)


def test_nested_prices_lowest_then_min_then_first():
    assert _pair({"prices": {"lowest": 3.5}}) == (3.5, None)
    assert _pair({"prices": {"min": "1.10"}, "currency": "USD"}) == (1.10, "USD")
    assert _pair({"prices": [4.2, 9.9]}) == (4.2, None)
    assert _pair({"prices": {"lowest": None, "min": 0.5}}) == (0.5, None)


def test_nested_prices_used_when_direct_amount_is_not_numeric():
    assert _pair({"amount": "n/a", "prices": {"lowest": 2}}) == (2, None)


def test_nested_prices_without_numbers_default():
    assert _pair({"prices": {"lowest": "free"}, "currency": "USD"}) == (0, None)
    assert _pair({"prices": []}) == (0, None)


def test_zero_price_and_missing_price_look_the_same():
    assert _pair(0) == _pair(None) == _pair("0") == (0, None)


def test_shape_card_prefers_variant_image():
    card = shape_card({"image": "card.png", "variants": [{"image": "v.png"}]})
    assert card.image == "v.png"


def test_shape_card_falls_back_to_card_image():
    card = shape_card({"image": "card.png", "variants": [{}]})
    assert card.image == "card.png"


def test_shape_card_without_images_or_variants():
    card = shape_card({"id": "c1", "name": "Pikachu", "set": "base1", "number": 58})
    assert card.image is None
    assert card.variant_id is None
    assert card.price == 0
    assert card.currency is None
    assert card.number == 58
    assert card.set_name == "base1"


def test_shape_card_full_record():
    raw = {
        "id": "pokemon-base1-pikachu",
        "name": "Pikachu",
        "set": "base1",
        "set_name": "Base Set",
        "number": "58/102",
        "image": "card.png",
        "price": 10,
        "variants": [
            {"id": "v-1", "image": "", "price": {"amount": "2.50", "currency": "USD"}},
            {"id": "v-2", "image": "second.png", "price": 99},
        ],
    }

    card = shape_card(raw)

    assert card.model_dump() == {
        "id": "pokemon-base1-pikachu",
        "name": "Pikachu",
        "set_name": "Base Set",
        "set": "base1",
        "number": "58/102",
        "image": "card.png",
        "price": 2.5,
        "currency": "USD",
        "variant_id": "v-1",
    }


def test_price_source_order():
    assert select_price_source({"price": 3, "prices": 4}, {"prices": 2}) == 2
    assert select_price_source({"price": 3, "prices": 4}, {}) == 3
    assert select_price_source({"prices": {"lowest": 1}}, {}) == {"lowest": 1}
    assert select_price_source({}, {}) is None


def test_shape_card_uses_card_prices_when_variant_has_none():
    card = shape_card({"prices": {"lowest": 1.25}, "variants": []})
    assert card.price == 1.25


def test_shape_card_price_hides_raw_unless_requested():
    raw = {"id": "c1", "variants": [{"id": "v1", "price": 4}]}

    plain = shape_card_price(raw)
    assert "raw" not in plain.model_dump(exclude_unset=True)
    assert plain.price == 4
    assert plain.variant_id == "v1"

    debug = shape_card_price(raw, show_raw=True)
    assert debug.raw == {"card": raw, "variant": {"id": "v1", "price": 4}}


def test_numeric_identifiers_keep_their_type():
    raw = {"id": 1234, "name": "Pikachu", "set": "base1", "number": 58, "variants": [{"id": 77, "price": 1}]}

    card = shape_card(raw)
    assert (card.id, card.number, card.variant_id) == (1234, 58, 77)
    assert card.model_dump(mode="json")["number"] == 58

    assert shape_card_price(raw).variant_id == 77
    assert shape_card({"id": "c1", "number": "058"}).number == "058"
