"""Tests for the agent-facing formatters."""

import json

from core.formatting import (
    format_amount,
    format_checkout,
    format_coffee_detail,
    format_coffee_summary,
)
from core.models import CheckoutResponse, Coffee

from tests.conftest import make_coffee, make_variant


def _coffee(variants):
    return Coffee.from_api_response(make_coffee("eth", "Ethiopia Yirgacheffe", variants))


def _checkout(**overrides):
    data = {
        "checkout_id": "chk_9",
        "checkout_url": "https://shop.example/c/9",
        "subtotal": {"amount": 30.0, "currency": "EUR"},
        "total": {"amount": 24.0, "currency": "EUR"},
        "discount": None,
        "items": [{"title": "Ethiopia Yirgacheffe", "quantity": 2, "price": 15}],
    }
    data.update(overrides)
    return CheckoutResponse.from_api_response(data)


def test_format_amount_drops_trailing_zero():
    assert format_amount(12.0) == "12"
    assert format_amount(12.5) == "12.5"
    assert format_amount(7) == "7"


def test_summary_lists_only_available_prices():
    coffee = _coffee([
        make_variant("v1", "small", weight=330, price=14.9),
        make_variant("v2", "medium", weight=500, price=19.0, available=False),
        make_variant("v3", "large", weight=1000, price=34.0),
    ])

    summary = format_coffee_summary(coffee)

    assert summary["prices"] == "330g: 14.9EUR, 1000g: 34EUR"
    assert summary["preparation"] == "filter/espresso"
    assert summary["type"] == "arabica"
    assert summary["flavor_notes"] == ["Jasmine", "Lemon", "Honey"]


def test_summary_with_nothing_available_has_empty_prices():
    coffee = _coffee([make_variant("v1", "small", available=False)])
    assert format_coffee_summary(coffee)["prices"] == ""


def test_detail_variants_survive_json_round_trip_in_order():
    coffee = _coffee([
        make_variant("v-l", "large", weight=1000, price=34, available=False),
        make_variant("v-s", "small", weight=220, price=11.5, available=True),
    ])

    detail = json.loads(json.dumps(format_coffee_detail(coffee)))

    assert detail["variants"] == [
        {"id": "v-l", "size": "large", "weight": "1000g", "price": "34 EUR", "available": False},
        {"id": "v-s", "size": "small", "weight": "220g", "price": "11.5 EUR", "available": True},
    ]
    assert detail["cupping_score"] == 87.5
    assert detail["bitterness"] == 2


def test_checkout_without_discount():
    response = format_checkout(_checkout())

    assert response["success"] is True
    assert response["order"]["subtotal"] == "30 EUR"
    assert response["order"]["total"] == "24 EUR"
    assert response["order"]["items"] == [{"title": "Ethiopia Yirgacheffe", "quantity": 2, "price": 15}]
    assert response["checkout_url"] == "https://shop.example/c/9"
    assert response["message"] == "Complete payment at the checkout URL"
    assert "discount" not in response
    assert "size_substitutions" not in response


def test_checkout_with_discount():
    response = format_checkout(_checkout(discount={"code": "MCP20", "amount": 6}))

    assert response["discount"] == {"code": "MCP20", "savings": "6.00 EUR"}
    assert "discount" in response["message"].lower()
    assert "MCP20" in response["message"]


def test_checkout_lists_size_substitutions():
    subs = [{"coffee_id": "eth", "requested_size": "medium", "selected_size": "small"}]

    response = format_checkout(_checkout(), subs)

    assert response["size_substitutions"] == subs


def test_fractional_weight_is_kept():
    coffee = _coffee([make_variant("v1", "small", weight=250.5, price=12)])

    assert coffee.variants[0].weight == 250.5
    assert format_coffee_summary(coffee)["prices"] == "250.5g: 12EUR"
    assert format_coffee_detail(coffee)["variants"][0]["weight"] == "250.5g"
