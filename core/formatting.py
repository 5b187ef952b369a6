# =============================================================================
# core/formatting.py  -  Compact, Agent-Facing Summaries
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reshapes backend records into the small dicts the tools return.  The
#   agent gets prices as "330g: 14.9EUR" strings and sizes as "500g" rather
#   than raw numeric fields it would have to stitch together itself.
#
#   Everything here is a pure function of its input.
# =============================================================================

from dataclasses import asdict
from typing import Any, Optional, Union

from core.models import CheckoutResponse, Coffee

Number = Union[int, float]


def format_amount(value: Number) -> str:
    """Render a number the way it appears in JSON: 12.0 -> "12", 12.5 -> "12.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_money(amount: Number, currency: str) -> str:
    return f"{format_amount(amount)} {currency}"


def format_coffee_summary(coffee: Coffee) -> dict[str, Any]:
    """One line item in a catalog listing."""
    prices = ", ".join(
        f"{format_amount(v.weight)}g: {format_amount(v.price)}{v.currency}"
        for v in coffee.variants
        if v.available
    )
    return {
        "id": coffee.id,
        "name": coffee.name,
        "type": coffee.coffee_type,
        "preparation": "/".join(coffee.preparation),
        "origin": coffee.origin,
        "region": coffee.region,
        "roast_level": coffee.roast_level,
        "flavor_notes": coffee.flavor_notes,
        "prices": prices,
    }


def format_coffee_detail(coffee: Coffee) -> dict[str, Any]:
    """Full record for a single coffee, variants in backend order."""
    return {
        "id": coffee.id,
        "name": coffee.name,
        "description": coffee.description,
        "type": coffee.coffee_type,
        "preparation": coffee.preparation,
        "origin": coffee.origin,
        "region": coffee.region,
        "altitude": coffee.altitude,
        "processing": coffee.processing,
        "flavor_notes": coffee.flavor_notes,
        "roast_level": coffee.roast_level,
        "farm": coffee.farm,
        "variety": coffee.variety,
        "harvest_period": coffee.harvest_period,
        "cupping_score": coffee.cupping_score,
        "acidity": coffee.acidity,
        "bitterness": coffee.bitterness,
        "body": coffee.body,
        "crema": coffee.crema,
        "story": coffee.story,
        "variants": [
            {
                "id": v.id,
                "size": v.size,
                "weight": f"{format_amount(v.weight)}g",
                "price": format_money(v.price, v.currency),
                "available": v.available,
            }
            for v in coffee.variants
        ],
    }


def format_checkout(
    checkout: CheckoutResponse,
    substitutions: Optional[list[dict[str, str]]] = None,
) -> dict[str, Any]:
    """Order confirmation with the payment link.

    If the backend applied a discount, the savings are spelled out and the
    message says so.  Size substitutions made while picking variants are
    listed so the agent can tell the user.
    """
    response: dict[str, Any] = {
        "success": True,
        "order": {
            "items": [asdict(item) for item in checkout.items],
            "subtotal": format_money(checkout.subtotal.amount, checkout.subtotal.currency),
            "total": format_money(checkout.total.amount, checkout.total.currency),
        },
        "checkout_url": checkout.checkout_url,
        "message": "Complete payment at the checkout URL",
    }

    if checkout.discount:
        response["discount"] = {
            "code": checkout.discount.code,
            "savings": f"{checkout.discount.amount:.2f} {checkout.total.currency}",
        }
        response["message"] = (
            f"Discount {checkout.discount.code} applied! Complete payment at the checkout URL"
        )

    if substitutions:
        response["size_substitutions"] = substitutions

    return response
