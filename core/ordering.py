# =============================================================================
# core/ordering.py  -  Defaults, Catalog Filters & Variant Selection
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Holds the decisions the tools make before and after talking to the
#   backend:
#     - which value wins when an argument, a saved preference and a
#       hard-coded default all apply (resolve_default)
#     - which saved preferences are folded into a catalog query
#       (apply_preference_filters)
#     - which package of a coffee an order line turns into
#       (select_variant, resolve_order_items)
#
#   Nothing here imports FastMCP or httpx.  Order resolution takes the
#   coffee lookup as a callable so it can run against a fake in tests.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from core.models import DEFAULT_SIZE, CheckoutLine, Coffee, CoffeeVariant, UserPreferences

T = TypeVar("T")

# Catalog filters that saved preferences can fill in.
PREFERENCE_FILTERS = ("preparation", "coffee_type")


class NoAvailableVariant(Exception):
    """A coffee in the order has no package that can be bought right now."""

    def __init__(self, coffee: Coffee) -> None:
        self.coffee = coffee
        super().__init__(f"No available variant for {coffee.name}")


@dataclass
class OrderRequestItem:
    """One line of an order as the caller asked for it."""

    coffee_id: str
    quantity: int = 1
    size: Optional[str] = None


@dataclass
class SizeSubstitution:
    coffee_id: str
    requested_size: str
    selected_size: str


@dataclass
class OrderResolution:
    lines: list[CheckoutLine] = field(default_factory=list)
    substitutions: list[SizeSubstitution] = field(default_factory=list)


def resolve_default(explicit: Optional[T], saved: Optional[T], fallback: Optional[T] = None) -> Optional[T]:
    """Pick explicit argument, else saved preference, else fallback.

    Empty strings count as "not given", matching how tool arguments arrive.
    """
    for candidate in (explicit, saved):
        if candidate is not None and candidate != "":
            return candidate
    return fallback


def apply_preference_filters(filters: dict[str, Any], prefs: UserPreferences) -> dict[str, Any]:
    """Fold saved preparation/coffee_type into a catalog query.

    Saved values are only used when the caller gave neither filter; an
    explicit preparation or coffee_type leaves the query untouched.
    """
    applied = dict(filters)
    if any(applied.get(name) for name in PREFERENCE_FILTERS):
        return applied
    for name in PREFERENCE_FILTERS:
        saved = getattr(prefs, name)
        if saved:
            applied[name] = saved
    return applied


def select_variant(variants: Iterable[CoffeeVariant], size: str) -> Optional[CoffeeVariant]:
    """First available variant of `size`, else first available of any size."""
    available = [v for v in variants if v.available]
    for variant in available:
        if variant.size == size:
            return variant
    return available[0] if available else None


async def resolve_order_items(
    items: list[OrderRequestItem],
    fetch_coffee: Callable[[str], Awaitable[Coffee]],
    prefs: UserPreferences,
) -> OrderResolution:
    """Turn requested coffees into checkout lines, in input order.

    Raises:
        NoAvailableVariant: on the first coffee that has nothing in stock.
            Lines resolved before it are discarded.
    """
    resolution = OrderResolution()

    for item in items:
        coffee = await fetch_coffee(item.coffee_id)
        size = resolve_default(item.size, prefs.default_size, DEFAULT_SIZE)

        variant = select_variant(coffee.variants, size)
        if variant is None:
            raise NoAvailableVariant(coffee)

        if variant.size != size:
            resolution.substitutions.append(SizeSubstitution(
                coffee_id=coffee.id,
                requested_size=size,
                selected_size=variant.size,
            ))
        resolution.lines.append(CheckoutLine(
            variant_id=variant.id,
            quantity=item.quantity or 1,
        ))

    return resolution
