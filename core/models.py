# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every record that flows through the
# server: the user's saved defaults, the coffees and variants the backend
# returns, and the checkout session it creates.
#
# Backend records are built with `from_api_response()` so that the rest of
# the code never touches raw JSON dicts.  Optional descriptive fields are
# None when the backend sends null or leaves them out.
# =============================================================================

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Literal, Optional

Preparation = Literal["filter", "espresso", "omni"]
CoffeeType = Literal["robusta", "arabica", "blend", "decaf"]
Size = Literal["small", "medium", "large"]

DEFAULT_SIZE: Size = "small"


# -----------------------------------------------------------------------------
# Preferences: persisted locally, one record per installation
# -----------------------------------------------------------------------------
@dataclass
class ShippingAddress:
    """Where orders should be shipped.  All four fields travel together."""

    name: str
    street: str
    city: str
    zip: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShippingAddress":
        if not isinstance(data, dict):
            raise ValueError(f"shipping_address must be an object, got {type(data).__name__}")
        return cls(
            name=str(data["name"]),
            street=str(data["street"]),
            city=str(data["city"]),
            zip=str(data["zip"]),
        )


@dataclass
class UserPreferences:
    """Saved defaults applied when a tool call leaves a field out.

    A field set to None means "no default set", never an error.
    """

    preparation: Optional[Preparation] = None
    coffee_type: Optional[CoffeeType] = None
    default_size: Optional[Size] = None
    email: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferences":
        """Build from the on-disk JSON record.  Unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ValueError(f"preferences must be an object, got {type(data).__name__}")
        address = data.get("shipping_address")
        return cls(
            preparation=data.get("preparation"),
            coffee_type=data.get("coffee_type"),
            default_size=data.get("default_size"),
            email=data.get("email"),
            shipping_address=ShippingAddress.from_dict(address) if address is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with unset fields omitted."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    def merged_with(self, partial: "UserPreferences") -> "UserPreferences":
        """Shallow field-level merge: every field set on `partial` wins."""
        updates = {
            f.name: getattr(partial, f.name)
            for f in fields(partial)
            if getattr(partial, f.name) is not None
        }
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        return UserPreferences(**{**current, **updates})

    def is_empty(self) -> bool:
        return not self.to_dict()


# -----------------------------------------------------------------------------
# Catalog: read-only records sourced from the backend
# -----------------------------------------------------------------------------
@dataclass
class CoffeeVariant:
    """One purchasable package of a coffee."""

    id: str                            # Passed to checkout as variant_id
    size: str                          # "small" | "medium" | "large"
    weight: float                      # Grams
    price: float
    currency: str                      # ISO code, e.g. "EUR"
    available: bool

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "CoffeeVariant":
        return cls(
            id=str(data["id"]),
            size=data.get("size", ""),
            weight=data.get("weight", 0),
            price=data.get("price", 0),
            currency=data.get("currency", ""),
            available=bool(data.get("available", False)),
        )


@dataclass
class Coffee:
    """A coffee product with its tasting profile and package variants."""

    id: str
    name: str
    description: str = ""
    coffee_type: str = ""
    origin: str = ""
    preparation: list[str] = field(default_factory=list)
    flavor_notes: list[str] = field(default_factory=list)
    variants: list[CoffeeVariant] = field(default_factory=list)

    region: Optional[str] = None
    altitude: Optional[str] = None
    altitude_min: Optional[int] = None
    altitude_max: Optional[int] = None
    processing: Optional[str] = None
    roast_level: Optional[str] = None
    farm: Optional[str] = None
    variety: Optional[str] = None
    harvest_period: Optional[str] = None

    cupping_score: Optional[float] = None
    acidity: Optional[float] = None    # 1-5
    bitterness: Optional[float] = None  # 1-5
    body: Optional[str] = None
    crema: Optional[str] = None
    story: Optional[str] = None
    price_min: Optional[float] = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Coffee":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description") or "",
            coffee_type=data.get("coffee_type") or "",
            origin=data.get("origin") or "",
            preparation=list(data.get("preparation") or []),
            flavor_notes=list(data.get("flavor_notes") or []),
            variants=[CoffeeVariant.from_api_response(v) for v in data.get("variants") or []],
            region=data.get("region"),
            altitude=data.get("altitude"),
            altitude_min=data.get("altitude_min"),
            altitude_max=data.get("altitude_max"),
            processing=data.get("processing"),
            roast_level=data.get("roast_level"),
            farm=data.get("farm"),
            variety=data.get("variety"),
            harvest_period=data.get("harvest_period"),
            cupping_score=data.get("cupping_score"),
            acidity=data.get("acidity"),
            bitterness=data.get("bitterness"),
            body=data.get("body"),
            crema=data.get("crema"),
            story=data.get("story"),
            price_min=data.get("price_min"),
        )


# -----------------------------------------------------------------------------
# Checkout: the payment session created by the backend
# -----------------------------------------------------------------------------
@dataclass
class Money:
    amount: float
    currency: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Money":
        return cls(amount=data.get("amount", 0), currency=data.get("currency", ""))


@dataclass
class Discount:
    code: str
    amount: float


@dataclass
class CheckoutLineItem:
    title: str
    quantity: int
    price: float


@dataclass
class CheckoutLine:
    """One line submitted to the backend when creating a checkout."""

    variant_id: str
    quantity: int = 1


@dataclass
class CheckoutResponse:
    """A checkout session; the buyer completes payment at checkout_url."""

    checkout_id: str
    checkout_url: str
    subtotal: Money
    total: Money
    items: list[CheckoutLineItem] = field(default_factory=list)
    discount: Optional[Discount] = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "CheckoutResponse":
        discount = data.get("discount")
        return cls(
            checkout_id=str(data.get("checkout_id", "")),
            checkout_url=data.get("checkout_url", ""),
            subtotal=Money.from_api_response(data.get("subtotal") or {}),
            total=Money.from_api_response(data.get("total") or {}),
            items=[
                CheckoutLineItem(
                    title=item.get("title", ""),
                    quantity=item.get("quantity", 1),
                    price=item.get("price", 0),
                )
                for item in data.get("items") or []
            ],
            discount=Discount(code=discount["code"], amount=discount["amount"]) if discount else None,
        )
