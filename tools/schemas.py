# =============================================================================
# tools/schemas.py  -  Nested Tool Argument Shapes
# =============================================================================
#
# FastMCP builds each tool's JSON input schema from its type hints.  Flat
# arguments are declared inline on the tool functions; the nested objects
# (an order line, a shipping address) are declared here as pydantic models
# so their fields, enums and ranges show up in the schema the agent sees.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, Field

from core.models import ShippingAddress, Size
from core.ordering import OrderRequestItem


class ShippingAddressInput(BaseModel):
    """Shipping address for orders."""

    name: str = Field(description="Recipient name")
    street: str = Field(description="Street and house number")
    city: str
    zip: str = Field(description="Postal code")

    def to_address(self) -> ShippingAddress:
        return ShippingAddress(name=self.name, street=self.street, city=self.city, zip=self.zip)


class OrderItemInput(BaseModel):
    """One coffee in an order."""

    coffee_id: str = Field(description="Coffee ID from catalog")
    quantity: int = Field(default=1, ge=1, description="Number of bags (default: 1)")
    size: Optional[Size] = Field(
        default=None,
        description="Package size: small (220g/330g), medium (500g), large (1kg)",
    )

    def to_request_item(self) -> OrderRequestItem:
        return OrderRequestItem(coffee_id=self.coffee_id, quantity=self.quantity, size=self.size)
