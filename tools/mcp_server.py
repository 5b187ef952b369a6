# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the MCP tools an agent can call to browse the Doppio catalog,
#   remember the user's defaults and place orders.  Each tool is a thin
#   wrapper: it reads saved preferences where needed, calls core/ and the
#   backend client, and returns the result as pretty-printed JSON text.
#
# THE TOOLS:
#   set_preferences    Save brew method, coffee type, size, email, address
#   get_preferences    Show what is saved and where
#   list_coffees       Catalog listing, saved preferences fill in filters
#   get_coffee_detail  Full profile of one coffee with every package
#   create_order       Resolve packages and create a checkout link
#
# ERROR CONTRACT:
#   A tool never raises.  Any failure (backend error, network error, or an
#   argument the schema rejects) comes back as {"error": "..."}.
#
# RUNNING THIS SERVER:
#   python main.py             (stdio transport)
#   python -m tools.mcp_server
# =============================================================================

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Annotated, Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError, ValidationError
from fastmcp.server.middleware import Middleware
from fastmcp.tools import ToolResult
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from core import config
from core.api_client import DoppioClient
from core.formatting import format_checkout, format_coffee_detail, format_coffee_summary
from core.models import CoffeeType, Preparation, Size, UserPreferences
from core.ordering import NoAvailableVariant, apply_preference_filters, resolve_default, resolve_order_items
from core.preferences import PreferenceStore
from tools.schemas import OrderItemInput, ShippingAddressInput

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP JSON-RPC stream, so every log line goes to STDERR.
#   - CYAN for incoming requests (tool name + parameters)
#   - GREEN for response JSON
#   - YELLOW for intermediate status/progress messages
#   - RED for errors returned to the caller
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict[str, Any]) -> str:
    """Log the tool response as compact JSON in GREEN, then return it pretty-printed."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'))}{_RESET}")
    return json.dumps(result, indent=2)


def _log_error(tool_name: str, exc: Exception, message: Optional[str] = None) -> str:
    """Log a failed tool call in RED and return the error payload."""
    message = message or str(exc) or "Unknown error"
    logging.error(f"{_RED}  ✗ {tool_name} failed: {type(exc).__name__}: {message}{_RESET}")
    return json.dumps({"error": message}, indent=2)


# =============================================================================
# Argument validation
# =============================================================================
# FastMCP checks arguments against each tool's schema before the tool body
# runs, so a bad enum or a missing coffee_id never reaches the try/except
# inside the tool.  This middleware catches those rejections and answers
# with the same {"error": "..."} payload every tool returns.
# =============================================================================
def _validation_message(exc: Exception) -> str:
    cause = exc if isinstance(exc, PydanticValidationError) else exc.__cause__
    if not isinstance(cause, PydanticValidationError):
        return str(exc)
    problems = []
    for err in cause.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "Invalid arguments: " + "; ".join(problems)


class ErrorPayloadMiddleware(Middleware):
    async def on_call_tool(self, context, call_next):
        try:
            return await call_next(context)
        except (ValidationError, ToolError, PydanticValidationError) as exc:
            payload = _log_error(context.message.name, exc, _validation_message(exc))
            return ToolResult(content=payload)


# =============================================================================
# Server, backend client and preference store
# =============================================================================
# Module-level so every tool shares them.  The client holds no state between
# calls; the store owns the preferences file and its in-memory fallback.
# =============================================================================
SERVER_INSTRUCTIONS = """DOPPIO Coffee - MCP server for ordering freshly roasted coffee from DOPPIO roastery based in Zilina, Slovakia.

We offer freshly roasted specialty coffee crafted with passion and expertise.

Package sizes:
- small: 220g (330g for filter coffee - default)
- medium: 500g
- large: 1kg (1000g)

For any questions or issues, please contact us:
DOPPIO Coffee - www.kavadoppio.sk"""

mcp = FastMCP("doppio-coffee-mcp", instructions=SERVER_INSTRUCTIONS)
mcp.add_middleware(ErrorPayloadMiddleware())

api = DoppioClient(config.API_URL, config.API_KEY, timeout=config.HTTP_TIMEOUT)
preferences = PreferenceStore()

OneToFive = Annotated[Optional[float], Field(ge=1, le=5)]


# =============================================================================
# PREFERENCES
# =============================================================================
@mcp.tool()
async def set_preferences(
    preparation: Annotated[
        Optional[Preparation],
        Field(description="Brewing method: filter, espresso machine, or omni (both)"),
    ] = None,
    coffee_type: Annotated[Optional[CoffeeType], Field(description="Preferred coffee type")] = None,
    default_size: Annotated[
        Optional[Size],
        Field(description="Default size: small (220g/330g), medium (500g), large (1kg)"),
    ] = None,
    email: Annotated[Optional[str], Field(description="Email for orders")] = None,
    shipping_address: Annotated[
        Optional[ShippingAddressInput],
        Field(description="Shipping address for orders"),
    ] = None,
) -> str:
    """Sets user's default coffee preferences. Use when user mentions:
- Brewing method preference (filter, espresso machine, or both)
- Preferred coffee type (robusta, arabica, blend, decaf)
- Default package size (small, medium or large)
- Wants to save email or shipping address for orders
Examples: "I use a filter", "I prefer arabica", "Always order 1kg bags"

Only the fields you pass are changed; everything else stays as saved.
"""
    _log_request("set_preferences", preparation=preparation, coffee_type=coffee_type,
                 default_size=default_size, email=email, shipping_address=shipping_address)
    try:
        partial = UserPreferences(
            preparation=preparation,
            coffee_type=coffee_type,
            default_size=default_size,
            email=email,
            shipping_address=shipping_address.to_address() if shipping_address else None,
        )
        updated = await asyncio.to_thread(preferences.save, partial)
        return _log_response("set_preferences", {
            "success": True,
            "preferences": updated.to_dict(),
            "saved_to": str(preferences.path),
        })
    except Exception as exc:
        return _log_error("set_preferences", exc)


@mcp.tool()
async def get_preferences() -> str:
    """Returns user's saved coffee preferences. Use when:
- User asks about their settings
- You need to apply preferences to filter coffees
- Before creating an order to get saved email/address
"""
    _log_request("get_preferences")
    try:
        prefs = await asyncio.to_thread(preferences.get)
        return _log_response("get_preferences", {
            "preferences": prefs.to_dict(),
            "file_path": str(preferences.path),
        })
    except Exception as exc:
        return _log_error("get_preferences", exc)


# =============================================================================
# CATALOG
# =============================================================================
@mcp.tool()
async def list_coffees(
    preparation: Annotated[Optional[Preparation], Field(description="Filter by brewing method")] = None,
    coffee_type: Annotated[Optional[CoffeeType], Field(description="Filter by coffee type")] = None,
    size: Annotated[
        Optional[Size],
        Field(description="Filter by package size: small (220g/330g), medium (500g), large (1kg)"),
    ] = None,
    origin: Annotated[
        Optional[str],
        Field(description="Filter by country of origin (e.g., 'Brazil', 'Ethiopia', 'Rwanda')"),
    ] = None,
    roast_level: Annotated[
        Optional[str],
        Field(description="Filter by roast level (e.g., 'Light', 'Medium', 'Dark')"),
    ] = None,
    price_max: Annotated[
        Optional[float],
        Field(description="Maximum price in EUR (filters by cheapest variant)"),
    ] = None,
    flavor: Annotated[
        Optional[str],
        Field(description="Filter by flavor notes (e.g., 'chocolate', 'fruit', 'nuts')"),
    ] = None,
    altitude_min: Annotated[
        Optional[float],
        Field(description="Minimum altitude in meters (higher altitude = more complex flavors)"),
    ] = None,
    acidity_min: Annotated[
        OneToFive, Field(description="Minimum acidity level (1-5, higher = more acidic/bright)")
    ] = None,
    acidity_max: Annotated[
        OneToFive, Field(description="Maximum acidity level (1-5, higher = more acidic/bright)")
    ] = None,
    bitterness_min: Annotated[
        OneToFive, Field(description="Minimum bitterness level (1-5, higher = more bitter/intense)")
    ] = None,
    bitterness_max: Annotated[
        OneToFive, Field(description="Maximum bitterness level (1-5, higher = more bitter/intense)")
    ] = None,
) -> str:
    """Lists available coffee products with optional filtering.
Use when user:
- Asks about coffee, menu, prices, or what's available
- Says they're running out of coffee or need to order
- Wants recommendations
- Asks "what do you have?"

If neither preparation nor coffee_type is given, applies user's saved
preferences for them automatically.
"""
    requested = {
        "preparation": preparation,
        "coffee_type": coffee_type,
        "size": size,
        "origin": origin,
        "roast_level": roast_level,
        "price_max": price_max,
        "flavor": flavor,
        "altitude_min": altitude_min,
        "acidity_min": acidity_min,
        "acidity_max": acidity_max,
        "bitterness_min": bitterness_min,
        "bitterness_max": bitterness_max,
    }
    _log_request("list_coffees", **requested)
    try:
        prefs = await asyncio.to_thread(preferences.get)
        filters = apply_preference_filters(
            {name: value for name, value in requested.items() if value is not None},
            prefs,
        )
        _log_status(f"Querying catalog with filters: {filters}")

        coffees = await api.list_coffees(filters)
        _log_status(f"Backend returned {len(coffees)} coffees")

        return _log_response("list_coffees", {
            "count": len(coffees),
            "filters_applied": filters,
            "coffees": [format_coffee_summary(c) for c in coffees],
        })
    except Exception as exc:
        return _log_error("list_coffees", exc)


@mcp.tool()
async def get_coffee_detail(
    coffee_id: Annotated[str, Field(description="The coffee ID from the catalog")],
) -> str:
    """Gets detailed information about a specific coffee.
Use when user wants to know more about a particular coffee:
- Flavor profile, origin, processing method
- Available sizes and prices
- Whether it's suitable for their brewing method
"""
    _log_request("get_coffee_detail", coffee_id=coffee_id)
    try:
        coffee = await api.get_coffee(coffee_id)
        return _log_response("get_coffee_detail", format_coffee_detail(coffee))
    except Exception as exc:
        return _log_error("get_coffee_detail", exc)


# =============================================================================
# ORDER
# =============================================================================
# Items are resolved strictly in the order given.  The first coffee with no
# package in stock aborts the whole order before any checkout is created.
# =============================================================================
@mcp.tool()
async def create_order(
    items: Annotated[
        list[OrderItemInput],
        Field(min_length=1, description="List of coffees to order"),
    ],
    email: Annotated[
        Optional[str],
        Field(description="Email for order (uses saved preference if not provided)"),
    ] = None,
) -> str:
    """Creates an order with one or more coffees and returns checkout URL.
Use when user wants to buy/order/purchase coffee.
Accepts array of items for multi-product orders.
Returns a payment URL where user completes the purchase.

If a requested size is sold out, another available size of the same coffee
is used and reported under size_substitutions.

Examples: "order 2x Ethiopia", "buy one of each", "I'll take the Brazil"
"""
    _log_request("create_order", items=items, email=email)
    try:
        prefs = await asyncio.to_thread(preferences.get)
        order_email = resolve_default(email, prefs.email)

        try:
            resolution = await resolve_order_items(
                [item.to_request_item() for item in items],
                api.get_coffee,
                prefs,
            )
        except NoAvailableVariant as exc:
            _log_status(f"Order aborted: {exc}")
            return _log_response("create_order", {"error": str(exc)})

        _log_status(f"Resolved {len(resolution.lines)} lines, creating checkout")
        checkout = await api.create_checkout(resolution.lines, order_email)

        return _log_response("create_order", format_checkout(
            checkout,
            [asdict(s) for s in resolution.substitutions],
        ))
    except Exception as exc:
        return _log_error("create_order", exc)


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run(show_banner=False)
