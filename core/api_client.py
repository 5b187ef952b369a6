# =============================================================================
# core/api_client.py  -  Doppio Backend HTTP Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps the four backend endpoints the tools need.  The backend expects a
#   JSON body even for reads, so every data call is a POST:
#
#     POST /api/coffees   filters          -> {"coffees": [...]}
#     POST /api/coffee    {"coffee_id"}    -> {"coffee": {...}}
#     POST /api/checkout  {"items","email"}-> checkout record
#     GET  /api/health                     -> {"status": ...}
#
#   Every request carries the static API key in the X-API-Key header.
#   Non-success responses become BackendError.  Nothing is cached and
#   nothing is retried.
# =============================================================================

import logging
from typing import Any, Optional

import httpx

from core.models import CheckoutLine, CheckoutResponse, Coffee

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The backend answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API Error: {status_code} - {message}")


class DoppioClient:
    """Stateless client for the Doppio catalog and checkout backend."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            api_url: Backend base URL.  A trailing slash is dropped.
            api_key: Value for the X-API-Key header.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests to stand in
                for the network.
        """
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "Content-Type": "application/json",
                "X-API-Key": self.api_key,
            },
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Any:
        async with self._client() as client:
            response = await client.request(method, endpoint, json=payload)

        if not response.is_success:
            raise BackendError(response.status_code, _error_message(response))
        return response.json()

    async def list_coffees(self, filters: Optional[dict[str, Any]] = None) -> list[Coffee]:
        """List coffees matching `filters`.

        Filters are sent verbatim; an empty or missing dict means no
        restriction.
        """
        result = await self._request("POST", "/api/coffees", filters or {})
        return [Coffee.from_api_response(item) for item in result["coffees"]]

    async def get_coffee(self, coffee_id: str) -> Coffee:
        """Fetch one coffee with its current variants."""
        result = await self._request("POST", "/api/coffee", {"coffee_id": coffee_id})
        return Coffee.from_api_response(result["coffee"])

    async def create_checkout(
        self,
        items: list[CheckoutLine],
        email: Optional[str] = None,
    ) -> CheckoutResponse:
        """Create a checkout session for the given variant lines."""
        payload: dict[str, Any] = {
            "items": [{"variant_id": line.variant_id, "quantity": line.quantity} for line in items],
        }
        if email:
            payload["email"] = email
        result = await self._request("POST", "/api/checkout", payload)
        return CheckoutResponse.from_api_response(result)

    async def health_check(self) -> bool:
        """Return True when the backend answers its health probe.

        Never raises: network errors, error statuses and unparseable bodies
        all read as unhealthy.
        """
        try:
            await self._request("GET", "/api/health")
            return True
        except Exception as exc:
            logger.warning("Backend health check failed: %s", exc)
            return False


def _error_message(response: httpx.Response) -> str:
    """Best-effort message from an error response, else the status text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase
