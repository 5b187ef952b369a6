"""Shared fixtures: sample backend records and a fake backend."""

import json
from typing import Any, Callable

import httpx
import pytest

from core.api_client import DoppioClient
from core.preferences import PreferenceStore


def make_variant(variant_id: str, size: str, available: bool = True, weight: float = 250,
                 price: float = 12.5, currency: str = "EUR") -> dict[str, Any]:
    return {
        "id": variant_id,
        "size": size,
        "weight": weight,
        "price": price,
        "currency": currency,
        "available": available,
    }


def make_coffee(coffee_id: str, name: str, variants: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    coffee = {
        "id": coffee_id,
        "name": name,
        "description": f"{name} from our roastery",
        "preparation": ["filter", "espresso"],
        "coffee_type": "arabica",
        "origin": "Ethiopia",
        "region": "Yirgacheffe",
        "altitude": "1900-2100 m",
        "altitude_min": 1900,
        "altitude_max": 2100,
        "processing": "Washed",
        "flavor_notes": ["Jasmine", "Lemon", "Honey"],
        "roast_level": "Light",
        "farm": None,
        "variety": "Heirloom",
        "harvest_period": "2024",
        "cupping_score": 87.5,
        "acidity": 4,
        "bitterness": 2,
        "body": "Light",
        "crema": None,
        "story": None,
        "price_min": 12.5,
        "variants": variants,
    }
    coffee.update(extra)
    return coffee


class FakeBackend:
    """Routes requests by path and records every request it receives."""

    def __init__(self) -> None:
        self.coffees: dict[str, dict[str, Any]] = {}
        self.checkout_response: dict[str, Any] = {
            "checkout_id": "chk_1",
            "checkout_url": "https://shop.example/checkout/chk_1",
            "subtotal": {"amount": 25, "currency": "EUR"},
            "total": {"amount": 25, "currency": "EUR"},
            "discount": None,
            "items": [{"title": "Ethiopia Yirgacheffe", "quantity": 2, "price": 12.5}],
        }
        self.requests: list[httpx.Request] = []

    def add(self, coffee: dict[str, Any]) -> None:
        self.coffees[coffee["id"]] = coffee

    def bodies(self, path: str) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/coffees":
            return httpx.Response(200, json={"coffees": list(self.coffees.values())})
        if path == "/api/coffee":
            coffee_id = json.loads(request.content)["coffee_id"]
            if coffee_id not in self.coffees:
                return httpx.Response(404, json={"error": "Coffee not found"})
            return httpx.Response(200, json={"coffee": self.coffees[coffee_id]})
        if path == "/api/checkout":
            return httpx.Response(200, json=self.checkout_response)
        if path == "/api/health":
            return httpx.Response(200, json={"status": "ok"})
        return httpx.Response(404, json={"error": "Not found"})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client_for() -> Callable[[Callable[[httpx.Request], httpx.Response]], DoppioClient]:
    """Build a DoppioClient whose requests go to `handler` instead of the network."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> DoppioClient:
        return DoppioClient(
            "https://backend.test/",
            "test-key",
            transport=httpx.MockTransport(handler),
        )

    return _build


@pytest.fixture
def api(backend: FakeBackend, client_for) -> DoppioClient:
    return client_for(backend.handler)


@pytest.fixture
def store(tmp_path) -> PreferenceStore:
    return PreferenceStore(tmp_path / "doppio" / "preferences.json")
