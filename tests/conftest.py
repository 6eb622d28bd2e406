"""Pytest configuration for the collection proxy tests."""

import json
from typing import Any, Callable, Dict, List, Optional

import azure.functions as func
import httpx
import pytest

from collection_proxy import CollectionProducts
from collection_proxy.shared import collection_fetcher
from collection_proxy.shared.config import Settings

GRAPHQL_ENDPOINT = "https://test-store.myshopify.com/api/2024-04/graphql.json"
API_TOKEN = "storefront-test-token"


class FakeStorefront:
    """Stands in for the storefront GraphQL API through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"data": {"collection": None}}
        )

    def reply_json(self, payload: Any, status_code: int = 200) -> None:
        self._respond = lambda request: httpx.Response(status_code, json=payload)

    def reply_raw(self, content: bytes, status_code: int = 200) -> None:
        self._respond = lambda request: httpx.Response(status_code, content=content)

    def fail_with(self, exc_type: type, message: str = "upstream unreachable") -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)

        self._respond = _raise

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


def make_collection_payload(product_count: int = 2) -> Dict[str, Any]:
    return {
        "data": {
            "collection": {
                "id": "gid://shopify/Collection/123",
                "handle": "summer-denim",
                "title": "Summer Denim",
                "description": "Lightweight jeans for warm days",
                "updatedAt": "2024-05-01T00:00:00Z",
                "products": {
                    "nodes": [
                        {
                            "id": f"gid://shopify/Product/{i}",
                            "handle": f"jean-{i}",
                            "title": f"Jean {i}",
                            "tags": ["denim"],
                            "variants": {"nodes": [{"sku": f"SKU-{i}", "quantityAvailable": i}]},
                        }
                        for i in range(1, product_count + 1)
                    ]
                },
            }
        }
    }


def make_request(
    collection_id: Optional[str] = "123",
    params: Optional[Dict[str, str]] = None,
    body: bytes = b"",
    method: str = "GET",
) -> func.HttpRequest:
    route_params = {"collectionId": collection_id} if collection_id is not None else {}
    return func.HttpRequest(
        method=method,
        url=f"/api/collection/{collection_id or ''}",
        headers={"Content-Type": "application/json"},
        params=params or {},
        route_params=route_params,
        body=body,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(graphql_endpoint=GRAPHQL_ENDPOINT, api_token=API_TOKEN)


@pytest.fixture
def storefront(monkeypatch) -> FakeStorefront:
    fake = FakeStorefront()

    def _open_client(settings: Settings) -> httpx.Client:
        return httpx.Client(timeout=settings.timeout_s, transport=httpx.MockTransport(fake.handle))

    monkeypatch.setattr(collection_fetcher, "_open_client", _open_client)
    return fake


@pytest.fixture
def app_settings(monkeypatch, settings) -> Settings:
    monkeypatch.setattr(CollectionProducts, "SETTINGS", settings)
    return settings
