import asyncio
import base64
import json
import logging
import re
import time
import uuid
from typing import Any, Dict, Optional

import httpx

from .config import Settings
from .errors import (
    CollectionNotFound,
    ConfigurationError,
    LimitExceeded,
    UpstreamGraphQLError,
    UpstreamHttpError,
    UpstreamProtocolError,
    UpstreamTransportError,
)

logger = logging.getLogger("collection_proxy")

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
STOREFRONT_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"

# Page sizes are fixed in the document; $limit is sent as a variable but the
# query never declares or reads it.
COLLECTION_PRODUCTS_QUERY = """
  query ($id: ID!) {
    collection(id: $id) {
      id
      handle
      title
      description
      products(first: 250) {
        nodes {
          id
          handle
          images(first: 25) {
            nodes {
              altText
              height
              id
              url
              width
            }
          }
          category {
            name
            id
          }
          createdAt
          description
          descriptionHtml
          availableForSale
          compareAtPriceRange {
            maxVariantPrice {
              amount
              currencyCode
            }
            minVariantPrice {
              amount
              currencyCode
            }
          }
          onlineStoreUrl
          priceRange {
            maxVariantPrice {
              amount
              currencyCode
            }
            minVariantPrice {
              amount
              currencyCode
            }
          }
          productType
          publishedAt
          tags
          title
          totalInventory
          vendor
          variants(first: 15) {
            nodes {
              availableForSale
              compareAtPrice {
                amount
                currencyCode
              }
              id
              image {
                altText
                height
                id
                url
                width
              }
              price {
                amount
                currencyCode
              }
              sku
              title
              taxable
              weight
              quantityAvailable
            }
          }
        }
      }
    }
  }
"""

_LEADING_INT = re.compile(r"[+-]?[0-9]+")


def to_global_id(type_name: str, raw_id: str) -> str:
    """Encode a Shopify global object id, e.g. gid://shopify/Collection/123."""
    return base64.b64encode(f"gid://shopify/{type_name}/{raw_id}".encode("utf-8")).decode("ascii")


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """Read the ?limit= value.

    Absent or empty means the default. Otherwise the leading integer is used
    ("20abc" -> 20); a value with no leading integer yields None, which is
    forwarded upstream as null rather than rejected.
    """
    if not raw:
        return DEFAULT_LIMIT
    match = _LEADING_INT.match(raw.strip())
    if not match:
        return None
    return int(match.group(0))


def check_limit(limit: Optional[int]) -> None:
    if limit is not None and limit > MAX_LIMIT:
        raise LimitExceeded()


def _open_client(settings: Settings) -> httpx.Client:
    return httpx.Client(timeout=settings.timeout_s)


def _build_headers(settings: Settings) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        STOREFRONT_TOKEN_HEADER: settings.api_token or "",
    }


def _extract_collection(payload: Any, collection_id: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise UpstreamProtocolError("Unexpected response from GraphQL API: body is not a JSON object")

    errors = payload.get("errors")
    if errors is not None:
        raise UpstreamGraphQLError(json.dumps(errors, separators=(",", ":"), ensure_ascii=False))

    data = payload.get("data")
    if data is None or data == "" or data == 0:
        raise UpstreamProtocolError("No data returned from GraphQL API")

    collection = data.get("collection") if isinstance(data, dict) else None
    if collection is None:
        raise CollectionNotFound(collection_id)

    try:
        products = collection["products"]["nodes"]
    except (KeyError, TypeError):
        raise UpstreamProtocolError("Unexpected response from GraphQL API: collection has no product nodes")

    return {
        "collection": {
            "id": collection.get("id"),
            "title": collection.get("title"),
            "description": collection.get("description"),
            "handle": collection.get("handle"),
        },
        "products": products,
    }


async def fetch_products_by_collection(
    collection_id: str,
    settings: Settings,
    limit: Optional[int] = DEFAULT_LIMIT,
    trace_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Run the collection query for a raw collection id.

    Returns {"collection": {id, title, description, handle}, "products": [...]}
    where products are the upstream nodes, untouched. Makes exactly one call.
    """
    if not settings.graphql_endpoint:
        raise ConfigurationError("GRAPHQL_ENDPOINT environment variable is required")
    if not settings.api_token:
        raise ConfigurationError("API_TOKEN environment variable is required")

    trace_id = trace_id or str(uuid.uuid4())
    global_id = to_global_id("Collection", collection_id)
    body = {
        "query": COLLECTION_PRODUCTS_QUERY,
        "variables": {"id": global_id, "limit": limit},
    }
    headers = _build_headers(settings)

    def _do_sync() -> httpx.Response:
        with _open_client(settings) as client:
            return client.post(settings.graphql_endpoint, headers=headers, json=body)

    started = time.perf_counter()
    try:
        resp = await asyncio.to_thread(_do_sync)
    except httpx.TimeoutException as e:
        logger.warning("Timeout contacting GraphQL API", extra={"collection_id": collection_id, "trace_id": trace_id})
        raise UpstreamTransportError(f"Timeout contacting GraphQL API: {e}") from e
    except httpx.RequestError as e:
        logger.warning("RequestError contacting GraphQL API", extra={"collection_id": collection_id, "trace_id": trace_id})
        raise UpstreamTransportError(f"Request error contacting GraphQL API: {e}") from e

    elapsed_ms = (time.perf_counter() - started) * 1000
    telemetry = {
        "event": "graphql_proxy_call",
        "entity": "collection",
        "collection_id": collection_id,
        "status": resp.status_code,
        "elapsed_ms": round(elapsed_ms, 2),
        "trace_id": trace_id,
    }
    logger.info("collection_proxy: " + json.dumps(telemetry))

    if not resp.is_success:
        raise UpstreamHttpError(resp.status_code, resp.reason_phrase)

    try:
        payload = resp.json()
    except ValueError as e:
        raise UpstreamProtocolError(f"Invalid JSON returned from GraphQL API: {e}") from e

    return _extract_collection(payload, collection_id)
