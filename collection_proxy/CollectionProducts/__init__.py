import logging
import uuid

import azure.functions as func

from ..shared import (
    Settings,
    check_limit,
    error_response,
    fetch_products_by_collection,
    json_response,
    log_request_debug,
    parse_limit,
    utc_timestamp,
    validate_collection_id,
)
from ..shared.errors import CollectionProxyError

logger = logging.getLogger("collection_proxy")

SETTINGS = Settings.from_env()


async def main(req: func.HttpRequest) -> func.HttpResponse:
    """GET /api/collection/{collectionId}?limit=N

    Validates the id, runs the storefront collection query and answers with
    the {success, collectionId, collection, products, totalCount, timestamp}
    envelope.
    """
    trace_id = str(uuid.uuid4())
    log_request_debug(req, SETTINGS, trace_id)

    try:
        collection_id = validate_collection_id(req)
    except CollectionProxyError as e:
        logger.warning("invalid_collection_request", extra={"error": e.error, "trace_id": trace_id})
        return error_response(e, trace_id)

    try:
        limit = parse_limit(req.params.get("limit"))
        check_limit(limit)
        result = await fetch_products_by_collection(collection_id, SETTINGS, limit=limit, trace_id=trace_id)
    except CollectionProxyError as e:
        logger.warning(
            "collection_request_failed",
            extra={"collection_id": collection_id, "status": e.status_code, "detail": str(e), "trace_id": trace_id},
        )
        return error_response(e, trace_id)
    except Exception as e:
        logger.exception("Unexpected error fetching collection", extra={"collection_id": collection_id, "trace_id": trace_id})
        return json_response(
            500,
            {"success": False, "error": "Failed to fetch products", "details": str(e)},
            trace_id,
        )

    collection = result.get("collection")
    products = result.get("products") or []
    return json_response(
        200,
        {
            "success": True,
            "collectionId": collection_id,
            "collection": collection,
            "products": products,
            "totalCount": len(products),
            "timestamp": utc_timestamp(),
        },
        trace_id,
    )
